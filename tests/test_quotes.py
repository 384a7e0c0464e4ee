from __future__ import annotations

from tasknest.domain.defaults import DEFAULT_QUOTES
from tasknest.domain.entities import QuoteEntity
from tasknest.domain.enums import QuoteMode
from tasknest.domain.quotes import QuoteSelector

QUOTES = (
    QuoteEntity(id="q1", text="first"),
    QuoteEntity(id="q2", text="second"),
    QuoteEntity(id="q3", text="third"),
)


class PinnedRandom:
    """Always draws the configured index."""

    def __init__(self, index: int) -> None:
        self.index = index
        self.calls = 0

    def randrange(self, *args, **kwargs) -> int:  # noqa: ARG002
        self.calls += 1
        return self.index


def test_fixed_mode_shows_chosen_quote() -> None:
    selector = QuoteSelector()

    assert selector.choose(2, QUOTES) == "third"
    assert selector.mode == QuoteMode.FIXED
    assert selector.select(QUOTES) == "third"


def test_fixed_index_out_of_range_falls_back_to_first() -> None:
    selector = QuoteSelector(mode=QuoteMode.FIXED, fixed_index=2)

    assert selector.select(QUOTES[:2]) == "first"


def test_forget_shifts_choice_after_earlier_deletion() -> None:
    selector = QuoteSelector(mode=QuoteMode.FIXED, fixed_index=2)

    selector.forget(0)

    assert selector.fixed_index == 1
    assert selector.select(QUOTES[1:]) == "third"


def test_forget_never_goes_below_zero() -> None:
    selector = QuoteSelector(mode=QuoteMode.FIXED, fixed_index=0)

    selector.forget(0)

    assert selector.fixed_index == 0


def test_forget_ignores_later_deletions() -> None:
    selector = QuoteSelector(mode=QuoteMode.FIXED, fixed_index=1)

    selector.forget(2)

    assert selector.fixed_index == 1


def test_defaults_are_used_when_store_has_no_quotes() -> None:
    selector = QuoteSelector(mode=QuoteMode.FIXED)

    assert selector.select([]) == DEFAULT_QUOTES[0].text


def test_random_mode_draws_from_stored_quotes_on_every_select() -> None:
    rng = PinnedRandom(1)
    selector = QuoteSelector(rng=rng)
    custom = (QuoteEntity(id="mine", text="my own line"), QuoteEntity(id="q2", text="other"))

    assert selector.select(custom) == "other"
    rng.index = 0
    assert selector.select(custom) == "my own line"
    assert rng.calls == 2


def test_switching_mode_recomputes_current() -> None:
    selector = QuoteSelector(rng=PinnedRandom(0), fixed_index=1)

    assert selector.set_mode(QuoteMode.FIXED, QUOTES) == "second"
    assert selector.current == "second"


def test_preview_shows_text_being_edited_for_the_fixed_choice() -> None:
    selector = QuoteSelector()
    selector.choose(1, QUOTES)

    assert selector.preview(QUOTES, 1, "second, revised") == "second, revised"
    assert selector.preview(QUOTES, 0, "first, revised") == "second"
    assert selector.preview(QUOTES, 1, "   ") == "second"
