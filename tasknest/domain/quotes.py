from __future__ import annotations

import random
from collections.abc import Sequence

from .defaults import effective_quotes
from .entities import QuoteEntity
from .enums import QuoteMode


class QuoteSelector:
    """Picks the line shown on the dashboard.

    ``select`` is called on every recomputation trigger (quote collection
    changed, mode changed, dashboard shown again). Random mode draws a fresh
    index each time; fixed mode shows the last explicit choice, falling back to
    the first quote when that choice no longer exists.
    """

    def __init__(
        self,
        mode: QuoteMode = QuoteMode.RANDOM,
        fixed_index: int = 0,
        rng: random.Random | None = None,
    ) -> None:
        self.mode = QuoteMode(mode)
        self.fixed_index = max(fixed_index, 0)
        self._rng = rng or random.Random()
        self.current = ""

    def select(self, quotes: Sequence[QuoteEntity]) -> str:
        texts = [quote.text for quote in effective_quotes(quotes)]
        if self.mode == QuoteMode.RANDOM:
            self.current = texts[self._rng.randrange(len(texts))]
        elif 0 <= self.fixed_index < len(texts):
            self.current = texts[self.fixed_index]
        else:
            self.current = texts[0]
        return self.current

    def set_mode(self, mode: QuoteMode, quotes: Sequence[QuoteEntity]) -> str:
        self.mode = QuoteMode(mode)
        return self.select(quotes)

    def choose(self, index: int, quotes: Sequence[QuoteEntity]) -> str:
        self.fixed_index = max(index, 0)
        self.mode = QuoteMode.FIXED
        return self.select(quotes)

    def forget(self, deleted_index: int) -> None:
        """Keep the fixed choice pointing at the same quote after a deletion."""
        if self.fixed_index >= deleted_index and self.fixed_index > 0:
            self.fixed_index -= 1

    def preview(self, quotes: Sequence[QuoteEntity], index: int, text: str) -> str:
        """What the dashboard shows while quote ``index`` is being edited."""
        if not text.strip():
            return self.current
        if self.mode == QuoteMode.FIXED and index == self.fixed_index and index < len(quotes):
            return text
        if quotes and 0 <= index < len(quotes) and quotes[index].text == self.current:
            return text
        return self.current
