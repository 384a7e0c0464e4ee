from __future__ import annotations

from datetime import datetime

import pytest

from tasknest.domain.defaults import DEFAULT_QUOTES
from tasknest.domain.drafts import TaskDraft
from tasknest.domain.enums import CompletionKind, Energy, HistoryKind, QuoteMode, TaskStatus
from tasknest.domain.quotes import QuoteSelector
from tasknest.infra.store import StoreError
from tasknest.services.completion import CompletionEngine
from tasknest.services.live_model import LiveModel
from tasknest.services.task_service import TaskService

NOW = datetime(2026, 6, 10, 14, 30)


class FirstPick:
    def randrange(self, *args, **kwargs) -> int:  # noqa: ARG002
        return 0


class App:
    """Wires the services the way the main window does."""

    def __init__(self, store) -> None:
        self.errors: list[str] = []
        self.completed: list[str] = []
        self.model = LiveModel(store)
        self.selector = QuoteSelector(rng=FirstPick())
        self.completion = CompletionEngine(
            store,
            on_completed=lambda draft: self.completed.append(draft.title),
            on_error=self.errors.append,
            clock=lambda: NOW,
        )
        self.service = TaskService(
            store,
            self.model,
            completion=self.completion,
            quote_selector=self.selector,
            on_error=self.errors.append,
            clock=lambda: NOW,
        )
        self.model.start()

    def task(self, task_id: str):
        return self.model.find_task(task_id)


@pytest.fixture()
def app(store) -> App:
    return App(store)


def test_leaf_task_flows_from_dashboard_to_history(app: App) -> None:
    work = app.service.save_tag("Work", "blue")
    draft = app.service.new_draft()
    draft.title = "Draft report"
    draft.is_temp = False
    draft.tag_id = work
    draft.est_time = 60
    draft.energy = Energy.HIGH

    task_id = app.service.save_draft()

    view = app.model.dashboard()
    assert view.inbox == ()
    assert [t.id for t in view.bucket(work).tasks] == [task_id]

    app.completion.begin_completion(CompletionKind.MAIN, app.task(task_id))
    app.completion.update_draft(actual_time=75, reflection="took longer")
    assert app.completion.confirm()

    assert app.model.dashboard().buckets == ()
    [day] = app.model.history(now=NOW)
    assert day.day == NOW.date()
    [record] = day.records
    assert record.kind == HistoryKind.SINGLE
    assert record.task.actual_time == 75
    assert record.task.reflection == "took longer"
    assert app.completed == ["Draft report"]


def test_container_rolls_up_when_every_subtask_is_done(app: App) -> None:
    school = app.service.save_tag("School", "emerald")
    draft = app.service.new_draft()
    draft.title = "Thesis"
    draft.is_temp = False
    draft.tag_id = school
    draft.add_subtask("A")
    draft.add_subtask("B")

    task_id = app.service.save_draft()

    task = app.task(task_id)
    assert app.model.dashboard().bucket(school).tasks == (task,)
    assert len(task.open_subtasks) == 2
    assert task.est_time is None and task.energy is None

    first = task.subtasks[0]
    app.completion.begin_completion(CompletionKind.SUB, task, first)
    app.completion.confirm()

    task = app.task(task_id)
    assert task.status == TaskStatus.PENDING
    assert task.completed_at is None
    assert app.model.dashboard().bucket(school).tasks == (task,)

    app.completion.begin_completion(CompletionKind.SUB, task, task.subtasks[1])
    app.completion.confirm()

    task = app.task(task_id)
    assert task.status == TaskStatus.COMPLETED
    assert task.completed_at == NOW
    assert app.model.dashboard().buckets == ()
    [day] = app.model.history(now=NOW)
    [record] = day.records
    assert record.kind == HistoryKind.GROUPED
    assert [s.title for s in record.subtasks] == ["A", "B"]


def test_quotes_fall_back_to_defaults_until_one_is_added(app: App) -> None:
    assert app.model.effective_quotes == DEFAULT_QUOTES
    assert app.selector.select(app.model.quotes) == DEFAULT_QUOTES[0].text

    app.service.save_quote("  my own line ")

    assert [q.text for q in app.model.quotes] == ["my own line"]
    assert app.selector.select(app.model.quotes) == "my own line"


def test_temp_task_lands_in_inbox_without_tag(app: App) -> None:
    draft = app.service.new_draft()
    draft.title = "Call the bank"
    draft.tag_id = "default-life"

    task_id = app.service.save_draft()

    assert [t.id for t in app.model.dashboard().inbox] == [task_id]
    assert app.task(task_id).tag_id is None


def test_default_tag_ids_are_accepted_while_no_tags_are_stored(app: App) -> None:
    draft = app.service.new_draft()
    draft.title = "Laundry"
    draft.is_temp = False
    draft.tag_id = "default-life"

    task_id = app.service.save_draft()

    assert app.model.dashboard().bucket("default-life").tasks[0].id == task_id


def test_invalid_drafts_never_reach_the_store(app: App) -> None:
    untitled = TaskDraft(title="  ")
    untagged = TaskDraft(title="Tagged work", is_temp=False)
    unknown = TaskDraft(title="Tagged work", is_temp=False, tag_id="nowhere")

    for draft in (untitled, untagged, unknown):
        assert app.service.can_save(draft) is False
        assert app.service.save_draft(draft) is None

    assert app.model.tasks == ()


def test_editing_keeps_creation_time_and_subtask_order(app: App) -> None:
    draft = app.service.new_draft()
    draft.title = "Move house"
    for title in ("Pack", "Drive", "Unpack"):
        draft.add_subtask(title)
    task_id = app.service.save_draft()
    created = app.task(task_id).created_at

    edit = app.service.edit_task(task_id)
    edit.move_subtask(2, 0)
    edit.title = "Move flat"
    app.service.save_draft()

    task = app.task(task_id)
    assert task.title == "Move flat"
    assert [s.title for s in task.subtasks] == ["Unpack", "Pack", "Drive"]
    assert task.created_at == created
    assert app.service.editing is None


def test_deleting_a_task_drops_its_drafts(app: App) -> None:
    draft = app.service.new_draft()
    draft.title = "Short lived"
    task_id = app.service.save_draft()
    app.service.edit_task(task_id)
    app.completion.begin_completion(CompletionKind.MAIN, app.task(task_id))

    assert app.service.delete_task(task_id)

    assert app.service.editing is None
    assert app.completion.draft is None
    assert app.model.tasks == ()


def test_last_stored_tag_cannot_be_deleted(app: App) -> None:
    work = app.service.save_tag("Work", "blue")
    life = app.service.save_tag("Life", "not-a-colour")

    assert app.model.find_tag(life).color == "stone"
    assert app.service.delete_tag(work)
    assert app.service.delete_tag(life) is False
    assert [t.id for t in app.model.tags] == [life]


def test_deleting_a_tag_clears_it_from_the_open_draft(app: App) -> None:
    work = app.service.save_tag("Work", "blue")
    app.service.save_tag("Life", "amber")
    draft = app.service.new_draft()
    draft.is_temp = False
    draft.tag_id = work

    app.service.delete_tag(work)

    assert draft.tag_id is None


def test_deleting_a_quote_keeps_the_fixed_choice(app: App) -> None:
    first = app.service.save_quote("one")
    app.service.save_quote("two")
    app.service.save_quote("three")
    app.selector.choose(2, app.model.quotes)

    app.service.delete_quote(first)

    assert app.selector.mode == QuoteMode.FIXED
    assert app.selector.select(app.model.quotes) == "three"


def test_store_failure_is_reported_once(app: App, monkeypatch) -> None:
    def offline(*args, **kwargs):
        raise StoreError("offline")

    monkeypatch.setattr(app.service._store, "create", offline)
    draft = app.service.new_draft()
    draft.title = "Will not land"

    assert app.service.save_draft() is None
    assert len(app.errors) == 1
    assert app.model.tasks == ()


def test_removing_the_open_subtask_completes_the_container(app: App) -> None:
    draft = app.service.new_draft()
    draft.title = "Thesis"
    draft.add_subtask("A")
    draft.add_subtask("B")
    task_id = app.service.save_draft()
    task = app.task(task_id)
    app.completion.begin_completion(CompletionKind.SUB, task, task.subtasks[0])
    app.completion.confirm()

    edit = app.service.edit_task(task_id)
    edit.remove_subtask(edit.subtasks[1].id)
    app.service.save_draft()

    task = app.task(task_id)
    assert task.status == TaskStatus.COMPLETED
    assert task.completed_at == NOW
    assert app.model.dashboard().inbox == ()


def test_containers_cannot_be_completed_directly(app: App) -> None:
    draft = app.service.new_draft()
    draft.title = "Thesis"
    draft.add_subtask("A")
    task_id = app.service.save_draft()

    assert app.completion.begin_completion(CompletionKind.MAIN, app.task(task_id)) is None
    assert app.task(task_id).status == TaskStatus.PENDING
