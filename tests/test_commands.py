# tests/test_commands.py

from __future__ import annotations

from dayplan.cli.bootstrap import create_initial_state
from dayplan.cli.commands import END_BEFORE_START, CommandRegistry, registry


def test_command_registry_routes_quoted_args_and_aliases(state) -> None:
    reg = CommandRegistry()
    calls: list[list[str]] = []

    def handler(state, args):
        calls.append(args)
        return "ok"

    reg.register("a", handler, "a", aliases=["bee"])

    assert reg.handle(state, '/a x "y z"') == "ok"
    assert reg.handle(state, "/BEE y") == "ok"
    assert reg.handle(state, '/a "unbalanced') == "ok"
    assert calls == [["x", "y z"], ["y"], ['"unbalanced']]
    assert "/a - a" in reg.build_help()


def test_command_registry_unknown_and_non_command(state) -> None:
    reg = CommandRegistry()
    assert reg.handle(state, "hello") is None
    assert "Unknown command" in (reg.handle(state, "/nope") or "")
    assert "Empty command" in (reg.handle(state, "/") or "")


def test_add_and_list_day(state) -> None:
    out = registry.handle(state, '/add 09:00 10:30 Deep work cat=work desc="no meetings"')
    assert out is not None and out.startswith("Added")

    listing = registry.handle(state, "/day") or ""
    assert "09:00-10:30 (1h 30m) Deep work <Work>" in listing
    assert "no meetings" in listing


def test_add_conflict_surfaces_store_error(state) -> None:
    registry.handle(state, "/add 09:00 10:00 A")
    out = registry.handle(state, "/add 09:30 10:30 B") or ""
    assert out.startswith("Error:")
    assert '"A"' in out
    assert state.store.error is not None
    assert len(state.store.tasks) == 1

    ok = registry.handle(state, "/add 10:00 11:00 C") or ""
    assert ok.startswith("Added")
    assert state.store.error is None


def test_add_validates_before_calling_store(state) -> None:
    out = registry.handle(state, "/add 10:00 09:00 Backwards") or ""
    assert END_BEFORE_START in out
    assert state.store.error == END_BEFORE_START
    assert state.store.tasks == []

    assert "HH:MM" in (registry.handle(state, "/add 9am 10:00 Bad") or "")
    assert "YYYY-MM-DD" in (registry.handle(state, "/add 09:00 10:00 Bad date=tomorrow") or "")
    assert "Unknown category" in (registry.handle(state, "/add 09:00 10:00 Bad cat=nope") or "")
    assert state.store.tasks == []


def test_edit_delete_done_by_list_number(state) -> None:
    registry.handle(state, "/add 13:00 14:00 Lunch")
    registry.handle(state, "/add 08:00 09:00 Gym cat=health")

    # list number follows start-time order: 1 = Gym, 2 = Lunch
    out = registry.handle(state, '/edit 2 start=12:30 title="Early lunch"') or ""
    assert out.startswith("Updated")
    lunch = [t for t in state.store.tasks if t.title == "Early lunch"]
    assert lunch and lunch[0].start_time == "12:30"

    clash = registry.handle(state, "/edit 2 start=08:30") or ""
    assert clash.startswith("Error:") and '"Gym"' in clash

    assert "done" in (registry.handle(state, "/done 1") or "")
    gym = [t for t in state.store.tasks if t.title == "Gym"][0]
    assert gym.completed is True

    assert (registry.handle(state, "/delete 1") or "").startswith("Deleted")
    assert [t.title for t in state.store.tasks] == ["Early lunch"]
    assert "No such task" in (registry.handle(state, "/delete 9") or "")


def test_day_navigation_commands(state) -> None:
    registry.handle(state, "/day 2024-02-28")
    registry.handle(state, "/next")
    assert state.store.selected_date == "2024-02-29"
    registry.handle(state, "/prev")
    registry.handle(state, "/prev")
    assert state.store.selected_date == "2024-02-27"
    assert "Usage" in (registry.handle(state, "/day 28.02.2024") or "")


def test_timeline_lists_tasks_under_their_hour(state) -> None:
    registry.handle(state, "/add 09:15 10:00 Review")
    lines = (registry.handle(state, "/timeline") or "").splitlines()
    assert len(lines) == 25
    nine = [line for line in lines if "09:00 |" in line][0]
    assert "Review (09:15-10:00)" in nine


def test_category_commands(state) -> None:
    assert "Errands" in (registry.handle(state, "/cat add errands Errands #00bcd4") or "")
    assert "already exists" in (registry.handle(state, "/cat add errands Errands #00bcd4") or "")
    registry.handle(state, "/add 17:00 18:00 Groceries cat=errands")
    registry.handle(state, "/cat edit errands name=Chores")
    assert "<Chores>" in (registry.handle(state, "/day") or "")

    registry.handle(state, "/cat del errands")
    assert "errands" not in (registry.handle(state, "/cat") or "")
    # dangling reference shows the raw color token
    assert "<#00bcd4>" in (registry.handle(state, "/day") or "")


def test_error_command(state) -> None:
    state.store.set_error("boom")
    assert "boom" in (registry.handle(state, "/error") or "")
    registry.handle(state, "/error clear")
    assert state.store.error is None


def test_status_and_help(state) -> None:
    assert "Selected date: 2024-05-01" in (registry.handle(state, "/status") or "")
    assert "/add" in (registry.handle(state, "/help") or "")


def test_bootstrap_wires_sqlite_storage(settings) -> None:
    state = create_initial_state(settings=settings)
    assert state.store.loading is False
    registry.handle(state, "/add 09:00 10:00 Persisted date=2024-05-01")

    again = create_initial_state(settings=settings)
    assert [t.title for t in again.store.tasks] == ["Persisted"]
    assert settings.store_path.exists()


def test_week_date_is_rejected_so_same_day_overlap_cannot_slip_in(state) -> None:
    # 2024-W18-3 names the same calendar day as 2024-05-01
    assert (registry.handle(state, "/add 09:00 10:00 A date=2024-05-01") or "").startswith("Added")

    out = registry.handle(state, "/add 09:00 10:00 B date=2024-W18-3") or ""
    assert "YYYY-MM-DD" in out
    assert [(t.title, t.date) for t in state.store.tasks] == [("A", "2024-05-01")]

    assert "Usage" in (registry.handle(state, "/day 2024-W18-3") or "")
    first = state.store.tasks[0]
    out = registry.handle(state, f"/edit {first.id} date=2024-W18-3") or ""
    assert "YYYY-MM-DD" in out
    assert state.store.tasks[0].date == "2024-05-01"


def test_empty_task_reference_matches_nothing(state) -> None:
    registry.handle(state, "/add 09:00 10:00 Only")

    assert "No such task" in (registry.handle(state, '/delete ""') or "")
    assert "No such task" in (registry.handle(state, '/done ""') or "")
    assert "No such task" in (registry.handle(state, '/edit "" title=X') or "")
    assert [t.title for t in state.store.tasks] == ["Only"]
    assert state.store.tasks[0].completed is False
