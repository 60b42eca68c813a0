# src/dayplan/cli/commands.py

from __future__ import annotations

import logging
import shlex
from collections.abc import Callable
from dataclasses import replace
from datetime import datetime

from ..core.state import AppState
from ..schedule.models import Category, Task
from ..schedule.time_model import (
    calculate_duration,
    format_duration,
    format_time,
    generate_time_slots,
    get_next_day,
    get_previous_day,
    get_today_date_string,
    is_today,
    is_valid_date,
    is_valid_time,
    time_to_minutes,
)

CommandHandler = Callable[[AppState, list[str]], str]

logger = logging.getLogger(__name__)

END_BEFORE_START = "End time must be after start time"


class CommandRegistry:
    """Simple slash-command registry used by the console (/help, /add, ...)."""

    def __init__(self) -> None:
        self._handlers: dict[str, CommandHandler] = {}
        self._help: dict[str, str] = {}

    def register(
        self,
        name: str,
        handler: CommandHandler,
        help_text: str,
        aliases: list[str] | None = None,
    ) -> None:
        aliases = aliases or []
        key = name.lower()
        self._handlers[key] = handler
        self._help[key] = help_text
        for alias in aliases:
            self._handlers[alias.lower()] = handler

    def handle(
        self,
        state: AppState,
        line: str,
    ) -> str | None:
        """
        Handle a string like "/command args".
        Returns a reply string or None if not a command.
        """
        if not line.startswith("/"):
            return None

        try:
            parts = shlex.split(line[1:])
        except ValueError:
            # Unbalanced quotes: fall back to plain whitespace split.
            parts = line[1:].split()
        if not parts:
            return "Empty command. Use /help to list available commands."

        name = parts[0].lower()
        args = parts[1:]

        handler = self._handlers.get(name)
        if not handler:
            return f"Unknown command: /{name}. Use /help to list available commands."

        return handler(state, args)

    def build_help(self) -> str:
        lines = ["Available commands:"]
        for name, help_text in self._help.items():
            lines.append(f"  /{name} - {help_text}")
        return "\n".join(lines)


registry = CommandRegistry()


# ---- helpers ----


def _split_options(args: list[str], allowed: set[str]) -> tuple[list[str], dict[str, str]]:
    """Separate `key=value` options from positional words."""
    positional: list[str] = []
    options: dict[str, str] = {}
    for a in args:
        key, sep, value = a.partition("=")
        if sep and key.lower() in allowed:
            options[key.lower()] = value
        else:
            positional.append(a)
    return positional, options


def _resolve_category(state: AppState, ref: str | None) -> str | None:
    """Category reference (id, name or color) -> color token. None if unknown."""
    cats = state.store.categories
    if ref is None:
        return cats[0].color if cats else ""
    low = ref.lower()
    for c in cats:
        if low in (c.id.lower(), c.name.lower(), c.color.lower()):
            return c.color
    return None


def _resolve_task(state: AppState, ref: str) -> Task | None:
    """A task reference is either its number in the selected day's list or an id prefix."""
    if not ref:
        return None
    day_tasks = state.store.tasks_for_date(state.store.selected_date)
    if ref.isdigit():
        n = int(ref)
        if 1 <= n <= len(day_tasks):
            return day_tasks[n - 1]
        return None
    matches = [t for t in state.store.tasks if t.id.startswith(ref)]
    return matches[0] if len(matches) == 1 else None


def _validate_candidate(start: str, end: str, day: str, title: str) -> str | None:
    if not title.strip():
        return "Title is required"
    if not is_valid_time(start) or not is_valid_time(end):
        return "Times must be in HH:MM format (00:00-23:59)"
    if not is_valid_date(day):
        return "Date must be in YYYY-MM-DD format"
    if time_to_minutes(end) <= time_to_minutes(start):
        return END_BEFORE_START
    return None


def _category_label(state: AppState, token: str) -> str:
    cat = state.store.find_category(token)
    return cat.name if cat is not None else (token or "-")


def _format_task_line(state: AppState, n: int, t: Task) -> str:
    mark = "x" if t.completed else " "
    dur = format_duration(calculate_duration(t.start_time, t.end_time))
    line = (
        f"{n}. [{mark}] {t.start_time}-{t.end_time} ({dur}) {t.title}"
        f" <{_category_label(state, t.category)}> #{t.id[:8]}"
    )
    if t.description:
        line += f"\n     {t.description}"
    return line


def _day_header(day: str) -> str:
    label = datetime.strptime(day, "%Y-%m-%d").strftime("%A, %d %B %Y")
    return f"{label} (today)" if is_today(day) else label


def render_day(state: AppState) -> str:
    day = state.store.selected_date
    tasks = state.store.tasks_for_date(day)
    lines = [_day_header(day)]
    if not tasks:
        lines.append("  No tasks scheduled. Use /add to create one.")
    for i, t in enumerate(tasks, start=1):
        lines.append("  " + _format_task_line(state, i, t))
    return "\n".join(lines)


def _failure(state: AppState, message: str) -> str:
    state.store.set_error(message)
    return f"Error: {message}"


# ---- commands ----


def cmd_help(state: AppState, args: list[str]) -> str:
    return registry.build_help()


def cmd_status(state: AppState, args: list[str]) -> str:
    settings = state.settings
    store = state.store
    return (
        "Status:\n"
        f"  App: {getattr(settings, 'app_name', 'dayplan')}\n"
        f"  Storage: {getattr(settings, 'store_path', '-')}\n"
        f"  Selected date: {store.selected_date}\n"
        f"  Tasks: {len(store.tasks)} total, "
        f"{len(store.tasks_for_date(store.selected_date))} on selected date\n"
        f"  Categories: {len(store.categories)}\n"
        f"  Last error: {store.error or '-'}"
    )


def cmd_day(state: AppState, args: list[str]) -> str:
    """
    /day             -> show selected day
    /day YYYY-MM-DD  -> select that day and show it
    """
    if args:
        if not is_valid_date(args[0]):
            return "Usage: /day [YYYY-MM-DD]"
        state.store.set_selected_date(args[0])
    return render_day(state)


def cmd_today(state: AppState, args: list[str]) -> str:
    state.store.set_selected_date(get_today_date_string())
    return render_day(state)


def cmd_next(state: AppState, args: list[str]) -> str:
    state.store.set_selected_date(get_next_day(state.store.selected_date))
    return render_day(state)


def cmd_prev(state: AppState, args: list[str]) -> str:
    state.store.set_selected_date(get_previous_day(state.store.selected_date))
    return render_day(state)


_ADD_OPTIONS = {"date", "cat", "desc"}


def cmd_add(state: AppState, args: list[str]) -> str:
    """
    /add HH:MM HH:MM Title words [date=YYYY-MM-DD] [cat=work] [desc="..."]
    """
    positional, opts = _split_options(args, _ADD_OPTIONS)
    if len(positional) < 3:
        return 'Usage: /add HH:MM HH:MM Title [date=YYYY-MM-DD] [cat=NAME] [desc="..."]'

    store = state.store
    store.clear_error()

    start, end = positional[0], positional[1]
    title = " ".join(positional[2:])
    day = opts.get("date") or store.selected_date

    problem = _validate_candidate(start, end, day, title)
    if problem:
        return _failure(state, problem)

    category = _resolve_category(state, opts.get("cat"))
    if category is None:
        return _failure(state, f"Unknown category: {opts['cat']}")

    task = store.add_task(
        title=title.strip(),
        description=opts.get("desc", ""),
        start_time=start,
        end_time=end,
        date=day,
        category=category,
    )
    if task is None:
        return f"Error: {store.error}"
    return f"Added #{task.id[:8]} {task.title} on {task.date} {format_time(task.start_time)}-{format_time(task.end_time)}."


_EDIT_OPTIONS = {"start", "end", "title", "date", "cat", "desc"}


def cmd_edit(state: AppState, args: list[str]) -> str:
    """
    /edit N|ID [start=HH:MM] [end=HH:MM] [title=...] [date=...] [cat=...] [desc=...]
    """
    positional, opts = _split_options(args, _EDIT_OPTIONS)
    if not positional or not opts:
        return "Usage: /edit N|ID [start=HH:MM] [end=HH:MM] [title=...] [date=...] [cat=...] [desc=...]"

    store = state.store
    store.clear_error()

    current = _resolve_task(state, positional[0])
    if current is None:
        return f"No such task: {positional[0]}"

    category = current.category
    if "cat" in opts:
        resolved = _resolve_category(state, opts["cat"])
        if resolved is None:
            return _failure(state, f"Unknown category: {opts['cat']}")
        category = resolved

    candidate = replace(
        current,
        title=opts.get("title", current.title).strip(),
        description=opts.get("desc", current.description),
        start_time=opts.get("start", current.start_time),
        end_time=opts.get("end", current.end_time),
        date=opts.get("date", current.date),
        category=category,
    )

    problem = _validate_candidate(
        candidate.start_time, candidate.end_time, candidate.date, candidate.title
    )
    if problem:
        return _failure(state, problem)

    task = store.edit_task(candidate)
    if task is None:
        return f"Error: {store.error or 'task could not be updated'}"
    return f"Updated #{task.id[:8]} {task.title} ({task.start_time}-{task.end_time} on {task.date})."


def cmd_delete(state: AppState, args: list[str]) -> str:
    if not args:
        return "Usage: /delete N|ID"
    task = _resolve_task(state, args[0])
    if task is None:
        return f"No such task: {args[0]}"
    state.store.delete_task(task.id)
    return f"Deleted {task.title}."


def cmd_done(state: AppState, args: list[str]) -> str:
    if not args:
        return "Usage: /done N|ID"
    task = _resolve_task(state, args[0])
    if task is None:
        return f"No such task: {args[0]}"
    state.store.toggle_task_completion(task.id)
    return f"{task.title}: {'not done' if task.completed else 'done'}."


def cmd_timeline(state: AppState, args: list[str]) -> str:
    """Hour grid for the selected day; tasks listed under the hour they start in."""
    day = state.store.selected_date
    by_hour: dict[int, list[Task]] = {}
    for t in state.store.tasks_for_date(day):
        by_hour.setdefault(time_to_minutes(t.start_time) // 60, []).append(t)

    now_hour = datetime.now().hour if is_today(day) else None
    lines = [_day_header(day)]
    for hour, slot in enumerate(generate_time_slots()):
        marker = ">" if hour == now_hour else " "
        titles = ", ".join(f"{t.title} ({t.start_time}-{t.end_time})" for t in by_hour.get(hour, []))
        lines.append(f"{marker} {slot} | {titles}".rstrip())
    return "\n".join(lines)


def cmd_cat(state: AppState, args: list[str]) -> str:
    """
    /cat                         -> list categories
    /cat add ID NAME COLOR       -> add category
    /cat edit ID [name=] [color=] -> edit category
    /cat del ID                  -> delete category (tasks keep their color token)
    """
    store = state.store
    if not args:
        lines = ["Categories:"]
        for c in store.categories:
            lines.append(f"  {c.id}: {c.name} ({c.color})")
        return "\n".join(lines)

    sub = args[0].lower()

    if sub == "add":
        if len(args) != 4:
            return "Usage: /cat add ID NAME COLOR"
        if any(c.id == args[1] for c in store.categories):
            return f"Category already exists: {args[1]}"
        store.add_category(Category(id=args[1], name=args[2], color=args[3]))
        return f"Category added: {args[2]}."

    if sub == "edit":
        positional, opts = _split_options(args[1:], {"name", "color"})
        if len(positional) != 1 or not opts:
            return "Usage: /cat edit ID [name=NAME] [color=COLOR]"
        current = next((c for c in store.categories if c.id == positional[0]), None)
        if current is None:
            return f"No such category: {positional[0]}"
        store.edit_category(
            Category(
                id=current.id,
                name=opts.get("name", current.name),
                color=opts.get("color", current.color),
            )
        )
        return f"Category updated: {current.id}."

    if sub in ("del", "delete", "rm"):
        if len(args) != 2:
            return "Usage: /cat del ID"
        if not any(c.id == args[1] for c in store.categories):
            return f"No such category: {args[1]}"
        store.delete_category(args[1])
        return f"Category deleted: {args[1]}."

    return "Unknown /cat subcommand. Usage: /cat | /cat add | /cat edit | /cat del"


def cmd_error(state: AppState, args: list[str]) -> str:
    """
    /error        -> show last error
    /error clear  -> clear it
    """
    if args and args[0].lower() == "clear":
        state.store.clear_error()
        return "Error cleared."
    return f"Last error: {state.store.error or '-'}"


registry.register("help", cmd_help, help_text="Show available commands.", aliases=["h", "?"])
registry.register("status", cmd_status, help_text="Show storage, selected date and counts.")
registry.register("day", cmd_day, help_text="Show the selected day or select one: /day [YYYY-MM-DD].", aliases=["ls"])
registry.register("today", cmd_today, help_text="Jump to today.")
registry.register("next", cmd_next, help_text="Go to the next day.")
registry.register("prev", cmd_prev, help_text="Go to the previous day.")
registry.register(
    "add",
    cmd_add,
    help_text='Add a task: /add 09:00 10:00 Title [date=YYYY-MM-DD] [cat=work] [desc="..."].',
)
registry.register(
    "edit", cmd_edit, help_text="Edit a task: /edit N|ID start=.. end=.. title=.. date=.. cat=.. desc=.."
)
registry.register("delete", cmd_delete, help_text="Delete a task: /delete N|ID.", aliases=["del", "rm"])
registry.register("done", cmd_done, help_text="Toggle completion: /done N|ID.")
registry.register("timeline", cmd_timeline, help_text="Hour-by-hour view of the selected day.", aliases=["slots"])
registry.register("cat", cmd_cat, help_text="Categories: /cat | /cat add | /cat edit | /cat del.")
registry.register("error", cmd_error, help_text="Show or clear the last error: /error [clear].")
