"""Subtasks kept as checkbox lines under a marker line in a reminder's notes."""

from .constants import SUBTASK_DONE_PREFIX, SUBTASK_MARKER, SUBTASK_OPEN_PREFIX
from .models import Subtask


def _is_checkbox(line: str) -> bool:
    return line.startswith(SUBTASK_OPEN_PREFIX) or line.startswith(SUBTASK_DONE_PREFIX)


def _section_bounds(lines: list[str]) -> tuple[int, int] | None:
    """Index of the marker line and one past the section's last checkbox."""
    for index, line in enumerate(lines):
        if line.strip() == SUBTASK_MARKER:
            end = index + 1
            while end < len(lines) and _is_checkbox(lines[end]):
                end += 1
            return index, end
    return None


def parse_subtasks(notes: str | None) -> list[Subtask]:
    """Read the checkbox lines that follow the marker line."""
    if not notes:
        return []
    lines = notes.splitlines()
    bounds = _section_bounds(lines)
    if bounds is None:
        return []
    start, end = bounds
    return [
        Subtask(
            text=line[len(SUBTASK_OPEN_PREFIX):],
            done=line.startswith(SUBTASK_DONE_PREFIX),
        )
        for line in lines[start + 1 : end]
    ]


def append_subtask(notes: str | None, text: str) -> str:
    """Return ``notes`` with an open subtask added, creating the section if needed."""
    entry = f"{SUBTASK_OPEN_PREFIX}{text.strip()}"
    if not notes or not notes.strip():
        return f"{SUBTASK_MARKER}\n{entry}"

    lines = notes.splitlines()
    bounds = _section_bounds(lines)
    if bounds is None:
        return f"{notes.rstrip()}\n\n{SUBTASK_MARKER}\n{entry}"

    _, end = bounds
    lines.insert(end, entry)
    return "\n".join(lines)
