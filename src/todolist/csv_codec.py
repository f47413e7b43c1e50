"""
CSV export/import format for todo items.

Format:
    Id,Description,Done
    0,buy milk,false
    1,walk dog,true

Rows are split on the first two commas only and nothing is quoted, so a
description containing a comma cannot be read back faithfully.
"""
from __future__ import annotations

from typing import Iterable, List, Set, Tuple

from .errors import MalformedStorageError
from .logging_config import get_logger
from .models import TodoItem
from .utils import normalize, parse_item_ref

CSV_HEADER = "Id,Description,Done"

log = get_logger(__name__)


# PUBLIC_INTERFACE
def is_csv_safe(description: str) -> bool:
    """Return True if `description` survives a dump_csv / parse_csv round trip."""
    return not any(ch in description for ch in (",", "\n", "\r"))


def _render_done(done: bool) -> str:
    return "true" if done else "false"


# PUBLIC_INTERFACE
def dump_csv(items: Iterable[TodoItem]) -> str:
    """Render the header line followed by one newline-terminated row per item."""
    lines = [CSV_HEADER]
    lines.extend(f"{item.id},{item.description},{_render_done(item.done)}" for item in items)
    return "\n".join(lines) + "\n"


def _parse_row(line: str, lineno: int, origin: str) -> TodoItem:
    fields = line.split(",", 2)
    if len(fields) != 3:
        raise MalformedStorageError(origin, f"line {lineno}: expected 3 fields, got {len(fields)}")
    raw_id, description, raw_done = fields

    item_id = parse_item_ref(raw_id)
    if not isinstance(item_id, int):
        raise MalformedStorageError(origin, f"line {lineno}: id {raw_id!r} is not an unsigned integer")

    done = raw_done.strip()
    if done not in {"true", "false"}:
        raise MalformedStorageError(origin, f"line {lineno}: done must be 'true' or 'false', got {raw_done!r}")

    return TodoItem(id=item_id, description=normalize(description), done=done == "true")


# PUBLIC_INTERFACE
def parse_csv(source: str, origin: str = "<csv>") -> Tuple[List[TodoItem], int]:
    """
    Parse CSV text produced by dump_csv.

    Args:
        source: Full CSV text. The first line is the header and is skipped.
        origin: Name used in error messages (usually the file path).

    Returns:
        (items, next_id) where next_id is 1 + the highest id, or 0 without rows.

    Raises:
        MalformedStorageError: on a row with too few fields, a non-numeric id,
            an unrecognized done value, or a repeated id or description.
    """
    lines = [line.rstrip("\r") for line in source.split("\n")]
    if lines and lines[0] and lines[0] != CSV_HEADER:
        log.warning("csv.header_mismatch", origin=origin, header=lines[0])

    items: List[TodoItem] = []
    seen_ids: Set[int] = set()
    seen_keys: Set[str] = set()
    for lineno, line in enumerate(lines[1:], start=2):
        if not line.strip():
            continue
        item = _parse_row(line, lineno, origin)
        if item.id in seen_ids:
            raise MalformedStorageError(origin, f"line {lineno}: duplicate id {item.id}")
        if item.description in seen_keys:
            raise MalformedStorageError(origin, f"line {lineno}: duplicate description {item.description!r}")
        seen_ids.add(item.id)
        seen_keys.add(item.description)
        items.append(item)

    next_id = max((item.id for item in items), default=-1) + 1
    log.debug("csv.parsed", origin=origin, rows=len(items), next_id=next_id)
    return items, next_id
