"""Load inventory drafts from JSON or JSON Lines files."""

from __future__ import annotations

import json
from logging import getLogger
from typing import TYPE_CHECKING

from pydantic import ValidationError

from stocksync.adapters.store.translator import translate_draft

if TYPE_CHECKING:
    from collections.abc import Iterator
    from pathlib import Path

    from stocksync.domain.inventory.model import InventoryEntryDraft

log = getLogger(__name__)


class DraftFileError(ValueError):
    """Raised when a draft file cannot be parsed."""


def load_drafts(path: Path) -> list[InventoryEntryDraft | None]:
    """Read drafts from ``path``.

    ``.jsonl``/``.ndjson`` files hold one draft per line; anything else must be
    a JSON array. ``null`` items are kept as ``None`` so the sync can report
    them like any other invalid draft.
    """

    if path.suffix.lower() in {".jsonl", ".ndjson"}:
        raw_items = list(_iter_json_lines(path))
    else:
        try:
            document = json.loads(path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as exc:
            raise DraftFileError(f"{path}: invalid JSON ({exc})") from exc
        if not isinstance(document, list):
            raise DraftFileError(f"{path}: expected a JSON array of drafts")
        raw_items = document

    drafts: list[InventoryEntryDraft | None] = []
    for index, item in enumerate(raw_items):
        if item is None:
            drafts.append(None)
            continue
        if not isinstance(item, dict):
            raise DraftFileError(f"{path}: item {index} is not a JSON object")
        try:
            drafts.append(translate_draft(item))
        except ValidationError as exc:
            raise DraftFileError(f"{path}: item {index} is not a valid draft: {exc}") from exc

    log.info("Loaded %s draft(s) from %s", len(drafts), path)
    return drafts


def _iter_json_lines(path: Path) -> Iterator[object]:
    with path.open(encoding="utf-8") as handle:
        for line_number, line in enumerate(handle, start=1):
            stripped = line.strip()
            if not stripped:
                continue
            try:
                yield json.loads(stripped)
            except json.JSONDecodeError as exc:
                raise DraftFileError(f"{path}:{line_number}: invalid JSON ({exc})") from exc
