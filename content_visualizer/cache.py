"""In-memory store of completed analyses keyed by content hash."""

from __future__ import annotations

import hashlib
import json
import logging
from collections import OrderedDict
from typing import TYPE_CHECKING, Optional

from .models import ContentInput

if TYPE_CHECKING:
    from .pipeline import PipelineResult

LOGGER = logging.getLogger(__name__)


def content_hash(content: ContentInput) -> str:
    """SHA-256 over the canonical JSON form of the content and its metadata."""

    canonical = json.dumps(
        {
            "content": content.text,
            "type": content.metadata.type,
            "metadata": content.metadata.to_dict(),
        },
        sort_keys=True,
        ensure_ascii=False,
        separators=(",", ":"),
    )
    return hashlib.sha256(canonical.encode("utf-8")).hexdigest()


class AnalysisCache:
    """Bounded LRU cache; only completed pipeline results are stored."""

    def __init__(self, max_entries: int = 128) -> None:
        if max_entries < 1:
            raise ValueError("max_entries must be positive")
        self.max_entries = max_entries
        self._entries: "OrderedDict[str, PipelineResult]" = OrderedDict()

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: str) -> bool:
        return key in self._entries

    def get(self, key: str) -> Optional["PipelineResult"]:
        result = self._entries.get(key)
        if result is not None:
            self._entries.move_to_end(key)
        return result

    def put(self, key: str, result: "PipelineResult") -> None:
        self._entries[key] = result
        self._entries.move_to_end(key)
        while len(self._entries) > self.max_entries:
            evicted, _ = self._entries.popitem(last=False)
            LOGGER.debug("Evicted cached analysis %s", evicted)

    def clear(self) -> None:
        self._entries.clear()
