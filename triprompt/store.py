"""
Local persistence for run history and saved prompts.

Each collection is a flat JSON array kept under a fixed key and read or
written wholesale on every access. There is no locking: two processes writing
the same key concurrently can lose an update.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any, Dict, List, Optional

from run_state_manager import RunHistoryItem, SavedPrompt

logger = logging.getLogger(__name__)

HISTORY_KEY = "triPrompt_history"
TOOLBOX_KEY = "triPrompt_toolbox"
HISTORY_LIMIT = 50


class LocalStore:
    """Key/value store of JSON arrays, one ``<key>.json`` file per key."""

    def __init__(self, data_dir: Path | str) -> None:
        self._data_dir = Path(data_dir)

    @property
    def data_dir(self) -> Path:
        return self._data_dir

    def path_for(self, key: str) -> Path:
        return self._data_dir / f"{key}.json"

    def read(self, key: str) -> List[Dict[str, Any]]:
        path = self.path_for(key)
        if not path.exists():
            return []
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as exc:
            logger.error("Failed to parse %s: %s", path, exc)
            return []
        if not isinstance(data, list):
            logger.error("Expected a JSON array in %s, found %s", path, type(data).__name__)
            return []
        return data

    def write(self, key: str, items: List[Dict[str, Any]]) -> None:
        self._data_dir.mkdir(parents=True, exist_ok=True)
        path = self.path_for(key)
        fd, tmp_name = tempfile.mkstemp(dir=self._data_dir, prefix=f".{key}.", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                json.dump(items, handle, ensure_ascii=False)
            os.replace(tmp_name, path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise
        logger.debug("Wrote %d item(s) to %s", len(items), path)

    def remove(self, key: str) -> None:
        self.path_for(key).unlink(missing_ok=True)


class RunHistory:
    """Completed runs, oldest first, capped at ``limit`` entries."""

    def __init__(self, store: LocalStore, *, limit: int = HISTORY_LIMIT) -> None:
        self._store = store
        self._limit = limit

    def append(self, item: RunHistoryItem) -> None:
        items = self._store.read(HISTORY_KEY)
        items.append(item.to_dict())
        if len(items) > self._limit:
            items = items[len(items) - self._limit :]
        self._store.write(HISTORY_KEY, items)
        logger.info("Saved run %s to history (%d kept)", item.id, len(items))

    def items(self) -> List[RunHistoryItem]:
        return [RunHistoryItem.from_dict(raw) for raw in self._store.read(HISTORY_KEY)]

    def newest_first(self) -> List[RunHistoryItem]:
        return list(reversed(self.items()))

    def get(self, run_id: str) -> Optional[RunHistoryItem]:
        for item in self.items():
            if item.id == run_id:
                return item
        return None

    def clear(self) -> None:
        self._store.remove(HISTORY_KEY)
        logger.info("Cleared run history")


class Toolbox:
    """Saved prompts in the order they were saved; not capped."""

    def __init__(self, store: LocalStore) -> None:
        self._store = store

    def save(self, label: str, content: str) -> SavedPrompt:
        prompt = SavedPrompt(label=label, content=content)
        items = self._store.read(TOOLBOX_KEY)
        items.append(prompt.to_dict())
        self._store.write(TOOLBOX_KEY, items)
        logger.info("Saved prompt %s to toolbox", prompt.id)
        return prompt

    def items(self) -> List[SavedPrompt]:
        return [SavedPrompt.from_dict(raw) for raw in self._store.read(TOOLBOX_KEY)]

    def newest_first(self) -> List[SavedPrompt]:
        return list(reversed(self.items()))

    def delete(self, prompt_id: str) -> bool:
        items = self._store.read(TOOLBOX_KEY)
        kept = [raw for raw in items if str(raw.get("id")) != prompt_id]
        if len(kept) == len(items):
            return False
        self._store.write(TOOLBOX_KEY, kept)
        return True
