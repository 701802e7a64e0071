"""State store adapters.

- InMemoryStateStore: dictionary-backed store for a single process
- JsonFileStateStore: persists states to a JSON document on disk

Records are persisted as their set fields only; UNSET fields are dropped
and come back as UNSET when the document is loaded.
"""

import dataclasses
import json
import logging
from pathlib import Path
from typing import Any, Optional

from ...api.exceptions import ConfigurationError
from ..domain.entities import UNSET, ResourceState
from ..domain.ports import IStateStore

logger = logging.getLogger(__name__)


class InMemoryStateStore(IStateStore):
    """Dictionary-backed state store."""

    def __init__(self, states: Optional[dict[str, ResourceState]] = None):
        self._states: dict[str, ResourceState] = dict(states or {})

    def get(self, key: str) -> Optional[ResourceState]:
        return self._states.get(key)

    def put(self, key: str, state: ResourceState) -> None:
        self._states[key] = state

    def remove(self, key: str) -> None:
        self._states.pop(key, None)

    def keys(self) -> list[str]:
        return list(self._states)


class JsonFileStateStore(IStateStore):
    """State store persisted to a JSON file after every write.

    The document maps each key to ``{"id": .., "type": .., "record": {..}}``.
    Record types must be registered so they can be rebuilt on load.

    Example:
        store = JsonFileStateStore("state.json", record_types=[IPRangeRecord])
        store.put("ip_range.office", ResourceState(id=7, record=record))
    """

    def __init__(self, path: str | Path, record_types: list[type]):
        """Initialize the store, loading an existing document if present.

        Args:
            path: Location of the JSON document
            record_types: Record dataclasses that may appear in the document

        Raises:
            ConfigurationError: If the document holds an unregistered record type
        """
        self.path = Path(path)
        self._types = {t.__name__: t for t in record_types}
        self._states: dict[str, ResourceState] = {}
        if self.path.exists():
            self._load()

    def get(self, key: str) -> Optional[ResourceState]:
        return self._states.get(key)

    def put(self, key: str, state: ResourceState) -> None:
        self._states[key] = state
        self._save()

    def remove(self, key: str) -> None:
        if self._states.pop(key, None) is not None:
            self._save()

    def keys(self) -> list[str]:
        return list(self._states)

    # ----------------------------------------
    # Serialization
    # ----------------------------------------

    @staticmethod
    def _record_to_dict(record: Any) -> dict[str, Any]:
        data = {}
        for f in dataclasses.fields(record):
            value = getattr(record, f.name)
            if value is UNSET:
                continue
            data[f.name] = list(value) if isinstance(value, tuple) else value
        return data

    def _record_from_dict(self, type_name: str, data: dict[str, Any]) -> Any:
        record_type = self._types.get(type_name)
        if record_type is None:
            raise ConfigurationError(
                f"Unknown record type in state file {self.path}: {type_name}",
                details={"record_type": type_name},
            )
        values = {
            name: tuple(value) if isinstance(value, list) else value
            for name, value in data.items()
        }
        return record_type(**values)

    def _load(self) -> None:
        document = json.loads(self.path.read_text(encoding="utf-8"))
        for key, entry in document.get("resources", {}).items():
            record = None
            if entry.get("record") is not None:
                record = self._record_from_dict(entry["type"], entry["record"])
            self._states[key] = ResourceState(id=entry.get("id"), record=record)
        logger.debug(f"Loaded {len(self._states)} states from {self.path}")

    def _save(self) -> None:
        resources = {}
        for key, state in self._states.items():
            entry: dict[str, Any] = {"id": state.id, "type": None, "record": None}
            if state.record is not None:
                entry["type"] = type(state.record).__name__
                entry["record"] = self._record_to_dict(state.record)
            resources[key] = entry

        tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
        tmp_path.write_text(
            json.dumps({"version": 1, "resources": resources}, indent=2, sort_keys=True),
            encoding="utf-8",
        )
        tmp_path.replace(self.path)
