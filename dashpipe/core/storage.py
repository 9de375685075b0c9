"""Data source storage interfaces and implementations.

Every call is scoped by ``owner_id``: a record owned by someone else behaves
exactly like a missing one. Each owner's records and imported rows live in a
single document::

    {"data_sources": {id: record}, "rows": {id: [row, ...]}}

``InMemoryDataSourceStore`` keeps the documents in a dict and
``LocalJsonDataSourceStore`` writes one JSON file per owner.
"""

from __future__ import annotations

import json
import logging
import threading
import uuid
from collections import OrderedDict
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional, Protocol
from urllib.parse import quote

from dashpipe.core.exceptions import ConfigError, NotFoundError, StorageError
from dashpipe.core.rows import FetchData, Row
from dashpipe.models.data_source import (
    DataSource,
    DataSourceCreate,
    DataSourceUpdate,
    utc_now,
)

logger = logging.getLogger(__name__)

Document = dict[str, Any]


class DataSourceStore(Protocol):
    """Protocol for data source persistence backends."""

    def create(self, owner_id: str, data: DataSourceCreate) -> DataSource:
        """Create a data source owned by ``owner_id``."""
        ...

    def get(self, owner_id: str, source_id: str) -> DataSource:
        """Return one data source.

        Raises:
            NotFoundError: If the owner has no such data source
        """
        ...

    def list(self, owner_id: str) -> list[DataSource]:
        """Return the owner's data sources, newest first."""
        ...

    def update(
        self, owner_id: str, source_id: str, changes: DataSourceUpdate
    ) -> DataSource:
        """Apply the fields set in ``changes`` and return the updated record."""
        ...

    def delete(self, owner_id: str, source_id: str) -> None:
        """Delete a data source together with its imported rows."""
        ...

    def import_rows(
        self,
        owner_id: str,
        source_id: str,
        rows: list[Row],
        schema: Optional[dict[str, Any]] = None,
    ) -> int:
        """Replace the imported rows of a data source; returns the row count."""
        ...

    def get_rows(self, owner_id: str, source_id: str) -> list[Row]:
        """Return imported rows in import order."""
        ...

    def update_row(
        self, owner_id: str, source_id: str, row_index: int, row: Row
    ) -> None:
        """Replace the row at ``row_index``."""
        ...

    def clear_rows(self, owner_id: str, source_id: str) -> None:
        """Remove all imported rows of a data source."""
        ...


class _DocumentStore:
    """Shared store logic on top of per-owner document load/save."""

    def __init__(self) -> None:
        self._lock = threading.RLock()

    def _load(self, owner_id: str) -> Document:
        raise NotImplementedError

    def _save(self, owner_id: str, document: Document) -> None:
        raise NotImplementedError

    def _document(self, owner_id: str) -> Document:
        document = self._load(owner_id)
        document.setdefault("data_sources", {})
        document.setdefault("rows", {})
        return document

    def _record(self, document: Document, owner_id: str, source_id: str) -> Document:
        record = document["data_sources"].get(source_id)
        if record is None:
            raise NotFoundError(
                "Data source not found",
                context={"data_source_id": source_id, "owner_id": owner_id},
            )
        return record

    def create(self, owner_id: str, data: DataSourceCreate) -> DataSource:
        source = DataSource(
            id=f"ds_{uuid.uuid4().hex[:16]}",
            owner_id=owner_id,
            **data.model_dump(),
        )
        with self._lock:
            document = self._document(owner_id)
            document["data_sources"][source.id] = source.model_dump()
            self._save(owner_id, document)
        logger.info(
            f"Created data source '{source.name}'",
            extra={"data_source_id": source.id},
        )
        return source

    def get(self, owner_id: str, source_id: str) -> DataSource:
        with self._lock:
            document = self._document(owner_id)
            return DataSource.model_validate(
                self._record(document, owner_id, source_id)
            )

    def list(self, owner_id: str) -> list[DataSource]:
        with self._lock:
            document = self._document(owner_id)
            sources = [
                DataSource.model_validate(r) for r in document["data_sources"].values()
            ]
        return sorted(sources, key=lambda s: s.created_at, reverse=True)

    def update(
        self, owner_id: str, source_id: str, changes: DataSourceUpdate
    ) -> DataSource:
        with self._lock:
            document = self._document(owner_id)
            record = self._record(document, owner_id, source_id)
            record.update(changes.model_dump(exclude_unset=True, exclude_none=True))
            record["updated_at"] = utc_now()
            self._save(owner_id, document)
            return DataSource.model_validate(record)

    def delete(self, owner_id: str, source_id: str) -> None:
        with self._lock:
            document = self._document(owner_id)
            self._record(document, owner_id, source_id)
            del document["data_sources"][source_id]
            document["rows"].pop(source_id, None)
            self._save(owner_id, document)
        logger.info("Deleted data source", extra={"data_source_id": source_id})

    def import_rows(
        self,
        owner_id: str,
        source_id: str,
        rows: list[Row],
        schema: Optional[dict[str, Any]] = None,
    ) -> int:
        with self._lock:
            document = self._document(owner_id)
            record = self._record(document, owner_id, source_id)
            document["rows"][source_id] = list(rows)
            if schema is not None:
                record["schema_config"] = schema
            record["updated_at"] = utc_now()
            self._save(owner_id, document)
        logger.info(
            f"Imported {len(rows)} rows",
            extra={"data_source_id": source_id},
        )
        return len(rows)

    def get_rows(self, owner_id: str, source_id: str) -> list[Row]:
        with self._lock:
            document = self._document(owner_id)
            self._record(document, owner_id, source_id)
            return list(document["rows"].get(source_id, []))

    def update_row(
        self, owner_id: str, source_id: str, row_index: int, row: Row
    ) -> None:
        with self._lock:
            document = self._document(owner_id)
            record = self._record(document, owner_id, source_id)
            rows = document["rows"].get(source_id, [])
            if not 0 <= row_index < len(rows):
                raise NotFoundError(
                    f"Row {row_index} not found",
                    context={"data_source_id": source_id, "row_count": len(rows)},
                )
            rows[row_index] = row
            record["updated_at"] = utc_now()
            self._save(owner_id, document)

    def clear_rows(self, owner_id: str, source_id: str) -> None:
        with self._lock:
            document = self._document(owner_id)
            record = self._record(document, owner_id, source_id)
            document["rows"].pop(source_id, None)
            record["updated_at"] = utc_now()
            self._save(owner_id, document)


class InMemoryDataSourceStore(_DocumentStore):
    """Process-local store, used by tests and the ``memory`` store spec."""

    def __init__(self) -> None:
        super().__init__()
        self._documents: dict[str, Document] = {}

    def _load(self, owner_id: str) -> Document:
        return self._documents.setdefault(owner_id, {})

    def _save(self, owner_id: str, document: Document) -> None:
        self._documents[owner_id] = document


class LocalJsonDataSourceStore(_DocumentStore):
    """Local file-based store.

    Stores one JSON document per owner under ``{base_path}/{owner}.json``.
    Uses atomic writes (write to temp file, then rename) to prevent corruption.
    """

    def __init__(self, base_path: str | Path = ".dashpipe"):
        super().__init__()
        self.base_path = Path(base_path)
        self.base_path.mkdir(parents=True, exist_ok=True)

    def _path(self, owner_id: str) -> Path:
        return self.base_path / f"{quote(owner_id, safe='')}.json"

    def _load(self, owner_id: str) -> Document:
        path = self._path(owner_id)
        if not path.exists():
            return {}

        try:
            with open(path, "r", encoding="utf-8") as f:
                data = json.load(f)
                return data if isinstance(data, dict) else {}
        except json.JSONDecodeError as e:
            raise StorageError(
                f"Failed to parse store file {path}: {e}",
                context={"owner_id": owner_id, "store_file": str(path)},
            ) from e
        except OSError as e:
            raise StorageError(
                f"Failed to read store file {path}: {e}",
                context={"owner_id": owner_id, "store_file": str(path)},
            ) from e

    def _save(self, owner_id: str, document: Document) -> None:
        path = self._path(owner_id)
        temp_path = path.with_name(path.name + ".tmp")

        try:
            with open(temp_path, "w", encoding="utf-8") as f:
                json.dump(document, f, indent=2, ensure_ascii=False)

            temp_path.replace(path)
        except OSError as e:
            if temp_path.exists():
                temp_path.unlink()
            raise StorageError(
                f"Failed to save store file {path}: {e}",
                context={"owner_id": owner_id, "store_file": str(path)},
            ) from e
        except (TypeError, ValueError) as e:
            if temp_path.exists():
                temp_path.unlink()
            raise StorageError(
                f"Failed to serialize rows for owner {owner_id}: {e}",
                context={"owner_id": owner_id},
            ) from e


def create_store(spec: str) -> DataSourceStore:
    """Build a store from a spec string.

    Args:
        spec: ``memory``, ``local`` or ``local:<directory>``

    Raises:
        ConfigError: If the spec names an unknown backend
    """
    backend, _, location = spec.partition(":")
    if backend == "memory":
        return InMemoryDataSourceStore()
    if backend == "local":
        return LocalJsonDataSourceStore(location or ".dashpipe")
    raise ConfigError(
        f"Unknown storage backend: '{backend}'",
        context={"storage": spec, "available": "memory, local"},
    )


@dataclass
class CachedRows:
    """Data last fetched for one data source, kept exactly as fetched."""

    rows: FetchData
    last_updated: str


class RowCache(Protocol):
    def put(self, owner_id: str, key: str, rows: FetchData) -> CachedRows: ...

    def get(self, owner_id: str, key: str) -> Optional[CachedRows]: ...


class InMemoryRowCache:
    """Owner-scoped cache of fetched data, evicting the least recently used entry.

    Entries are stored as fetched; a cached object stays an object.
    """

    def __init__(self, max_entries: int = 256) -> None:
        if max_entries < 1:
            raise ValueError("max_entries must be at least 1")
        self.max_entries = max_entries
        self._entries: OrderedDict[tuple[str, str], CachedRows] = OrderedDict()
        self._lock = threading.Lock()

    def put(self, owner_id: str, key: str, rows: FetchData) -> CachedRows:
        entry = CachedRows(rows=rows, last_updated=utc_now())
        with self._lock:
            self._entries[(owner_id, key)] = entry
            self._entries.move_to_end((owner_id, key))
            while len(self._entries) > self.max_entries:
                self._entries.popitem(last=False)
        return entry

    def get(self, owner_id: str, key: str) -> Optional[CachedRows]:
        with self._lock:
            entry = self._entries.get((owner_id, key))
            if entry is not None:
                self._entries.move_to_end((owner_id, key))
            return entry

    def __len__(self) -> int:
        return len(self._entries)
