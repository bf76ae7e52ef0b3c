"""
Client record persistence keyed by clientId.

Two backends share one contract: an in-memory store for tests and a
JSON-file store that rewrites the whole document after every mutation.

Updates are optimistic. Each record carries a ``revision``; ``update``
reads a record, applies the mutator to a copy and writes it back only if
the stored revision is still the one it read. On conflict it re-reads
and tries again, so a concurrent writer's change is never overwritten
silently.

Usage:
    store = JsonFileClientStore("clients.json")
    store.create(record)
    store.update(record.client_id, lambda r: setattr(r, "paid_at", now))
"""

import json
import logging
import os
import threading
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Callable, Union

from src.errors import (
    ConcurrentUpdateError,
    DuplicateKeyError,
    NotFoundError,
    ValidationError,
)
from src.schemas.client_schema import ClientRecord

logger = logging.getLogger(__name__)

Mutator = Callable[[ClientRecord], None]

DEFAULT_MAX_RETRIES = 3


class ClientStore(ABC):
    """Contract for client record persistence."""

    def __init__(self, max_retries: int = DEFAULT_MAX_RETRIES) -> None:
        self._max_retries = max_retries

    @abstractmethod
    def create(self, record: ClientRecord) -> ClientRecord:
        """Insert a new record. Raises DuplicateKeyError if the id exists."""

    @abstractmethod
    def get(self, client_id: str) -> ClientRecord:
        """Return a copy of the record. Raises NotFoundError if absent."""

    @abstractmethod
    def list_clients(self) -> list[ClientRecord]:
        """Return copies of all records."""

    @abstractmethod
    def _compare_and_swap(self, record: ClientRecord, expected_revision: int) -> bool:
        """Replace the stored record if its revision still matches."""

    def update(self, client_id: str, mutator: Mutator) -> ClientRecord:
        """Apply ``mutator`` to one record and persist it.

        Raises:
            NotFoundError: If the record does not exist.
            ConcurrentUpdateError: If every attempt lost a revision race.
        """
        for attempt in range(1, self._max_retries + 1):
            current = self.get(client_id)
            draft = current.model_copy(deep=True)
            mutator(draft)
            draft.client_id = current.client_id
            draft.revision = current.revision + 1
            if current.is_paid and not draft.is_paid:
                raise ValidationError(
                    f"Client {client_id}: paymentStatus cannot go back to pending"
                )
            if self._compare_and_swap(draft, expected_revision=current.revision):
                return draft
            logger.warning(
                "Revision conflict on %s (attempt %d/%d)",
                client_id, attempt, self._max_retries,
            )
        raise ConcurrentUpdateError(
            f"Client {client_id} changed concurrently {self._max_retries} times; update abandoned"
        )


class InMemoryClientStore(ClientStore):
    """Process-local store. Used by tests and local experiments."""

    def __init__(self, max_retries: int = DEFAULT_MAX_RETRIES) -> None:
        super().__init__(max_retries)
        self._records: dict[str, ClientRecord] = {}
        self._lock = threading.Lock()

    def create(self, record: ClientRecord) -> ClientRecord:
        with self._lock:
            if record.client_id in self._records:
                raise DuplicateKeyError(f"Client {record.client_id} already exists")
            self._records[record.client_id] = record.model_copy(deep=True)
        return record

    def get(self, client_id: str) -> ClientRecord:
        with self._lock:
            record = self._records.get(client_id)
            if record is None:
                raise NotFoundError(f"Client {client_id} not found")
            return record.model_copy(deep=True)

    def list_clients(self) -> list[ClientRecord]:
        with self._lock:
            return [r.model_copy(deep=True) for r in self._records.values()]

    def _compare_and_swap(self, record: ClientRecord, expected_revision: int) -> bool:
        with self._lock:
            stored = self._records.get(record.client_id)
            if stored is None:
                raise NotFoundError(f"Client {record.client_id} not found")
            if stored.revision != expected_revision:
                return False
            self._records[record.client_id] = record.model_copy(deep=True)
            return True


class JsonFileClientStore(ClientStore):
    """All records in one JSON document, rewritten atomically on every change."""

    def __init__(self, path: Union[str, Path], max_retries: int = DEFAULT_MAX_RETRIES) -> None:
        super().__init__(max_retries)
        self._path = Path(path)
        self._lock = threading.Lock()
        if not self._path.exists():
            self._dump({})
            logger.info("Initialized empty client database at %s", self._path)

    @property
    def path(self) -> Path:
        return self._path

    def _load(self) -> dict[str, ClientRecord]:
        raw = self._path.read_text(encoding="utf-8").strip()
        documents = json.loads(raw) if raw else {}
        return {
            client_id: ClientRecord.model_validate(doc)
            for client_id, doc in documents.items()
        }

    def _dump(self, records: dict[str, ClientRecord]) -> None:
        documents = {client_id: r.to_document() for client_id, r in records.items()}
        tmp_path = self._path.with_name(self._path.name + ".tmp")
        tmp_path.write_text(json.dumps(documents, indent=2), encoding="utf-8")
        os.replace(tmp_path, self._path)

    def create(self, record: ClientRecord) -> ClientRecord:
        with self._lock:
            records = self._load()
            if record.client_id in records:
                raise DuplicateKeyError(f"Client {record.client_id} already exists")
            records[record.client_id] = record
            self._dump(records)
        return record

    def get(self, client_id: str) -> ClientRecord:
        with self._lock:
            record = self._load().get(client_id)
        if record is None:
            raise NotFoundError(f"Client {client_id} not found")
        return record

    def list_clients(self) -> list[ClientRecord]:
        with self._lock:
            return list(self._load().values())

    def _compare_and_swap(self, record: ClientRecord, expected_revision: int) -> bool:
        with self._lock:
            records = self._load()
            stored = records.get(record.client_id)
            if stored is None:
                raise NotFoundError(f"Client {record.client_id} not found")
            if stored.revision != expected_revision:
                return False
            records[record.client_id] = record
            self._dump(records)
            return True
