"""Call summary persistence: one JSON document keyed by summary ID."""

import json
import logging
import os
import threading
import uuid
from pathlib import Path
from typing import Optional, Union

from src.schemas.calendar_schema import CallSummary
from src.utils import epoch_millis

logger = logging.getLogger(__name__)


class CallSummaryStore:
    """Stores summaries for later use when generating a client's workflow."""

    def __init__(self, path: Union[str, Path]) -> None:
        self._path = Path(path)
        self._lock = threading.Lock()

    def _load(self) -> dict[str, dict]:
        if not self._path.exists():
            return {}
        raw = self._path.read_text(encoding="utf-8").strip()
        return json.loads(raw) if raw else {}

    def _dump(self, documents: dict[str, dict]) -> None:
        tmp_path = self._path.with_name(self._path.name + ".tmp")
        tmp_path.write_text(json.dumps(documents, indent=2), encoding="utf-8")
        os.replace(tmp_path, self._path)

    def save(self, summary: CallSummary) -> str:
        """Persist a summary and return its generated ID."""
        with self._lock:
            documents = self._load()
            summary_id = f"summary_{epoch_millis()}"
            if summary_id in documents:
                summary_id = f"{summary_id}_{uuid.uuid4().hex[:6]}"
            documents[summary_id] = summary.model_dump(by_alias=True, mode="json")
            self._dump(documents)
        logger.info("Call summary %s stored for %s", summary_id, summary.client_name)
        return summary_id

    def get(self, summary_id: str) -> Optional[CallSummary]:
        with self._lock:
            doc = self._load().get(summary_id)
        return CallSummary.model_validate(doc) if doc else None

    def list_summaries(self) -> dict[str, CallSummary]:
        with self._lock:
            documents = self._load()
        return {sid: CallSummary.model_validate(doc) for sid, doc in documents.items()}
