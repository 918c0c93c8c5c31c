import json
import logging
import os
import threading
import uuid
from typing import Iterable, List

from schemas.complaints import ComplaintRead

logger = logging.getLogger(__name__)


class LocalCache:
    """JSON snapshot of complaints, read when the store cannot be reached."""

    def __init__(self, path: str):
        self.path = path
        self._lock = threading.Lock()

    def _read(self) -> dict:
        if not os.path.exists(self.path):
            return {}
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                return json.load(f)
        except (OSError, ValueError) as e:
            logger.warning("Ignoring unreadable complaint cache %s: %s", self.path, e)
            return {}

    def _write(self, records: dict):
        directory = os.path.dirname(self.path)
        if directory:
            os.makedirs(directory, exist_ok=True)
        tmp_path = f"{self.path}.tmp"
        with open(tmp_path, "w", encoding="utf-8") as f:
            json.dump(records, f)
        os.replace(tmp_path, self.path)

    @staticmethod
    def _dump(complaint) -> dict:
        return ComplaintRead.model_validate(complaint).model_dump(mode="json")

    def save_local(self, complaint):
        with self._lock:
            records = self._read()
            record = self._dump(complaint)
            records[record["id"]] = record
            self._write(records)

    def save_all(self, complaints: Iterable):
        with self._lock:
            records = {}
            for complaint in complaints:
                record = self._dump(complaint)
                records[record["id"]] = record
            self._write(records)

    def forget(self, complaint_id: uuid.UUID):
        with self._lock:
            records = self._read()
            if records.pop(str(complaint_id), None) is not None:
                self._write(records)

    def load_local(self) -> List[ComplaintRead]:
        with self._lock:
            records = self._read()
        return [ComplaintRead.model_validate(record) for record in records.values()]
