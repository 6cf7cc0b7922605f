import json
import logging
import os
import stat
import tempfile
import threading
from pathlib import Path
from typing import Any, Dict, List

from fleet_admin.utils.errors import DuplicateRecord, RecordNotFound, StoreUnavailable

logger = logging.getLogger(__name__)

Record = Dict[str, Any]

DEFAULT_FILE_MODE = 0o644


class CollectionStore:
    """One resource type persisted as a JSON array in ``<data_dir>/<name>.json``.

    Every call re-reads the file; nothing is cached between calls. Mutations
    load the whole collection, change it in memory and rewrite the whole file
    while holding the store's lock. Writes go to a temporary file first and
    are moved over the target with ``os.replace``.
    """

    def __init__(self, name: str, data_dir: Path):
        self.name = name
        self.file_path = Path(data_dir) / f"{name}.json"
        self._lock = threading.Lock()

    def get_all(self) -> List[Record]:
        with self._lock:
            return self._load()

    def get_by_key(self, record_id: str) -> Record:
        with self._lock:
            records = self._load()
        record = next((r for r in records if r.get("id") == record_id), None)
        if record is None:
            raise RecordNotFound(self.name, record_id)
        return record

    def append(self, record: Record) -> Record:
        with self._lock:
            records = self._load()
            if any(r.get("id") == record.get("id") for r in records):
                raise DuplicateRecord(self.name, record.get("id"))
            records.append(record)
            self._save(records)
        return record

    def replace_by_key(self, record_id: str, record: Record) -> Record:
        with self._lock:
            records = self._load()
            index = next((i for i, r in enumerate(records) if r.get("id") == record_id), None)
            if index is None:
                raise RecordNotFound(self.name, record_id)
            records[index] = record
            self._save(records)
        return record

    def delete_by_key(self, record_id: str) -> None:
        # Removes every match, so duplicates written before ids were enforced go too.
        with self._lock:
            records = self._load()
            remaining = [r for r in records if r.get("id") != record_id]
            if len(remaining) != len(records):
                logger.debug(f"[CollectionStore] {self.name}: removing {len(records) - len(remaining)} record(s) with id {record_id}")
            self._save(remaining)

    def _load(self) -> List[Record]:
        try:
            self.file_path.parent.mkdir(parents=True, exist_ok=True)
            if not self.file_path.exists():
                self._save([])
            with open(self.file_path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            logger.error(f"[CollectionStore] Cannot read {self.file_path}: {e}")
            raise StoreUnavailable(f"Cannot read {self.name} data") from e

        if not isinstance(data, list):
            logger.error(f"[CollectionStore] {self.file_path} does not hold a JSON array")
            raise StoreUnavailable(f"{self.name} data is not a list")
        return data

    def _save(self, records: List[Record]) -> None:
        tmp_path = None
        try:
            self.file_path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(
                prefix=f".{self.name}.", suffix=".tmp", dir=self.file_path.parent
            )
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(records, f, indent=2)
                f.flush()
                os.fsync(f.fileno())
            # mkstemp creates 0600 files; keep the target's mode instead
            if self.file_path.exists():
                mode = stat.S_IMODE(os.stat(self.file_path).st_mode)
            else:
                mode = DEFAULT_FILE_MODE
            os.chmod(tmp_path, mode)
            os.replace(tmp_path, self.file_path)
        except (OSError, TypeError, ValueError) as e:
            logger.error(f"[CollectionStore] Cannot write {self.file_path}: {e}")
            if tmp_path is not None and os.path.exists(tmp_path):
                os.remove(tmp_path)
            raise StoreUnavailable(f"Cannot write {self.name} data") from e
        logger.debug(f"[CollectionStore] {self.name}: {len(records)} records written")


def lookup_name(store: CollectionStore, record_id: str) -> str:
    """Name of the referenced record, or "" when it does not exist (references are not enforced)."""
    try:
        return store.get_by_key(record_id).get("name", "")
    except RecordNotFound:
        return ""
