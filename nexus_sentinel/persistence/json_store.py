"""
JSON Store - Single-document JSON files with locked updates

Module: persistence.json_store
Date: 2026-10-06
Version: 0.1.0

CHANGELOG:
[2026-10-06 v0.1.0] Initial implementation
  - One JSON document per file, created from a default on first use
  - Replace-on-write through a sibling .tmp file (owner-only mode)
  - transaction() for read-modify-write under a re-entrant lock

ARCHITECTURE:
JSONStore is shared by PrincipalStore and TokenLedger:
  - load(): current document
  - save(): replace the whole document
  - transaction(): load, mutate in place, save on clean exit
  - append_entry(): push one item onto a top-level list

The lock serializes writers inside the process; the core runs in worker
threads behind the HTTP API. Cross-process writers are not supported.
"""

import copy
import json
import logging
import os
import threading
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Dict, Iterator, Optional


class JSONStoreError(Exception):
    """Base JSON store error"""
    pass


class JSONStoreIOError(JSONStoreError):
    """Document could not be read or written"""
    pass


class JSONStoreFormatError(JSONStoreError):
    """Document is not valid JSON"""
    pass


class JSONStore:
    """
    JSON document bound to one file path.
    """

    def __init__(self, file_path: str, default_data: Optional[Dict[str, Any]] = None):
        """
        Bind the store to a file, creating it if needed

        Args:
            file_path: Location of the document
            default_data: Initial document for a new file
        """
        self.logger = logging.getLogger(f"persistence.{self.__class__.__name__}")
        self.file_path = Path(file_path)
        self.default_data = default_data or {}
        self._lock = threading.RLock()

        self.file_path.parent.mkdir(parents=True, exist_ok=True)
        if not self.file_path.is_file():
            self._replace_file(self.default_data)
            self.logger.info(f"Initialized {self.file_path}")

    def load(self) -> Dict[str, Any]:
        """
        Read the current document

        Raises:
            JSONStoreIOError: Unreadable file
            JSONStoreFormatError: Corrupted content
        """
        with self._lock:
            try:
                text = self.file_path.read_text(encoding="utf-8")
            except FileNotFoundError:
                self.logger.warning(f"{self.file_path} disappeared, using defaults")
                return copy.deepcopy(self.default_data)
            except OSError as e:
                raise JSONStoreIOError(f"Cannot read {self.file_path}: {e}")

            try:
                return json.loads(text)
            except json.JSONDecodeError as e:
                raise JSONStoreFormatError(f"Corrupted document {self.file_path}: {e}")

    def save(self, data: Dict[str, Any]) -> None:
        """Replace the whole document"""
        with self._lock:
            self._replace_file(data)

    @contextmanager
    def transaction(self) -> Iterator[Dict[str, Any]]:
        """
        Locked read-modify-write

        The yielded document is written back only if the block
        completes without raising.

            with store.transaction() as data:
                data["users"].append(record)
        """
        with self._lock:
            data = self.load()
            yield data
            self._replace_file(data)

    def append_entry(self, entries_key: str, entry: Dict[str, Any]) -> None:
        """Append `entry` to the list stored under `entries_key`"""
        with self.transaction() as data:
            data.setdefault(entries_key, []).append(entry)

    def _replace_file(self, data: Dict[str, Any]) -> None:
        tmp_path = self.file_path.with_name(self.file_path.name + ".tmp")
        try:
            serialized = json.dumps(data, indent=2, default=str)
            with open(tmp_path, "w", encoding="utf-8") as f:
                f.write(serialized)
                f.flush()
                os.fsync(f.fileno())
            os.chmod(tmp_path, 0o600)
            os.replace(tmp_path, self.file_path)
        except (OSError, TypeError, ValueError) as e:
            raise JSONStoreIOError(f"Cannot write {self.file_path}: {e}")
