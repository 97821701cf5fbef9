"""
File-based store for the canonical quote dataset.

The dataset is a JSON file holding either a bare array of quote records
(legacy seed format) or an envelope {"metadata": {...}, "quotes": [...]}.
Writes go to a temporary file in the same directory and are moved into place
with os.replace, so a crash never leaves a truncated dataset. The backup of
the original bytes is written and fsynced before the canonical file changes.

save() always writes the envelope, so after the first enrichment run the
file is no longer a bare array. Consumers that index or upload the dataset
must read the "quotes" key (or call load(), which accepts both formats).

Usage:
    store = QuoteDatasetStore(Path("data/quotes.json"))
    raw = store.read_raw()
    quotes = store.load()
    store.backup(raw)
    store.save(enriched, metadata={"enriched": True})
"""

import json
import logging
import os
import stat
import tempfile
from contextlib import contextmanager
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional, Union

from anime_quotes.shared.exceptions import DatasetLockedError, DatasetStoreError

logger = logging.getLogger(__name__)

SCHEMA_VERSION = 2


def default_backup_path(data_path: Path) -> Path:
    """Sibling backup path: data/quotes.json -> data/quotes.backup.json."""
    return data_path.with_name(f"{data_path.stem}.backup{data_path.suffix}")


class QuoteDatasetStore:
    """Read/write access to the quote dataset file and its backup."""

    def __init__(
        self,
        data_path: Union[str, Path],
        backup_path: Optional[Union[str, Path]] = None,
    ) -> None:
        self.data_path = Path(data_path)
        self.backup_path = (
            Path(backup_path) if backup_path else default_backup_path(self.data_path)
        )
        self.lock_path = self.data_path.with_name(f"{self.data_path.name}.lock")

    def read_raw(self) -> bytes:
        """
        Read the dataset file bytes exactly as stored.

        Raises:
            DatasetStoreError: If the file cannot be read
        """
        try:
            return self.data_path.read_bytes()
        except OSError as e:
            raise DatasetStoreError(f"Failed to read dataset {self.data_path}: {e}") from e

    def _parse(self, raw: bytes) -> Dict[str, Any]:
        try:
            data = json.loads(raw.decode("utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError) as e:
            raise DatasetStoreError(f"Dataset {self.data_path} is not valid JSON: {e}") from e

        if isinstance(data, list):
            return {"metadata": {}, "quotes": data}

        if isinstance(data, dict) and isinstance(data.get("quotes"), list):
            metadata = data.get("metadata") or {}
            if not isinstance(metadata, dict):
                raise DatasetStoreError(f"Dataset {self.data_path} has invalid metadata block")
            return {"metadata": metadata, "quotes": data["quotes"]}

        raise DatasetStoreError(
            f"Dataset {self.data_path} must be a JSON array or an object with a 'quotes' array"
        )

    def load(self, raw: Optional[bytes] = None) -> List[Dict[str, Any]]:
        """
        Load quote records.

        Args:
            raw: Already-read file bytes (read from disk if omitted)

        Returns:
            List of quote dictionaries

        Raises:
            DatasetStoreError: If the file is missing, unreadable or malformed
        """
        data = self._parse(raw if raw is not None else self.read_raw())
        logger.info(f"✓ Loaded {len(data['quotes'])} quotes from {self.data_path}")
        return data["quotes"]

    def load_metadata(self, raw: Optional[bytes] = None) -> Dict[str, Any]:
        """Collection-level metadata (empty for legacy bare-array files)."""
        return self._parse(raw if raw is not None else self.read_raw())["metadata"]

    def backup(self, raw: bytes) -> Path:
        """
        Write the original dataset bytes to the backup path, durably.

        Raises:
            DatasetStoreError: If the backup cannot be written
        """
        try:
            self.backup_path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.backup_path, "wb") as f:
                f.write(raw)
                f.flush()
                os.fsync(f.fileno())
        except OSError as e:
            raise DatasetStoreError(f"Failed to write backup {self.backup_path}: {e}") from e

        logger.info(f"Backup created at: {self.backup_path}")
        return self.backup_path

    def save(
        self,
        quotes: List[Dict[str, Any]],
        metadata: Optional[Dict[str, Any]] = None,
    ) -> Path:
        """
        Atomically overwrite the dataset with the given quotes and metadata.

        Raises:
            DatasetStoreError: If serialization or the write fails
        """
        envelope_metadata = dict(metadata or {})
        envelope_metadata.setdefault("schema_version", SCHEMA_VERSION)
        envelope_metadata["quote_count"] = len(quotes)
        envelope_metadata["updated_at"] = datetime.now(timezone.utc).isoformat()

        payload = {"metadata": envelope_metadata, "quotes": quotes}

        tmp_name = None
        try:
            self.data_path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                prefix=f".{self.data_path.name}.", suffix=".tmp", dir=self.data_path.parent
            )
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(payload, f, indent=2, ensure_ascii=False)
                f.flush()
                os.fsync(f.fileno())
            # mkstemp creates 0600; keep the permissions of the file being replaced
            if self.data_path.exists():
                os.chmod(tmp_name, stat.S_IMODE(self.data_path.stat().st_mode))
            os.replace(tmp_name, self.data_path)
        except (OSError, TypeError, ValueError) as e:
            if tmp_name and os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise DatasetStoreError(f"Failed to write dataset {self.data_path}: {e}") from e

        logger.info(f"Saved {len(quotes)} quotes to: {self.data_path}")
        return self.data_path

    @contextmanager
    def run_lock(self) -> Iterator[Path]:
        """
        Hold an exclusive lock file for the duration of a pipeline run.

        Raises:
            DatasetLockedError: If another run already holds the lock
            DatasetStoreError: If the lock file cannot be created
        """
        try:
            self.lock_path.parent.mkdir(parents=True, exist_ok=True)
            fd = os.open(self.lock_path, os.O_CREAT | os.O_EXCL | os.O_WRONLY)
        except FileExistsError as e:
            raise DatasetLockedError(
                f"Dataset {self.data_path} is locked by another run "
                f"(remove {self.lock_path} if no run is active)"
            ) from e
        except OSError as e:
            raise DatasetStoreError(f"Failed to create lock {self.lock_path}: {e}") from e

        try:
            os.write(fd, str(os.getpid()).encode("ascii"))
        finally:
            os.close(fd)

        try:
            yield self.lock_path
        finally:
            try:
                self.lock_path.unlink()
            except FileNotFoundError:
                logger.warning(f"Lock file {self.lock_path} already removed")
