"""Collection store: the in-memory index of archived records.

The snapshot on disk is a JSON array of records sorted by numeric snowflake.
A missing snapshot means a fresh run, and the output directory is reset.
"""

from __future__ import annotations

import os
import shutil
import tempfile
from pathlib import Path

from pydantic import ValidationError

from starboard_archive.archive.logger import logger
from starboard_archive.archive.models import ArchiveRecord, RecordList
from starboard_archive.utils.snowflake import newest, snowflake_key


class SnapshotError(Exception):
    """Raised when an existing snapshot cannot be parsed."""

    def __init__(self, path: Path, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Invalid snapshot {path}: {reason}")


class CollectionStore:
    """Owns every ArchiveRecord for the lifetime of a run."""

    def __init__(self, output_dir: Path, downloads_subdir: str = "downloads") -> None:
        self.output_dir = output_dir
        self.downloads_dir = output_dir / downloads_subdir
        self.snapshot_path = output_dir / "metadata.json"
        self._records: dict[str, ArchiveRecord] = {}

    def __len__(self) -> int:
        return len(self._records)

    def load(self) -> int:
        """Load the snapshot, or reset the output directory if there is none.

        Returns:
            Number of records loaded
        """
        if self.snapshot_path.exists():
            try:
                records = RecordList.validate_json(self.snapshot_path.read_bytes())
            except ValidationError as e:
                raise SnapshotError(self.snapshot_path, str(e)) from e

            self._records = {}
            for record in records:
                if record.source_id in self._records:
                    raise SnapshotError(
                        self.snapshot_path, f"duplicate snowflake {record.source_id}"
                    )
                self._records[record.source_id] = record
            self.downloads_dir.mkdir(parents=True, exist_ok=True)
            logger.collection_loaded(len(self._records), self.snapshot_path)
        else:
            self._records = {}
            if self.output_dir.exists():
                shutil.rmtree(self.output_dir)
            self.downloads_dir.mkdir(parents=True, exist_ok=True)
            logger.collection_reset(self.output_dir)
        return len(self._records)

    def has(self, source_id: str) -> bool:
        return source_id in self._records

    def add(self, record: ArchiveRecord) -> None:
        if record.source_id in self._records:
            raise ValueError(f"Record for {record.source_id} already archived")
        self._records[record.source_id] = record

    def records(self) -> list[ArchiveRecord]:
        """All records, ascending by numeric snowflake."""
        return sorted(self._records.values(), key=lambda r: snowflake_key(r.source_id))

    def latest_source_id(self) -> str | None:
        return newest(self._records)

    def flush(self) -> None:
        """Write the full snapshot, replacing the previous one atomically."""
        data = RecordList.dump_json(
            self.records(), by_alias=True, exclude_none=True, indent=2
        )
        self.output_dir.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(
            dir=self.output_dir, prefix=".metadata-", suffix=".json.tmp"
        )
        try:
            with os.fdopen(fd, "wb") as f:
                f.write(data)
            os.replace(tmp_name, self.snapshot_path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise
        logger.collection_saved(len(self._records), self.snapshot_path)
