"""Shared FileRecord and Snapshot models (stored in the history file)."""

import time
from dataclasses import dataclass, field
from typing import Dict, List, Optional


@dataclass(frozen=True)
class FileRecord:
    """One tracked file's size in the current build against the baseline."""

    filename: str
    size: int
    previous_size: int = 0

    @property
    def delta(self) -> int:
        return self.size - self.previous_size

    @property
    def is_new(self) -> bool:
        return self.previous_size == 0 and self.size > 0

    @property
    def is_removed(self) -> bool:
        return self.size == 0 and self.previous_size > 0

    def to_dict(self) -> Dict:
        """Convert to the on-disk history format."""
        return {
            'filename': self.filename,
            'previous': self.previous_size,
            'size': self.size,
            'diff': self.delta
        }

    @classmethod
    def from_dict(cls, data: Dict) -> 'FileRecord':
        """Create from the on-disk history format.

        ``diff`` is recomputed from ``size`` and ``previous`` rather than trusted.

        Raises:
            ValueError: If the entry does not have the expected shape
        """
        if not isinstance(data, dict):
            raise ValueError(f"File entry must be an object, got {type(data).__name__}")
        filename = data.get('filename')
        size = data.get('size')
        previous = data.get('previous', 0)
        if not isinstance(filename, str):
            raise ValueError("File entry is missing a filename")
        for value in (size, previous):
            # bool is an int subclass
            if not isinstance(value, int) or isinstance(value, bool) or value < 0:
                raise ValueError(f"Invalid size in file entry {filename}")
        return cls(filename=filename, size=size, previous_size=previous)


@dataclass
class Snapshot:
    """One build's full result."""

    timestamp: int = field(default_factory=lambda: int(time.time() * 1000))
    files: List[FileRecord] = field(default_factory=list)

    def has_changes(self) -> bool:
        """True if any tracked file changed size."""
        return any(record.delta != 0 for record in self.files)

    def get(self, filename: str) -> Optional[FileRecord]:
        for record in self.files:
            if record.filename == filename:
                return record
        return None

    @property
    def total_size(self) -> int:
        return sum(record.size for record in self.files)

    @property
    def total_delta(self) -> int:
        return sum(record.delta for record in self.files)

    def to_sizes(self) -> Dict[str, int]:
        """Project to a filename -> size mapping."""
        return {record.filename: record.size for record in self.files}

    def to_dict(self) -> Dict:
        """Convert to dictionary for serialization."""
        return {
            'timestamp': self.timestamp,
            'files': [record.to_dict() for record in self.files]
        }

    @classmethod
    def from_dict(cls, data: Dict) -> 'Snapshot':
        """Create from dictionary.

        Raises:
            ValueError: If the entry does not have the expected shape
        """
        if not isinstance(data, dict):
            raise ValueError(f"Snapshot must be an object, got {type(data).__name__}")
        timestamp = data.get('timestamp')
        files = data.get('files')
        if not isinstance(timestamp, (int, float)) or isinstance(timestamp, bool):
            raise ValueError("Snapshot is missing a numeric timestamp")
        if not isinstance(files, list):
            raise ValueError("Snapshot is missing its file list")
        records = [FileRecord.from_dict(f) for f in files]
        if len({record.filename for record in records}) != len(records):
            raise ValueError("Snapshot lists the same filename twice")
        return cls(timestamp=int(timestamp), files=records)
