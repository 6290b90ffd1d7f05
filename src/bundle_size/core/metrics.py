"""Summary metrics for a single tracked build."""

from dataclasses import dataclass, asdict, field
from datetime import datetime
from typing import Dict
import json

from .diff import summarize_changes
from .report import format_delta, pretty_bytes
from .snapshot import Snapshot


@dataclass
class BuildMetrics:
    """Counts collected while tracking one build."""

    run_id: str = field(default_factory=lambda: datetime.now().strftime("%Y%m%d_%H%M%S"))
    outputs_in_build: int = 0
    files_tracked: int = 0
    measurement_failures: int = 0
    cold_start: bool = False
    new_files: int = 0
    removed_files: int = 0
    grown_files: int = 0
    shrunk_files: int = 0
    unchanged_files: int = 0
    total_size: int = 0
    total_delta: int = 0
    persisted: bool = False
    published: bool = False

    def record_snapshot(self, snapshot: Snapshot) -> None:
        """Fill the change counts from a computed snapshot."""
        counts = summarize_changes(snapshot)
        self.new_files = counts['new']
        self.removed_files = counts['removed']
        self.grown_files = counts['grown']
        self.shrunk_files = counts['shrunk']
        self.unchanged_files = counts['unchanged']
        self.total_size = snapshot.total_size
        self.total_delta = snapshot.total_delta

    def to_dict(self) -> Dict:
        """Convert to dictionary for serialization."""
        return asdict(self)

    def to_json(self, indent: int = 2) -> str:
        return json.dumps(self.to_dict(), indent=indent)

    def get_summary(self) -> str:
        """Generate a human-readable summary."""
        if self.files_tracked == 0:
            return f"No tracked files among {self.outputs_in_build} build outputs"

        parts = [f"Tracked {self.files_tracked} of {self.outputs_in_build} outputs"]
        if self.cold_start:
            parts.append("cold start")
        if self.measurement_failures > 0:
            parts.append(f"{self.measurement_failures} could not be measured")

        parts.append(f"total {pretty_bytes(self.total_size)}")
        if self.total_delta != 0:
            parts.append(f"({format_delta(self.total_delta)})")

        changes = []
        if self.new_files > 0:
            changes.append(f"{self.new_files} new")
        if self.removed_files > 0:
            changes.append(f"{self.removed_files} removed")
        if self.grown_files > 0:
            changes.append(f"{self.grown_files} grew")
        if self.shrunk_files > 0:
            changes.append(f"{self.shrunk_files} shrank")
        parts.append(", ".join(changes) if changes else "no size changes")

        parts.append("history updated" if self.persisted else "history unchanged")
        if self.published:
            parts.append("published")

        return " - ".join(parts)
