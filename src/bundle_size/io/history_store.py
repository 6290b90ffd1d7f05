"""On-disk history of build size snapshots."""

import json
from pathlib import Path
from typing import Dict, List, Union

from ..core.logging import get_logger
from ..core.snapshot import Snapshot


class HistoryStore:
    """Reads and prepends snapshots in a JSON history file.

    The file holds a JSON array of snapshots, most recent first. Anything
    else found there is treated as an empty history.
    """

    def __init__(self, history_file_path: Union[str, Path], enabled: bool = True):
        """Initialize the history store.

        Args:
            history_file_path: Path to the JSON history file
            enabled: When False, reads return nothing and writes are skipped
        """
        self.history_file_path = Path(history_file_path)
        self.enabled = enabled
        self.logger = get_logger(__name__)

    def read(self) -> List[Snapshot]:
        """Load all snapshots, most recent first.

        Returns:
            List of snapshots; empty if the file is absent, unreadable or malformed
        """
        if not self.enabled:
            return []

        if not self.history_file_path.exists():
            self.logger.debug(f"No size history at {self.history_file_path}")
            return []

        try:
            with open(self.history_file_path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            self.logger.warning(f"Ignoring unreadable size history {self.history_file_path}: {e}")
            return []

        if not isinstance(data, list):
            self.logger.warning(f"Ignoring size history {self.history_file_path}: expected a list of snapshots")
            return []

        try:
            snapshots = [Snapshot.from_dict(entry) for entry in data]
        except ValueError as e:
            self.logger.warning(f"Ignoring malformed size history {self.history_file_path}: {e}")
            return []

        snapshots.sort(key=lambda snapshot: snapshot.timestamp, reverse=True)
        self.logger.debug(f"Loaded {len(snapshots)} snapshots from {self.history_file_path}")
        return snapshots

    def write(self, snapshot: Snapshot) -> bool:
        """Prepend a snapshot and persist the whole history.

        Args:
            snapshot: Snapshot for the build that just finished

        Returns:
            True if the history file was written, False otherwise
        """
        if not self.enabled:
            self.logger.debug("Size history writes are disabled")
            return False

        history = [snapshot] + self.read()

        try:
            self.history_file_path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.history_file_path, 'w', encoding='utf-8') as f:
                json.dump([entry.to_dict() for entry in history], f, indent=2)
        except (OSError, TypeError, ValueError) as e:
            self.logger.error(f"Error saving size history {self.history_file_path}: {e}")
            return False

        self.logger.info(f"Saved snapshot to {self.history_file_path} ({len(history)} total)")
        return True

    @staticmethod
    def baseline_from(snapshots: List[Snapshot]) -> Dict[str, int]:
        """filename -> size from the most recent snapshot."""
        if not snapshots:
            return {}
        return snapshots[0].to_sizes()
