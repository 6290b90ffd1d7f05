"""Reconcile a baseline against freshly measured sizes."""

from typing import Dict, List, Mapping, Optional

from .snapshot import FileRecord, Snapshot


def merge_filenames(baseline: Mapping[str, int], current: Mapping[str, int]) -> List[str]:
    """Union of baseline then current filenames, first occurrence wins."""
    seen = set()
    names = []
    for name in list(baseline.keys()) + list(current.keys()):
        if name not in seen:
            seen.add(name)
            names.append(name)
    return names


def compute_diff(baseline: Mapping[str, int], current: Mapping[str, int],
                 timestamp: Optional[int] = None) -> Snapshot:
    """Build the snapshot for one build.

    Files only in the baseline are kept as removed (size 0); files only in
    ``current`` are new (previous size 0).

    Args:
        baseline: filename -> size from the previous build
        current: filename -> size measured for this build
        timestamp: Milliseconds since epoch, defaults to now

    Returns:
        Snapshot with one record per filename
    """
    records = []
    for name in merge_filenames(baseline, current):
        size = current.get(name) or 0
        previous_size = baseline.get(name) or 0
        records.append(FileRecord(filename=name, size=size, previous_size=previous_size))

    if timestamp is None:
        return Snapshot(files=records)
    return Snapshot(timestamp=timestamp, files=records)


def summarize_changes(snapshot: Snapshot) -> Dict[str, int]:
    """Count records by kind of change."""
    counts = {'new': 0, 'removed': 0, 'grown': 0, 'shrunk': 0, 'unchanged': 0}
    for record in snapshot.files:
        if record.is_new:
            counts['new'] += 1
        elif record.is_removed:
            counts['removed'] += 1
        elif record.delta > 0:
            counts['grown'] += 1
        elif record.delta < 0:
            counts['shrunk'] += 1
        else:
            counts['unchanged'] += 1
    return counts
