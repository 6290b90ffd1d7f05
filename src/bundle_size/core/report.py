"""Render size records as an aligned, severity-colored text report."""

from enum import Enum
from typing import Sequence

from rich.markup import escape

from .snapshot import FileRecord

BYTE_UNITS = ['B', 'kB', 'MB', 'GB', 'TB', 'PB']

# Size thresholds for the severity tiers, checked largest first
CRITICAL_SIZE = 100 * 1024
HIGH_SIZE = 40 * 1024
ELEVATED_SIZE = 20 * 1024

SIGNIFICANT_GROWTH = 1024
SIGNIFICANT_SHRINK = -10
NOISE_THRESHOLD = 1


class SeverityTier(Enum):
    """Ordered emphasis buckets for an absolute file size."""
    NORMAL = "green"
    ELEVATED = "cyan"
    HIGH = "yellow"
    CRITICAL = "red"

    @classmethod
    def for_size(cls, size: int) -> 'SeverityTier':
        if size > CRITICAL_SIZE:
            return cls.CRITICAL
        if size > HIGH_SIZE:
            return cls.HIGH
        if size > ELEVATED_SIZE:
            return cls.ELEVATED
        return cls.NORMAL

    @property
    def style(self) -> str:
        return self.value


def pretty_bytes(number: int) -> str:
    """Format a byte count with 1000-based units and three significant digits.

    >>> pretty_bytes(12345)
    '12.3 kB'
    >>> pretty_bytes(-512)
    '-512 B'
    """
    if number == 0:
        return "0 B"
    sign = '-' if number < 0 else ''
    value = float(abs(number))
    exponent = 0
    while value >= 1000 and exponent < len(BYTE_UNITS) - 1:
        value /= 1000
        exponent += 1
    rounded = float(f"{value:.3g}")
    return f"{sign}{rounded:g} {BYTE_UNITS[exponent]}"


def format_delta(delta: int) -> str:
    """Signed delta text, e.g. ``+1.5 kB``."""
    return ('+' if delta > 0 else '') + pretty_bytes(delta)


class ReportFormatter:
    """Formats FileRecords into the per-build size report."""

    def __init__(self, column_width: int = 20, color: bool = True):
        """Initialize the formatter.

        Args:
            column_width: Minimum filename column width for single-file reports
            color: Emit rich markup for the severity tiers
        """
        self.column_width = column_width
        self.color = color

    def _style(self, text: str, style: str) -> str:
        if not self.color:
            return text
        return f"[{style}]{text}[/{style}]"

    def format_line(self, record: FileRecord, width: int) -> str:
        """Format one record, without the trailing newline."""
        name = escape(record.filename) if self.color else record.filename
        padding = ' ' * (width - len(record.filename) + 1)
        prefix = f"{padding}{name} ⏤  "

        tier = SeverityTier.for_size(record.size)
        size_text = self._style(pretty_bytes(record.size), tier.style)

        delta = record.delta
        if abs(delta) > NOISE_THRESHOLD:
            delta_text = format_delta(delta)
            if delta > SIGNIFICANT_GROWTH:
                size_text = self._style(size_text, 'bold')
                delta_text = self._style(delta_text, 'red')
            elif delta < SIGNIFICANT_SHRINK:
                delta_text = self._style(delta_text, 'green')
            size_text += f" ({delta_text})"

        return prefix + size_text

    def render(self, records: Sequence[FileRecord]) -> str:
        """Render the report; an empty string means there is nothing to print."""
        if not records:
            return ""

        width = max(len(record.filename) for record in records)
        if len(records) == 1:
            width = max(width, self.column_width)

        output = ''.join(self.format_line(record, width) + '\n' for record in records)

        if len(records) == 1:
            output = output.rstrip()
        return output
