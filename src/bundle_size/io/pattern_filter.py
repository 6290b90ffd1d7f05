"""Glob-based selection of which build outputs are tracked.

Patterns follow the usual bundler glob dialect: ``*`` and ``?`` stay within
one path segment, ``**`` spans segments, ``[...]`` is a character class
and ``{a,b}`` / ``{1..3}`` expand to alternatives.
"""

import re
from typing import Dict, Iterable, List, Optional, Pattern

from ..core.exceptions import PatternError
from ..core.logging import get_logger
from ..core.models import OutputFile

logger = get_logger(__name__)

_RANGE_RE = re.compile(r'^(-?\d+)\.\.(-?\d+)$')


def _find_closing_brace(pattern: str, start: int) -> int:
    """Index of the brace closing the one at ``start``, or -1."""
    depth = 0
    i = start
    while i < len(pattern):
        char = pattern[i]
        if char == '\\':
            i += 2
            continue
        if char == '{':
            depth += 1
        elif char == '}':
            depth -= 1
            if depth == 0:
                return i
        i += 1
    return -1


def _split_alternatives(body: str) -> List[str]:
    """Split a brace body on top-level commas."""
    parts = []
    depth = 0
    current = ''
    i = 0
    while i < len(body):
        char = body[i]
        if char == '\\' and i + 1 < len(body):
            current += body[i:i + 2]
            i += 2
            continue
        if char == '{':
            depth += 1
        elif char == '}':
            depth -= 1
        elif char == ',' and depth == 0:
            parts.append(current)
            current = ''
            i += 1
            continue
        current += char
        i += 1
    parts.append(current)
    return parts


def expand_braces(pattern: str) -> List[str]:
    """Expand ``{a,b}`` alternation and ``{1..3}`` ranges.

    Braces without a comma or range, or without a closing brace, are literal.
    """
    i = 0
    while i < len(pattern):
        if pattern[i] == '\\':
            i += 2
            continue
        if pattern[i] != '{':
            i += 1
            continue

        end = _find_closing_brace(pattern, i)
        if end == -1:
            return [pattern]

        prefix, body, suffix = pattern[:i], pattern[i + 1:end], pattern[end + 1:]
        range_match = _RANGE_RE.match(body)
        if range_match:
            low, high = int(range_match.group(1)), int(range_match.group(2))
            step = 1 if high >= low else -1
            alternatives = [str(n) for n in range(low, high + step, step)]
        else:
            alternatives = _split_alternatives(body)
            if len(alternatives) < 2:
                # Literal braces; keep scanning after them
                i = end + 1
                continue

        expanded = []
        for alternative in alternatives:
            expanded.extend(expand_braces(prefix + alternative + suffix))
        return expanded

    return [pattern]


def _translate_segment(segment: str) -> str:
    """Translate one path segment (no ``/``) into a regex fragment."""
    out = []
    i = 0
    n = len(segment)
    while i < n:
        char = segment[i]
        if char == '\\' and i + 1 < n:
            out.append(re.escape(segment[i + 1]))
            i += 2
        elif char == '*':
            while i < n and segment[i] == '*':
                i += 1
            out.append('[^/]*')
        elif char == '?':
            out.append('[^/]')
            i += 1
        elif char == '[':
            j = i + 1
            if j < n and segment[j] in '!^':
                j += 1
            if j < n and segment[j] == ']':
                # A leading ] is part of the class
                j += 1
            end = segment.find(']', j)
            if end == -1:
                out.append(re.escape(char))
                i += 1
                continue
            body = segment[i + 1:end]
            negate = body[:1] in ('!', '^')
            if negate:
                body = body[1:]
            body = body.replace('\\', '\\\\').replace('[', '\\[').replace(']', '\\]')
            out.append('[' + ('^' if negate else '') + body + ']')
            i = end + 1
        else:
            out.append(re.escape(char))
            i += 1
    return ''.join(out)


def translate_glob(pattern: str) -> str:
    """Translate a single brace-free glob into a regex source string."""
    segments = []
    for segment in pattern.split('/'):
        if segment == '**' and segments and segments[-1] == '**':
            continue
        segments.append(segment)
    parts = []
    last = len(segments) - 1
    for index, segment in enumerate(segments):
        if segment == '**':
            if index == last:
                # Trailing ** matches everything below, including nothing
                parts.append('.*' if index == 0 else '(?:/.*)?')
                if index != 0:
                    # The separator before a trailing ** is optional
                    parts[-2] = parts[-2][:-1] if parts[-2].endswith('/') else parts[-2]
            else:
                parts.append('(?:[^/]+/)*')
        else:
            parts.append(_translate_segment(segment) + ('' if index == last else '/'))
    return ''.join(parts)


def compile_glob(pattern: str) -> Pattern:
    """Compile a glob (braces included) into one anchored regex.

    Raises:
        PatternError: If the pattern is empty or produces an invalid regex
    """
    if not isinstance(pattern, str) or not pattern:
        raise PatternError("Glob pattern must be a non-empty string")
    try:
        alternatives = [translate_glob(p) for p in expand_braces(pattern)]
        return re.compile('(?:' + '|'.join(alternatives) + r')\Z')
    except re.error as e:
        raise PatternError(f"Invalid glob pattern '{pattern}': {e}") from e


class PatternFilter:
    """Decides which output filenames are tracked."""

    def __init__(self, pattern: str, exclude: Optional[str] = None):
        """Initialize the filter.

        Args:
            pattern: Include glob
            exclude: Optional exclude glob

        Raises:
            PatternError: If either glob cannot be compiled
        """
        self.pattern = pattern
        self.exclude = exclude
        self._include_re = compile_glob(pattern)
        self._exclude_re = compile_glob(exclude) if exclude else None

    def is_excluded(self, name: str) -> bool:
        return bool(self._exclude_re and self._exclude_re.match(name))

    def matches(self, name: str) -> bool:
        """True if ``name`` matches the include glob and not the exclude glob."""
        return bool(self._include_re.match(name)) and not self.is_excluded(name)

    def filter(self, names: Iterable[str]) -> List[str]:
        """Keep the matching names, preserving order."""
        return [name for name in names if self.matches(name)]

    def select(self, files: Dict[str, OutputFile]) -> List[str]:
        """Pick the tracked outputs of a build.

        Outputs matching the globs are tracked. A build with exactly one
        chunk also tracks that chunk by its exact name, whatever the include
        glob says; the exclude glob still applies to it.
        """
        chunks = [name for name, output in files.items() if output.is_chunk]
        single_chunk = chunks[0] if len(chunks) == 1 else None

        selected = []
        for name in files:
            if self.matches(name):
                selected.append(name)
            elif name == single_chunk and not self.is_excluded(name):
                logger.debug(f"Single chunk build, tracking {name} outside the pattern")
                selected.append(name)
        return selected
