"""Data models and enums for bundle-size."""

from enum import Enum
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Optional, Union

from .exceptions import ConfigurationError

CHUNK_SUFFIXES = ('.js', '.mjs', '.cjs')


class CompressionMode(Enum):
    """Compression applied before a file's size is recorded."""
    NONE = "none"
    GZIP = "gzip"
    BROTLI = "brotli"

    @classmethod
    def parse(cls, value: Union[str, 'CompressionMode', None]) -> 'CompressionMode':
        """Parse a configured compression name."""
        if isinstance(value, cls):
            return value
        if value is None:
            return cls.GZIP
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            valid = ", ".join(m.value for m in cls)
            raise ConfigurationError(f"Unknown compression mode '{value}' (expected one of: {valid})")

    @classmethod
    def from_flags(cls, gzip: Optional[bool] = None, brotli: Optional[bool] = None) -> 'CompressionMode':
        """Map the legacy gzip/brotli boolean flags onto a single mode.

        brotli wins when set; gzip is on unless explicitly disabled.
        """
        if brotli:
            return cls.BROTLI
        if gzip is False:
            return cls.NONE
        return cls.GZIP


@dataclass
class OutputFile:
    """One file emitted by the bundler for the current build.

    Either ``code`` holds the emitted bytes, or ``path`` points at a file
    on disk holding them.
    """

    name: str
    code: Optional[Union[bytes, str]] = None
    path: Optional[Path] = None
    is_chunk: bool = True

    def __post_init__(self):
        if self.code is None and self.path is None:
            raise ValueError(f"Output file {self.name} needs either code or a path")
        if self.path is not None:
            self.path = Path(self.path)

    def read_bytes(self, sourcemap_comment: bool = False) -> Optional[bytes]:
        """Return the in-memory content, or None when the file lives on disk.

        Args:
            sourcemap_comment: Append a sourceMappingURL line to chunks
        """
        if self.code is None:
            return None
        data = self.code.encode('utf-8') if isinstance(self.code, str) else bytes(self.code)
        if sourcemap_comment and self.is_chunk:
            basename = self.name.rsplit('/', 1)[-1]
            data += f"\n//# sourceMappingURL={basename}.map".encode('utf-8')
        return data


@dataclass
class BuildOutput:
    """Everything the bundler hands over for one completed build."""

    files: Dict[str, OutputFile] = field(default_factory=dict)
    # Where the previous build's outputs live, measured on a cold start
    baseline_dir: Optional[Path] = None

    @classmethod
    def from_directory(cls, output_dir: Union[str, Path],
                       baseline_dir: Optional[Union[str, Path]] = None) -> 'BuildOutput':
        """Collect every file below ``output_dir`` as a path-backed output."""
        root = Path(output_dir)
        files = {}
        if root.is_dir():
            for path in sorted(root.rglob('*')):
                if not path.is_file():
                    continue
                name = path.relative_to(root).as_posix()
                files[name] = OutputFile(name=name, path=path,
                                         is_chunk=path.suffix in CHUNK_SUFFIXES)
        return cls(files=files, baseline_dir=Path(baseline_dir) if baseline_dir else None)

    @classmethod
    def from_file(cls, output_file: Union[str, Path],
                  baseline_dir: Optional[Union[str, Path]] = None) -> 'BuildOutput':
        """Wrap a single output file; it is always treated as the build's only chunk."""
        path = Path(output_file)
        files = {path.name: OutputFile(name=path.name, path=path, is_chunk=True)}
        return cls(files=files, baseline_dir=Path(baseline_dir) if baseline_dir else None)

