"""Compression strategies used to estimate transfer size.

Each strategy measures an in-memory buffer or streams a file from disk,
and only the compressed byte count is kept.
"""

import gzip
import zlib
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Dict, Type, Union

try:
    import brotli
except ImportError:
    brotli = None

from ..core.exceptions import UnsupportedCompressionError
from ..core.models import CompressionMode

CHUNK_SIZE = 64 * 1024
GZIP_LEVEL = 9
BROTLI_QUALITY = 11
# zlib window bits selecting a gzip container
_GZIP_WBITS = 16 + zlib.MAX_WBITS


class CompressionStrategy(ABC):
    """Abstract base class for compression size estimators."""

    mode: CompressionMode

    @abstractmethod
    def measure(self, data: bytes) -> int:
        """Return the compressed length of ``data``."""
        pass

    @abstractmethod
    def measure_file(self, path: Union[str, Path]) -> int:
        """Return the compressed length of a file, reading it in chunks.

        Raises:
            OSError: If the file cannot be read
        """
        pass


class NoCompression(CompressionStrategy):
    """Raw byte length."""

    mode = CompressionMode.NONE

    def measure(self, data: bytes) -> int:
        return len(data)

    def measure_file(self, path: Union[str, Path]) -> int:
        total = 0
        with open(path, 'rb') as f:
            for chunk in iter(lambda: f.read(CHUNK_SIZE), b''):
                total += len(chunk)
        return total


class GzipCompression(CompressionStrategy):
    """gzip at maximum compression level with a zeroed header timestamp."""

    mode = CompressionMode.GZIP

    def measure(self, data: bytes) -> int:
        return len(gzip.compress(data, compresslevel=GZIP_LEVEL, mtime=0))

    def measure_file(self, path: Union[str, Path]) -> int:
        compressor = zlib.compressobj(GZIP_LEVEL, zlib.DEFLATED, _GZIP_WBITS)
        total = 0
        with open(path, 'rb') as f:
            for chunk in iter(lambda: f.read(CHUNK_SIZE), b''):
                total += len(compressor.compress(chunk))
        total += len(compressor.flush())
        return total


class BrotliCompression(CompressionStrategy):
    """brotli at maximum quality."""

    mode = CompressionMode.BROTLI

    def __init__(self):
        if brotli is None:
            raise UnsupportedCompressionError(
                "brotli compression requested but the 'brotli' package is not installed"
            )

    def measure(self, data: bytes) -> int:
        return len(brotli.compress(data, quality=BROTLI_QUALITY))

    def measure_file(self, path: Union[str, Path]) -> int:
        compressor = brotli.Compressor(quality=BROTLI_QUALITY)
        total = 0
        with open(path, 'rb') as f:
            for chunk in iter(lambda: f.read(CHUNK_SIZE), b''):
                total += len(compressor.process(chunk))
        total += len(compressor.finish())
        return total


_STRATEGIES: Dict[CompressionMode, Type[CompressionStrategy]] = {
    CompressionMode.NONE: NoCompression,
    CompressionMode.GZIP: GzipCompression,
    CompressionMode.BROTLI: BrotliCompression,
}


def get_compression_strategy(mode: Union[CompressionMode, str]) -> CompressionStrategy:
    """Instantiate the strategy for a compression mode.

    Raises:
        ConfigurationError: If the mode is unknown
        UnsupportedCompressionError: If the mode is unavailable in this runtime
    """
    return _STRATEGIES[CompressionMode.parse(mode)]()


def measure(data: bytes, mode: Union[CompressionMode, str]) -> int:
    """Compressed size of a buffer under ``mode``."""
    return get_compression_strategy(mode).measure(data)


def measure_file(path: Union[str, Path], mode: Union[CompressionMode, str]) -> int:
    """Compressed size of a file under ``mode``."""
    return get_compression_strategy(mode).measure_file(path)
