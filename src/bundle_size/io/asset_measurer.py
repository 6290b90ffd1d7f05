"""Concurrent size measurement of build outputs."""

import asyncio
from pathlib import Path
from typing import Dict, Iterable, Optional, Union

from ..core.logging import get_logger
from ..core.models import BuildOutput, OutputFile
from .compression import CompressionStrategy
from .pattern_filter import PatternFilter

logger = get_logger(__name__)


class AssetMeasurer:
    """Measures outputs concurrently, one worker thread per file.

    A file that cannot be read is left out of the result instead of
    failing its siblings.
    """

    def __init__(self, strategy: CompressionStrategy, sourcemap_comment: bool = False):
        """Initialize the measurer.

        Args:
            strategy: Compression strategy to measure with
            sourcemap_comment: Append a sourceMappingURL line to in-memory chunks
        """
        self.strategy = strategy
        self.sourcemap_comment = sourcemap_comment

    def _measure_output(self, output: OutputFile) -> int:
        data = output.read_bytes(sourcemap_comment=self.sourcemap_comment)
        if data is not None:
            return self.strategy.measure(data)
        return self.strategy.measure_file(output.path)

    async def _measure_one(self, name: str, output: OutputFile) -> Optional[int]:
        try:
            return await asyncio.to_thread(self._measure_output, output)
        except Exception as e:
            # Unreadable file, unencodable code or a compressor error
            logger.warning(f"Could not measure {name}: {e}")
            return None

    async def measure_outputs(self, outputs: Dict[str, OutputFile],
                              names: Optional[Iterable[str]] = None) -> Dict[str, int]:
        """Measure outputs of the current build.

        Args:
            outputs: All outputs of the build by name
            names: Subset to measure, defaults to all of them

        Returns:
            filename -> size for every output that could be measured
        """
        selected = list(outputs.keys()) if names is None else list(names)
        sizes = await asyncio.gather(
            *(self._measure_one(name, outputs[name]) for name in selected)
        )
        return {name: size for name, size in zip(selected, sizes) if size is not None}

    async def measure_directory(self, directory: Optional[Union[str, Path]],
                                pattern_filter: PatternFilter) -> Dict[str, int]:
        """Measure the files already present in a previous output directory.

        Used on a cold start, when no history exists yet. Files are selected
        the same way as the outputs of the current build.

        Args:
            directory: Previous output directory
            pattern_filter: Include/exclude globs for the candidates

        Returns:
            filename -> size; empty if the directory is missing
        """
        if directory is None:
            return {}
        root = Path(directory)
        if not root.is_dir():
            logger.debug(f"No previous output at {root}, starting from an empty baseline")
            return {}

        previous = BuildOutput.from_directory(root)
        names = pattern_filter.select(previous.files)
        logger.info(f"Cold start: measuring {len(names)} files in {root}")
        return await self.measure_outputs(previous.files, names)
