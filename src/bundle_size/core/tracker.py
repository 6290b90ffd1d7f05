"""Per-build size tracking pipeline."""

import asyncio
import inspect
from dataclasses import dataclass, field
from typing import Callable, List, Optional

from rich.console import Console

from ..io.asset_measurer import AssetMeasurer
from ..io.compression import get_compression_strategy
from ..io.history_store import HistoryStore
from ..io.pattern_filter import PatternFilter
from ..publish.publisher import Publisher
from .diff import compute_diff
from .exceptions import ConfigurationError
from .logging import get_logger
from .metrics import BuildMetrics
from .models import BuildOutput
from .report import ReportFormatter
from .snapshot import Snapshot

logger = get_logger(__name__)


@dataclass
class TrackResult:
    """Outcome of one tracked build."""

    snapshot: Snapshot
    report: str
    persisted: bool = False
    metrics: BuildMetrics = field(default_factory=BuildMetrics)


class SizeTracker:
    """Measures a build, diffs it against history, reports and persists it.

    Construction validates the configuration; a tracker can then be
    reused for successive builds.
    """

    def __init__(self, config, publisher: Optional[Publisher] = None,
                 save_hook: Optional[Callable] = None,
                 console: Optional[Console] = None):
        """Initialize the tracker.

        Args:
            config: Config object
            publisher: Optional sink notified after each build
            save_hook: Optional callable (sync or async) receiving each new Snapshot
            console: Console the report is printed to

        Raises:
            ConfigurationError: If the compression mode or globs are unusable
        """
        self.config = config
        self.strategy = get_compression_strategy(config.compression)
        self.pattern_filter = PatternFilter(config.pattern, config.exclude)
        self.history_store = HistoryStore(config.history_path, enabled=config.write_file)
        self.formatter = ReportFormatter(column_width=config.column_width, color=config.color)
        self.measurer = AssetMeasurer(self.strategy,
                                      sourcemap_comment=config.append_sourcemap_comment)
        self.publisher = publisher if config.publish else None
        self.save_hook = save_hook
        self.console = console or Console(highlight=False)

    async def load_baseline(self, build: BuildOutput, history: List[Snapshot],
                            metrics: BuildMetrics):
        """Sizes of the previous build, from history or a cold-start measurement."""
        if history:
            logger.debug(f"Baseline from snapshot {history[0].timestamp}")
            return HistoryStore.baseline_from(history)
        metrics.cold_start = True
        return await self.measurer.measure_directory(build.baseline_dir, self.pattern_filter)

    async def track_build(self, build: BuildOutput) -> Optional[TrackResult]:
        """Track one completed build.

        Failures other than misconfiguration are logged and yield None, so
        a broken size report never fails the build itself.

        Raises:
            ConfigurationError: If the configuration turns out to be unusable
        """
        try:
            return await self._track(build)
        except ConfigurationError:
            raise
        except Exception as e:
            logger.error(f"Size tracking failed: {e}", exc_info=True)
            return None

    def track_build_sync(self, build: BuildOutput) -> Optional[TrackResult]:
        """Blocking wrapper around track_build for non-async callers."""
        return asyncio.run(self.track_build(build))

    async def _track(self, build: BuildOutput) -> TrackResult:
        metrics = BuildMetrics(outputs_in_build=len(build.files))

        history = self.history_store.read()
        baseline = await self.load_baseline(build, history, metrics)

        tracked = self.pattern_filter.select(build.files)
        metrics.files_tracked = len(tracked)
        current = await self.measurer.measure_outputs(build.files, tracked)
        metrics.measurement_failures = len(tracked) - len(current)

        snapshot = compute_diff(baseline, current)
        metrics.record_snapshot(snapshot)

        report = self.formatter.render(snapshot.files)
        if report:
            self.console.print('\n' + report, markup=self.formatter.color,
                               highlight=False, soft_wrap=True)

        persisted = await self._save(snapshot, history, metrics)
        metrics.persisted = persisted

        logger.info(metrics.get_summary())
        return TrackResult(snapshot=snapshot, report=report, persisted=persisted, metrics=metrics)

    async def _save(self, snapshot: Snapshot, history: List[Snapshot],
                    metrics: BuildMetrics) -> bool:
        """Publish, run the save hook, and persist when sizes changed."""
        label = self.config.filename

        if self.publisher:
            metrics.published = await self._publish(self.publisher.publish_diff(snapshot, label))

        if self.save_hook:
            await self._run_save_hook(snapshot)

        persisted = False
        if not self.config.persist:
            logger.debug(f"Not persisting history for build mode {self.config.build_mode}")
        elif not snapshot.has_changes():
            logger.info("No size changes, history left as is")
        else:
            persisted = self.history_store.write(snapshot)

        if self.publisher:
            updated_history = [snapshot] + history
            published = await self._publish(self.publisher.publish_sizes(updated_history, label))
            metrics.published = metrics.published and published

        return persisted

    async def _publish(self, publication) -> bool:
        try:
            return bool(await publication)
        except Exception as e:
            logger.error(f"Publisher failed: {e}")
            return False

    async def _run_save_hook(self, snapshot: Snapshot) -> None:
        try:
            result = self.save_hook(snapshot)
            if inspect.isawaitable(result):
                await result
        except Exception as e:
            logger.error(f"Save hook failed: {e}")
