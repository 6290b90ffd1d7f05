"""Command runner for the bundle-size CLI."""

import argparse
from datetime import datetime
from pathlib import Path
from typing import Optional

from rich.console import Console

from .exceptions import ConfigurationError
from .logging import get_logger, setup_logging
from .models import BuildOutput
from .report import format_delta, pretty_bytes

logger = get_logger(__name__)


class Application:
    """Runs the report and history commands."""

    def __init__(self, console: Optional[Console] = None):
        self.console = console or Console(highlight=False)

    def _setup_file_logging(self, config) -> None:
        """Set up file logging if configured."""
        if config.log_file:
            setup_logging(
                level=config.log_level,
                format_type=config.log_format,
                log_file=config.log_file,
                max_file_size_mb=config.log_max_file_size_mb,
                backup_count=config.log_backup_count
            )

    def _load_config(self, args: argparse.Namespace):
        from ..config import ConfigLoader
        from ..config.cli_config import CLIConfigManager

        cli_config = CLIConfigManager().args_to_config_dict(args)
        config = ConfigLoader().load_config(config_file=args.config, cli_args=cli_config)
        self._setup_file_logging(config)
        return config

    def run(self, args: argparse.Namespace) -> int:
        """Run the application with parsed arguments.

        Returns:
            Exit code: 0 on success, 2 on a configuration error, 1 otherwise
        """
        try:
            config = self._load_config(args)

            if args.command == "report":
                return self.run_report_command(config, args)
            elif args.command == "history":
                return self.run_history_command(config, args)
            else:
                logger.error(f"Unknown command: {args.command}")
                return 1

        except ConfigurationError as e:
            logger.error(f"Configuration error: {e}")
            return 2
        except Exception as e:
            logger.error(f"Application error: {e}")
            return 1

    def build_publisher(self, config):
        """Instantiate the configured publisher, or None when publishing is off."""
        if not config.publish:
            return None
        from ..io.strategy_loader import strategy_loader

        options = {'url': config.publish_url}
        if config.publish_token:
            options['token'] = config.publish_token
        try:
            return strategy_loader.instantiate(config.publisher, options)
        except (ImportError, TypeError, ValueError) as e:
            raise ConfigurationError(f"Cannot create publisher {config.publisher}: {e}") from e

    def build_save_hook(self, config):
        """Load the configured save hook, or None."""
        if not config.save_hook:
            return None
        from ..io.strategy_loader import strategy_loader

        try:
            return strategy_loader.load_hook(config.save_hook)
        except ImportError as e:
            raise ConfigurationError(f"Cannot load save hook {config.save_hook}: {e}") from e

    def _collect_build(self, args: argparse.Namespace) -> BuildOutput:
        output_file = getattr(args, 'file', None)
        if output_file:
            if not Path(output_file).is_file():
                logger.warning(f"Build output {output_file} does not exist")
            return BuildOutput.from_file(output_file, baseline_dir=args.previous_dir)

        build = BuildOutput.from_directory(args.dir, baseline_dir=args.previous_dir)
        if not build.files:
            logger.warning(f"No build outputs found in {args.dir}")
        return build

    def run_report_command(self, config, args: argparse.Namespace) -> int:
        """Measure the build output and print the size report."""
        from .tracker import SizeTracker

        config.log_config()

        tracker = SizeTracker(
            config,
            publisher=self.build_publisher(config),
            save_hook=self.build_save_hook(config),
            console=self.console
        )
        build = self._collect_build(args)

        # Pipeline failures are logged by the tracker and never fail the build
        tracker.track_build_sync(build)
        return 0

    def run_history_command(self, config, args: argparse.Namespace) -> int:
        """Print stored snapshots, most recent first."""
        from ..io.history_store import HistoryStore

        snapshots = HistoryStore(config.history_path).read()
        if not snapshots:
            self.console.print(f"No size history in {config.history_path}", markup=False)
            return 0

        for snapshot in snapshots[:args.limit]:
            when = datetime.fromtimestamp(snapshot.timestamp / 1000).strftime("%Y-%m-%d %H:%M:%S")
            line = (f"{when}  {len(snapshot.files)} files  "
                    f"{pretty_bytes(snapshot.total_size)} ({format_delta(snapshot.total_delta)})")
            self.console.print(line, markup=False)
        return 0
