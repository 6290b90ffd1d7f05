"""CLI-specific configuration management."""

import argparse
from typing import Optional, Dict, Any
from .. import __version__


class CLIConfigManager:
    """Manages CLI argument parsing and conversion to configuration."""

    def __init__(self):
        self.parser = self._create_parser()

    def _create_parser(self) -> argparse.ArgumentParser:
        """Create the CLI argument parser."""
        parser = argparse.ArgumentParser(
            prog="bundle-size",
            description="bundle-size - track compressed build output sizes across builds",
            formatter_class=argparse.RawDescriptionHelpFormatter,
            epilog="""
Examples:
  %(prog)s report --dir dist
  %(prog)s report --dir dist --compression brotli --exclude "**/*.map"
  %(prog)s report --dir dist --previous-dir dist-old --no-write
  %(prog)s report --file dist/bundle.js --compression none
  %(prog)s history --limit 5
            """
        )

        parser.add_argument(
            "--version",
            action="version",
            version=f"bundle-size {__version__}"
        )

        parser.add_argument(
            "--config",
            type=str,
            help="Path to YAML configuration file"
        )
        parser.add_argument(
            "--log-level",
            choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
            default="INFO",
            help="Set logging level (default: INFO)"
        )
        parser.add_argument(
            "--log-format",
            choices=["standard", "json"],
            default="standard",
            help="Set log format (default: standard)"
        )

        subparsers = parser.add_subparsers(dest="command", help="Available commands")

        self._add_report_command(subparsers)
        self._add_history_command(subparsers)

        return parser

    def _add_report_command(self, subparsers):
        """Add the report subcommand."""
        report_parser = subparsers.add_parser(
            "report",
            help="Measure a build output directory and report size changes"
        )

        output_group = report_parser.add_argument_group("Build Output")
        source = output_group.add_mutually_exclusive_group(required=True)
        source.add_argument(
            "--dir",
            type=str,
            help="Build output directory to measure"
        )
        source.add_argument(
            "--file",
            type=str,
            help="Single output file to measure, tracked as the build's only chunk"
        )
        output_group.add_argument(
            "--previous-dir",
            type=str,
            help="Previous output directory, measured when no history exists yet"
        )

        tracking_group = report_parser.add_argument_group("Tracking")
        tracking_group.add_argument(
            "--compression",
            choices=["none", "gzip", "brotli"],
            help="Compression applied before measuring (default: gzip)"
        )
        tracking_group.add_argument(
            "--pattern",
            type=str,
            help="Glob of files to track (default: **/*.{mjs,js,jsx,css,html})"
        )
        tracking_group.add_argument(
            "--exclude",
            type=str,
            help="Glob of files NOT to track"
        )
        tracking_group.add_argument(
            "--sourcemap",
            action="store_true",
            help="Append a sourceMappingURL comment to chunks before measuring"
        )

        history_group = report_parser.add_argument_group("History")
        history_group.add_argument(
            "--filename",
            type=str,
            help="History file to read and write (default: size-plugin.json)"
        )
        history_group.add_argument(
            "--no-write",
            action="store_true",
            help="Neither read nor write the history file"
        )
        history_group.add_argument(
            "--build-mode",
            type=str,
            help="Build mode; only production builds persist history by default"
        )

        publish_group = report_parser.add_argument_group("Publishing")
        publish_group.add_argument(
            "--publish",
            action="store_true",
            help="Publish sizes and the diff to the configured size store"
        )
        publish_group.add_argument(
            "--publish-url",
            type=str,
            help="Base URL of the size store"
        )

        display_group = report_parser.add_argument_group("Display")
        display_group.add_argument(
            "--column-width",
            type=int,
            help="Minimum filename column width (default: 20)"
        )
        display_group.add_argument(
            "--no-color",
            action="store_true",
            help="Print the report without colors"
        )

    def _add_history_command(self, subparsers):
        """Add the history subcommand."""
        history_parser = subparsers.add_parser(
            "history",
            help="Show stored size snapshots"
        )
        history_parser.add_argument(
            "--filename",
            type=str,
            help="History file to read (default: size-plugin.json)"
        )
        history_parser.add_argument(
            "--limit",
            type=int,
            default=10,
            help="Number of snapshots to show (default: 10)"
        )

    def parse_args(self, args: Optional[list] = None) -> argparse.Namespace:
        """Parse command line arguments."""
        parsed_args = self.parser.parse_args(args)

        if not parsed_args.command:
            self.parser.error("No command specified. Use 'report' or 'history'.")

        if parsed_args.command == "history" and parsed_args.limit is not None and parsed_args.limit < 1:
            self.parser.error("--limit must be at least 1")

        return parsed_args

    def args_to_config_dict(self, args: argparse.Namespace) -> Dict[str, Any]:
        """Convert parsed arguments to dictionary for config loading."""
        config_dict = {}

        for key in ('compression', 'pattern', 'exclude', 'filename', 'build_mode',
                    'publish_url', 'column_width'):
            value = getattr(args, key, None)
            if value is not None:
                config_dict[key] = value

        if getattr(args, 'sourcemap', False):
            config_dict['sourcemap'] = True
        if getattr(args, 'no_write', False):
            config_dict['write_file'] = False
        if getattr(args, 'publish', False):
            config_dict['publish'] = True
        if getattr(args, 'no_color', False):
            config_dict['color'] = False

        if args.log_level:
            config_dict['log_level'] = args.log_level
        if args.log_format:
            config_dict['log_format'] = args.log_format

        return config_dict
