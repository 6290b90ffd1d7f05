"""Configuration management for bundle-size."""

import os
import yaml
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Dict, Any
from dotenv import load_dotenv

from ..core.exceptions import ConfigurationError
from ..core.models import CompressionMode
from ..core.logging import get_logger

logger = get_logger(__name__)

DEFAULT_PATTERN = '**/*.{mjs,js,jsx,css,html}'
DEFAULT_HISTORY_FILENAME = 'size-plugin.json'
DEFAULT_CONFIG_FILE = 'bundle-size.yaml'
DEFAULT_PUBLISHER = 'bundle_size.publish.publisher:HttpPublisher'

_TRUE_VALUES = ('1', 'true', 'yes', 'on')


def _to_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in _TRUE_VALUES


@dataclass(frozen=True)
class Config:
    """Immutable configuration for one size tracking invocation."""

    # What is measured
    compression: CompressionMode = CompressionMode.GZIP
    pattern: str = DEFAULT_PATTERN
    exclude: Optional[str] = None
    append_sourcemap_comment: bool = False

    # History persistence
    filename: str = DEFAULT_HISTORY_FILENAME
    write_file: bool = True
    build_mode: str = "production"
    persist: Optional[bool] = None
    save_hook: Optional[str] = None

    # Publication
    publish: bool = False
    publish_url: str = ""
    publish_token: str = ""
    publisher: str = DEFAULT_PUBLISHER

    # Report
    column_width: int = 20
    color: bool = True

    # Logging configuration
    log_level: str = "INFO"
    log_format: str = "standard"
    log_file: Optional[str] = None
    log_max_file_size_mb: int = 100
    log_backup_count: int = 10

    # Internal tracking
    _loaded_config_file: Optional[str] = None

    def __post_init__(self):
        """Validate configuration after initialization."""
        object.__setattr__(self, 'compression', CompressionMode.parse(self.compression))

        if not self.pattern:
            raise ConfigurationError("PATTERN must not be empty")
        if not self.filename:
            raise ConfigurationError("FILENAME must not be empty")
        if self.column_width < 0:
            raise ConfigurationError("COLUMN_WIDTH must not be negative")
        if self.publish and not self.publish_url and self.publisher == DEFAULT_PUBLISHER:
            raise ConfigurationError("PUBLISH_URL is required when publishing is enabled")

        # Only production builds write history unless told otherwise
        if self.persist is None:
            object.__setattr__(self, 'persist', self.build_mode == "production")

    @property
    def history_path(self) -> Path:
        """History file location, relative names resolved against the cwd."""
        path = Path(self.filename)
        return path if path.is_absolute() else Path.cwd() / path

    def log_config(self) -> None:
        """Log the current configuration (without secrets)."""
        if self._loaded_config_file:
            logger.info(f"Configuration loaded from: {self._loaded_config_file}")
        else:
            logger.debug("Configuration loaded from: defaults (no config file found)")
        logger.info(f"  COMPRESSION: {self.compression.value}")
        logger.info(f"  PATTERN: {self.pattern}")
        logger.info(f"  EXCLUDE: {self.exclude}")
        logger.info(f"  FILENAME: {self.history_path}")
        logger.info(f"  WRITE_FILE: {self.write_file}")
        logger.info(f"  BUILD_MODE: {self.build_mode}")
        logger.info(f"  PERSIST: {self.persist}")
        logger.info(f"  PUBLISH: {self.publish}")
        if self.publish:
            logger.info(f"  PUBLISH_URL: {self.publish_url}")
            logger.info(f"  PUBLISH_TOKEN: {'*' * len(self.publish_token)} ({len(self.publish_token)} chars)")
        logger.info(f"  COLUMN_WIDTH: {self.column_width}")


class ConfigLoader:
    """Loads configuration from multiple sources with precedence."""

    def __init__(self):
        self.logger = get_logger(__name__)

    def load_config(self,
                    config_file: Optional[str] = None,
                    cli_args: Optional[Dict[str, Any]] = None) -> Config:
        """Load configuration from all sources with precedence.

        Precedence order (highest to lowest):
        1. CLI arguments
        2. Environment variables
        3. YAML config file
        4. Defaults

        Args:
            config_file: Path to YAML config file
            cli_args: Dictionary of CLI arguments

        Returns:
            Immutable Config object
        """
        load_dotenv()

        config_data = self._get_defaults()
        loaded_config_file = None

        if config_file:
            config_data.update(self._fold_compression_flags(self._load_yaml_config(config_file)))
            loaded_config_file = config_file
        else:
            default_config_path = Path(DEFAULT_CONFIG_FILE)
            if default_config_path.exists():
                config_data.update(self._fold_compression_flags(
                    self._load_yaml_config(str(default_config_path))))
                loaded_config_file = str(default_config_path)

        config_data.update(self._fold_compression_flags(self._load_env_config()))

        if cli_args:
            config_data.update(self._process_cli_args(cli_args))

        if config_data.get('compression') is None:
            config_data['compression'] = CompressionMode.GZIP

        config_data['_loaded_config_file'] = loaded_config_file
        return Config(**config_data)

    def _get_defaults(self) -> Dict[str, Any]:
        """Get default configuration values."""
        return {
            'compression': None,
            'pattern': DEFAULT_PATTERN,
            'exclude': None,
            'append_sourcemap_comment': False,
            'filename': DEFAULT_HISTORY_FILENAME,
            'write_file': True,
            'build_mode': 'production',
            'persist': None,
            'save_hook': None,
            'publish': False,
            'publish_url': '',
            'publish_token': '',
            'publisher': DEFAULT_PUBLISHER,
            'column_width': 20,
            'color': True,
            'log_level': 'INFO',
            'log_format': 'standard',
        }

    def _fold_compression_flags(self, layer: Dict[str, Any]) -> Dict[str, Any]:
        """Fold one source's legacy gzip/brotli flags into its ``compression``.

        An explicit ``compression`` in the same source wins over the flags.
        """
        gzip_flag = layer.pop('gzip', None)
        brotli_flag = layer.pop('brotli', None)
        if gzip_flag is None and brotli_flag is None:
            return layer
        if layer.get('compression') is not None:
            self.logger.warning("Ignoring gzip/brotli flags, compression is set explicitly")
            return layer
        layer['compression'] = CompressionMode.from_flags(
            gzip=_to_bool(gzip_flag) if gzip_flag is not None else None,
            brotli=_to_bool(brotli_flag) if brotli_flag is not None else None
        )
        return layer

    def _load_yaml_config(self, config_file: str) -> Dict[str, Any]:
        """Load configuration from YAML file."""
        config_path = Path(config_file)
        if not config_path.exists():
            self.logger.warning(f"Config file not found: {config_file}")
            return {}

        try:
            with open(config_path, 'r') as f:
                yaml_data = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            self.logger.error(f"Error loading config file {config_file}: {e}")
            return {}

        if not isinstance(yaml_data, dict):
            self.logger.error(f"Config file {config_file} must contain a mapping")
            return {}
        return self._normalize_keys(yaml_data)

    def _load_env_config(self) -> Dict[str, Any]:
        """Load configuration from environment variables."""
        env_mapping = {
            'BUNDLE_SIZE_COMPRESSION': 'compression',
            'BUNDLE_SIZE_GZIP': 'gzip',
            'BUNDLE_SIZE_BROTLI': 'brotli',
            'BUNDLE_SIZE_PATTERN': 'pattern',
            'BUNDLE_SIZE_EXCLUDE': 'exclude',
            'BUNDLE_SIZE_SOURCEMAP': 'append_sourcemap_comment',
            'BUNDLE_SIZE_FILENAME': 'filename',
            'BUNDLE_SIZE_WRITE_FILE': 'write_file',
            'BUNDLE_SIZE_BUILD_MODE': 'build_mode',
            'BUNDLE_SIZE_PERSIST': 'persist',
            'BUNDLE_SIZE_SAVE_HOOK': 'save_hook',
            'BUNDLE_SIZE_PUBLISH': 'publish',
            'BUNDLE_SIZE_PUBLISH_URL': 'publish_url',
            'BUNDLE_SIZE_PUBLISH_TOKEN': 'publish_token',
            'BUNDLE_SIZE_PUBLISHER': 'publisher',
            'BUNDLE_SIZE_COLUMN_WIDTH': 'column_width',
            'BUNDLE_SIZE_COLOR': 'color',
            'LOG_LEVEL': 'log_level',
            'LOG_FORMAT': 'log_format',
            'LOG_FILE': 'log_file',
            'LOG_MAX_FILE_SIZE_MB': 'log_max_file_size_mb',
            'LOG_BACKUP_COUNT': 'log_backup_count'
        }
        int_keys = ['column_width', 'log_max_file_size_mb', 'log_backup_count']
        bool_keys = ['append_sourcemap_comment', 'write_file', 'persist', 'publish', 'color']

        config = {}
        for env_var, config_key in env_mapping.items():
            value = os.getenv(env_var)
            if value is None:
                continue
            if config_key in int_keys:
                try:
                    config[config_key] = int(value)
                except ValueError:
                    self.logger.warning(f"Invalid integer value for {env_var}: {value}")
            elif config_key in bool_keys:
                config[config_key] = _to_bool(value)
            else:
                config[config_key] = value

        return config

    def _process_cli_args(self, cli_args: Dict[str, Any]) -> Dict[str, Any]:
        """Process CLI arguments into config format."""
        cli_mapping = {
            'compression': 'compression',
            'pattern': 'pattern',
            'exclude': 'exclude',
            'sourcemap': 'append_sourcemap_comment',
            'filename': 'filename',
            'write_file': 'write_file',
            'build_mode': 'build_mode',
            'persist': 'persist',
            'publish': 'publish',
            'publish_url': 'publish_url',
            'column_width': 'column_width',
            'color': 'color',
            'log_level': 'log_level',
            'log_format': 'log_format'
        }

        config = {}
        for cli_key, config_key in cli_mapping.items():
            if cli_key in cli_args and cli_args[cli_key] is not None:
                config[config_key] = cli_args[cli_key]

        return config

    def _normalize_keys(self, data: Dict[str, Any]) -> Dict[str, Any]:
        """Normalize nested YAML structure to flat config field names."""
        normalized = {}

        section_mappings = {
            'tracking': {
                'compression': 'compression',
                'gzip': 'gzip',
                'brotli': 'brotli',
                'pattern': 'pattern',
                'exclude': 'exclude',
                'sourcemap': 'append_sourcemap_comment',
            },
            'history': {
                'filename': 'filename',
                'write-file': 'write_file',
                'build-mode': 'build_mode',
                'persist': 'persist',
                'save-hook': 'save_hook',
            },
            'publish': {
                'enabled': 'publish',
                'url': 'publish_url',
                'token': 'publish_token',
                'publisher': 'publisher',
            },
            'report': {
                'column-width': 'column_width',
                'color': 'color',
            },
            'logging': {
                'level': 'log_level',
                'format': 'log_format',
                'file': 'log_file',
                'max_file_size_mb': 'log_max_file_size_mb',
                'backup_count': 'log_backup_count',
            },
        }

        for section, mapping in section_mappings.items():
            section_data = data.get(section)
            if not isinstance(section_data, dict):
                continue
            for yaml_key, config_key in mapping.items():
                if yaml_key in section_data:
                    normalized[config_key] = section_data[yaml_key]

        # Flat keys, as accepted by the bundler plugin options
        legacy_key_mapping = {
            'writeFile': 'write_file',
            'columnWidth': 'column_width',
            'sourcemap': 'append_sourcemap_comment',
            'save': 'save_hook',
            'publish': 'publish',
        }

        for key, value in data.items():
            if key in section_mappings and isinstance(value, dict):
                continue
            normalized_key = legacy_key_mapping.get(key, key.replace('-', '_').lower())
            if normalized_key not in normalized:
                normalized[normalized_key] = value

        known = set(self._get_defaults()) | {'gzip', 'brotli', 'log_file', 'log_max_file_size_mb', 'log_backup_count'}
        unknown = [key for key in normalized if key not in known]
        for key in unknown:
            self.logger.warning(f"Ignoring unknown configuration key: {key}")
            del normalized[key]

        return normalized
