"""Loader for configurable hooks and publisher classes."""

import importlib
from typing import Any, Callable, Dict, Optional

from ..core.logging import get_logger

logger = get_logger(__name__)


class StrategyLoader:
    """Loads objects named in configuration as ``module:attribute`` paths."""

    def __init__(self):
        self._cache: Dict[str, Any] = {}

    def load_object(self, module_path: str) -> Any:
        """Load an attribute from a module path string.

        Args:
            module_path: Full path like "bundle_size.publish.publisher:HttpPublisher"

        Returns:
            The loaded attribute

        Raises:
            ImportError: If the module or attribute cannot be loaded
        """
        if module_path in self._cache:
            return self._cache[module_path]

        try:
            if ':' not in module_path:
                raise ValueError(f"Invalid module path format. Expected 'module:attribute', got: {module_path}")

            module_name, attribute = module_path.split(':', 1)
            module = importlib.import_module(module_name)

            if not hasattr(module, attribute):
                raise AttributeError(f"Module {module_name} has no attribute {attribute}")

            loaded = getattr(module, attribute)
            self._cache[module_path] = loaded

            logger.debug(f"Loaded {module_path}")
            return loaded

        except Exception as e:
            logger.error(f"Failed to load {module_path}: {e}")
            raise ImportError(f"Cannot load {module_path}") from e

    def load_hook(self, module_path: str) -> Callable:
        """Load a callable, e.g. a save hook.

        Raises:
            ImportError: If the attribute cannot be loaded or is not callable
        """
        hook = self.load_object(module_path)
        if not callable(hook):
            raise ImportError(f"{module_path} is not callable")
        return hook

    def instantiate(self, module_path: str, options: Optional[Dict[str, Any]] = None) -> Any:
        """Load and instantiate a class.

        Args:
            module_path: Full path like "bundle_size.publish.publisher:HttpPublisher"
            options: Optional keyword arguments for the constructor

        Returns:
            Instantiated object
        """
        loaded_class = self.load_object(module_path)
        if options:
            return loaded_class(**options)
        return loaded_class()


# Global strategy loader instance
strategy_loader = StrategyLoader()
