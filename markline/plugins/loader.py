"""
Loader for plugin definitions.

Turns the external data shape (decoded JSON) into Plugin objects and applies
the load policy: by default an invalid line function fails its whole plugin;
with skip_invalid the function is dropped with a warning.
"""

import json
import logging
from pathlib import Path
from typing import Any, List, Optional

from markline.utils.config import config
from .defaults import default_plugins
from .errors import PluginDefinitionError
from .manager import PluginManager
from .plugin import Plugin

logger = logging.getLogger(__name__)


def plugin_from_dict(data: Any, skip_invalid: bool = False) -> Plugin:
    """
    Build one plugin from its external shape.

    Raises:
        PluginLoadError: See Plugin.from_dict
    """
    return Plugin.from_dict(data, skip_invalid=skip_invalid)


def plugin_to_dict(plugin: Plugin) -> dict:
    return plugin.to_dict()


def plugins_from_data(data: Any, skip_invalid: bool = False) -> List[Plugin]:
    """
    Build plugins from a single plugin object or a list of them.

    Accepts {"plugins": [...]} as well.

    Raises:
        PluginLoadError: On the first plugin that fails to load
    """
    if isinstance(data, dict) and "plugins" in data:
        data = data["plugins"]
    if isinstance(data, dict):
        data = [data]
    if not isinstance(data, list):
        raise PluginDefinitionError(
            f"Expected a plugin object or a list of plugins, got {type(data).__name__}"
        )

    plugins = [plugin_from_dict(item, skip_invalid=skip_invalid) for item in data]

    names = [plugin.name for plugin in plugins]
    duplicates = sorted({name for name in names if names.count(name) > 1})
    if duplicates:
        logger.warning(f"Duplicate plugin names: {', '.join(duplicates)}")

    return plugins


def load_plugins_file(file_path: str | Path, skip_invalid: bool = False) -> List[Plugin]:
    """
    Load plugin definitions from a UTF-8 JSON file.

    Args:
        file_path: Path to the JSON file
        skip_invalid: Skip invalid functions instead of failing their plugin

    Returns:
        Loaded plugins, in file order

    Raises:
        FileNotFoundError: If the file does not exist
        PluginLoadError: If the content is invalid
    """
    file_path = Path(file_path)
    if not file_path.exists():
        raise FileNotFoundError(f"Plugin file not found: {file_path}")

    with open(file_path, "r", encoding="utf-8") as f:
        try:
            data = json.load(f)
        except json.JSONDecodeError as e:
            raise PluginDefinitionError(f"Invalid JSON in {file_path}: {e}") from e

    plugins = plugins_from_data(data, skip_invalid=skip_invalid)
    logger.info(f"Loaded {len(plugins)} plugin(s) from {file_path}")
    return plugins


def create_manager(
    plugins_file: Optional[str] = None,
    skip_invalid: Optional[bool] = None,
    debug: Optional[bool] = None,
    lock_timeout: Optional[float] = None
) -> PluginManager:
    """
    Create a plugin manager from configuration.

    Arguments left as None fall back to the environment (see
    markline.utils.config). With a plugins file, its plugins are loaded;
    without one, debug mode loads the built-in demo plugins and release mode
    starts empty.

    Raises:
        FileNotFoundError, PluginLoadError: See load_plugins_file
    """
    if plugins_file is None:
        plugins_file = config.get_plugins_file()
    if skip_invalid is None:
        skip_invalid = config.skip_invalid_functions()
    if debug is None:
        debug = config.is_debug()
    if lock_timeout is None:
        lock_timeout = config.get_lock_timeout()

    if plugins_file:
        plugins = load_plugins_file(plugins_file, skip_invalid=skip_invalid)
    elif debug:
        logger.info("No plugins file configured, loading built-in plugins (debug mode)")
        plugins = default_plugins()
    else:
        logger.info("No plugins file configured, starting with no plugins")
        plugins = []

    return PluginManager(plugins, lock_timeout=lock_timeout)
