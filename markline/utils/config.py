#!/usr/bin/env python3
"""
Shared configuration utility for markline.

Provides flexible .env file discovery and typed access to the settings used
by the plugin engine, the Flask shell and the CLI.
"""

import os
from pathlib import Path
from dotenv import load_dotenv
from typing import List, Optional

ENV_FILE_NAME = ".env.markline"


class ConfigManager:
    """
    Centralized configuration management for markline.

    Features:
    - Flexible .env file discovery (current dir + up to 2 parent dirs)
    - Typed environment helpers with sensible defaults
    """

    def __init__(self):
        self._env_loaded = False
        self._env_path: Optional[Path] = None
        self.load_environment()

    def load_environment(self) -> bool:
        """
        Search for and load the .env file with flexible path discovery.

        Search order:
        1. Current working directory
        2. One level up (parent directory)
        3. Two levels up (grandparent directory)

        Returns:
            bool: True if .env file was found and loaded, False otherwise
        """
        if self._env_loaded:
            return True

        search_paths = [
            Path.cwd(),
            Path.cwd().parent,
            Path.cwd().parent.parent
        ]

        for search_path in search_paths:
            env_file = search_path / ENV_FILE_NAME
            if env_file.exists() and env_file.is_file():
                print(f"Loading {ENV_FILE_NAME} from: {env_file}")
                load_dotenv(env_file, override=True)
                self._env_path = env_file
                self._env_loaded = True
                return True

        return False

    def get_plugins_file(self) -> Optional[str]:
        """
        Get path of the plugin definitions file.

        Returns:
            str: Path from MARKLINE_PLUGINS_FILE, or None if unset
        """
        return os.getenv("MARKLINE_PLUGINS_FILE") or None

    def get_lock_timeout(self) -> Optional[float]:
        """
        Get how long a transformation waits for the plugin manager.

        Returns:
            float: Seconds to wait, or None to wait forever (unset or negative)
        """
        timeout = self.get_env_float("MARKLINE_LOCK_TIMEOUT", -1.0)
        if timeout < 0:
            return None
        return timeout

    def is_debug(self) -> bool:
        """Whether debug mode (built-in demo plugins, debug logging) is on."""
        return self.get_env_bool("MARKLINE_DEBUG", False)

    def skip_invalid_functions(self) -> bool:
        """Whether invalid line functions are skipped instead of failing their plugin."""
        return self.get_env_bool("MARKLINE_SKIP_INVALID_FUNCTIONS", False)

    def get_cors_origins(self) -> List[str]:
        """
        Get allowed CORS origins.

        Returns:
            List[str]: Origins from comma-separated CORS_ORIGINS
        """
        origins = os.getenv("CORS_ORIGINS", "http://localhost:1420")
        return [origin.strip() for origin in origins.split(",") if origin.strip()]

    def get_log_file(self) -> Optional[str]:
        """Get the log file path, or None to log to the console only."""
        return os.getenv("MARKLINE_LOG_FILE") or None

    def print_config_summary(self) -> None:
        """Print a summary of current configuration for debugging."""
        print("\n=== Configuration Summary ===")
        print(f"Environment file: {self._env_path or 'Not found'}")
        print(f"Environment loaded: {self._env_loaded}")
        print(f"Plugins file: {self.get_plugins_file() or 'Not set'}")
        timeout = self.get_lock_timeout()
        print(f"Lock timeout: {'wait forever' if timeout is None else f'{timeout}s'}")
        print(f"Debug mode: {self.is_debug()}")
        print(f"Skip invalid functions: {self.skip_invalid_functions()}")
        print(f"CORS origins: {', '.join(self.get_cors_origins())}")
        print(f"Log file: {self.get_log_file() or 'console only'}")
        print("==============================\n")

    def get_env_string(self, key: str, default: str = None) -> str:
        """
        Get string environment variable.

        Args:
            key: Environment variable name
            default: Default value if not found

        Returns:
            str: Environment variable value or default
        """
        return os.getenv(key, default)

    def get_env_int(self, key: str, default: int) -> int:
        """
        Get integer environment variable.

        Args:
            key: Environment variable name
            default: Default value if not found or invalid

        Returns:
            int: Environment variable value or default
        """
        value = os.getenv(key)
        if value is None:
            return default
        try:
            return int(value)
        except ValueError:
            print(f"Warning: Invalid integer value for {key}, using default {default}")
            return default

    def get_env_float(self, key: str, default: float) -> float:
        """
        Get float environment variable.

        Args:
            key: Environment variable name
            default: Default value if not found or invalid

        Returns:
            float: Environment variable value or default
        """
        value = os.getenv(key)
        if value is None:
            return default
        try:
            return float(value)
        except ValueError:
            print(f"Warning: Invalid float value for {key}, using default {default}")
            return default

    def get_env_bool(self, key: str, default: bool) -> bool:
        """
        Get boolean environment variable.

        Args:
            key: Environment variable name
            default: Default value if not found

        Returns:
            bool: True if value is 'true', '1', 'yes', 'on' (case-insensitive)
        """
        value = os.getenv(key)
        if value is None:
            return default
        return value.lower() in ('true', '1', 'yes', 'on')


# Global singleton instance for easy import
config = ConfigManager()


def get_plugins_file() -> Optional[str]:
    """Convenience function to get the plugin definitions file."""
    return config.get_plugins_file()


def get_lock_timeout() -> Optional[float]:
    """Convenience function to get the plugin manager lock timeout."""
    return config.get_lock_timeout()


def get_env_string(key: str, default: str = None) -> str:
    """Convenience function for getting string environment variable."""
    return config.get_env_string(key, default)


def get_env_int(key: str, default: int) -> int:
    """Convenience function for getting integer environment variable."""
    return config.get_env_int(key, default)


def get_env_float(key: str, default: float) -> float:
    """Convenience function for getting float environment variable."""
    return config.get_env_float(key, default)


def get_env_bool(key: str, default: bool) -> bool:
    """Convenience function for getting boolean environment variable."""
    return config.get_env_bool(key, default)


if __name__ == "__main__":
    config.print_config_summary()
