"""
gitvfs Configuration Loader

Loads the JSON configuration used by the command line front end:
- Repository location and the reference to expose
- Modification time policy for stat results
- HTTP server address and index file
- Logging settings

Unset keys keep their defaults.
"""

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional
import threading

from gitvfs.exceptions import ConfigLoadError, ConfigValidationError


MOD_TIME_POLICIES = ("commit", "now")
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass
class RepositoryConfig:
    """Which repository and reference to expose."""
    path: str = "."
    reference: str = "HEAD"


@dataclass
class FilesystemConfig:
    """Filesystem behaviour settings."""
    mod_time: str = "commit"


@dataclass
class ServerConfig:
    """HTTP server settings."""
    host: str = "127.0.0.1"
    port: int = 8080
    index_file: str = "index.html"


@dataclass
class LoggingConfig:
    """Logging configuration settings."""
    level: str = "INFO"
    log_file: Optional[str] = None
    console_output: bool = True


@dataclass
class Config:
    """Main configuration container."""
    repository: RepositoryConfig = field(default_factory=RepositoryConfig)
    filesystem: FilesystemConfig = field(default_factory=FilesystemConfig)
    server: ServerConfig = field(default_factory=ServerConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    def validate(self) -> None:
        """
        Check value ranges.

        Raises:
            ConfigValidationError: On the first invalid value
        """
        if self.filesystem.mod_time not in MOD_TIME_POLICIES:
            raise ConfigValidationError(
                f"mod_time must be one of {', '.join(MOD_TIME_POLICIES)}",
                key="filesystem.mod_time"
            )
        if not isinstance(self.server.port, int) or not 0 <= self.server.port <= 65535:
            raise ConfigValidationError(
                f"Invalid port: {self.server.port!r}",
                key="server.port"
            )
        if str(self.logging.level).upper() not in LOG_LEVELS:
            raise ConfigValidationError(
                f"Invalid log level: {self.logging.level!r}",
                key="logging.level"
            )
        if not self.repository.reference:
            raise ConfigValidationError(
                "Reference name must not be empty",
                key="repository.reference"
            )


class ConfigLoader:
    """
    Configuration loader and manager.

    Example:
        >>> loader = ConfigLoader()
        >>> config = loader.load('gitvfs.json')
        >>> print(config.server.port)
        8080
    """

    _instance: Optional['ConfigLoader'] = None
    _lock = threading.Lock()

    def __new__(cls) -> 'ConfigLoader':
        """Singleton pattern for configuration access."""
        with cls._lock:
            if cls._instance is None:
                cls._instance = super().__new__(cls)
                cls._instance._config = Config()
                cls._instance._loaded = False
            return cls._instance

    def load(self, config_path: str) -> Config:
        """
        Load configuration from a JSON file.

        Args:
            config_path: Path to the configuration file

        Returns:
            Config object with loaded settings

        Raises:
            ConfigLoadError: If the file cannot be loaded or parsed
            ConfigValidationError: If a key is unknown or a value is invalid
        """
        path = Path(config_path)

        if not path.exists():
            raise ConfigLoadError(
                f"Configuration file not found: {config_path}",
                config_path=str(config_path)
            )

        try:
            with open(path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            raise ConfigLoadError(
                f"Invalid JSON in configuration file: {e}",
                config_path=str(config_path)
            ) from e
        except OSError as e:
            raise ConfigLoadError(
                f"Cannot read configuration file: {e}",
                config_path=str(config_path)
            ) from e

        if not isinstance(data, dict):
            raise ConfigLoadError(
                "Configuration root must be an object",
                config_path=str(config_path)
            )

        config = self._parse_config(data)
        config.validate()

        self._config = config
        self._loaded = True
        return self._config

    def _parse_config(self, data: dict[str, Any]) -> Config:
        """Parse configuration data into Config object."""
        config = Config()

        for section in data:
            if not hasattr(config, section):
                raise ConfigValidationError(
                    f"Unknown configuration section: {section}",
                    key=section
                )

        if 'repository' in data:
            repo_data = data['repository']
            config.repository = RepositoryConfig(
                path=repo_data.get('path', config.repository.path),
                reference=repo_data.get('reference', config.repository.reference),
            )

        if 'filesystem' in data:
            fs_data = data['filesystem']
            config.filesystem = FilesystemConfig(
                mod_time=fs_data.get('mod_time', config.filesystem.mod_time),
            )

        if 'server' in data:
            server_data = data['server']
            config.server = ServerConfig(
                host=server_data.get('host', config.server.host),
                port=server_data.get('port', config.server.port),
                index_file=server_data.get('index_file', config.server.index_file),
            )

        if 'logging' in data:
            log_data = data['logging']
            config.logging = LoggingConfig(
                level=log_data.get('level', config.logging.level),
                log_file=log_data.get('log_file', config.logging.log_file),
                console_output=log_data.get('console_output', config.logging.console_output),
            )

        return config

    @property
    def config(self) -> Config:
        """Get the current configuration."""
        if not self._loaded:
            return Config()
        return self._config

    def get(self, key: str, default: Any = None) -> Any:
        """
        Get a configuration value by dot-notation key.

        Args:
            key: Dot-notation key (e.g., 'server.port')
            default: Default value if key not found
        """
        obj: Any = self.config

        for part in key.split('.'):
            if hasattr(obj, part):
                obj = getattr(obj, part)
            else:
                return default

        return obj

    def set(self, key: str, value: Any) -> None:
        """
        Set a configuration value at runtime.

        Changes are validated but not written back to disk.
        """
        parts = key.split('.')
        if not self._loaded:
            self._config = Config()
            self._loaded = True
        obj: Any = self._config

        for part in parts[:-1]:
            if hasattr(obj, part):
                obj = getattr(obj, part)
            else:
                raise ConfigValidationError(f"Invalid configuration key: {key}", key=key)

        final_key = parts[-1]
        if not hasattr(obj, final_key):
            raise ConfigValidationError(f"Invalid configuration key: {key}", key=key)

        previous = getattr(obj, final_key)
        setattr(obj, final_key, value)
        try:
            self._config.validate()
        except ConfigValidationError:
            setattr(obj, final_key, previous)
            raise

    def reset(self) -> None:
        """Drop any loaded configuration and return to defaults."""
        self._config = Config()
        self._loaded = False

    def to_dict(self) -> dict[str, Any]:
        """Convert configuration to dictionary."""
        def dataclass_to_dict(obj: Any) -> Any:
            if hasattr(obj, '__dataclass_fields__'):
                return {
                    k: dataclass_to_dict(v)
                    for k, v in obj.__dict__.items()
                }
            elif isinstance(obj, list):
                return [dataclass_to_dict(item) for item in obj]
            elif isinstance(obj, dict):
                return {k: dataclass_to_dict(v) for k, v in obj.items()}
            else:
                return obj

        return dataclass_to_dict(self.config)


def get_config() -> Config:
    """
    Get the global configuration instance.

    Returns:
        Config object with current settings
    """
    loader = ConfigLoader()
    return loader.config
