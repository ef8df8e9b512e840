"""
gitvfs Core Module

Configuration loading shared by the command line and the HTTP server.
"""

from .config_loader import (
    ConfigLoader,
    Config,
    RepositoryConfig,
    FilesystemConfig,
    ServerConfig,
    LoggingConfig,
    get_config,
)

__all__ = [
    'ConfigLoader',
    'Config',
    'RepositoryConfig',
    'FilesystemConfig',
    'ServerConfig',
    'LoggingConfig',
    'get_config',
]
