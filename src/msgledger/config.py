"""
Configuration Management for msgledger

🔧 Ledger Configuration:
Event names the ledger listens to and logging setup. The ledger always
subscribes with deep propagation. Configuration can come from code, a dict, a
JSON/YAML file or ``MSGLEDGER_*`` environment variables.
"""

import json
import logging
import logging.handlers
import os
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml

from .events import MESSAGE_ADDED, MESSAGE_REMOVED


class Environment(Enum):
    """Application environments"""
    DEVELOPMENT = "development"
    TESTING = "testing"
    STAGING = "staging"
    PRODUCTION = "production"


@dataclass
class LoggingConfig:
    """Logging configuration"""
    level: str = "INFO"
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    file_path: Optional[str] = None
    max_file_size: int = 10 * 1024 * 1024  # 10MB
    backup_count: int = 5


@dataclass
class LedgerConfig:
    """Complete ledger configuration"""
    environment: Environment = Environment.DEVELOPMENT
    debug: bool = False

    added_event: str = MESSAGE_ADDED
    removed_event: str = MESSAGE_REMOVED
    warn_on_reinit: bool = True

    logging: LoggingConfig = field(default_factory=LoggingConfig)

    @classmethod
    def for_environment(cls, environment: Environment) -> 'LedgerConfig':
        """Create configuration for specific environment"""
        config = cls(environment=environment)

        if environment == Environment.DEVELOPMENT:
            config.debug = True
            config.logging.level = "DEBUG"

        elif environment == Environment.TESTING:
            config.logging.level = "WARNING"

        elif environment == Environment.PRODUCTION:
            config.debug = False
            config.logging.level = "INFO"

        return config

    @classmethod
    def from_dict(cls, config_dict: Dict[str, Any]) -> 'LedgerConfig':
        """Create configuration from dictionary"""
        if "environment" in config_dict:
            config = cls.for_environment(Environment(config_dict["environment"]))
        else:
            config = cls()

        for key in ("debug", "added_event", "removed_event", "warn_on_reinit"):
            if key in config_dict:
                setattr(config, key, config_dict[key])

        if "logging" in config_dict:
            for key, value in config_dict["logging"].items():
                if hasattr(config.logging, key):
                    setattr(config.logging, key, value)

        return config

    @classmethod
    def from_file(cls, config_path: Union[str, Path]) -> 'LedgerConfig':
        """Load configuration from a JSON or YAML file"""
        config_path = Path(config_path)

        if not config_path.exists():
            raise FileNotFoundError(f"Configuration file not found: {config_path}")

        if config_path.suffix == '.json':
            with open(config_path) as f:
                config_dict = json.load(f)
        elif config_path.suffix in ('.yml', '.yaml'):
            with open(config_path) as f:
                config_dict = yaml.safe_load(f) or {}
        else:
            raise ValueError(f"Unsupported configuration file format: {config_path.suffix}")

        return cls.from_dict(config_dict)

    @classmethod
    def from_environment(cls) -> 'LedgerConfig':
        """Create configuration from environment variables"""
        env_name = os.getenv('MSGLEDGER_ENV', 'development')
        config = cls.for_environment(Environment(env_name))

        if os.getenv('MSGLEDGER_DEBUG'):
            config.debug = os.getenv('MSGLEDGER_DEBUG').lower() == 'true'

        if os.getenv('MSGLEDGER_LOG_LEVEL'):
            config.logging.level = os.getenv('MSGLEDGER_LOG_LEVEL').upper()

        if os.getenv('MSGLEDGER_ADDED_EVENT'):
            config.added_event = os.getenv('MSGLEDGER_ADDED_EVENT')

        if os.getenv('MSGLEDGER_REMOVED_EVENT'):
            config.removed_event = os.getenv('MSGLEDGER_REMOVED_EVENT')

        return config

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary"""
        return {
            "environment": self.environment.value,
            "debug": self.debug,
            "added_event": self.added_event,
            "removed_event": self.removed_event,
            "warn_on_reinit": self.warn_on_reinit,
            "logging": {
                "level": self.logging.level,
                "format": self.logging.format,
                "file_path": self.logging.file_path,
                "max_file_size": self.logging.max_file_size,
                "backup_count": self.logging.backup_count
            }
        }


def configure_logging(config: Optional[LoggingConfig] = None) -> logging.Logger:
    """Apply a logging configuration to the ``msgledger`` logger"""
    config = config or get_config().logging
    logger = logging.getLogger("msgledger")
    logger.setLevel(config.level.upper())

    formatter = logging.Formatter(config.format)
    if config.file_path:
        handler = logging.handlers.RotatingFileHandler(
            config.file_path,
            maxBytes=config.max_file_size,
            backupCount=config.backup_count
        )
    else:
        handler = logging.StreamHandler()
    handler.setFormatter(formatter)

    for existing in list(logger.handlers):
        logger.removeHandler(existing)
        existing.close()
    logger.addHandler(handler)

    return logger


# Global configuration management
_current_config: Optional[LedgerConfig] = None

def set_config(config: Optional[LedgerConfig]):
    """Set the global configuration"""
    global _current_config
    _current_config = config

def get_config() -> LedgerConfig:
    """Get the current global configuration"""
    global _current_config

    if _current_config is None:
        # Auto-create from environment if not set
        _current_config = LedgerConfig.from_environment()

    return _current_config

def configure_from_file(config_path: Union[str, Path]) -> LedgerConfig:
    """Configure from file"""
    config = LedgerConfig.from_file(config_path)
    set_config(config)
    return config

def configure_from_dict(config_dict: Dict[str, Any]) -> LedgerConfig:
    """Configure from dictionary"""
    config = LedgerConfig.from_dict(config_dict)
    set_config(config)
    return config


__all__ = [
    "LedgerConfig", "LoggingConfig", "Environment", "configure_logging",
    "set_config", "get_config", "configure_from_file", "configure_from_dict"
]
