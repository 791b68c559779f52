#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
DailyFlow - Configuration
Centralised, environment-driven configuration with validation
"""

import os
import logging
from pathlib import Path
from typing import Optional, Dict, Any, List
from dataclasses import dataclass, field
from enum import Enum

import pytz

from dailyflow.core.exceptions import ConfigurationError

class Environment(Enum):
    """Runtime environments"""
    DEVELOPMENT = "development"
    STAGING = "staging"
    PRODUCTION = "production"

class LogLevel(Enum):
    """Logging levels"""
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"

@dataclass
class StorageConfig:
    """Per-user JSON storage"""
    data_dir: Path
    backup_dir: Path
    export_dir: Path

@dataclass
class ServerConfig:
    """Dashboard API server"""
    host: str = "127.0.0.1"
    port: int = 8000
    debug_mode: bool = False
    cors_origins: List[str] = field(default_factory=list)

@dataclass
class StatsConfig:
    """Statistics and insight tuning"""
    week_window_days: int = 7
    min_insights: int = 4
    max_insights: int = 6
    deadlines_limit: int = 5

@dataclass
class ReminderConfig:
    """Daily reminder job"""
    enabled: bool = True
    check_interval_minutes: int = 1

def _env_bool(key: str, default: str) -> bool:
    return os.getenv(key, default).lower() == 'true'

def _env_int(key: str, default: int, errors: list) -> int:
    raw = os.getenv(key)
    if raw is None:
        return default
    try:
        return int(raw)
    except ValueError:
        errors.append(f"{key} must be an integer, got {raw!r}")
        return default

class FlowConfig:
    """Main configuration object"""

    def __init__(self):
        self._errors = []
        self._load_config()
        self._validate_config()

    def _load_config(self):
        """Read configuration from environment variables"""
        env_name = os.getenv('ENVIRONMENT', 'development')
        try:
            self.environment = Environment(env_name)
        except ValueError:
            self._errors.append(f"ENVIRONMENT must be one of {[e.value for e in Environment]}, got {env_name!r}")
            self.environment = Environment.DEVELOPMENT

        self.storage = StorageConfig(
            data_dir=Path(os.getenv('DATA_DIR', 'data')),
            backup_dir=Path(os.getenv('BACKUP_DIR', 'backups')),
            export_dir=Path(os.getenv('EXPORT_DIR', 'exports'))
        )
        self.log_dir = Path(os.getenv('LOG_DIR', 'logs'))

        self.server = ServerConfig(
            host=os.getenv('HOST', '127.0.0.1'),
            port=_env_int('PORT', 8000, self._errors),
            debug_mode=_env_bool('DEBUG_MODE', 'false'),
            cors_origins=[o.strip() for o in os.getenv('CORS_ORIGINS', '').split(',') if o.strip()]
        )

        self.stats = StatsConfig(
            week_window_days=_env_int('WEEK_WINDOW_DAYS', 7, self._errors),
            min_insights=_env_int('MIN_INSIGHTS', 4, self._errors),
            max_insights=_env_int('MAX_INSIGHTS', 6, self._errors),
            deadlines_limit=_env_int('DEADLINES_LIMIT', 5, self._errors)
        )

        self.reminders = ReminderConfig(
            enabled=_env_bool('REMINDERS_ENABLED', 'true'),
            check_interval_minutes=_env_int('REMINDER_CHECK_MINUTES', 1, self._errors)
        )

        self.timezone = os.getenv('TIMEZONE', 'UTC')

        # Logging
        level_name = os.getenv('LOG_LEVEL', 'INFO').upper()
        try:
            self.log_level = LogLevel(level_name)
        except ValueError:
            self._errors.append(f"LOG_LEVEL must be one of {[l.value for l in LogLevel]}, got {level_name!r}")
            self.log_level = LogLevel.INFO
        self.log_to_file = _env_bool('LOG_TO_FILE', 'false')
        self.log_format = os.getenv(
            'LOG_FORMAT',
            '%(asctime)s [%(levelname)s] %(name)s: %(message)s'
        )

    def _validate_config(self):
        """Validate the loaded values, reporting every problem at once"""
        errors = list(self._errors)

        if self.timezone not in pytz.all_timezones_set:
            errors.append(f"TIMEZONE {self.timezone!r} is not a known timezone")

        if not 1 <= self.server.port <= 65535:
            errors.append(f"PORT {self.server.port} is outside 1-65535")

        if self.stats.week_window_days < 1:
            errors.append("WEEK_WINDOW_DAYS must be positive")

        if self.stats.min_insights < 0 or self.stats.max_insights < self.stats.min_insights:
            errors.append("MAX_INSIGHTS must be >= MIN_INSIGHTS >= 0")

        if self.reminders.check_interval_minutes < 1:
            errors.append("REMINDER_CHECK_MINUTES must be at least 1")

        if errors:
            raise ConfigurationError("Configuration errors:\n" + "\n".join(f"• {error}" for error in errors))

    def ensure_directories(self):
        """Create data, backup, export and log directories"""
        directories = [
            self.storage.data_dir,
            self.storage.backup_dir,
            self.storage.export_dir,
            self.log_dir
        ]

        for directory in directories:
            directory.mkdir(parents=True, exist_ok=True)

    def get_logging_config(self) -> Dict[str, Any]:
        """dictConfig for logging.config"""
        handlers = ['console']
        if self.log_to_file:
            handlers.append('file')

        config = {
            'version': 1,
            'disable_existing_loggers': False,
            'formatters': {
                'default': {
                    'format': self.log_format,
                    'datefmt': '%Y-%m-%d %H:%M:%S'
                }
            },
            'handlers': {
                'console': {
                    'class': 'logging.StreamHandler',
                    'level': self.log_level.value,
                    'formatter': 'default',
                    'stream': 'ext://sys.stderr'
                }
            },
            'loggers': {
                '': {
                    'level': self.log_level.value,
                    'handlers': handlers,
                    'propagate': False
                },
                'uvicorn.access': {
                    'level': 'WARNING',
                    'handlers': handlers,
                    'propagate': False
                },
                'apscheduler': {
                    'level': 'WARNING',
                    'handlers': handlers,
                    'propagate': False
                }
            }
        }

        if self.log_to_file:
            config['handlers']['file'] = {
                'class': 'logging.handlers.RotatingFileHandler',
                'level': self.log_level.value,
                'formatter': 'default',
                'filename': str(self.log_dir / f"dailyflow_{self.environment.value}.log"),
                'maxBytes': 10485760,  # 10MB
                'backupCount': 5,
                'encoding': 'utf-8'
            }

        return config

    def is_development(self) -> bool:
        return self.environment == Environment.DEVELOPMENT

    def to_dict(self) -> Dict[str, Any]:
        """Serialise the configuration"""
        return {
            'environment': self.environment.value,
            'timezone': self.timezone,
            'storage': {
                'data_dir': str(self.storage.data_dir),
                'backup_dir': str(self.storage.backup_dir),
                'export_dir': str(self.storage.export_dir)
            },
            'server': {
                'host': self.server.host,
                'port': self.server.port,
                'debug_mode': self.server.debug_mode,
                'cors_origins': self.server.cors_origins
            },
            'stats': {
                'week_window_days': self.stats.week_window_days,
                'min_insights': self.stats.min_insights,
                'max_insights': self.stats.max_insights,
                'deadlines_limit': self.stats.deadlines_limit
            },
            'reminders_enabled': self.reminders.enabled,
            'log_level': self.log_level.value
        }

_config: Optional[FlowConfig] = None

def get_config() -> FlowConfig:
    """Cached configuration instance"""
    global _config

    if _config is None:
        _config = FlowConfig()
        logging.getLogger(__name__).debug("Configuration loaded for %s", _config.environment.value)

    return _config

def reset_config() -> None:
    """Drop the cached instance so the next get_config() re-reads the environment"""
    global _config
    _config = None

__all__ = [
    'FlowConfig',
    'get_config',
    'reset_config',
    'Environment',
    'LogLevel',
    'StorageConfig',
    'ServerConfig',
    'StatsConfig',
    'ReminderConfig'
]
