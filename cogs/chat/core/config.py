"""
Configuration Management for Chat Module
========================================

Handles loading and managing chat bridge configuration from INI files
and environment variables.
"""

import os
import configparser
from pathlib import Path
from typing import List
from dataclasses import dataclass
import logging


logger = logging.getLogger(__name__)

DEFAULT_SYSTEM_PROMPT = (
    "You are a helpful AI assistant. Keep responses under 2048 characters."
)

# Environment variables consumed by the completion provider
API_KEY_ENV = "OPENWEBUI_API_KEY"
API_URL_ENV = "OPENWEBUI_URL"


@dataclass
class ProviderConfig:
    """Configuration for the completion endpoint."""
    name: str
    api_key: str
    url: str
    model: str
    endpoint: str = "/api/chat/completions"
    request_timeout: float = 60.0


@dataclass
class HistoryConfig:
    """Conversation memory configuration."""
    system_prompt: str = DEFAULT_SYSTEM_PROMPT
    max_history_pairs: int = 10
    max_response_length: int = 2048
    rollback_failed_turns: bool = False


@dataclass
class CommandConfig:
    """Chat command configuration."""
    prefix: str = "s."
    source_link: str = "https://github.com/SkyJoshua/SkyAI"
    send_timeout: float = 30.0


@dataclass
class LoggingConfig:
    """Logging configuration."""
    log_level: str = "INFO"
    log_api_calls: bool = True


class ChatConfig:
    """
    Main configuration class for the chat module.

    Loads configuration from INI file and environment variables.
    Provides typed access to all configuration values.
    """

    DEFAULT_CONFIG_PATH = "config/chat_config.ini"

    def __init__(self, config_path: str = None):
        self.config_path = config_path or self.DEFAULT_CONFIG_PATH
        self._config = configparser.ConfigParser()

        self.provider = ProviderConfig(name="openwebui", api_key="", url="", model="")
        self.history = HistoryConfig()
        self.commands = CommandConfig()
        self.logging = LoggingConfig()

        self._load_config()

    def _load_config(self) -> None:
        """Load configuration from file and environment."""
        config_file = Path(self.config_path)

        if config_file.exists():
            self._config.read(config_file, encoding="utf-8")
            logger.info(f"Loaded configuration from {self.config_path}")
        else:
            logger.warning(f"Configuration file not found: {self.config_path}. Using defaults.")

        self._load_provider_config()
        self._load_history_config()
        self._load_command_config()
        self._load_logging_config()

    def _load_provider_config(self) -> None:
        """Load completion provider configuration from environment variables."""
        section = 'completion'

        url = os.getenv(API_URL_ENV, '').strip().rstrip('/')

        self.provider = ProviderConfig(
            name="openwebui",
            api_key=os.getenv(API_KEY_ENV, '').strip(),
            url=url,
            model=self._get(section, 'model', 'llama3.1:latest'),
            endpoint=self._get(section, 'endpoint', '/api/chat/completions'),
            request_timeout=self._getfloat(section, 'request_timeout', 60.0),
        )

        if self.provider.request_timeout <= 0:
            logger.warning("request_timeout must be positive, falling back to 60s")
            self.provider.request_timeout = 60.0

    def _load_history_config(self) -> None:
        """Load conversation memory configuration."""
        section = 'history'

        self.history = HistoryConfig(
            system_prompt=self._get(section, 'system_prompt', DEFAULT_SYSTEM_PROMPT),
            max_history_pairs=max(1, self._getint(section, 'max_history_pairs', 10)),
            max_response_length=max(1, self._getint(section, 'max_response_length', 2048)),
            rollback_failed_turns=self._getboolean(section, 'rollback_failed_turns', False),
        )

    def _load_command_config(self) -> None:
        """Load chat command configuration."""
        section = 'commands'

        self.commands = CommandConfig(
            prefix=self._get(section, 'prefix', 's.'),
            source_link=self._get(section, 'source_link', 'https://github.com/SkyJoshua/SkyAI'),
            send_timeout=self._getfloat(section, 'send_timeout', 30.0),
        )

    def _load_logging_config(self) -> None:
        """Load logging configuration."""
        section = 'logging'

        self.logging = LoggingConfig(
            log_level=self._get(section, 'log_level', 'INFO').upper(),
            log_api_calls=self._getboolean(section, 'log_api_calls', True),
        )

    def missing_settings(self) -> List[str]:
        """Get the names of required environment variables that are not set."""
        missing = []
        if not self.provider.api_key:
            missing.append(API_KEY_ENV)
        if not self.provider.url:
            missing.append(API_URL_ENV)
        return missing

    # Helper methods for config parsing
    def _get(self, section: str, key: str, fallback: str = None) -> str:
        """Get a string value from config."""
        try:
            return self._config.get(section, key)
        except (configparser.NoSectionError, configparser.NoOptionError):
            return fallback

    def _getint(self, section: str, key: str, fallback: int = 0) -> int:
        """Get an integer value from config."""
        try:
            return self._config.getint(section, key)
        except (configparser.NoSectionError, configparser.NoOptionError, ValueError):
            return fallback

    def _getfloat(self, section: str, key: str, fallback: float = 0.0) -> float:
        """Get a float value from config."""
        try:
            return self._config.getfloat(section, key)
        except (configparser.NoSectionError, configparser.NoOptionError, ValueError):
            return fallback

    def _getboolean(self, section: str, key: str, fallback: bool = False) -> bool:
        """Get a boolean value from config."""
        try:
            return self._config.getboolean(section, key)
        except (configparser.NoSectionError, configparser.NoOptionError, ValueError):
            return fallback
