"""Core module - Framework-independent logic."""

from .config import ChatConfig, ProviderConfig, HistoryConfig, CommandConfig, LoggingConfig
from .exceptions import (
    ChatException,
    ConfigurationException,
    ContextException,
    SendException,
    CompletionException,
    UnreachableException,
    CompletionTimeoutException,
    AuthenticationException,
    ApiErrorException,
)

__all__ = [
    'ChatConfig',
    'ProviderConfig',
    'HistoryConfig',
    'CommandConfig',
    'LoggingConfig',
    'ChatException',
    'ConfigurationException',
    'ContextException',
    'SendException',
    'CompletionException',
    'UnreachableException',
    'CompletionTimeoutException',
    'AuthenticationException',
    'ApiErrorException',
]
