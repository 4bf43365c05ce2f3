"""
Custom Exceptions for Chat Module
=================================

Defines custom exception classes for the chat bridge.
"""


class ChatException(Exception):
    """Base exception for chat module."""

    def __init__(self, message: str, original_error: Exception = None):
        self.message = message
        self.original_error = original_error
        super().__init__(self.message)

    def __str__(self):
        if self.original_error:
            return f"{self.message} (Caused by: {self.original_error})"
        return self.message


class ConfigurationException(ChatException):
    """Exception raised for configuration errors."""

    def __init__(self, config_key: str, message: str = None):
        self.config_key = config_key
        msg = message or f"Configuration error for key: {config_key}"
        super().__init__(msg)


class ContextException(ChatException):
    """Exception raised for conversation context errors."""

    def __init__(self, channel_id: int, message: str):
        self.channel_id = channel_id
        super().__init__(f"[Channel {channel_id}] {message}")


class SendException(ChatException):
    """Exception raised when a reply could not be delivered."""

    def __init__(self, channel_id: int, original_error: Exception = None):
        self.channel_id = channel_id
        super().__init__(f"[Channel {channel_id}] Failed to send reply", original_error)


class CompletionException(ChatException):
    """Base exception for a failed completion call."""


class UnreachableException(CompletionException):
    """Exception raised when the completion server cannot be reached."""

    def __init__(self, message: str, original_error: Exception = None):
        super().__init__(message, original_error)


class CompletionTimeoutException(CompletionException):
    """Exception raised when the completion request times out."""

    def __init__(self, timeout: float, original_error: Exception = None):
        self.timeout = timeout
        super().__init__(f"Request timed out after {timeout} seconds", original_error)


class AuthenticationException(CompletionException):
    """Exception raised for API authentication failures."""

    def __init__(self):
        super().__init__("Authentication failed. Check API key.")


class ApiErrorException(CompletionException):
    """Exception raised for non-2xx responses and unparsable bodies."""

    def __init__(self, status_code: int, body: str):
        self.status_code = status_code
        self.body = body
        super().__init__(f"API error {status_code}: {body}")
