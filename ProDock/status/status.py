"""Status definitions and exceptions for ProDock.

This module provides:
    - Status: enumeration of possible application states
    - STATUS_MESSAGE: user-facing messages for each status
    - get_message: retrieve the message for a status
    - BaseStatusException: base exception carrying a Status
    - Specific exceptions (e.g., ExecutionFailedException) raised by the dockutil adapter
"""
import enum
import logging
from typing import Dict, Optional


class Status(enum.StrEnum):
    """Enumeration of application status codes."""
    UnknownStatus = enum.auto()
    Okay = enum.auto()

    # Settings status
    SettingsNotFound = enum.auto()
    SettingsInvalid = enum.auto()

    # dockutil status
    ToolUnavailable = enum.auto()
    ExecutionFailed = enum.auto()
    ParseFailed = enum.auto()
    ConstructionFailed = enum.auto()


STATUS_MESSAGE: Dict[Status, str] = {
    Status.UnknownStatus: 'Unknown status. Please check the settings.',
    Status.Okay: 'Everything is okay.',

    Status.SettingsNotFound: 'Could not find the settings file.',
    Status.SettingsInvalid: 'The settings file seems to be incomplete, or contains invalid values.',

    Status.ToolUnavailable: 'dockutil command-line tool not found or not executable.',
    Status.ExecutionFailed: 'dockutil (or shell) execution failed.',
    Status.ParseFailed: 'Failed to parse dockutil output.',
    Status.ConstructionFailed: 'Failed to construct command or fragment.',
}


def get_message(status: Status) -> str:
    """
    Get the message for a given status.

    Args:
        status (Status): The status enum.

    Returns:
        str: The message associated with the status.
    """
    return STATUS_MESSAGE.get(status, 'Unknown status')


class BaseStatusException(Exception):
    """Base exception for status-based errors in ProDock.

    Attributes:
        status (Status): Status code associated with this error.
        status_message (str): User-facing message for the status.

    Args:
        message (str): Optional additional context for the error.
    """
    status = Status.UnknownStatus

    def __init__(self, message: Optional[str] = None):
        self.status_message = get_message(self.status)
        self.detail = message or ''
        exception_message = f'{self.status_message} {message}' if message else self.status_message
        super().__init__(exception_message)

        logging.error(exception_message)

        from ..ui.actions import signals
        signals.error.emit(exception_message)


class UnknownException(BaseStatusException):
    """Exception for an unknown error during status processing."""
    pass


class SettingsNotFoundException(BaseStatusException):
    """Exception raised when settings.json cannot be found."""
    status = Status.SettingsNotFound


class SettingsInvalidException(BaseStatusException):
    """Exception raised when settings.json is malformed or fails validation."""
    status = Status.SettingsInvalid


class ToolUnavailableException(BaseStatusException):
    """Exception raised when the dockutil executable is missing or not runnable."""
    status = Status.ToolUnavailable


class ExecutionFailedException(BaseStatusException):
    """Exception raised when a shell command exits with a nonzero status.

    Attributes:
        exit_status (int): The process exit status, or -1 if the process could not be launched.
        output (str): The captured stderr, falling back to stdout.
    """
    status = Status.ExecutionFailed

    def __init__(self, exit_status: int, message: str = ''):
        self.exit_status = exit_status
        self.output = message.strip()
        detail = f'Error: {self.output}' if self.output else '(No specific error message)'
        super().__init__(f'Exit status {exit_status}. {detail}')


class ParseFailedException(BaseStatusException):
    """Exception raised when dockutil output cannot be interpreted."""
    status = Status.ParseFailed


class ConstructionFailedException(BaseStatusException):
    """Exception raised when an add fragment or command cannot be built."""
    status = Status.ConstructionFailed
