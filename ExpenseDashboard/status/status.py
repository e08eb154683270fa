"""Status definitions and exceptions for ExpenseDashboard.

This module provides:
    - Status: enumeration of possible application states
    - STATUS_MESSAGE: user-facing messages for each status
    - get_message: retrieve the message for a status
    - BaseStatusException: base exception carrying a Status
    - Specific exceptions used by the gateway, the records parser and the settings API

Two families matter to the dashboard controller:

    - transport or server errors: :class:`ServiceUnavailableException` and its
      subclass :class:`ResponseInvalidException`
    - validation errors: :class:`DraftInvalidException`, raised before any request is sent
"""
import enum
import logging
from typing import Dict


class Status(enum.StrEnum):
    """Enumeration of application status codes."""
    UnknownStatus = enum.auto()
    Okay = enum.auto()

    # Config status
    SettingsNotFound = enum.auto()
    SettingsInvalid = enum.auto()

    # Service status
    ServiceUnavailable = enum.auto()
    ResponseInvalid = enum.auto()

    # Validation status
    DraftInvalid = enum.auto()


STATUS_MESSAGE: Dict[Status, str] = {
    Status.UnknownStatus: 'Unknown status. Please check the logs.',
    Status.Okay: 'Everything is okay.',

    Status.SettingsNotFound: 'Could not find the settings file.',
    Status.SettingsInvalid: 'The settings file seems to be incomplete, or contains invalid values.',

    Status.ServiceUnavailable: 'The expense service is unavailable. Please check your connection and the service address.',
    Status.ResponseInvalid: 'The expense service returned data in an unexpected format.',

    Status.DraftInvalid: 'The expense is not valid.',
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
    """Base exception for status-based errors in ExpenseDashboard.

    Attributes:
        status (Status): Status code associated with this error.
        status_message (str): User-facing message for the status.
        detail (str): The additional context passed to the exception, if any.

    Args:
        message (str): Optional additional context for the error.
    """
    status = Status.UnknownStatus

    def __init__(self, message: str = None):
        self.status_message = get_message(self.status)
        self.detail = message or ''
        exception_message = f'{self.status_message} {message}' if message else self.status_message
        super().__init__(exception_message)

        logging.error(exception_message)


class UnknownException(BaseStatusException):
    """Exception for an unknown error during status processing."""
    pass


class SettingsNotFoundException(BaseStatusException):
    """Exception raised when the settings file cannot be found."""
    status = Status.SettingsNotFound


class SettingsInvalidException(BaseStatusException):
    """Exception raised when the settings file is invalid or malformed."""
    status = Status.SettingsInvalid


class ServiceUnavailableException(BaseStatusException):
    """Exception raised when a request fails in transport or the service answers with a non-success status."""
    status = Status.ServiceUnavailable


class ResponseInvalidException(ServiceUnavailableException):
    """Exception raised when the service answers successfully but the payload cannot be parsed."""
    status = Status.ResponseInvalid


class DraftInvalidException(BaseStatusException):
    """Exception raised when a draft expense fails local validation."""
    status = Status.DraftInvalid
