"""
Custom Blogit exception classes
"""

from typing import Any


class BlogitException(Exception):
    """Base class for all Exceptions raised within Blogit"""

    def __reduce__(self) -> tuple[Any, tuple[Any]]:
        return (self.__class__, (self.args[0],))


class BlogitExceptionWithMessage(BlogitException):
    def __init__(self, messages: dict[str, list]) -> None:
        self.messages = messages

        super().__init__(messages)

    def __str__(self) -> str:
        if isinstance(self.messages, dict):
            return f"{dict(self.messages)}"
        return f"{self.messages}"

    def __reduce__(self) -> tuple[Any, tuple[Any]]:
        return (self.__class__, (self.messages,))


class ConfigurationError(BlogitException):
    """Improper Configuration encountered like:
    * An important configuration variable is missing or has an unknown value
    * Comments accessed while the comment backend is not `persisted`
    * An author that does not expose the configured display name accessor
    """


class NotFoundError(BlogitException):
    """Object was not found, can raise 404"""


class InvalidOperationError(BlogitException):
    """Operation being performed is not permitted"""


class NotSupportedError(BlogitException):
    """Object does not support the operation being performed"""


class ValidationError(BlogitExceptionWithMessage):
    """Raised when validation fails on a field. Validators and custom fields should
    raise this exception.

    :param messages: An error message or a list of error messages or a
        dictionary of error messages where key is field name and value is
        the list of violated constraints

    """
