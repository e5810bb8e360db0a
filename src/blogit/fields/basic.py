"""Module for defining basic Field types of Entity"""

import datetime
from uuid import UUID

import bleach
from dateutil.parser import parse as date_parser

from blogit.exceptions import InvalidOperationError
from blogit.fields import validators
from blogit.fields.base import Field


class String(Field):
    """A line of text, like a title or a commenter's name.

    Strings made only of whitespace count as empty, so they fail ``required``.

    :param max_length: The maximum allowed length for the field.
    :param min_length: The minimum allowed length for the field.
    :param sanitize: Escape markup in the value with `bleach`.
    """

    error_messages = {**Field.error_messages, "invalid": '"{value}" value must be a string.'}

    def __init__(self, max_length=255, min_length=None, sanitize=True, **kwargs):
        self.min_length = min_length
        self.max_length = max_length
        self.sanitize = sanitize
        self.default_validators = [
            validators.MinLengthValidator(self.min_length),
            validators.MaxLengthValidator(self.max_length),
        ]
        super().__init__(**kwargs)

    def is_empty(self, value):
        return value is None or (isinstance(value, str) and not value.strip())

    def _cast_to_type(self, value):
        value = value if isinstance(value, str) else str(value)

        return bleach.clean(value) if self.sanitize else value

    def as_dict(self, value):
        return value

    def _repr_options(self):
        options = []
        if self.max_length != 255:
            options.append(f"max_length={self.max_length}")
        if self.min_length:
            options.append(f"min_length={self.min_length}")
        if not self.sanitize:
            options.append("sanitize=False")
        return options


class Text(String):
    """Text without an upper bound on length.

    Post bodies hold markdown, so sanitization is off unless asked for.
    """

    def __init__(self, min_length=None, sanitize=False, **kwargs):
        super().__init__(max_length=None, min_length=min_length, sanitize=sanitize, **kwargs)

    def _repr_options(self):
        options = []
        if self.min_length:
            options.append(f"min_length={self.min_length}")
        if self.sanitize:
            options.append("sanitize=True")
        return options


class Auto(Field):
    """A value generated by the storage layer, like an auto-incremented id.

    Auto fields are never required, since their values only exist once an
    entity has been stored. Once set, the value cannot be changed.

    :param increment: The storage layer assigns values from a counter, starting at 1.
    """

    def __init__(self, increment=False, **kwargs):
        self.increment = increment

        super().__init__(**kwargs)
        self.required = False

    def __set__(self, instance, value):
        existing_value = getattr(instance, self.field_name)
        if existing_value is not None and value != existing_value:
            raise InvalidOperationError("Identifiers cannot be changed once set")

        instance.__dict__[self.field_name] = self._load(value)

    def _cast_to_type(self, value):
        return value

    def as_dict(self, value):
        if not value:
            return None

        return value if isinstance(value, int) else str(value)

    def _repr_options(self):
        return ["increment=True"] if self.increment else []


class Identifier(Field):
    """A reference to the identity of another record.

    Accepts UUIDs, strings and integers as they are, since the referenced
    record may live in a collection of any shape.
    """

    def _cast_to_type(self, value):
        # `bool` is a subclass of `int`, but never an identifier
        if not isinstance(value, (UUID, str, int)) or isinstance(value, bool):
            self.fail("invalid", value=value)

        return value

    def as_dict(self, value):
        if isinstance(value, UUID):
            return str(value)
        return value


class DateTime(Field):
    """A point in time, always timezone aware.

    Naive datetimes, dates and parsed strings without an offset are taken to be
    in UTC, so all stored values compare and sort together.
    """

    error_messages = {
        **Field.error_messages,
        "invalid": '"{value}" has an invalid datetime format.',
    }

    def _cast_to_type(self, value):
        if isinstance(value, datetime.datetime):
            pass
        elif isinstance(value, datetime.date):
            value = datetime.datetime(value.year, value.month, value.day)
        else:
            try:
                value = date_parser(value)
            except (ValueError, TypeError, OverflowError):
                self.fail("invalid", value=value)

        if value.tzinfo is None:
            value = value.replace(tzinfo=datetime.UTC)

        return value

    def as_dict(self, value):
        return str(value) if value else None
