"""Validators used by field types. Each is a callable raising `ValidationError`."""

import re

from blogit.exceptions import ValidationError


class MinLengthValidator:
    def __init__(self, min_length):
        self.min_length = min_length

    def __call__(self, value):
        if self.min_length is not None and len(value) < self.min_length:
            raise ValidationError(f"value has less than {self.min_length} characters")


class MaxLengthValidator:
    def __init__(self, max_length):
        self.max_length = max_length

    def __call__(self, value):
        if self.max_length is not None and len(value) > self.max_length:
            raise ValidationError(f"value has more than {self.max_length} characters")


class EmailValidator:
    """Check that a commenter's email address is well formed.

    Deliverability is not checked. Local part, `@`, and a domain with at least
    one dot and a top level domain of two or more letters.
    """

    pattern = re.compile(r"^[A-Za-z0-9._%+\-]+@(?:[A-Za-z0-9\-]+\.)+[A-Za-z]{2,}$")
    message = "is not a valid email address"

    def __call__(self, value):
        if not self.pattern.match(str(value)):
            raise ValidationError(self.message)
