from . import validators
from .base import Field, FieldBase
from .basic import Auto, DateTime, Identifier, String, Text

__all__ = [
    "Auto",
    "DateTime",
    "Field",
    "FieldBase",
    "Identifier",
    "String",
    "Text",
    "validators",
]
