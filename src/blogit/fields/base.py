"""Module for defining base Field class"""

from abc import ABCMeta, abstractmethod
from typing import Any, Callable, Iterable

from blogit import exceptions


class FieldBase:
    """Marker class, so entities can discover their fields."""


class Field(FieldBase, metaclass=ABCMeta):
    """Base class for the fields of Blogit entities.

    Fields are descriptors. Every value set on an instance goes through ``_load``,
    which applies the default, enforces ``required``, converts the value to the
    field's type and runs validators. Values live in the instance's ``__dict__``.

    :param referenced_as: the attribute name in storage, when it differs from the field name.
    :param identifier: the field identifies the entity. Implies ``required``.
    :param default: a value, or a callable returning one, used for empty values.
    :param required: empty values are rejected with ``is required``.
    :param validators: callables raising ``ValidationError`` for invalid values.
    """

    error_messages = {
        "invalid": "Value is not a valid type for this field.",
        "required": "is required",
    }

    default_validators: list[Callable] = []

    def __init__(
        self,
        referenced_as: str = None,
        identifier: bool = False,
        default: Any = None,
        required: bool = False,
        validators: Iterable[Callable] = (),
    ):
        self.field_name = None
        self.referenced_as = referenced_as
        self.identifier = identifier
        self.default = default
        self.required = identifier or required
        self._validators = list(validators)

    def __set_name__(self, entity_cls, name):
        self.field_name = name

    def get_attribute_name(self) -> str:
        """The key under which the value is stored"""
        return self.referenced_as or self.field_name

    def __get__(self, instance, owner):
        if instance is None:
            return self

        return instance.__dict__.get(self.field_name)

    def __set__(self, instance, value):
        instance.__dict__[self.field_name] = self._load(value)

        if hasattr(instance, "state_"):
            instance.state_.mark_changed()

    def __delete__(self, instance):
        instance.__dict__.pop(self.field_name, None)

    def __repr__(self):
        options = []
        if self.identifier:
            options.append("identifier=True")
        elif self.required:
            options.append("required=True")
        if self.referenced_as:
            options.append(f"referenced_as='{self.referenced_as}'")
        if self.default is not None:
            default = getattr(self.default, "__name__", repr(self.default))
            options.append(f"default={default}")
        options.extend(self._repr_options())

        return f"{self.__class__.__name__}({', '.join(options)})"

    def _repr_options(self) -> list[str]:
        return []

    def fail(self, key, **kwargs):
        """Raise a `ValidationError` with one of the field's messages"""
        message = self.error_messages[key].format(**kwargs)

        # A field used by itself (not owned by an entity) has no name
        raise exceptions.ValidationError({self.field_name or "unlinked": [message]})

    @property
    def validators(self) -> list[Callable]:
        return [*self.default_validators, *self._validators]

    def is_empty(self, value: Any) -> bool:
        return value is None or value == ""

    @abstractmethod
    def _cast_to_type(self, value: Any) -> Any:
        """Convert ``value`` to the field's type, failing with ``invalid``"""

    @abstractmethod
    def as_dict(self, value: Any) -> Any:
        """Return JSON-compatible value of field"""

    def _run_validators(self, value):
        messages = []
        for validator in self.validators:
            try:
                validator(value)
            except exceptions.ValidationError as err:
                messages.append(err.messages)

        if messages:
            raise exceptions.ValidationError({self.field_name or "unlinked": messages})

    def _load(self, value: Any):
        """Check and convert a value before it is stored on an instance"""
        if self.is_empty(value):
            if self.default is not None:
                return self.default() if callable(self.default) else self.default

            if self.required:
                self.fail("required")

            # Optional empty values are stored as given, without validation
            return value

        value = self._cast_to_type(value)
        self._run_validators(value)

        return value
