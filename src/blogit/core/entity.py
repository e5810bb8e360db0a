"""Entity Functionality and Classes"""

import functools
import logging
from collections import defaultdict

import inflection

from blogit.exceptions import NotSupportedError, ValidationError
from blogit.fields import Auto, FieldBase
from blogit.utils.container import OptionsMixin
from blogit.utils.reflection import _FIELDS, _ID_FIELD_NAME, fields, id_field

logger = logging.getLogger(__name__)


class _EntityState:
    """Store entity instance state."""

    def __init__(self):
        self._new = True
        self._changed = False
        self._destroyed = False

    @property
    def is_new(self):
        return self._new

    @property
    def is_persisted(self):
        return not self._new

    @property
    def is_changed(self):
        return self._changed

    @property
    def is_destroyed(self):
        return self._destroyed

    def mark_saved(self):
        self._new = False
        self._changed = False

    mark_retrieved = mark_saved

    def mark_changed(self):
        if not (self._new or self._destroyed):
            self._changed = True

    def mark_destroyed(self):
        self._destroyed = True
        self._changed = False


def invariant(func):
    """Mark an entity method as an invariant.

    Invariants run after the entity is built and whenever it is validated.
    They signal violations by raising `ValidationError`.
    """

    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        return func(*args, **kwargs)

    setattr(wrapper, "_invariant", True)
    return wrapper


class BaseEntity(OptionsMixin):
    """The Base class for Blogit Entities.

    Define an Entity by subclassing and declaring fields::

        class Comment(BaseEntity):
            name = String(required=True, max_length=100)
            body = Text(required=True, min_length=4)

    An auto-incrementing `id` identifier is added when no identifier field is declared.
    Values are validated as they are loaded. All errors found while building the entity
    are collected and raised together as a single `ValidationError`.
    """

    def __new__(cls, *args, **kwargs):
        if cls is BaseEntity:
            raise NotSupportedError("BaseEntity cannot be instantiated")
        return super().__new__(cls)

    @classmethod
    def _default_options(cls):
        return [
            ("auto_add_id_field", True),
            ("provider", "default"),
            ("schema_name", inflection.underscore(cls.__name__)),
        ]

    def __init_subclass__(cls) -> None:
        super().__init_subclass__()

        # Gather fields in the order specified, starting with base classes
        fields_dict = {}
        for base in reversed(cls.__bases__):
            if hasattr(base, _FIELDS):
                fields_dict.update(fields(base))

        for attr_name, attr_obj in cls.__dict__.items():
            if isinstance(attr_obj, FieldBase):
                fields_dict[attr_name] = attr_obj

        id_field_name = next(
            (name for name, field in fields_dict.items() if field.identifier), None
        )
        if id_field_name is None and cls.meta_.auto_add_id_field:
            id_field_obj = Auto(identifier=True, increment=True)
            id_field_obj.__set_name__(cls, "id")
            setattr(cls, "id", id_field_obj)

            id_field_name = "id"
            fields_dict = {"id": id_field_obj, **fields_dict}

        setattr(cls, _FIELDS, fields_dict)
        setattr(cls, _ID_FIELD_NAME, id_field_name)

        # Record invariant methods, including those inherited
        cls._invariants = {
            name: method
            for klass in reversed(cls.__mro__)
            for name, method in vars(klass).items()
            if callable(method) and getattr(method, "_invariant", False)
        }

    def __init__(self, *template, blog=None, **kwargs):
        """
        Initialise the entity object.

        Both keyword arguments and dictionaries are supported. The objects initialized
        in the following example have the same structure::

            comment1 = Comment({'name': 'John', 'body': 'Nice post'})

            comment2 = Comment(name='John', body='Nice post')

        Writable properties declared on the entity can be supplied along with fields.
        They are applied after fields are loaded.

        `blog` binds the entity to the blog whose configuration governs its rules
        and accessors.
        """
        self._initialized = False
        self.blog_ = blog

        if self.meta_.abstract is True:
            raise NotSupportedError(
                f"{self.__class__.__name__} class has been marked abstract"
                f" and cannot be instantiated"
            )

        self.errors = defaultdict(list)

        # Set up the storage for instance state
        self.state_ = _EntityState()

        # Gather values from template
        template_values = {}
        for dictionary in template:
            if not isinstance(dictionary, dict):
                raise AssertionError(
                    f"Positional argument {dictionary} passed must be a dict. "
                    f"This argument serves as a template for loading common "
                    f"values.",
                )
            template_values.update(dictionary)

        supplied_values = {**template_values, **kwargs}

        loaded_fields = []
        property_values = {}
        for field_name, val in supplied_values.items():
            if field_name in fields(self):
                self._load_attribute(field_name, val)
                loaded_fields.append(field_name)
            elif self._is_writable_property(field_name):
                property_values[field_name] = val
            else:
                self.errors[field_name].append("is not a known attribute")

        for name, val in property_values.items():
            self._load_attribute(name, val)

        # Load remaining fields with a None value, which will fail for required fields
        for field_name, field_obj in fields(self).items():
            if (
                field_name not in loaded_fields
                and field_name not in self.errors
                and getattr(self, field_name) is None
            ):
                self._load_attribute(field_name, None)

        self._initialized = True

        for field_name, messages in self._run_invariants().items():
            self.errors[field_name].extend(messages)

        # Raise any errors found during load
        if self.errors:
            logger.debug(f"Error during initialization: {dict(self.errors)}")
            raise ValidationError(self.errors)

    @classmethod
    def _is_writable_property(cls, name):
        attr = getattr(cls, name, None)
        return isinstance(attr, property) and attr.fset is not None

    def _load_attribute(self, name, value):
        try:
            setattr(self, name, value)
        except ValidationError as err:
            for field_name in err.messages:
                self.errors[field_name].extend(err.messages[field_name])

    def _run_invariants(self):
        """Run all invariants and return the errors they raised, by field name."""
        errors = defaultdict(list)

        for invariant_method in self._invariants.values():
            try:
                invariant_method(self)
            except ValidationError as err:
                for field_name in err.messages:
                    errors[field_name].extend(err.messages[field_name])

        return errors

    def validate(self):
        """Check current values against field rules and invariants.

        Values are checked when they are assigned, but rules can depend on state that
        changes afterwards, like a field being deleted or configuration being switched.
        Raises `ValidationError` with all violations.
        """
        errors = defaultdict(list)

        for field_name, field_obj in fields(self).items():
            if isinstance(field_obj, Auto):
                continue

            try:
                field_obj._load(getattr(self, field_name))
            except ValidationError as err:
                for name in err.messages:
                    errors[name].extend(err.messages[name])

        for field_name, messages in self._run_invariants().items():
            errors[field_name].extend(messages)

        if errors:
            raise ValidationError(errors)

    def to_dict(self):
        """Return entity data as a dictionary"""
        return {
            field_name: field_obj.as_dict(getattr(self, field_name))
            for field_name, field_obj in fields(self).items()
        }

    def __eq__(self, other):
        """Equivalence check to be based only on Identity"""
        if type(other) is not type(self):
            return False

        self_id = getattr(self, id_field(self).field_name)
        other_id = getattr(other, id_field(other).field_name)

        if self_id is None or other_id is None:
            return self is other

        return self_id == other_id

    def __hash__(self):
        """Overrides the default implementation and bases hashing on identity"""
        identifier = getattr(self, id_field(self).field_name)
        return hash(identifier) if identifier is not None else id(self)

    def __repr__(self):
        return "<%s: %s>" % (self.__class__.__name__, self)

    def __str__(self):
        identifier = getattr(self, id_field(self).field_name)
        return "%s object (%s)" % (
            self.__class__.__name__,
            "{}".format(identifier),
        )
