from __future__ import annotations

from typing import TYPE_CHECKING, Type

from blogit.exceptions import NotSupportedError

if TYPE_CHECKING:
    from blogit.core.entity import BaseEntity
    from blogit.fields.base import Field

_FIELDS = "__container_fields__"
_ID_FIELD_NAME = "__container_id_field_name__"


def fields(class_or_instance: Type[BaseEntity] | BaseEntity) -> dict[str, Field]:
    """Return a dictionary of fields in this element.

    Accepts an element or an instance of one.
    """
    try:
        fields_dict = getattr(class_or_instance, _FIELDS)
    except AttributeError:
        raise NotSupportedError(f"{class_or_instance} does not have fields")

    return fields_dict


def id_field(class_or_instance: Type[BaseEntity] | BaseEntity) -> Field | None:
    """Return the identity field in this element."""
    try:
        field_name = getattr(class_or_instance, _ID_FIELD_NAME)
    except AttributeError:
        return None

    return fields(class_or_instance)[field_name]


def attributes(class_or_instance: Type[BaseEntity] | BaseEntity) -> dict[str, Field]:
    """Return a dictionary of fields keyed by their storage attribute names."""
    return {
        field_obj.get_attribute_name(): field_obj
        for field_obj in fields(class_or_instance).values()
    }
