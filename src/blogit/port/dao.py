import logging
from abc import ABCMeta, abstractmethod
from typing import Any

from blogit.core.entity import BaseEntity
from blogit.core.queryset import Criteria, QuerySet, ResultSet
from blogit.exceptions import NotFoundError, ValidationError
from blogit.fields import Auto
from blogit.utils.reflection import attributes, fields, id_field

logger = logging.getLogger(__name__)


class BaseDAO(metaclass=ABCMeta):
    """Data access for one entity class on one provider.

    Concrete adapters implement the underscored methods, which deal in plain
    records: dictionaries keyed by storage attribute name. This class maps
    records to entities and back, and keeps entity state in step with storage.

    :param blog: the blog this DAO serves.
    :param provider: the provider that supplies connections.
    :param entity_cls: the entity class stored through this DAO.
    """

    def __init__(self, blog, provider, entity_cls):
        self.blog = blog
        self.provider = provider
        self.entity_cls = entity_cls

        #: The collection records are stored under
        self.schema_name = entity_cls.meta_.schema_name

    @property
    def query(self) -> QuerySet:
        """A fresh, unfiltered query"""
        return QuerySet(self)

    def _get_session(self):
        return self.provider.get_connection()

    ###################
    # Adapter methods #
    ###################

    @abstractmethod
    def _filter(
        self, criteria: Criteria, offset: int = 0, limit: int = None, order_by: list = ()
    ) -> ResultSet:
        """Return a `ResultSet` of the records matching `criteria`"""

    @abstractmethod
    def _create(self, record: dict) -> dict:
        """Store a new record, generating auto field values. Returns the record as stored."""

    @abstractmethod
    def _update(self, record: dict) -> dict:
        """Replace a stored record. Raises `NotFoundError` if it does not exist."""

    @abstractmethod
    def _delete(self, record: dict) -> dict:
        """Remove a stored record. Raises `NotFoundError` if it does not exist."""

    @abstractmethod
    def _delete_all(self, criteria: Criteria = None) -> int:
        """Remove records matching `criteria`, or every record when there are none.
        Returns the number removed.
        """

    ##################
    # Record mapping #
    ##################

    def attribute_name(self, field_name: str) -> str:
        """Storage attribute for a field, honoring `referenced_as`"""
        field_obj = fields(self.entity_cls).get(field_name)
        return field_obj.get_attribute_name() if field_obj else field_name

    def from_entity(self, entity_obj: BaseEntity) -> dict:
        return {
            attribute_name: getattr(entity_obj, field_obj.field_name)
            for attribute_name, field_obj in attributes(entity_obj).items()
        }

    def to_entity(self, record: dict) -> BaseEntity:
        """Build an entity from a stored record, marked as retrieved.

        The entity is bound to the blog only after it is built, so that rules depending
        on current configuration do not prevent stored records from being read.
        """
        values = {
            field_obj.field_name: record.get(attribute_name)
            for attribute_name, field_obj in attributes(self.entity_cls).items()
        }
        entity = self.entity_cls(values)
        entity.blog_ = self.blog
        entity.state_.mark_retrieved()

        return entity

    ######################
    # Life-cycle methods #
    ######################

    def get(self, identifier: Any) -> BaseEntity:
        """Fetch an entity by identifier. Raises `NotFoundError` if there is none."""
        logger.debug(
            f"Lookup `{self.entity_cls.__name__}` object with identifier {identifier}"
        )

        entity = self.query.filter(**{id_field(self.entity_cls).field_name: identifier}).first
        if entity is None:
            raise NotFoundError(
                f"`{self.entity_cls.__name__}` object with identifier {identifier} "
                f"does not exist."
            )

        return entity

    def save(self, entity_obj: BaseEntity) -> BaseEntity:
        """Create or update an entity, depending on whether it has been stored before.

        Generated auto field values are copied back onto the entity.
        """
        logger.debug(f"Saving `{self.entity_cls.__name__}` object {entity_obj}")

        try:
            if entity_obj.state_.is_persisted:
                self._update(self.from_entity(entity_obj))
            else:
                record = self._create(self.from_entity(entity_obj))

                for field_name, field_obj in fields(entity_obj).items():
                    if isinstance(field_obj, Auto) and getattr(entity_obj, field_name) is None:
                        setattr(entity_obj, field_name, record[field_obj.get_attribute_name()])

            entity_obj.state_.mark_saved()
            return entity_obj
        except (NotFoundError, ValidationError) as exc:
            logger.error(f"Failed saving entity because {exc}")
            raise

    def delete(self, entity_obj: BaseEntity) -> BaseEntity:
        """Delete an entity. Raises `NotFoundError` if it is not in storage."""
        try:
            if not entity_obj.state_.is_destroyed:
                self._delete(self.from_entity(entity_obj))
                entity_obj.state_.mark_destroyed()

            return entity_obj
        except NotFoundError as exc:
            logger.error(f"Failed entity deletion because of {exc}")
            raise

    def delete_all(self, criteria: Criteria = None) -> int:
        """Delete records without loading or validating them"""
        logger.debug(f"Deleting `{self.entity_cls.__name__}` records matching {criteria!r}")
        return self._delete_all(criteria)
