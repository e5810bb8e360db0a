from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from blogit.core.entity import BaseEntity
from blogit.core.queryset import QuerySet
from blogit.exceptions import NotSupportedError
from blogit.port.dao import BaseDAO
from blogit.utils.container import OptionsMixin

if TYPE_CHECKING:
    from blogit.blog import Blog

logger = logging.getLogger(__name__)


class BaseRepository(OptionsMixin):
    """This is the baseclass for concrete Repository implementations.

    The methods in this baseclass to `add`, `get`, `remove` or query `all` entities are sufficient
    in most cases. While they can be overridden, it is generally suggested to call the parent
    method first before writing custom code.

    Concrete repositories name the entity they manage with `Meta.part_of`.
    """

    @classmethod
    def _default_options(cls):
        return [("part_of", None)]

    def __new__(cls, *args, **kwargs):
        # Prevent instantiation of `BaseRepository itself`
        if cls is BaseRepository:
            raise NotSupportedError("BaseRepository cannot be instantiated")
        return super().__new__(cls)

    def __init__(self, blog: Blog) -> None:
        self._blog = blog

    @property
    def _dao(self) -> BaseDAO:
        """Retrieve a DAO registered with the entity's provider"""
        entity_cls = self.meta_.part_of
        provider = self._blog.get_provider(entity_cls.meta_.provider)
        return provider.get_dao(entity_cls)

    def add(self, entity: BaseEntity) -> BaseEntity:
        """Validate and persist an entity, creating or updating it depending on its state.

        Validation happens before anything is written, so a failure leaves the store untouched.
        """
        logger.debug(f"Adding `{entity.__class__.__name__}` object {entity}")

        entity.blog_ = self._blog
        entity.validate()

        self._dao.save(entity)

        return entity

    def get(self, identifier: Any) -> BaseEntity:
        """Retrieve an entity from the repository by its identifier.
        Raises `NotFoundError` if it does not exist.
        """
        return self._dao.get(identifier)

    def remove(self, entity: BaseEntity) -> BaseEntity:
        """Delete an entity from the repository.
        Raises `NotFoundError` if it does not exist.
        """
        return self._dao.delete(entity)

    def all(self) -> QuerySet:
        """An unfiltered query over the repository's entities"""
        return self._dao.query
