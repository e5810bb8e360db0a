"""Lazy, chainable queries over the records of a repository"""

from __future__ import annotations

import logging
import math
from typing import TYPE_CHECKING, Any, Union

if TYPE_CHECKING:
    from blogit.port.dao import BaseDAO

logger = logging.getLogger(__name__)


class Criteria:
    """Conditions a record must satisfy to be part of a query's results.

    Conditions are `(field_name, lookup, value)` triples, parsed from keyword
    arguments like `state__in=["published"]`. A key without a lookup suffix
    compares with `exact`. Conditions passed to `filter()` must all hold. The
    conditions of one `exclude()` call form a group that must not hold as a whole.
    """

    def __init__(self, included: tuple = (), excluded: tuple = ()):
        self.included = tuple(included)
        self.excluded = tuple(excluded)

    @staticmethod
    def parse(**kwargs) -> tuple:
        conditions = []
        for key, value in kwargs.items():
            field_name, _, lookup = key.partition("__")
            conditions.append((field_name, lookup or "exact", value))
        return tuple(conditions)

    def including(self, **kwargs) -> Criteria:
        return Criteria(self.included + self.parse(**kwargs), self.excluded)

    def excluding(self, **kwargs) -> Criteria:
        if not kwargs:
            return self
        return Criteria(self.included, self.excluded + (self.parse(**kwargs),))

    def __bool__(self):
        return bool(self.included or self.excluded)

    def __eq__(self, other):
        return (
            isinstance(other, Criteria)
            and (self.included, self.excluded) == (other.included, other.excluded)
        )

    def __repr__(self):
        return f"<Criteria: included={list(self.included)}, excluded={list(self.excluded)}>"


class QuerySet:
    """A lazy query over one repository's entities.

    `filter`, `exclude`, `order_by`, `limit`, `offset` and `page` each return a new
    QuerySet and leave the original untouched. Nothing is read from storage until the
    query is evaluated, by calling `all()`, iterating, `len()`, `bool()`, indexing or
    reading one of the result properties (`total`, `items`, `first` and so on).

    Results are cached on first evaluation. Call `all()` to read storage again.
    """

    def __init__(
        self,
        dao: BaseDAO,
        criteria: Criteria = None,
        offset: int = 0,
        limit: int = None,
        order_by: tuple = (),
    ):
        self._dao = dao
        self._criteria = criteria or Criteria()
        self._offset = offset
        self._limit = limit
        self._order_by = tuple(order_by)
        self._result_cache = None

    def _clone(self, **changes) -> QuerySet:
        settings = {
            "criteria": self._criteria,
            "offset": self._offset,
            "limit": self._limit,
            "order_by": self._order_by,
        }
        settings.update(changes)
        return self.__class__(self._dao, **settings)

    def filter(self, **kwargs) -> QuerySet:
        """Keep records matching all the given conditions"""
        return self._clone(criteria=self._criteria.including(**kwargs))

    def exclude(self, **kwargs) -> QuerySet:
        """Drop records matching all the given conditions"""
        return self._clone(criteria=self._criteria.excluding(**kwargs))

    def order_by(self, keys: Union[list, str]) -> QuerySet:
        """Sort on one or more field names. Prefix a name with `-` for descending order.

        Keys added by successive calls apply after those already present.
        """
        if isinstance(keys, str):
            keys = [keys]

        order_by = list(self._order_by)
        order_by.extend(key for key in keys if key not in order_by)
        return self._clone(order_by=order_by)

    def limit(self, limit: int) -> QuerySet:
        # Anything but an integer or `None` leaves the limit unchanged
        if limit is not None and not isinstance(limit, int):
            return self._clone()
        return self._clone(limit=limit)

    def offset(self, offset: int) -> QuerySet:
        if not isinstance(offset, int):
            return self._clone()
        return self._clone(offset=offset)

    def page(self, number: int = 1, per_page: int = 25) -> QuerySet:
        """Restrict results to one page of `per_page` records.

        Pages are numbered from 1. Anything that is not a positive page number
        is treated as the first page.
        """
        try:
            number = max(int(number), 1)
        except (TypeError, ValueError):
            number = 1

        return self.offset((number - 1) * per_page).limit(per_page)

    def all(self) -> ResultSet:
        """Read matching records from storage and return them as entities"""
        logger.debug(f"Evaluating {self!r}")

        results = self._dao._filter(
            self._criteria, self._offset, self._limit, list(self._order_by)
        )
        results.items = [self._dao.to_entity(record) for record in results.items]

        self._result_cache = results
        return results

    def delete_all(self) -> int:
        """Delete matching records without loading them. Returns the number deleted."""
        return self._dao.delete_all(self._criteria)

    @property
    def _data(self) -> ResultSet:
        return self._result_cache if self._result_cache is not None else self.all()

    def __iter__(self):
        return iter(self._data)

    def __len__(self):
        return len(self._data)

    def __bool__(self):
        return bool(self._data)

    def __getitem__(self, index):
        return self._data.items[index]

    def __contains__(self, entity):
        return any(item == entity for item in self._data.items)

    def __repr__(self):
        return (
            f"<QuerySet: {self._dao.entity_cls.__name__} {self._criteria!r}, "
            f"offset={self._offset}, limit={self._limit}, order_by={list(self._order_by)}>"
        )

    @property
    def total(self) -> int:
        """Number of records matching the criteria, ignoring offset and limit"""
        return self._data.total

    @property
    def items(self) -> list:
        return self._data.items

    @property
    def first(self) -> Any:
        return self._data.first

    @property
    def last(self) -> Any:
        return self._data.last

    @property
    def has_next(self) -> bool:
        return self._data.has_next

    @property
    def has_prev(self) -> bool:
        return self._data.has_prev

    @property
    def current_page(self) -> int:
        return self._data.current_page

    @property
    def total_pages(self) -> int:
        return self._data.total_pages


class ResultSet:
    """One window of query results, with what is needed to paginate through the rest.

    Storage adapters return records in `items`. The QuerySet swaps them for entities
    before handing the results out.
    """

    def __init__(self, offset: int, limit: int, total: int, items: list):
        self.offset = offset
        self.limit = limit
        self.total = total
        self.items = items

    @property
    def has_prev(self) -> bool:
        return bool(self.items) and self.offset > 0

    @property
    def has_next(self) -> bool:
        return self.limit is not None and self.offset + self.limit < self.total

    @property
    def first(self) -> Any:
        return self.items[0] if self.items else None

    @property
    def last(self) -> Any:
        return self.items[-1] if self.items else None

    @property
    def current_page(self) -> int:
        if not self.limit:
            return 1
        return self.offset // self.limit + 1

    @property
    def total_pages(self) -> int:
        if not self.limit:
            return 1 if self.total else 0
        return math.ceil(self.total / self.limit)

    def __bool__(self):
        return bool(self.items)

    def __iter__(self):
        return iter(self.items)

    def __len__(self):
        return len(self.items)

    def __repr__(self):
        return f"<ResultSet: {len(self.items)} of {self.total} items>"
