"""Implementation of a dictionary based repository"""

from collections import defaultdict
from itertools import count
from threading import Lock

from blogit.core.queryset import Criteria, ResultSet
from blogit.exceptions import NotFoundError, NotSupportedError, ValidationError
from blogit.fields import Auto
from blogit.port.dao import BaseDAO
from blogit.port.provider import BaseProvider
from blogit.utils.reflection import fields, id_field


def _is_in(source, target):
    if not isinstance(target, (list, tuple, set, frozenset)):
        target = [target]
    return source in target


#: Comparisons available to `filter()` and `exclude()`, by lookup name
LOOKUPS = {
    "exact": lambda source, target: source == target,
    "in": _is_in,
}


class MemoryConnection:
    """A handle on the provider's dictionaries.

    Writes go straight to the provider's data, each one under the provider's lock.
    """

    def __init__(self, provider):
        self.data = provider._databases
        self.lock = provider._lock
        self.counters = provider._counters


class MemoryProvider(BaseProvider):
    """Keeps records in dictionaries, one per schema, for the life of the blog"""

    __database__ = "memory"

    def __init__(self, name, blog, conn_info: dict):
        super().__init__(name, blog, conn_info)

        self._daos = {}
        self._data_reset()

    def get_connection(self):
        return MemoryConnection(self)

    def _data_reset(self):
        self._databases = defaultdict(dict)
        self._lock = Lock()
        self._counters = defaultdict(lambda: count(1))

    def get_dao(self, entity_cls):
        """Return the DAO for an entity class, building it on first use"""
        if entity_cls not in self._daos:
            self._daos[entity_cls] = DictDAO(self.blog, self, entity_cls)

        return self._daos[entity_cls]


class DictDAO(BaseDAO):
    """A DAO over one of the provider's dictionaries, keyed by identifier"""

    def __repr__(self) -> str:
        return f"DictDAO <{self.entity_cls.__name__}>"

    def _identifier(self, record):
        return record[id_field(self.entity_cls).get_attribute_name()]

    def _set_auto_fields(self, conn, record):
        for field_obj in fields(self.entity_cls).values():
            attribute_name = field_obj.get_attribute_name()
            if (
                isinstance(field_obj, Auto)
                and field_obj.increment
                and record.get(attribute_name) is None
            ):
                counter = conn.counters[f"{self.schema_name}_{attribute_name}"]
                record[attribute_name] = next(counter)

        return record

    def _satisfies(self, record, conditions):
        for field_name, lookup, value in conditions:
            try:
                compare = LOOKUPS[lookup]
            except KeyError:
                raise NotSupportedError(f"Lookup `{lookup}` is not supported")

            source = record.get(self.attribute_name(field_name))

            # Records with no value never match a condition
            if source is None or not compare(source, value):
                return False

        return True

    def _matching(self, criteria: Criteria, schema: dict) -> dict:
        """Records of `schema` that meet `criteria`, in storage order"""
        if not criteria:
            return dict(schema)

        return {
            key: record
            for key, record in schema.items()
            if self._satisfies(record, criteria.included)
            and not any(self._satisfies(record, group) for group in criteria.excluded)
        }

    def _sorted(self, records: list, order_by: list) -> list:
        # Sort on the least significant key first. Sorts are stable, so records
        #   that tie on every key stay in storage (insertion) order.
        for key in reversed(order_by):
            descending = key.startswith("-")
            attribute_name = self.attribute_name(key.lstrip("-"))

            missing = [record for record in records if record.get(attribute_name) is None]
            present = sorted(
                (record for record in records if record.get(attribute_name) is not None),
                key=lambda record: record[attribute_name],
                reverse=descending,
            )

            # Missing values sort as if larger than any other
            records = missing + present if descending else present + missing

        return records

    def _filter(
        self, criteria: Criteria, offset: int = 0, limit: int = None, order_by: list = ()
    ):
        conn = self._get_session()

        records = list(self._matching(criteria, conn.data[self.schema_name]).values())
        records = self._sorted(records, order_by)

        end = None if limit is None else offset + limit
        return ResultSet(
            offset=offset,
            limit=limit,
            total=len(records),
            items=[dict(record) for record in records[offset:end]],
        )

    def _create(self, record):
        conn = self._get_session()

        with conn.lock:
            record = self._set_auto_fields(conn, dict(record))

            identifier = self._identifier(record)
            if identifier in conn.data[self.schema_name]:
                raise ValidationError(
                    {
                        "_entity": [
                            f"`{self.entity_cls.__name__}` object with identifier {identifier} "
                            f"is already present."
                        ]
                    }
                )

            conn.data[self.schema_name][identifier] = record

        return record

    def _check_exists(self, conn, identifier):
        if identifier not in conn.data[self.schema_name]:
            raise NotFoundError(
                f"`{self.entity_cls.__name__}` object with identifier {identifier} "
                f"does not exist."
            )

    def _update(self, record):
        conn = self._get_session()

        with conn.lock:
            identifier = self._identifier(record)
            self._check_exists(conn, identifier)
            conn.data[self.schema_name][identifier] = dict(record)

        return record

    def _delete(self, record):
        conn = self._get_session()

        with conn.lock:
            identifier = self._identifier(record)
            self._check_exists(conn, identifier)
            del conn.data[self.schema_name][identifier]

        return record

    def _delete_all(self, criteria: Criteria = None):
        conn = self._get_session()

        with conn.lock:
            schema = conn.data[self.schema_name]
            identifiers = list(self._matching(criteria or Criteria(), schema))

            for identifier in identifiers:
                del schema[identifier]

        return len(identifiers)
