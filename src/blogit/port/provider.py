"""Base class for Providers"""

from abc import ABCMeta, abstractmethod


class BaseProvider(metaclass=ABCMeta):
    """A storage backend configured under `databases` in the blog's configuration.

    Providers hand out connections and build one DAO per entity class. Concurrency
    control (locking, isolation) belongs to the provider. Callers only issue reads
    and writes.

    :param name: the database name in configuration, like `default`.
    :param blog: the blog the provider serves.
    :param conn_info: the database's configuration section.
    """

    def __init__(self, name, blog, conn_info: dict):
        self.name = name
        self.blog = blog
        self.conn_info = conn_info

    @abstractmethod
    def get_connection(self):
        """Get the connection object for the repository"""

    @abstractmethod
    def get_dao(self, entity_cls):
        """Return a DAO object configured with a live connection"""

    @abstractmethod
    def _data_reset(self):
        """Flush all data. Meant for tests."""
