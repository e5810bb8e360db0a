"""Base class for Taggers"""

from abc import ABCMeta, abstractmethod
from typing import Iterable, Union


def parse_tag_list(value: Union[str, Iterable[str], None]) -> list[str]:
    """Normalize tag input into a list of labels.

    Accepts a comma-separated string or an iterable of strings. Labels are
    trimmed, blanks are dropped and duplicates are removed, keeping the first
    occurrence::

        >>> parse_tag_list(" ruby, python,,ruby ")
        ["ruby", "python"]
    """
    if not value:
        return []

    if isinstance(value, str):
        value = value.split(",")

    labels = []
    for label in value:
        label = str(label).strip()
        if label and label not in labels:
            labels.append(label)

    return labels


class BaseTagger(metaclass=ABCMeta):
    """Tagging collaborator. Keeps string labels against taggable records.

    Records are identified by a type name and an identifier. The tagger owns the tag
    vocabulary; records only own their association with it.
    """

    def __init__(self, name, blog, conn_info: dict):
        self.name = name
        self.blog = blog
        self.conn_info = conn_info

    @abstractmethod
    def tag(self, taggable_type: str, taggable_id, labels: list[str]) -> None:
        """Attach labels to a record. Labels already attached are ignored."""

    @abstractmethod
    def untag(self, taggable_type: str, taggable_id, labels: list[str]) -> None:
        """Detach labels from a record. Unknown labels are ignored."""

    @abstractmethod
    def tags_for(self, taggable_type: str, taggable_id) -> list[str]:
        """Return the labels attached to a record, in the order they were attached"""

    @abstractmethod
    def clear(self, taggable_type: str, taggable_id) -> None:
        """Detach all labels from a record"""

    @abstractmethod
    def _data_reset(self):
        """Flush all data. Meant for tests."""
