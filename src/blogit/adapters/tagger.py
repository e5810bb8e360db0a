"""Dictionary based tagger"""

import logging
from collections import defaultdict
from threading import Lock

from blogit.port.tagger import BaseTagger, parse_tag_list

logger = logging.getLogger(__name__)


class MemoryTagger(BaseTagger):
    """Tagger that keeps labels in a dictionary keyed by `(taggable_type, taggable_id)`"""

    def __init__(self, name, blog, conn_info: dict):
        super().__init__(name, blog, conn_info)

        self._taggings = defaultdict(list)
        self._lock = Lock()

    def tag(self, taggable_type, taggable_id, labels):
        with self._lock:
            taggings = self._taggings[(taggable_type, taggable_id)]
            for label in parse_tag_list(labels):
                if label not in taggings:
                    taggings.append(label)

        logger.debug(f"Tagged {taggable_type} {taggable_id} with {labels}")

    def untag(self, taggable_type, taggable_id, labels):
        with self._lock:
            key = (taggable_type, taggable_id)
            removed = parse_tag_list(labels)
            self._taggings[key] = [
                label for label in self._taggings[key] if label not in removed
            ]

    def tags_for(self, taggable_type, taggable_id):
        return list(self._taggings.get((taggable_type, taggable_id), []))

    def clear(self, taggable_type, taggable_id):
        with self._lock:
            self._taggings.pop((taggable_type, taggable_id), None)

    def _data_reset(self):
        self._taggings = defaultdict(list)
