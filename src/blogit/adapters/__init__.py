"""Adapters for the storage and tagging ports"""

from .memory import MemoryProvider
from .tagger import MemoryTagger

PROVIDERS = {
    "memory": "blogit.adapters.memory.MemoryProvider",
}

TAGGERS = {
    "memory": "blogit.adapters.tagger.MemoryTagger",
}

__all__ = ["MemoryProvider", "MemoryTagger", "PROVIDERS", "TAGGERS"]
