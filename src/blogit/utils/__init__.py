"""Utility module for Blogit

Definitions/declaractions in this module should be independent of other modules,
to the maximum extent possible.
"""

from __future__ import annotations

import importlib
import importlib.metadata
from datetime import UTC, datetime
from enum import Enum
from typing import Any

from blogit.exceptions import ConfigurationError


class CommentBackend(Enum):
    PERSISTED = "persisted"
    DISQUS = "disqus"
    DISABLED = "disabled"


def utcnow_func() -> datetime:
    """Return the current time in UTC with timezone information"""
    return datetime.now(UTC)


def get_version() -> str:
    return importlib.metadata.version("blogit")


def convert_str_values_to_list(value) -> list:
    if not value:
        return []
    elif isinstance(value, str):
        return [value]
    else:
        return list(value)


def import_from_full_path(full_path: str) -> Any:
    """Import a class or function from its dotted path, like `pkg.module.ClassName`"""
    module_path, _, attr_name = full_path.rpartition(".")
    if not module_path:
        raise ConfigurationError(f"`{full_path}` is not a full dotted path")

    try:
        module = importlib.import_module(module_path)
    except ModuleNotFoundError as exc:
        raise ConfigurationError(f"Could not import `{full_path}`: {exc}")

    try:
        return getattr(module, attr_name)
    except AttributeError:
        raise ConfigurationError(f"`{module_path}` does not define `{attr_name}`")


__all__ = [
    "CommentBackend",
    "convert_str_values_to_list",
    "get_version",
    "import_from_full_path",
    "utcnow_func",
]
