from __future__ import annotations

from types import SimpleNamespace


class Options(SimpleNamespace):
    """Settings of an entity or repository class, read from its inner `Meta` class.

    Undeclared settings take the class's defaults. `abstract` is never inherited,
    and defaults to `False`.
    """


class OptionsMixin:
    """Gives each subclass its own `meta_` options"""

    def __init_subclass__(cls) -> None:
        meta = cls.__dict__.get("Meta")
        declared = {} if meta is None else {
            key: value
            for key, value in vars(meta).items()
            if not key.startswith("_") and value is not None
        }

        cls.meta_ = Options(**{"abstract": False, **dict(cls._default_options()), **declared})

        super().__init_subclass__()

    @classmethod
    def _default_options(cls) -> list[tuple[str, object]]:
        return []
