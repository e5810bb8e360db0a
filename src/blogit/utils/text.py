"""Text helpers for derived post values"""

from typing import Optional

import inflection

DEFAULT_OMISSION = "..."


def parameterize(text: str, separator: str = "-") -> str:
    """Turn ``text`` into a URL-safe fragment.

    Transliterates to ASCII and lowercases. Every run of characters outside
    ``[a-z0-9-]`` becomes a single separator, with no leading or trailing
    separators::

        >>> parameterize("Hello, World! Test")
        "hello-world-test"
        >>> parameterize("snake_case title")
        "snake-case-title"
    """
    # `inflection` keeps underscores, slugs should not
    return inflection.parameterize(text.replace("_", " "), separator)


def truncate(
    text: Optional[str],
    length: int = 30,
    omission: str = DEFAULT_OMISSION,
    separator: Optional[str] = None,
) -> Optional[str]:
    """Truncate ``text`` to at most ``length`` characters, ``omission`` included.

    When ``separator`` is supplied, the cut happens at the last occurrence of the
    separator that leaves room for the omission marker, if there is one.

        >>> truncate("Once upon a time in a world far far away", 17)
        "Once upon a ti..."
        >>> truncate("Once upon a time\\nin a world far far away", 27, separator="\\n")
        "Once upon a time..."
    """
    if text is None or len(text) <= length:
        return text

    stop = length - len(omission)
    if separator:
        position = text.rfind(separator, 0, stop + len(separator))
        if position != -1:
            stop = position

    return f"{text[:stop]}{omission}"
