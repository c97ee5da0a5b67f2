"""
Structured key=value logging.

TorLens logs named events (``details_fetched``, ``command_failed``) with
their context as keyword arguments. [Logger][torlens.core.logger.Logger]
attaches those arguments to the stdlib record under ``structured_kv``, and
[StructuredFormatter][torlens.core.logger.StructuredFormatter] renders them
after the message as ``key=value`` pairs.

The library never configures logging itself. The CLI installs
``StructuredFormatter`` on the root handler, so records from ``Logger`` and
from plain ``logging.getLogger()`` calls in the models and utils layers
come out in the same ``level name message key=value ...`` shape.

Examples:
    ```python
    from torlens.core.logger import Logger

    logger = Logger("torlens.api")
    logger.debug("details_fetched", relays=42, bridges=7)
    # debug torlens.api details_fetched relays=42 bridges=7
    ```
"""

import logging
from typing import Any


DEFAULT_MAX_VALUE_LENGTH = 1000


def _truncate(text: str, max_length: int | None) -> str:
    if max_length and len(text) > max_length:
        return text[:max_length] + f"...<truncated {len(text) - max_length} chars>"
    return text


def format_kv_pairs(
    kwargs: dict[str, Any],
    max_value_length: int | None = DEFAULT_MAX_VALUE_LENGTH,
    prefix: str = " ",
) -> str:
    """Render *kwargs* as space-separated ``key=value`` pairs.

    Empty values and values containing whitespace, ``=`` or quotes are
    wrapped in double quotes with backslashes and double quotes escaped.

    Args:
        kwargs: Pairs to render, in insertion order.
        max_value_length: Values longer than this are cut and marked with
            ``...<truncated N chars>``. ``None`` disables truncation.
        prefix: Prepended to a non-empty result.

    Returns:
        For example ``' relays=3 as_name="Comcast Cable"'``, or ``""`` when
        *kwargs* is empty.
    """
    if not kwargs:
        return ""

    parts = []
    for key, value in kwargs.items():
        text = _truncate(str(value), max_value_length)
        if not text or any(c in text for c in " =\"'"):
            escaped = text.replace("\\", "\\\\").replace('"', '\\"')
            parts.append(f'{key}="{escaped}"')
        else:
            parts.append(f"{key}={text}")
    return prefix + " ".join(parts)


class StructuredFormatter(logging.Formatter):
    """Render every record as ``level name message key=value ...``.

    Records without ``structured_kv`` are rendered without the pairs.
    """

    def format(self, record: logging.LogRecord) -> str:
        line = f"{record.levelname.lower()} {record.name} {record.getMessage()}"
        return line + format_kv_pairs(getattr(record, "structured_kv", {}))


class Logger:
    """Thin wrapper over ``logging.Logger`` taking event context as keywords.

    Args:
        name: Passed to ``logging.getLogger``.
        max_value_length: Values whose ``str()`` is longer are truncated
            before they are attached to the record. ``None`` means the
            default of 1000 characters.
    """

    def __init__(self, name: str, *, max_value_length: int | None = None) -> None:
        self._logger = logging.getLogger(name)
        self._max_value_length = max_value_length or DEFAULT_MAX_VALUE_LENGTH

    @property
    def name(self) -> str:
        return self._logger.name

    def _log(self, level: int, msg: str, kwargs: dict[str, Any]) -> None:
        if not self._logger.isEnabledFor(level):
            return
        structured: dict[str, Any] = {}
        for key, value in kwargs.items():
            text = str(value)
            if len(text) > self._max_value_length:
                value = _truncate(text, self._max_value_length)
            structured[key] = value
        self._logger.log(level, msg, extra={"structured_kv": structured})

    def debug(self, msg: str, **kwargs: Any) -> None:
        self._log(logging.DEBUG, msg, kwargs)

    def info(self, msg: str, **kwargs: Any) -> None:
        self._log(logging.INFO, msg, kwargs)

    def warning(self, msg: str, **kwargs: Any) -> None:
        self._log(logging.WARNING, msg, kwargs)

    def error(self, msg: str, **kwargs: Any) -> None:
        self._log(logging.ERROR, msg, kwargs)
