"""Runtime execution context for the packaging pipeline."""

from __future__ import annotations

import logging
from collections.abc import Iterator, Mapping
from typing import Any

from .errors import ContextTypeError, MissingKeyError

logger = logging.getLogger(__name__)


class BuildContext[P]:
    """Runtime state passed through the target chain.

    Values are written by earlier targets and read by later ones. A key is
    never removed; writing it again replaces the previous value.
    """

    def __init__(
        self,
        target: P,
        *,
        dry_run: bool = False,
        values: Mapping[str, Any] | None = None,
    ) -> None:
        self.target = target
        self.dry_run = dry_run
        self._values: dict[str, Any] = dict(values or {})

    def get[T](self, key: str, kind: type[T] = object) -> T:  # type: ignore[assignment]
        """Return the value stored under key, checked against kind.

        Raises MissingKeyError if no target has written the key yet.
        """
        try:
            value = self._values[key]
        except KeyError:
            raise MissingKeyError(key) from None
        if not isinstance(value, kind):
            raise ContextTypeError(key, kind, value)
        return value

    def set(self, key: str, value: Any) -> None:
        logger.debug("Context '%s' = %r", key, value)
        self._values[key] = value

    def keys(self) -> set[str]:
        return set(self._values)

    def __getitem__(self, key: str) -> Any:
        return self.get(key)

    def __setitem__(self, key: str, value: Any) -> None:
        self.set(key, value)

    def __contains__(self, key: object) -> bool:
        return key in self._values

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)
