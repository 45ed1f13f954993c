from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional


class LoadStatus(str, Enum):
    NOT_LOADED = "not_loaded"
    LOADED = "loaded"
    FAILED = "failed"


@dataclass(frozen=True)
class Loadable:
    """
    Result of a fetch as rendered by the screen.

    `value` always holds something displayable (the empty default when the
    data is not loaded or the load failed), so callers never branch on None.
    """
    status: LoadStatus
    value: Any
    error: Optional[str] = None

    @classmethod
    def not_loaded(cls, empty: Any = None) -> "Loadable":
        return cls(LoadStatus.NOT_LOADED, empty)

    @classmethod
    def loaded(cls, value: Any) -> "Loadable":
        return cls(LoadStatus.LOADED, value)

    @classmethod
    def failed(cls, error: str, empty: Any = None) -> "Loadable":
        return cls(LoadStatus.FAILED, empty, error)

    @property
    def is_loaded(self) -> bool:
        return self.status is LoadStatus.LOADED

    @property
    def is_failed(self) -> bool:
        return self.status is LoadStatus.FAILED

    @property
    def is_empty(self) -> bool:
        return not self.value

    def with_value(self, value: Any) -> "Loadable":
        return Loadable(self.status, value, self.error)
