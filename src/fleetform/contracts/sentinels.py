"""Sentinel values shared across modules."""

from typing import Final


class _MissingSentinel:
    """Sentinel to distinguish an absent default from a default of None."""

    _instance: "_MissingSentinel | None" = None

    def __new__(cls) -> "_MissingSentinel":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "MISSING"

    def __bool__(self) -> bool:
        return False

    def __copy__(self) -> "_MissingSentinel":
        return self

    def __deepcopy__(self, memo: dict[int, object]) -> "_MissingSentinel":
        return self


MISSING: Final = _MissingSentinel()
