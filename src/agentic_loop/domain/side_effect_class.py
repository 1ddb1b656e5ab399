"""Side-effect classifications for retry safety."""

from enum import Enum


class SideEffectClass(str, Enum):
    """Allowed side-effect classes for tools."""

    NONE = "none"
    IDEMPOTENT = "idempotent"
    NON_IDEMPOTENT = "non_idempotent"

    @classmethod
    def normalize(cls, value: "SideEffectClass | str | None") -> "SideEffectClass":
        """Normalize a side-effect class value.

        Unknown values are treated as "non_idempotent".
        """

        if isinstance(value, SideEffectClass):
            return value
        normalized = (value or "").strip().lower()
        for member in cls:
            if member.value == normalized:
                return member
        return cls.NON_IDEMPOTENT

    @property
    def retry_safe(self) -> bool:
        """Return True when repeated execution has no additional side effect."""

        return self in (SideEffectClass.NONE, SideEffectClass.IDEMPOTENT)
