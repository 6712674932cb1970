"""Typed outcome of a provider call."""

from dataclasses import dataclass
from typing import Generic, TypeVar

from healthos_nutrition.domain.errors import ProviderError

T = TypeVar("T")


@dataclass(frozen=True)
class ProviderResult(Generic[T]):
    """Either a provider value or the error that prevented it."""

    value: T | None = None
    error: ProviderError | None = None

    @classmethod
    def success(cls, value: T) -> "ProviderResult[T]":
        """Wrap a successful value."""
        return cls(value=value)

    @classmethod
    def failure(cls, error: ProviderError) -> "ProviderResult[T]":
        """Wrap a provider error."""
        return cls(error=error)

    @property
    def ok(self) -> bool:
        """True when the provider call succeeded."""
        return self.error is None

    def unwrap_or(self, default: T) -> T:
        """Return the value, or ``default`` when the call failed or was empty."""
        if self.error is not None or self.value is None:
            return default
        return self.value
