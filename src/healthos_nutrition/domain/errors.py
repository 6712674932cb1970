"""Error taxonomy for nutrition resolution."""


class NutritionError(Exception):
    """Base class for errors raised by the nutrition engine."""


class ConfigurationError(NutritionError):
    """A required external credential or setting is missing."""


class ValidationError(NutritionError):
    """Malformed query, portion, or catalog input."""


class StoreError(NutritionError):
    """The personal catalog or food log store failed."""


class CatalogEntryNotFound(NutritionError):
    """No catalog entry exists for the requested id."""


class ProviderError(NutritionError):
    """Failure talking to an external nutrition provider."""

    def __init__(self, provider: str, message: str) -> None:
        super().__init__(f"{provider}: {message}")
        self.provider = provider


class ProviderTransientError(ProviderError):
    """Rate-limited or server-side failure that survived the retry budget."""

    def __init__(self, provider: str, status_code: int) -> None:
        super().__init__(provider, f"HTTP {status_code} after retry")
        self.status_code = status_code
