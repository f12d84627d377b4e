class ProviderError(Exception):
    """The LLM provider could not produce a response."""


class ProviderNotConfigured(ProviderError):
    """No credentials or endpoint for the selected provider."""


class CatalogError(Exception):
    """The model catalog file is missing or malformed."""
