class OCMError(RuntimeError):
    """Raised when a call against the cluster manager API fails or a lookup is ambiguous."""


class ConfigurationError(OCMError):
    """Raised when the OCM configuration is missing, unreadable or invalid."""
