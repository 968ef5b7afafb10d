"""Domain-specific exceptions."""


class ServiceError(Exception):
    pass


class NetworkError(ServiceError):
    """Transport failure or non-success status from a remote endpoint."""


class DecodeError(ServiceError):
    """Response body could not be turned into store items."""
