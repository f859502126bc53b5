"""Domain-level exceptions.

Every failure the stores surface is a subclass of DomainException so the
CLI layer can catch them uniformly and display user-friendly messages.
"""


class DomainException(Exception):
    """Base class for all domain errors."""


class ValidationError(DomainException):
    """Caller input is missing or invalid."""


class GatewayError(DomainException):
    """The remote catalog failed in a way the client cannot classify further."""


class EntityNotFoundError(GatewayError):
    """A requested entity does not exist server-side."""


class NetworkError(GatewayError):
    """The remote catalog could not be reached (connection, timeout)."""


class AuthorizationError(GatewayError):
    """The session is missing, expired or lacks the required role."""
