from __future__ import annotations


class DomainError(Exception):
    """Base for domain errors."""


class InvalidInputError(DomainError):
    """Non-positive price, tick outside the supported domain or invalid range bounds."""


class PositionNotFoundError(DomainError):
    """Requested position does not exist."""


class PositionOwnershipError(DomainError):
    """Position does not belong to the requested owner."""


class PositionQueryInputError(DomainError):
    """Invalid parameters for a position query."""
