from __future__ import annotations


class SimpleBankError(Exception):
    """Base class for all simplebank exceptions."""


class ConstructionFailure(SimpleBankError):
    """Raised when a mapper cannot be built. Fatal at startup."""


class EncodeError(SimpleBankError):
    """Adds context for errors raised when serializing."""


class DecodeError(SimpleBankError):
    """Adds context for errors raised when deserializing."""


class MalformedPayload(DecodeError):
    """Raised when a wire value does not match the shape of its target type."""


class RegistryError(SimpleBankError):
    """Raised when a named lookup cannot be resolved."""
