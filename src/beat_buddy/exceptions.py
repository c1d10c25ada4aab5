"""Custom exceptions for Beat Buddy."""


class CommunicationError(Exception):
    """Raised when a conversation turn fails for any reason."""

    pass


class UnknownFunctionError(ValueError):
    """Raised when a function name is not part of the function catalog."""

    pass


class MalformedFunctionArgumentsError(ValueError):
    """Raised when function call arguments cannot be parsed or violate the schema."""

    pass


class BackendOperationError(Exception):
    """Raised when a Music Backend operation fails."""

    pass
