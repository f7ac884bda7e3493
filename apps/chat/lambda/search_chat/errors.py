"""Domain-level exceptions for the search chat API."""


class ChatError(Exception):
    """Base class for failures raised while answering a chat request."""


class ConfigurationError(ChatError):
    """Raised when the requested provider/model cannot be resolved."""


class RequestValidationError(ChatError, ValueError):
    """Raised for client-side invalid requests at the domain layer."""


class AdapterError(ChatError):
    """Raised by a search backend adapter on upstream failure."""


class GenerationError(ChatError):
    """Raised when an LLM generation call fails."""


class SinkClosedError(ChatError):
    """Raised when writing to an output sink the remote peer already closed."""
