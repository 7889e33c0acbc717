from typing import Any, Optional


class RestBuilderError(Exception):
    """Base exception for rest-builder errors."""
    pass


class PayloadError(RestBuilderError):
    def __init__(self, message: str, value: Any = None):
        super().__init__(message)
        self.value = value


class DeserializationError(RestBuilderError):
    def __init__(self, target: Any, cause: Exception, body: Optional[str] = None):
        name = getattr(target, "__name__", None) or repr(target)
        msg = f"Failed to deserialize response into {name}: {cause}"
        super().__init__(msg)
        self.target = target
        self.cause = cause
        self.body = body
