from .request import RequestBuilder
from .dispatcher import DispatchResult, PreparedRequest, dispatch, dispatch_request, prepare_request

__all__ = [
    "RequestBuilder",
    "DispatchResult", "PreparedRequest", "dispatch", "dispatch_request", "prepare_request",
]
