from .state import PendingRequest
from .state import RequestKind
from .state import SessionState

__all__ = [
    "PendingRequest",
    "RequestKind",
    "SessionState",
]
