"""
Delivery layer: session orchestration, persistence and the terminal front end.
"""

from .session import CaptureMode, CaptureResult, CaptureStatus, SessionCoordinator, SessionState
from .state_store import InMemoryStore, JsonFileStore, KeyValueStore, SqlStore, StateRepository, build_store

__all__ = [
    "SessionCoordinator",
    "SessionState",
    "CaptureMode",
    "CaptureResult",
    "CaptureStatus",
    "KeyValueStore",
    "InMemoryStore",
    "JsonFileStore",
    "SqlStore",
    "StateRepository",
    "build_store",
]
