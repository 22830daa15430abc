from __future__ import annotations

import threading
from collections import OrderedDict
from enum import Enum
from typing import Any, Callable, Generic, Optional, TypeVar

T = TypeVar("T")


class SubmissionState(str, Enum):
    IDLE = "idle"
    IN_FLIGHT = "in_flight"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


class SubmissionTracker:
    """
    Generation counter for one workflow instance.

    Every submission gets a new token from begin(). Only the result for the
    latest token is recorded, so a slow, superseded submission cannot
    overwrite the outcome of a newer one.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._generation = 0
        self._state = SubmissionState.IDLE
        self._result: Any = None

    @property
    def state(self) -> SubmissionState:
        return self._state

    @property
    def result(self) -> Any:
        return self._result

    @property
    def generation(self) -> int:
        return self._generation

    def begin(self) -> int:
        with self._lock:
            self._generation += 1
            self._state = SubmissionState.IN_FLIGHT
            self._result = None
            return self._generation

    def finish(self, token: int, result: Any, succeeded: bool) -> bool:
        with self._lock:
            if token != self._generation:
                return False
            self._state = SubmissionState.SUCCEEDED if succeeded else SubmissionState.FAILED
            self._result = result
            return True


class WorkflowRegistry(Generic[T]):
    """Per-client workflow instances, least recently used evicted first."""

    def __init__(self, factory: Callable[[], T], max_clients: int = 256):
        self._factory = factory
        self._max_clients = max_clients
        self._items: "OrderedDict[str, T]" = OrderedDict()
        self._lock = threading.Lock()

    def get(self, client_id: Optional[str]) -> T:
        key = (client_id or "").strip() or "anonymous"
        with self._lock:
            item = self._items.get(key)
            if item is None:
                item = self._factory()
                self._items[key] = item
            self._items.move_to_end(key)
            while len(self._items) > self._max_clients:
                self._items.popitem(last=False)
            return item

    def __len__(self) -> int:
        return len(self._items)
