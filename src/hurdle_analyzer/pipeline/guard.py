"""Serialized access to a shared pose model."""

from __future__ import annotations

import threading
import weakref

from hurdle_analyzer.core.types import Frame, Pose, PoseModel

# One lock per model object, shared by every wrapper around it
_MODEL_LOCKS: weakref.WeakKeyDictionary[PoseModel, threading.Lock] = weakref.WeakKeyDictionary()
_REGISTRY_LOCK = threading.Lock()


def model_lock(model: PoseModel) -> threading.Lock:
    """Get the lock guarding calls into ``model``."""
    with _REGISTRY_LOCK:
        lock = _MODEL_LOCKS.get(model)
        if lock is None:
            lock = threading.Lock()
            _MODEL_LOCKS[model] = lock
        return lock


class SerializedPoseModel:
    """PoseModel wrapper allowing one outstanding call per model at a time.

    Pose models are not reentrant. Wrappers around the same model object
    share its lock, so separate analyzers given one model never run it
    concurrently.
    """

    def __init__(self, model: PoseModel) -> None:
        self.model = model
        self._lock = model_lock(model)

    def initialize(self) -> None:
        """Initialize the wrapped model under the lock."""
        with self._lock:
            self.model.initialize()

    def estimate(self, frame: Frame) -> list[Pose]:
        """Run inference under the lock."""
        with self._lock:
            return self.model.estimate(frame)
