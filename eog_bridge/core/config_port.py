"""
Runtime tunables of the EOG detector

The threshold and debounce duration can change while the node runs. They are
kept as an immutable snapshot that is replaced under a lock, so each
evaluation cycle reads one consistent version.
"""

import math
import threading

from .config import UPDATE_EPSILON
from .data_types import DetectorSettings


class InvalidParameterError(ValueError):
    """Raised when a runtime update carries an unusable value"""


def _check_positive(name: str, value: float) -> float:
    value = float(value)
    if not math.isfinite(value) or value <= 0:
        raise InvalidParameterError(f"{name} must be a positive number, got {value}")
    return value


class ConfigPort:
    """Holds the current DetectorSettings and applies epsilon-gated updates"""

    def __init__(self, threshold: float, debounce_duration: float,
                 epsilon: float = UPDATE_EPSILON):
        self.epsilon = epsilon
        self._lock = threading.Lock()
        self._settings = DetectorSettings(
            threshold=_check_positive("threshold", threshold),
            debounce_duration=_check_positive("debounce_duration", debounce_duration),
        )

    def snapshot(self) -> DetectorSettings:
        with self._lock:
            return self._settings

    @property
    def threshold(self) -> float:
        return self.snapshot().threshold

    @property
    def debounce_duration(self) -> float:
        return self.snapshot().debounce_duration

    def _update(self, name: str, value: float) -> bool:
        value = _check_positive(name, value)
        with self._lock:
            current = getattr(self._settings, name)
            if abs(value - current) < self.epsilon:
                return False
            if name == "threshold":
                self._settings = DetectorSettings(value, self._settings.debounce_duration)
            else:
                self._settings = DetectorSettings(self._settings.threshold, value)
            return True

    def update_threshold(self, value: float) -> bool:
        """
        Replace the threshold if it moved by at least epsilon

        Returns:
            bool: True if the stored value changed
        """
        return self._update("threshold", value)

    def update_debounce_duration(self, value: float) -> bool:
        """
        Replace the debounce duration (seconds) if it moved by at least epsilon

        Returns:
            bool: True if the stored value changed
        """
        return self._update("debounce_duration", value)
