"""
EOG artifact onset/offset detection

This module turns the per-frame ocular signals into discrete artifact events.
A threshold crossing starts an artifact; the artifact ends once a minimum
duration has elapsed since its onset, whatever the signal does meanwhile.
"""

import logging
from typing import Optional

from ..core.config import EOG_EVENT_CODE
from ..core.data_types import ArtifactEvent, DetectorState, OcularSignals


class ArtifactDetector:
    """
    Two-state (IDLE/ACTIVE) artifact detector with debouncing

    The onset time is fixed when the artifact starts; the debounce duration is
    read on every check, so a runtime update also applies to an active
    artifact. Repeated crossings while ACTIVE neither emit a new onset nor
    extend the artifact. A frame whose peak is NaN never starts an artifact.
    """

    def __init__(self, event_code: int = EOG_EVENT_CODE):
        self.event_code = event_code
        self._state = DetectorState.IDLE
        self._onset_time: Optional[float] = None

    @property
    def state(self) -> DetectorState:
        return self._state

    @property
    def is_active(self) -> bool:
        return self._state is DetectorState.ACTIVE

    @property
    def onset_time(self) -> Optional[float]:
        return self._onset_time

    def reset(self):
        """Drop any active artifact without emitting an offset"""
        self._state = DetectorState.IDLE
        self._onset_time = None

    def evaluate(self, signals: OcularSignals, threshold: float, now: float,
                 debounce_duration: float,
                 stamp: Optional[float] = None) -> Optional[ArtifactEvent]:
        """
        Advance the state machine by one frame

        Args:
            signals: HEOG/VEOG of the current frame
            threshold: Peak amplitude that starts an artifact
            now: Current time (seconds)
            debounce_duration: Minimum artifact duration (seconds)
            stamp: Event timestamp, defaults to now

        Returns:
            ArtifactEvent: Onset or offset event, or None if nothing changed
        """
        if stamp is None:
            stamp = now

        if self._state is DetectorState.IDLE:
            peak = signals.peak()
            if not peak >= threshold:
                return None
            self._state = DetectorState.ACTIVE
            self._onset_time = now
            logging.debug(f"EOG detected: peak {peak:.2f} >= {threshold:.2f}")
            return ArtifactEvent.onset(stamp, self.event_code)

        if now - self._onset_time >= debounce_duration:
            logging.debug(f"EOG finished after {now - self._onset_time:.3f}s")
            self.reset()
            return ArtifactEvent.offset(stamp, self.event_code)

        return None
