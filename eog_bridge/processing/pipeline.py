"""
EOG artifact pipeline

Wires the frame buffer, feature extractor, artifact detector and runtime
tunables together. Frames are pushed in with on_frame() from the acquisition
thread; step() is called once per frame period by the evaluation loop.
"""

import logging
import time
from collections import deque
from typing import Callable, Optional

from ..acquisition.frame_buffer import FrameBuffer
from ..communication.event_sink import EventSink
from ..core.config import ChannelConfig, NodeParameters
from ..core.config_port import ConfigPort, InvalidParameterError
from ..core.data_types import ArtifactEvent, Frame, OcularSignals
from ..detection.eog_artifact import ArtifactDetector
from .features import FeatureExtractor


class EOGPipeline:
    """Online EOG artifact detection from frames to events"""

    def __init__(self, params: NodeParameters, sink: EventSink,
                 clock: Callable[[], float] = time.monotonic,
                 wall_clock: Callable[[], float] = time.time):
        params.validate()
        self.params = params
        self.sink = sink
        self.clock = clock
        self.wall_clock = wall_clock

        self.channel_config = ChannelConfig.from_parameters(params)
        self.buffer = FrameBuffer(self.channel_config)
        self.extractor = FeatureExtractor(self.channel_config)
        self.detector = ArtifactDetector(params.event_code)
        self.config_port = ConfigPort(params.eog_threshold, params.time_eog)

        self.peak_history = deque(maxlen=params.buffer_size)
        self.last_peak = 0.0

        logging.info(f"EOG channels: left={params.eog_left_channel} right={params.eog_right_channel}, "
                     f"threshold={params.eog_threshold}, time_eog={params.time_eog}s, "
                     f"frame period={self.frame_period_ms:.1f}ms")
        logging.info("EOG configured")

    @property
    def frame_period_ms(self) -> float:
        return self.params.frame_period_ms

    def on_frame(self, frame: Frame) -> bool:
        """Frame source callback"""
        return self.buffer.ingest(frame)

    def apply(self) -> Optional[OcularSignals]:
        """
        Extract the ocular signals of the newest unconsumed frame

        Returns:
            OcularSignals: Signals of the frame, or None if no new frame arrived
        """
        frame = self.buffer.take_if_new()
        if frame is None:
            return None

        signals = self.extractor.extract(frame)
        self.last_peak = signals.peak()
        self.peak_history.append(self.last_peak)
        return signals

    def step(self, now: Optional[float] = None) -> Optional[ArtifactEvent]:
        """
        Run one evaluation cycle and emit the resulting event, if any

        Debounce timing uses the monotonic clock; events are stamped with the
        wall clock. An explicit `now` is used for both.

        Args:
            now: Evaluation time in seconds, defaults to the pipeline clocks

        Returns:
            ArtifactEvent: Emitted event, or None
        """
        signals = self.apply()
        if signals is None:
            return None

        if now is None:
            now, stamp = self.clock(), self.wall_clock()
        else:
            stamp = now
        settings = self.config_port.snapshot()
        event = self.detector.evaluate(signals, settings.threshold, now,
                                       settings.debounce_duration, stamp)
        if event is not None:
            self.sink.emit(event)
        return event

    def reconfigure(self, threshold: Optional[float] = None,
                    debounce_duration: Optional[float] = None):
        """
        Apply a runtime update of the tunables

        Invalid values are logged and ignored, the rest of the update still
        applies.
        """
        if threshold is not None:
            try:
                if self.config_port.update_threshold(threshold):
                    logging.warning(f"Updated eog threshold to {self.config_port.threshold}")
            except InvalidParameterError as e:
                logging.error(f"Rejected eog threshold update: {e}")

        if debounce_duration is not None:
            try:
                if self.config_port.update_debounce_duration(debounce_duration):
                    logging.warning(f"Updated eog time to wait after EOG detection "
                                    f"{self.config_port.debounce_duration}")
            except InvalidParameterError as e:
                logging.error(f"Rejected eog time update: {e}")
