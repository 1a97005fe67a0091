"""
Frame acquisition sources

This module provides push-based frame sources for LSL streams, BrainFlow
boards (OpenBCI), and synthetic data generation for testing. Each source runs
its own reader thread and hands complete frames to a callback.
"""

import logging
import threading
import time
from typing import Callable, List, Optional
import numpy as np

from ..core.config import N_CHANNELS, N_SAMPLES, SAMPLING_FREQ
from ..core.data_types import Frame

# Optional imports with fallbacks
try:
    from brainflow.board_shim import BoardShim, BrainFlowInputParams, BoardIds
    BRAINFLOW_AVAILABLE = True
except ImportError:
    BRAINFLOW_AVAILABLE = False
    logging.warning("BrainFlow not available - use LSL or fake mode instead")

try:
    import pylsl
    LSL_AVAILABLE = True
except ImportError:
    LSL_AVAILABLE = False
    logging.warning("pylsl not available - BrainFlow and fake modes only")


FrameCallback = Callable[[Frame], None]


class FrameSource:
    """
    Base class for threaded, push-based frame sources

    Subclasses implement connect(), read_frames() and disconnect(). The reader
    thread keeps calling read_frames() and forwards every frame to the
    callback passed to start().
    """

    def __init__(self, n_channels: int = N_CHANNELS, n_samples: int = N_SAMPLES,
                 fs: float = SAMPLING_FREQ):
        self.n_channels = n_channels
        self.n_samples = n_samples
        self.fs = fs
        self.is_connected = False
        self._callback: Optional[FrameCallback] = None
        self._stop_event = threading.Event()
        self._thread: Optional[threading.Thread] = None

    def check_sampling_rate(self, expected: Optional[float]) -> bool:
        """
        Compare the device sampling rate with the configured one

        A mismatch changes the real frame period, so it is logged.

        Returns:
            bool: True if the rates agree
        """
        if expected is None or abs(float(self.fs) - float(expected)) < 1e-6:
            return True
        logging.warning(f"{type(self).__name__} sampling rate {self.fs} Hz differs from "
                        f"configured {expected} Hz")
        if self.fs > 0:
            logging.warning(f"Frame period is now {1000.0 * self.n_samples / self.fs:.1f}ms")
        return False

    def connect(self) -> bool:
        raise NotImplementedError

    def read_frames(self) -> List[Frame]:
        raise NotImplementedError

    def disconnect(self):
        self.is_connected = False

    def start(self, callback: FrameCallback) -> bool:
        """
        Connect and start forwarding frames

        Args:
            callback: Called with each frame, on the reader thread

        Returns:
            bool: True if the reader thread started
        """
        if not self.is_connected and not self.connect():
            return False
        self._callback = callback
        self._stop_event.clear()
        self._thread = threading.Thread(target=self._run, name=type(self).__name__, daemon=True)
        self._thread.start()
        return True

    def stop(self):
        """Stop the reader thread and disconnect"""
        self._stop_event.set()
        if self._thread is not None:
            self._thread.join(timeout=2.0)
            self._thread = None
        self.disconnect()

    def _run(self):
        while not self._stop_event.is_set():
            try:
                frames = self.read_frames()
            except Exception as e:
                logging.error(f"Failed to read frames: {e}")
                time.sleep(0.1)
                continue
            for frame in frames:
                self._callback(frame)


class LSLFrameSource(FrameSource):
    """Frames cut from an LSL EEG stream"""

    def __init__(self, stream_name: str = "EEG", n_samples: int = N_SAMPLES,
                 sampling_freq: Optional[float] = SAMPLING_FREQ, timeout: float = 5.0):
        super().__init__(n_samples=n_samples)
        self.sampling_freq = sampling_freq
        self.stream_name = stream_name
        self.timeout = timeout
        self.inlet = None
        self._pending = np.empty((0, 0))

    def connect(self) -> bool:
        if not LSL_AVAILABLE:
            logging.error("pylsl not available. Install with: pip install pylsl")
            return False

        try:
            logging.info(f"Looking for LSL stream: {self.stream_name}")
            streams = pylsl.resolve_byprop('name', self.stream_name, timeout=self.timeout)

            if not streams:
                # Try generic EEG type
                streams = pylsl.resolve_byprop('type', 'EEG', timeout=self.timeout)

            if not streams:
                logging.error("No LSL EEG streams found")
                return False

            stream_info = streams[0]
            self.inlet = pylsl.StreamInlet(stream_info)
            self.fs = stream_info.nominal_srate()
            self.n_channels = stream_info.channel_count()
            self._pending = np.empty((0, self.n_channels))

            logging.info(f"Connected to LSL stream: {stream_info.name()}")
            logging.info(f"Channels: {self.n_channels}, Sample rate: {self.fs} Hz")
            self.check_sampling_rate(self.sampling_freq)

            self.is_connected = True
            return True

        except Exception as e:
            logging.error(f"LSL connection failed: {e}")
            return False

    def read_frames(self) -> List[Frame]:
        samples, _ = self.inlet.pull_chunk(timeout=1.0)
        if not samples:
            return []

        # Chunks are (samples x channels), so row-major flattening is interleaved
        self._pending = np.vstack([self._pending, np.asarray(samples, dtype=np.float64)])
        frames = []
        while self._pending.shape[0] >= self.n_samples:
            block = self._pending[:self.n_samples]
            self._pending = self._pending[self.n_samples:]
            frames.append(Frame(data=block.ravel(), n_channels=block.shape[1],
                                n_samples=self.n_samples, timestamp=time.time()))
        return frames

    def disconnect(self):
        try:
            if self.inlet is not None:
                self.inlet.close_stream()
                logging.info("LSL disconnected")
        except Exception as e:
            logging.error(f"Disconnect error: {e}")
        finally:
            self.is_connected = False


class BrainFlowFrameSource(FrameSource):
    """Frames read from an OpenBCI board through BrainFlow"""

    def __init__(self, serial_port: str = "", board: str = "cyton-daisy",
                 n_samples: int = N_SAMPLES, sampling_freq: Optional[float] = SAMPLING_FREQ):
        super().__init__(n_samples=n_samples)
        self.sampling_freq = sampling_freq
        self.serial_port = serial_port
        self.board_name = board
        self.board = None
        self.eeg_channels = []

    def _board_id(self):
        return {
            "cyton": BoardIds.CYTON_BOARD,
            "cyton-daisy": BoardIds.CYTON_DAISY_BOARD,
            "synthetic": BoardIds.SYNTHETIC_BOARD,
        }[self.board_name]

    def connect(self) -> bool:
        if not BRAINFLOW_AVAILABLE:
            logging.error("BrainFlow not available. Install with: pip install brainflow")
            return False

        try:
            params = BrainFlowInputParams()
            params.serial_port = self.serial_port

            board_id = self._board_id()
            self.board = BoardShim(board_id, params)
            self.eeg_channels = BoardShim.get_eeg_channels(board_id)
            self.fs = BoardShim.get_sampling_rate(board_id)
            self.n_channels = len(self.eeg_channels)

            logging.info(f"BrainFlow EEG channels: {self.eeg_channels}")
            logging.info(f"Sampling rate: {self.fs} Hz")
            self.check_sampling_rate(self.sampling_freq)

            self.board.prepare_session()
            self.board.start_stream()

            self.is_connected = True
            logging.info(f"Connected to {self.board_name} on {self.serial_port or 'default port'}")
            return True

        except Exception as e:
            logging.error(f"BrainFlow connection failed: {e}")
            logging.error("Hint: Check serial port, ensure board is on, and no other software is using it")
            return False

    def read_frames(self) -> List[Frame]:
        if self.board.get_board_data_count() < self.n_samples:
            time.sleep(0.5 * self.n_samples / self.fs)
            return []

        frames = []
        while self.board.get_board_data_count() >= self.n_samples:
            data = self.board.get_board_data(self.n_samples)
            frames.append(Frame.from_matrix(data[self.eeg_channels, :], time.time()))
        return frames

    def disconnect(self):
        try:
            if self.board is not None:
                self.board.stop_stream()
                self.board.release_session()
                logging.info("BrainFlow disconnected")
        except Exception as e:
            logging.error(f"Disconnect error: {e}")
        finally:
            self.is_connected = False


class FakeFrameSource(FrameSource):
    """
    Generate synthetic frames with periodic eye movements

    Background activity is Gaussian noise. Every `movement_interval` seconds a
    saccade-like step of `movement_amplitude` is added to the left EOG channel
    for `movement_duration` seconds, which drives HEOG and VEOG past the
    default threshold.
    """

    def __init__(self, n_channels: int = N_CHANNELS, n_samples: int = N_SAMPLES,
                 fs: float = SAMPLING_FREQ, left_index: int = 11,
                 noise_std: float = 3.0, movement_amplitude: float = 80.0,
                 movement_interval: float = 6.0, movement_duration: float = 0.4,
                 seed: Optional[int] = None):
        super().__init__(n_channels, n_samples, fs)
        self.left_index = left_index
        self.noise_std = noise_std
        self.movement_amplitude = movement_amplitude
        self.movement_interval = movement_interval
        self.movement_duration = movement_duration
        self.time = 0.0
        self.rng = np.random.default_rng(seed)

    def connect(self) -> bool:
        self.is_connected = True
        return True

    def generate_frame(self, timestamp: float) -> Frame:
        """
        Generate the next synthetic frame

        Args:
            timestamp: Timestamp attached to the frame

        Returns:
            Frame: Synthetic frame of the configured geometry
        """
        t = self.time + np.arange(self.n_samples) / self.fs
        data = self.rng.normal(0.0, self.noise_std, size=(self.n_channels, self.n_samples))

        in_movement = np.mod(t, self.movement_interval) < self.movement_duration
        data[self.left_index, in_movement] += self.movement_amplitude

        self.time += self.n_samples / self.fs
        return Frame.from_matrix(data.astype(np.float32), timestamp)

    def read_frames(self) -> List[Frame]:
        time.sleep(self.n_samples / self.fs)
        return [self.generate_frame(time.time())]
