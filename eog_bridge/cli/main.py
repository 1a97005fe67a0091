"""
Main CLI entry point for EOG Bridge

This module provides the command-line interface and the real-time evaluation
loop of the EOG artifact node.
"""

import argparse
import logging
import signal
import sys
import time
from threading import Event
from typing import List, Optional

from ..core.config import *
from ..acquisition.sources import FrameSource, LSLFrameSource, BrainFlowFrameSource, FakeFrameSource
from ..communication.event_sink import EventSink, LoggingEventSink, UDPEventSink
from ..communication.reconfigure_receiver import ReconfigureReceiver
from ..processing.pipeline import EOGPipeline


class FanOutSink(EventSink):
    """Forward every event to several sinks"""

    def __init__(self, sinks: List[EventSink]):
        self.sinks = sinks

    def emit(self, event) -> bool:
        return all([sink.emit(event) for sink in self.sinks])

    def close(self):
        for sink in self.sinks:
            sink.close()


def run_realtime_processing(pipeline: EOGPipeline, source: FrameSource,
                            duration: Optional[float] = None) -> None:
    """
    Main real-time evaluation loop

    Frames are pushed into the pipeline by the source thread while this loop
    evaluates once per frame period until a shutdown signal arrives.
    """
    logging.info("Starting real-time processing...")

    status_interval = 2.0  # Print status every 2 seconds
    last_status_time = 0.0
    period = pipeline.frame_period_ms / 1000.0

    # Graceful shutdown handler
    shutdown_event = Event()
    def signal_handler(signum, frame):
        logging.info("Shutdown signal received")
        shutdown_event.set()

    signal.signal(signal.SIGINT, signal_handler)
    signal.signal(signal.SIGTERM, signal_handler)

    if not source.start(pipeline.on_frame):
        logging.error("Failed to start frame source")
        return

    start_time = time.time()
    next_tick = time.monotonic()
    try:
        logging.info("Real-time processing started. Press Ctrl+C to stop.")

        while not shutdown_event.is_set():
            current_time = time.time()
            if duration is not None and current_time - start_time >= duration:
                break

            try:
                pipeline.step()
            except Exception as e:
                logging.error(f"Evaluation failed: {e}")

            if current_time - last_status_time > status_interval:
                print(f"State: {pipeline.detector.state.value:>6} | Peak: {pipeline.last_peak:7.2f} | "
                      f"Threshold: {pipeline.config_port.threshold:.2f} | "
                      f"Frames: {pipeline.buffer.accepted_frames} ok / {pipeline.buffer.dropped_frames} dropped")
                last_status_time = current_time

            next_tick += period
            delay = next_tick - time.monotonic()
            if delay > 0:
                time.sleep(delay)
            else:
                next_tick = time.monotonic()

    except Exception as e:
        logging.error(f"Processing error: {e}")
    finally:
        source.stop()
        logging.info("Real-time processing stopped")


def create_parser() -> argparse.ArgumentParser:
    """Create command line argument parser"""
    parser = argparse.ArgumentParser(
        description="EOG Bridge - Online ocular artifact detection",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Test with synthetic data
  python -m eog_bridge --fake

  # Read an LSL stream, publish events to another host
  python -m eog_bridge --source lsl --lsl-stream EEG --udp-host 192.168.1.20

  # Load parameters from a JSON file and listen for runtime updates
  python -m eog_bridge --source brainflow --serial-port /dev/ttyUSB0 --params eog.json --reconfig-port 5006
        """
    )

    # Data source options
    parser.add_argument("--source", choices=["brainflow", "lsl"], default="brainflow",
                       help="EEG data source (default: brainflow)")
    parser.add_argument("--fake", action="store_true",
                       help="Use synthetic frames for testing")
    parser.add_argument("--board", choices=["cyton", "cyton-daisy", "synthetic"], default="cyton-daisy",
                       help="BrainFlow board (default: cyton-daisy)")
    parser.add_argument("--serial-port", default="",
                       help="Serial port for BrainFlow")
    parser.add_argument("--lsl-stream", default="EEG",
                       help="LSL stream name (default: EEG)")

    # Node parameters, override --params values
    parser.add_argument("--params",
                       help="JSON file with node parameters")
    parser.add_argument("--n-channels", type=int,
                       help=f"Channels per frame (default: {N_CHANNELS})")
    parser.add_argument("--n-samples", type=int,
                       help=f"Samples per frame (default: {N_SAMPLES})")
    parser.add_argument("--sampling-freq", type=int,
                       help=f"Sampling frequency (default: {SAMPLING_FREQ})")
    parser.add_argument("--buffer-size", type=int,
                       help=f"Peak history length (default: {BUFFER_SIZE})")
    parser.add_argument("--threshold", type=float, dest="eog_threshold",
                       help=f"EOG threshold (default: {EOG_THRESHOLD})")
    parser.add_argument("--time-eog", type=float,
                       help=f"Minimum artifact duration in seconds (default: {TIME_EOG})")
    parser.add_argument("--left-channel", type=int, dest="eog_left_channel",
                       help=f"Left EOG channel, 1-based (default: {EOG_LEFT_CHANNEL})")
    parser.add_argument("--right-channel", type=int, dest="eog_right_channel",
                       help=f"Right EOG channel, 1-based (default: {EOG_RIGHT_CHANNEL})")
    parser.add_argument("--event-code", type=lambda v: int(v, 0),
                       help=f"Base event code (default: 0x{EOG_EVENT_CODE:04x})")

    # Communication options
    parser.add_argument("--udp-host", default=UDP_HOST,
                       help=f"Event bus UDP host (default: {UDP_HOST})")
    parser.add_argument("--udp-port", type=int, default=UDP_PORT,
                       help=f"Event bus UDP port (default: {UDP_PORT})")
    parser.add_argument("--reconfig-port", type=int,
                       help="UDP port for runtime threshold/time updates (disabled by default)")

    parser.add_argument("--duration", type=float,
                       help="Stop after this many seconds")

    # Logging
    parser.add_argument("--verbose", "-v", action="store_true",
                       help="Enable verbose logging")

    return parser


PARAMETER_FLAGS = ("n_channels", "n_samples", "sampling_freq", "buffer_size", "eog_threshold",
                   "time_eog", "eog_left_channel", "eog_right_channel", "event_code")


def build_parameters(args: argparse.Namespace) -> NodeParameters:
    """Merge defaults, the --params file and explicit flags"""
    params = load_parameters(args.params) if args.params else NodeParameters()
    for name in PARAMETER_FLAGS:
        value = getattr(args, name)
        if value is not None:
            setattr(params, name, value)
    return params.validate()


def create_source(args: argparse.Namespace, params: NodeParameters) -> FrameSource:
    if args.fake:
        logging.info("Using synthetic frames")
        return FakeFrameSource(params.n_channels, params.n_samples, params.sampling_freq,
                               left_index=params.eog_left_channel - 1)
    if args.source == "lsl":
        return LSLFrameSource(args.lsl_stream, n_samples=params.n_samples,
                             sampling_freq=params.sampling_freq)
    return BrainFlowFrameSource(args.serial_port, args.board, n_samples=params.n_samples,
                                sampling_freq=params.sampling_freq)


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point"""
    parser = create_parser()
    args = parser.parse_args(argv)

    # Setup logging
    log_level = logging.DEBUG if args.verbose else logging.INFO
    logging.basicConfig(
        level=log_level,
        format='%(asctime)s - %(levelname)s - %(message)s',
        datefmt='%H:%M:%S'
    )

    print("="*60)
    print("EOG Bridge - Online Ocular Artifact Detection")
    print("="*60)

    try:
        params = build_parameters(args)
    except (OSError, ValueError) as e:
        logging.error(f"Invalid configuration: {e}")
        return 1

    sink = FanOutSink([LoggingEventSink(), UDPEventSink(args.udp_host, args.udp_port)])
    receiver = None
    try:
        pipeline = EOGPipeline(params, sink)
        source = create_source(args, params)

        if args.reconfig_port is not None:
            receiver = ReconfigureReceiver(pipeline.reconfigure, port=args.reconfig_port)
            receiver.start()

        run_realtime_processing(pipeline, source, args.duration)
        return 0

    except KeyboardInterrupt:
        logging.info("Interrupted by user")
        return 0
    except Exception as e:
        logging.error(f"Unexpected error: {e}")
        return 1
    finally:
        if receiver is not None:
            receiver.stop()
        sink.close()


if __name__ == "__main__":
    sys.exit(main())
