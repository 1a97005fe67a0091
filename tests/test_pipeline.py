import numpy as np
import pytest

from eog_bridge.core.config import ConfigurationError, NodeParameters
from eog_bridge.core.data_types import Frame
from eog_bridge.processing.pipeline import EOGPipeline

from tests.conftest import LEFT, make_frame

BASE = 0x0400
PERIOD = 0.0625


def feed(pipeline, peak, now):
    pipeline.on_frame(make_frame(peak, timestamp=now))
    return pipeline.step(now)


def test_step_without_new_frame_does_nothing(params, sink):
    pipeline = EOGPipeline(params, sink)
    assert pipeline.step(1.0) is None
    assert sink.events == []


def test_end_to_end_onset_and_offset(params, sink):
    pipeline = EOGPipeline(params, sink)
    assert pipeline.frame_period_ms == pytest.approx(62.5)

    onset = feed(pipeline, 45.0, 1.000)
    assert onset.code == BASE
    assert onset.timestamp == 1.000

    t = 1.010
    while t < 3.000:
        assert feed(pipeline, 10.0, t) is None
        t += PERIOD

    offset = feed(pipeline, 10.0, 3.000)
    assert offset.code == BASE | 0x8000
    assert offset.timestamp == 3.000

    assert sink.events == [onset, offset]


def test_dropped_frame_is_not_evaluated(params, sink):
    pipeline = EOGPipeline(params, sink)

    pipeline.on_frame(make_frame(100.0, n_samples=16))

    assert pipeline.step(1.0) is None
    assert pipeline.buffer.dropped_frames == 1
    assert sink.events == []


def test_frame_is_evaluated_once(params, sink):
    pipeline = EOGPipeline(params, sink)
    pipeline.on_frame(make_frame(45.0))

    assert pipeline.step(1.0) is not None
    assert pipeline.step(5.0) is None
    assert len(sink.events) == 1


def test_peak_history_is_bounded(sink):
    pipeline = EOGPipeline(NodeParameters(buffer_size=4), sink)

    for i in range(6):
        feed(pipeline, float(i), i * PERIOD)

    assert list(pipeline.peak_history) == [2.0, 3.0, 4.0, 5.0]
    assert pipeline.last_peak == 5.0


def test_reconfigure_changes_threshold(params, sink):
    pipeline = EOGPipeline(params, sink)
    pipeline.reconfigure(threshold=50.0)

    assert feed(pipeline, 45.0, 1.0) is None
    assert feed(pipeline, 55.0, 1.1).code == BASE


def test_reconfigure_ignores_invalid_values(params, sink):
    pipeline = EOGPipeline(params, sink)

    pipeline.reconfigure(threshold=-1.0, debounce_duration=0.5)

    assert pipeline.config_port.threshold == 30.0
    assert pipeline.config_port.debounce_duration == 0.5


def test_duration_update_applies_to_running_artifact(params, sink):
    pipeline = EOGPipeline(params, sink)
    feed(pipeline, 45.0, 0.0)

    pipeline.reconfigure(debounce_duration=0.5)

    assert feed(pipeline, 0.0, 0.25) is None
    assert feed(pipeline, 0.0, 1.0).code == BASE | 0x8000
    feed(pipeline, 45.0, 3.0)
    assert feed(pipeline, 0.0, 3.5).code == BASE | 0x8000


def test_debounce_uses_monotonic_clock_and_events_use_wall_clock(params, sink):
    monotonic = iter([10.0, 12.0])
    wall = iter([1700000000.0, 1699990000.0])   # wall clock stepped backwards
    pipeline = EOGPipeline(params, sink, clock=lambda: next(monotonic),
                           wall_clock=lambda: next(wall))

    pipeline.on_frame(make_frame(45.0))
    onset = pipeline.step()
    pipeline.on_frame(make_frame(0.0))
    offset = pipeline.step()

    assert onset.timestamp == 1700000000.0
    assert offset.code == BASE | 0x8000
    assert offset.timestamp == 1699990000.0


def test_short_buffer_frame_is_dropped(params, sink):
    pipeline = EOGPipeline(params, sink)

    pipeline.on_frame(Frame(data=np.zeros(100), n_channels=16, n_samples=32, timestamp=0.0))

    assert pipeline.step(1.0) is None
    assert pipeline.buffer.dropped_frames == 1


def test_nan_frame_emits_nothing(params, sink):
    pipeline = EOGPipeline(params, sink)
    frame = make_frame(0.0)
    frame.data[2 * 16 + LEFT] = np.nan   # sample 2 of the left EOG channel

    pipeline.on_frame(frame)

    assert pipeline.step(1.0) is None
    assert sink.events == []


def test_invalid_parameters_fail_construction(sink):
    with pytest.raises(ConfigurationError):
        EOGPipeline(NodeParameters(eog_left_channel=20), sink)
