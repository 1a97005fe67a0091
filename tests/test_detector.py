import numpy as np

from eog_bridge.core.data_types import DetectorState, OcularSignals
from eog_bridge.detection.eog_artifact import ArtifactDetector

BASE = 0x0400


def signals(peak):
    heog = np.zeros(32)
    heog[5] = peak
    return OcularSignals(heog=heog, veog=heog / 2.0)


def test_starts_idle():
    detector = ArtifactDetector(BASE)
    assert detector.state is DetectorState.IDLE
    assert detector.onset_time is None


def test_below_threshold_produces_nothing():
    detector = ArtifactDetector(BASE)
    assert detector.evaluate(signals(29.9), 30.0, 1.0, 2.0) is None
    assert not detector.is_active


def test_onset_at_threshold():
    detector = ArtifactDetector(BASE)

    event = detector.evaluate(signals(30.0), 30.0, 1.0, 2.0)

    assert event.code == BASE
    assert event.timestamp == 1.0
    assert not event.is_offset
    assert detector.is_active
    assert detector.onset_time == 1.0


def test_negative_peak_counts():
    detector = ArtifactDetector(BASE)
    assert detector.evaluate(signals(-45.0), 30.0, 1.0, 2.0) is not None


def test_onset_is_not_repeated_while_active():
    detector = ArtifactDetector(BASE)
    detector.evaluate(signals(50.0), 30.0, 1.0, 2.0)

    for now in np.arange(1.1, 2.9, 0.1):
        assert detector.evaluate(signals(50.0), 30.0, now, 2.0) is None
    assert detector.onset_time == 1.0


def test_offset_respects_debounce_boundary():
    detector = ArtifactDetector(BASE)
    detector.evaluate(signals(50.0), 30.0, 10.0, 2.0)

    assert detector.evaluate(signals(0.0), 30.0, 12.0 - 1e-6, 2.0) is None
    event = detector.evaluate(signals(0.0), 30.0, 12.0, 2.0)

    assert event.code == BASE | 0x8000
    assert event.is_offset
    assert event.base_code == BASE
    assert detector.state is DetectorState.IDLE
    assert detector.evaluate(signals(0.0), 30.0, 12.5, 2.0) is None


def test_crossing_at_offset_time_emits_offset_only():
    detector = ArtifactDetector(BASE)
    detector.evaluate(signals(50.0), 30.0, 0.0, 2.0)

    event = detector.evaluate(signals(50.0), 30.0, 2.0, 2.0)
    assert event.is_offset

    # Next cycle starts a new artifact
    event = detector.evaluate(signals(50.0), 30.0, 2.0625, 2.0)
    assert event.code == BASE
    assert detector.onset_time == 2.0625


def test_zero_length_debounce_never_emits_both_in_one_call():
    detector = ArtifactDetector(BASE)
    assert not detector.evaluate(signals(50.0), 30.0, 0.0, 1e-9).is_offset
    assert detector.evaluate(signals(50.0), 30.0, 0.1, 1e-9).is_offset


def test_debounce_change_applies_to_running_artifact():
    detector = ArtifactDetector(BASE)
    detector.evaluate(signals(50.0), 30.0, 0.0, 2.0)

    assert detector.evaluate(signals(0.0), 30.0, 0.4, 0.5) is None
    event = detector.evaluate(signals(0.0), 30.0, 1.0, 0.5)
    assert event.is_offset
    assert event.timestamp == 1.0


def test_longer_debounce_delays_running_artifact():
    detector = ArtifactDetector(BASE)
    detector.evaluate(signals(50.0), 30.0, 0.0, 2.0)

    assert detector.evaluate(signals(0.0), 30.0, 2.5, 3.0) is None
    assert detector.evaluate(signals(0.0), 30.0, 3.0, 3.0).is_offset


def test_nan_frame_does_not_start_artifact():
    detector = ArtifactDetector(BASE)
    heog = np.zeros(32)
    heog[3] = np.nan

    assert detector.evaluate(OcularSignals(heog=heog, veog=heog / 2.0), 30.0, 0.0, 2.0) is None
    assert detector.state is DetectorState.IDLE


def test_event_stamp_is_separate_from_evaluation_time():
    detector = ArtifactDetector(BASE)

    onset = detector.evaluate(signals(50.0), 30.0, 100.0, 2.0, stamp=1700000000.0)
    offset = detector.evaluate(signals(0.0), 30.0, 102.0, 2.0, stamp=1700000002.0)

    assert onset.timestamp == 1700000000.0
    assert detector.onset_time is None
    assert offset.timestamp == 1700000002.0


def test_reset_returns_to_idle_without_event():
    detector = ArtifactDetector(BASE)
    detector.evaluate(signals(50.0), 30.0, 0.0, 2.0)
    detector.reset()
    assert detector.state is DetectorState.IDLE
    assert detector.onset_time is None
