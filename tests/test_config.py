import json
import math

import pytest

from eog_bridge.core.config import ConfigurationError, NodeParameters, load_parameters
from eog_bridge.core.config_port import ConfigPort, InvalidParameterError


def test_defaults():
    params = NodeParameters().validate()
    assert params.buffer_size == 512
    assert params.time_eog == 2.0
    assert params.n_channels == 16
    assert params.n_samples == 32
    assert params.sampling_freq == 512
    assert params.eog_threshold == 30.0
    assert (params.eog_left_channel, params.eog_right_channel) == (12, 16)


def test_frame_period():
    assert NodeParameters().frame_period_ms == pytest.approx(62.5)
    assert NodeParameters(n_samples=16, sampling_freq=256).frame_period_ms == pytest.approx(62.5)


@pytest.mark.parametrize("overrides", [
    {"eog_threshold": 0.0},
    {"eog_threshold": -5.0},
    {"time_eog": 0.0},
    {"time_eog": math.nan},
    {"n_samples": 0},
    {"eog_right_channel": 17},
    {"event_code": 0x8000},
])
def test_invalid_parameters_are_rejected(overrides):
    with pytest.raises(ConfigurationError):
        NodeParameters(**overrides).validate()


def test_load_parameters_from_json(tmp_path):
    path = tmp_path / "eog.json"
    path.write_text(json.dumps({"eog_threshold": 45.0, "time_eog": 1.5, "unknown": 1}))

    params = load_parameters(str(path))

    assert params.eog_threshold == 45.0
    assert params.time_eog == 1.5
    assert params.n_channels == 16


def test_load_parameters_requires_object(tmp_path):
    path = tmp_path / "eog.json"
    path.write_text("[1, 2]")
    with pytest.raises(ConfigurationError):
        load_parameters(str(path))


def test_threshold_update_is_epsilon_gated():
    port = ConfigPort(threshold=30.0, debounce_duration=2.0)

    assert port.update_threshold(30.0005) is False
    assert port.threshold == 30.0
    assert port.update_threshold(31.0) is True
    assert port.threshold == 31.0


def test_duration_update_is_epsilon_gated():
    port = ConfigPort(threshold=30.0, debounce_duration=2.0)

    assert port.update_debounce_duration(2.0009) is False
    assert port.update_debounce_duration(2.5) is True
    assert port.debounce_duration == 2.5
    assert port.threshold == 30.0


def test_snapshot_is_not_changed_by_later_updates():
    port = ConfigPort(threshold=30.0, debounce_duration=2.0)
    before = port.snapshot()

    port.update_threshold(40.0)

    assert before.threshold == 30.0
    assert port.snapshot().threshold == 40.0


@pytest.mark.parametrize("value", [0.0, -1.0, math.inf, math.nan])
def test_invalid_updates_raise(value):
    port = ConfigPort(threshold=30.0, debounce_duration=2.0)
    with pytest.raises(InvalidParameterError):
        port.update_threshold(value)
    with pytest.raises(InvalidParameterError):
        port.update_debounce_duration(value)
    assert port.snapshot().threshold == 30.0


def test_invalid_initial_values_raise():
    with pytest.raises(InvalidParameterError):
        ConfigPort(threshold=-1.0, debounce_duration=2.0)
