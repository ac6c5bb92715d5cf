import json

import pytest

from prim_config import VisualizerConfig, load_config


def test_defaults():
    config = VisualizerConfig()
    assert config.interval_ms == 800
    assert config.history_limit == 14
    assert config.bounds == (900.0, 600.0, 25.0)


@pytest.mark.parametrize("interval", [99, 2001, 0])
def test_interval_outside_bounds_rejected(interval):
    with pytest.raises(ValueError):
        VisualizerConfig(interval_ms=interval)


def test_check_interval_accepts_edges_of_range():
    config = VisualizerConfig()
    assert config.check_interval(100) == 100
    assert config.check_interval(2000) == 2000


def test_bad_history_and_weights_rejected():
    with pytest.raises(ValueError):
        VisualizerConfig(history_limit=0)
    with pytest.raises(ValueError):
        VisualizerConfig(min_random_weight=5, max_random_weight=2)


def test_load_config_from_file(tmp_path):
    path = tmp_path / "config.json"
    path.write_text(json.dumps({"interval_ms": 300, "history_limit": 5}))
    config = load_config(str(path))
    assert config.interval_ms == 300
    assert config.to_dict()["history_limit"] == 5
    assert load_config() == VisualizerConfig()


def test_unknown_keys_rejected(tmp_path):
    path = tmp_path / "config.json"
    path.write_text(json.dumps({"speed": 3}))
    with pytest.raises(ValueError, match="speed"):
        load_config(str(path))
    path.write_text("[1, 2]")
    with pytest.raises(ValueError):
        load_config(str(path))
