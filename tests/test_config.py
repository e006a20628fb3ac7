from pathlib import Path

import pytest

from pingtrack.core.config import Config, DEFAULT_TARGET_URL

EXAMPLE_CONFIG = Path(__file__).resolve().parents[1] / "config.toml.example"


def test_default_values():
    config = Config.default()
    assert config.probe.target_url == DEFAULT_TARGET_URL
    assert config.tracking.interval_ms == 3000
    assert config.tracking.threshold_ms == 150
    assert config.validate()


def test_example_config_loads():
    config = Config.from_file(EXAMPLE_CONFIG)
    assert config.probe.mode == "direct"
    assert config.server.port == 8080
    assert config.storage.path == Path("~/.pingtrack/logs").expanduser()
    assert config.validate()


def test_partial_config_falls_back_to_defaults(tmp_path):
    path = tmp_path / "config.toml"
    path.write_text("[tracking]\nthreshold_ms = 200\n")

    config = Config.from_file(path)
    assert config.tracking.threshold_ms == 200
    assert config.tracking.interval_ms == 3000
    assert config.alert.enabled is True


def test_load_without_file_uses_defaults(tmp_path):
    assert Config.load(tmp_path / "missing.toml") == Config.default()


def test_unknown_key_is_rejected(tmp_path):
    path = tmp_path / "config.toml"
    path.write_text("[tracking]\ninterval = 10\n")
    with pytest.raises(ValueError, match="interval"):
        Config.from_file(path)


def test_malformed_toml_is_rejected(tmp_path):
    path = tmp_path / "config.toml"
    path.write_text("[tracking\n")
    with pytest.raises(ValueError):
        Config.from_file(path)


@pytest.mark.parametrize(
    "section, key, value",
    [
        ("probe", "mode", "icmp"),
        ("tracking", "interval_ms", 0),
        ("tracking", "threshold_ms", -1),
        ("alert", "volume", 1.5),
        ("server", "port", 70000),
    ],
)
def test_validate_rejects_bad_values(section, key, value):
    config = Config.default()
    setattr(getattr(config, section), key, value)
    with pytest.raises(ValueError):
        config.validate()
