import logging

import pytest

from kakebo.exceptions import ConfigError
from kakebo.logger import ROOT_LOGGER, configure_logging, get_logger
from kakebo.settings import Settings


@pytest.fixture(autouse=True)
def clear_env(monkeypatch):
    for name in ("KAKEBO_CONFIG", "KAKEBO_LOG_LEVEL", "KAKEBO_TEST_DATE", "KAKEBO_SEED_PATH"):
        monkeypatch.delenv(name, raising=False)


def test_missing_file_gives_defaults(tmp_path):
    s = Settings.load(tmp_path / "nope.yaml")
    assert s.seed_path == "data/seed.json"
    assert s.log_level == "INFO"
    assert s.test_date is None


def test_load_yaml(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text("seed_path: other.json\nlog_level: DEBUG\ntest_date: 2025-06-10\ncurrency_symbol: '$'\n")
    s = Settings.load(path)
    assert s.seed_path == "other.json"
    assert s.log_level == "DEBUG"
    assert s.test_date == "2025-06-10"
    assert s.currency_symbol == "$"


def test_env_overrides(tmp_path, monkeypatch):
    path = tmp_path / "config.yaml"
    path.write_text("log_level: INFO\n")
    monkeypatch.setenv("KAKEBO_CONFIG", str(path))
    monkeypatch.setenv("KAKEBO_LOG_LEVEL", "WARNING")
    monkeypatch.setenv("KAKEBO_TEST_DATE", "2025-07-01")
    s = Settings.load()
    assert s.log_level == "WARNING"
    assert s.test_date == "2025-07-01"


@pytest.mark.parametrize("content", [
    "log_level: LOUD\n",
    "test_date: someday\n",
    "unknown_key: 1\n",
    "- just\n- a list\n",
    "seed_path: [unclosed\n",
])
def test_bad_config_raises(tmp_path, content):
    path = tmp_path / "config.yaml"
    path.write_text(content)
    with pytest.raises(ConfigError):
        Settings.load(path)


def test_configure_logging_writes_file(tmp_path):
    log_file = tmp_path / "logs" / "kakebo.log"
    root = logging.getLogger(ROOT_LOGGER)
    try:
        configure_logging("DEBUG", str(log_file))
        get_logger("tests").debug("hello from tests")
        for handler in root.handlers:
            handler.flush()
        assert "hello from tests" in log_file.read_text(encoding="utf-8")
        assert get_logger("kakebo.store").name == "kakebo.store"
        assert get_logger("app").name == "kakebo.app"
    finally:
        for handler in list(root.handlers):
            handler.close()
        root.handlers.clear()
        root.propagate = True
        root.setLevel(logging.NOTSET)
