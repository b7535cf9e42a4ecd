import pytest

from matchday.services import InMemoryStore, ServiceFactory
from matchday.utils import AppConfig, fmt_mmss, now_ts, parse_duration, parse_timestamp, ts_to_iso


def test_config_defaults_from_empty_env():
    config = AppConfig.from_env({})
    assert config.match_minutes == 30
    assert config.match_duration_seconds == 1800.0
    assert config.host == "127.0.0.1"
    assert config.log_level == "INFO"


def test_config_overrides():
    config = AppConfig.from_env({
        "MATCHDAY_DATA_DIR": "/tmp/md",
        "MATCHDAY_MATCH_MINUTES": "40",
        "MATCHDAY_PORT": "9000",
        "MATCHDAY_LOG_LEVEL": "debug",
    })
    assert config.data_dir == "/tmp/md"
    assert config.match_duration_seconds == 2400.0
    assert config.port == 9000
    assert config.log_level == "DEBUG"


@pytest.mark.parametrize("env", [
    {"MATCHDAY_MATCH_MINUTES": "0"},
    {"MATCHDAY_MATCH_MINUTES": "half"},
    {"MATCHDAY_PORT": "-1"},
])
def test_config_rejects_bad_numbers(env):
    with pytest.raises(ValueError):
        AppConfig.from_env(env)


def test_factory_shares_one_match_state():
    factory = ServiceFactory(config=AppConfig(match_minutes=20), storage=InMemoryStore())
    try:
        suite = factory.create_complete_service_suite()
        assert suite["player"].match_state is factory.match_state
        assert suite["field"].match_state is factory.match_state
        assert suite["field"].timer_service is suite["timer"]
        assert factory.match_state.match_duration_seconds == 1200.0
    finally:
        factory.shutdown()


def test_time_helpers():
    assert fmt_mmss(90) == "01:30"
    assert fmt_mmss(-5) == "00:00"
    assert ts_to_iso(None) is None
    assert parse_timestamp(ts_to_iso(86400.5)) == 86400.5
    assert parse_timestamp(None) is None
    assert parse_timestamp(12) == 12.0
    assert parse_duration("1.00:00:30") == 86430.0
    assert parse_duration("45.5") == 45.5
    with pytest.raises(ValueError):
        parse_duration("soon")


def test_clock_timestamps_survive_iso_round_trip():
    for _ in range(200):
        ts = now_ts()
        assert parse_timestamp(ts_to_iso(ts)) == ts
