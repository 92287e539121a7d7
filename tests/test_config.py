import pytest
from pydantic import ValidationError

from request_tracker.config import Settings, TrackerConfig, merge_config
from request_tracker.tracker import RequestTracker


def test_merge_without_overrides_returns_defaults() -> None:
    config = merge_config()
    assert config == TrackerConfig(max_completed=50, max_completed_millis=300_000, auto_cleanup=True)


def test_later_overrides_win_per_field() -> None:
    config = merge_config(
        {"max_completed": 10, "auto_cleanup": False},
        {"max_completed": 20},
        None,
        {"max_completed_millis": 0},
    )
    assert config.max_completed == 20
    assert config.max_completed_millis == 0
    assert config.auto_cleanup is False


def test_model_override_only_applies_fields_it_sets() -> None:
    config = merge_config({"max_completed": 5}, TrackerConfig(auto_cleanup=False))
    assert config.max_completed == 5
    assert config.auto_cleanup is False


def test_none_values_do_not_override() -> None:
    config = merge_config({"max_completed": 7}, {"max_completed": None})
    assert config.max_completed == 7


def test_invalid_overrides_raise() -> None:
    with pytest.raises(ValidationError):
        merge_config({"max_completed": -1})
    with pytest.raises(ValidationError):
        merge_config({"max_pending": 3})


def test_tracker_merges_constructor_overrides() -> None:
    t = RequestTracker({"max_completed": 3}, {"auto_cleanup": False})
    assert t.config.max_completed == 3
    assert t.config.auto_cleanup is False
    assert t.config.max_completed_millis == 300_000


def test_settings_feed_tracker_overrides(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("TRACKER_MAX_COMPLETED", "12")
    monkeypatch.setenv("TRACKER_AUTO_CLEANUP", "false")

    config = merge_config(Settings().tracker_overrides)
    assert config.max_completed == 12
    assert config.auto_cleanup is False
    assert config.max_completed_millis == 300_000
