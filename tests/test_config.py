"""
Tests for settings validation.
"""
import pytest
from pydantic import ValidationError

from truckhours.core.config import Settings, get_settings


def test_defaults():
    settings = Settings()
    assert settings.DEFAULT_TIMEZONE == "America/New_York"
    assert settings.CLOSURE_READ_POLICY == "zoned"
    assert settings.PICKUP_LAST_ORDER_MINUTES == 30


def test_env_override(monkeypatch):
    monkeypatch.setenv("DEFAULT_TIMEZONE", "America/Denver")
    assert get_settings().DEFAULT_TIMEZONE == "America/Denver"


def test_unknown_timezone_rejected():
    with pytest.raises(ValidationError):
        Settings(DEFAULT_TIMEZONE="Nowhere/City")


def test_unknown_read_policy_rejected():
    with pytest.raises(ValidationError):
        Settings(CLOSURE_READ_POLICY="lenient")


def test_slot_length_must_be_positive():
    with pytest.raises(ValidationError):
        Settings(PICKUP_SLOT_MINUTES=0)
