"""Configuration tests."""

from __future__ import annotations

import pytest

from tallybook.config import BaseConfig, TestConfig


def test_defaults_from_data_dir(test_config, tmp_path):
    assert test_config.DATA_DIR == (tmp_path / "data").resolve()
    assert test_config.DATABASE_URL.endswith("tallybook.db")
    assert test_config.USER_ID == "tester"
    assert test_config.CURRENCY == "INR"
    assert test_config.CHART_POINT_LIMIT == 30
    assert test_config.RECOMMENDED_SAVINGS_RATE == 0.3
    assert test_config.DEV_MODE is False
    assert test_config.sqlalchemy_engine_options() == {"connect_args": {"check_same_thread": False}}


def test_env_overrides(test_config, monkeypatch, tmp_path):
    monkeypatch.setenv("TALLYBOOK_CURRENCY", "usd")
    monkeypatch.setenv("TALLYBOOK_CHART_POINT_LIMIT", "50")
    monkeypatch.setenv("TALLYBOOK_DEV_MODE", "yes")
    monkeypatch.setenv("TALLYBOOK_DATABASE_URL", f"sqlite:///{tmp_path / 'other.db'}")
    config = BaseConfig()
    assert config.CURRENCY == "USD"
    assert config.CHART_POINT_LIMIT == 50
    assert config.DEV_MODE is True
    assert config.DATABASE_URL.endswith("other.db")


@pytest.mark.parametrize(
    ("name", "value"),
    [
        ("TALLYBOOK_CHART_POINT_LIMIT", "lots"),
        ("TALLYBOOK_CHART_POINT_LIMIT", "0"),
        ("TALLYBOOK_RECOMMENDED_SAVINGS_RATE", "1.5"),
    ],
)
def test_invalid_numbers_rejected(test_config, monkeypatch, name, value):
    monkeypatch.setenv(name, value)
    with pytest.raises(ValueError):
        TestConfig()


def test_export_dir_created(test_config):
    assert test_config.export_dir.is_dir()
