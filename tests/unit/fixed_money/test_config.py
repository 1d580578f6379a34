from __future__ import annotations

import pytest

from fixed_money import config
from fixed_money.config import (
    DEFAULT_DIVISION_PRECISION,
    DIVISION_PRECISION_ENV_VAR,
    division_precision,
    get_division_precision,
    load_settings,
    set_division_precision,
)
from fixed_money.domain.numeric.fixed_decimal import FixedDecimal


@pytest.fixture(autouse=True)
def restore_division_precision():
    previous = get_division_precision()
    yield
    set_division_precision(previous)


def test_default_division_precision():
    assert config.get_division_precision() == DEFAULT_DIVISION_PRECISION == 20


def test_set_division_precision_affects_div():
    set_division_precision(2)

    assert get_division_precision() == 2
    assert str(FixedDecimal(2).div(FixedDecimal(3))) == "0.67"


@pytest.mark.parametrize("value", [-1, "3", 2.0, True])
def test_set_division_precision_rejects_invalid_values(value):
    with pytest.raises(ValueError):
        set_division_precision(value)


def test_division_precision_context_restores_previous_value():
    with division_precision(3) as precision:
        assert precision == 3
        assert str(FixedDecimal(2) / FixedDecimal(3)) == "0.667"

    assert get_division_precision() == DEFAULT_DIVISION_PRECISION


def test_division_precision_context_restores_on_error():
    with pytest.raises(RuntimeError):
        with division_precision(5):
            raise RuntimeError("boom")

    assert get_division_precision() == DEFAULT_DIVISION_PRECISION


def test_load_settings_reads_dotenv_file(tmp_path, monkeypatch):
    # setenv + delenv makes monkeypatch remove the variable that load_dotenv sets
    monkeypatch.setenv(DIVISION_PRECISION_ENV_VAR, "0")
    monkeypatch.delenv(DIVISION_PRECISION_ENV_VAR)
    dotenv_file = tmp_path / ".env"
    dotenv_file.write_text(f"{DIVISION_PRECISION_ENV_VAR}=6\n")

    assert load_settings(dotenv_file) == 6
    assert get_division_precision() == 6


def test_load_settings_environment_wins_over_dotenv_file(tmp_path, monkeypatch):
    monkeypatch.setenv(DIVISION_PRECISION_ENV_VAR, "4")
    dotenv_file = tmp_path / ".env"
    dotenv_file.write_text(f"{DIVISION_PRECISION_ENV_VAR}=6\n")

    assert load_settings(dotenv_file) == 4


def test_load_settings_without_variable_keeps_current_precision(tmp_path, monkeypatch):
    monkeypatch.setenv(DIVISION_PRECISION_ENV_VAR, "")
    set_division_precision(7)

    assert load_settings(tmp_path / "missing.env") == 7


@pytest.mark.parametrize("raw_value", ["abc", "1.5", "-2"])
def test_load_settings_rejects_invalid_values(tmp_path, monkeypatch, raw_value):
    monkeypatch.setenv(DIVISION_PRECISION_ENV_VAR, raw_value)

    with pytest.raises(ValueError):
        load_settings(tmp_path / "missing.env")
