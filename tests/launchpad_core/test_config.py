import json

import pytest

from decimal import Decimal

from launchpad_core.config import (
    DEFAULT_BUY_AMOUNTS,
    SimulationConfig,
    load_config,
    load_config_json,
    merge_overrides,
    resolve_config_path,
)


@pytest.fixture
def config_file(tmp_path):
    """
    Writes a small launchpad.json and returns its path.
    """
    path = tmp_path / "launchpad.json"
    path.write_text(json.dumps({
        "fdv_eth": 50,
        "price_range_multiplier": "10",
        "lp_fee_pips": 10000,
        "buy_amounts": [0.5, 2],
        "report_format": "JSON",
    }))
    return path


def test_defaults():
    config = SimulationConfig()
    assert config.total_supply == Decimal("1000000000")
    assert config.fdv_eth == Decimal("20")
    assert config.price_range_multiplier == Decimal("100")
    assert config.lp_fee_pips == 0
    assert config.creator_fee_bps == 8000
    assert config.buy_amounts == DEFAULT_BUY_AMOUNTS
    assert config.report_format == "console"


def test_buy_amounts_default_is_not_shared():
    a = SimulationConfig()
    a.buy_amounts.append(Decimal("99"))
    assert SimulationConfig().buy_amounts == DEFAULT_BUY_AMOUNTS


@pytest.mark.parametrize(
    "field, value",
    [
        ("total_supply", 0),
        ("fdv_eth", -1),
        ("price_range_multiplier", 1),
        ("lp_fee_pips", 1_000_000),
        ("creator_fee_bps", 10_001),
        ("buy_amounts", [1, -1]),
        ("report_format", "xml"),
    ]
)
def test_invalid_values_rejected(field, value):
    with pytest.raises(ValueError):
        SimulationConfig(**{field: value})


def test_curve_parameters_and_options():
    config = SimulationConfig(fdv_eth="5", price_range_multiplier="4", lp_fee_pips=3000)
    params = config.curve_parameters()
    assert params.fdv_eth == Decimal("5")
    assert params.price_range_multiplier == Decimal("4")
    assert config.curve_options() == {"lp_fee_pips": 3000, "creator_fee_bps": 8000}


def test_resolve_config_path_explicit(tmp_path):
    assert resolve_config_path(tmp_path / "x.json") == tmp_path / "x.json"


def test_resolve_config_path_from_env(monkeypatch, tmp_path):
    monkeypatch.setenv("LAUNCHPAD_CONFIG", str(tmp_path / "env.json"))
    assert resolve_config_path() == tmp_path / "env.json"


def test_resolve_config_path_default(monkeypatch, tmp_path):
    monkeypatch.delenv("LAUNCHPAD_CONFIG", raising=False)
    monkeypatch.chdir(tmp_path)
    assert resolve_config_path() == tmp_path / "launchpad.json"


def test_load_config_json_missing(tmp_path):
    assert load_config_json(tmp_path / "missing.json") == {}
    with pytest.raises(FileNotFoundError):
        load_config_json(tmp_path / "missing.json", require_exists=True)


def test_load_config_json_invalid(tmp_path):
    path = tmp_path / "bad.json"
    path.write_text("{not json")
    with pytest.raises(ValueError, match="not valid JSON"):
        load_config_json(path)


def test_load_config(config_file):
    config = load_config(config_file)
    assert config.fdv_eth == Decimal("50")
    assert config.price_range_multiplier == Decimal("10")
    assert config.lp_fee_pips == 10000
    assert config.buy_amounts == [Decimal("0.5"), Decimal("2")]
    assert config.report_format == "json"


def test_load_config_explicit_path_must_exist(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_config(tmp_path / "missing.json")


def test_load_config_without_file_uses_defaults(monkeypatch, tmp_path):
    monkeypatch.delenv("LAUNCHPAD_CONFIG", raising=False)
    monkeypatch.chdir(tmp_path)
    assert load_config() == SimulationConfig()


def test_merge_overrides_ignores_none():
    config = SimulationConfig(fdv_eth="50")
    merged = merge_overrides(config, {"fdv_eth": None, "lp_fee_pips": 500})
    assert merged.fdv_eth == Decimal("50")
    assert merged.lp_fee_pips == 500
    assert config.lp_fee_pips == 0


def test_merge_overrides_revalidates():
    with pytest.raises(ValueError):
        merge_overrides(SimulationConfig(), {"price_range_multiplier": Decimal("0.5")})
