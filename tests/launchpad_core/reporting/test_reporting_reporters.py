import csv
import io
import json

import pytest

from decimal import Decimal

from launchpad_core.common.enums import PricingModelType
from launchpad_core.common.model import CurveParameters
from launchpad_core.curves.concentrated import simulate_sequence as simulate_concentrated
from launchpad_core.curves.constant_product import simulate_sequence as simulate_constant_product
from launchpad_core.reporting.reporters import (
    ConsoleTableReporter,
    CsvReporter,
    JsonReporter,
    buy_to_row,
    get_reporter,
)


SUPPLY = Decimal("1000000000")


@pytest.fixture
def concentrated_result():
    """10x range with a buy in the middle that cannot be filled."""
    params = CurveParameters(SUPPLY, Decimal("20"), Decimal("10"))
    return simulate_concentrated(params, ["1", "100", "1"], label="FDV 20 ETH, 10x range")


@pytest.fixture
def legacy_result():
    return simulate_constant_product(Decimal("20"), Decimal("0.1"), SUPPLY, ["0.1"], label="Legacy 0.1 ETH")


def test_console_concentrated(concentrated_result):
    text = ConsoleTableReporter().render(concentrated_result)
    assert "FDV 20 ETH, 10x range" in text
    assert "Price range: 2.0000e-8 - 2.0000e-7 ETH/token" in text
    assert "Liquidity L:" in text
    assert "Initial price: 2.0000e-8 ETH/token" in text
    assert text.count("OUT OF RANGE - price exceeds upper bound") == 1
    assert "Remaining in pool:" in text
    assert "Stopped at first out-of-range buy." not in text


def test_console_stopped_early():
    params = CurveParameters(SUPPLY, Decimal("20"), Decimal("10"))
    result = simulate_concentrated(params, ["100", "1"], stop_on_out_of_range=True)
    text = ConsoleTableReporter().render(result)
    assert "Stopped at first out-of-range buy." in text


def test_console_legacy(legacy_result):
    text = ConsoleTableReporter().render(legacy_result)
    assert "Initial liquidity: 5.00M tokens (0.5000%)" in text
    assert "Burned: 995.00M tokens (99.5000%)" in text
    assert "+300.00%" in text
    assert "Price range" not in text


def test_buy_to_row(legacy_result):
    row = buy_to_row(legacy_result.results[0], legacy_result.total_supply)
    assert row["status"] == "FILLED"
    assert Decimal(row["tokens_out"]) == Decimal("2500000")
    assert Decimal(row["supply_pct"]) == Decimal("0.25")
    assert row["fee_eth"] == "0"
    assert all(isinstance(v, str) for v in row.values())


def test_json_reporter(concentrated_result):
    data = json.loads(JsonReporter().render(concentrated_result))
    assert data["label"] == "FDV 20 ETH, 10x range"
    assert data["model_type"] == PricingModelType.CONCENTRATED.value
    assert data["stopped_early"] is False
    assert [b["status"] for b in data["buys"]] == ["FILLED", "OUT_OF_RANGE", "FILLED"]
    assert data["buys"][1]["tokens_out"] == "0"
    assert Decimal(data["metadata"]["price_upper"]) == Decimal("2E-7")


def test_json_reporter_render_many(concentrated_result, legacy_result):
    data = json.loads(JsonReporter().render_many([concentrated_result, legacy_result]))
    assert [d["label"] for d in data] == ["FDV 20 ETH, 10x range", "Legacy 0.1 ETH"]


def test_csv_reporter(concentrated_result, legacy_result):
    text = CsvReporter().render_many([concentrated_result, legacy_result])
    rows = list(csv.DictReader(io.StringIO(text)))
    assert len(rows) == 4
    assert list(rows[0].keys()) == CsvReporter.FIELDS
    assert rows[1]["status"] == "OUT_OF_RANGE"
    assert rows[3]["label"] == "Legacy 0.1 ETH"
    assert rows[3]["model_type"] == "CONSTANT_PRODUCT"


@pytest.mark.parametrize(
    "name, cls",
    [
        ("console", ConsoleTableReporter),
        ("JSON", JsonReporter),
        ("csv", CsvReporter),
    ]
)
def test_get_reporter(name, cls):
    assert isinstance(get_reporter(name), cls)


def test_get_reporter_unknown():
    with pytest.raises(ValueError, match="Unknown report format"):
        get_reporter("xml")
