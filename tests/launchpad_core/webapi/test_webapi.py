import pytest

from decimal import Decimal

from launchpad_core.webapi.webapi import app


@pytest.fixture
def client():
    app.config["TESTING"] = True
    with app.test_client() as client:
        yield client


def test_simulate_concentrated(client):
    response = client.post("/curve/simulate", json={
        "model_type": "concentrated",
        "price_range_multiplier": 10,
        "buy_amounts": [1, 100, 1],
    })
    assert response.status_code == 200
    data = response.get_json()
    assert data["model_type"] == "CONCENTRATED"
    assert [b["status"] for b in data["buys"]] == ["FILLED", "OUT_OF_RANGE", "FILLED"]
    assert data["stopped_early"] is False


def test_simulate_concentrated_with_fee(client):
    response = client.post("/curve/simulate", json={
        "buy_amounts": [1],
        "lp_fee_pips": 10000,
    })
    assert response.status_code == 200
    data = response.get_json()
    assert Decimal(data["buys"][0]["fee_eth"]) == Decimal("0.01")
    assert data["metadata"]["lp_fee_pips"] == "10000"


def test_simulate_stop_on_out_of_range(client):
    response = client.post("/curve/simulate", json={
        "price_range_multiplier": 10,
        "buy_amounts": [100, 1],
        "stop_on_out_of_range": True,
    })
    assert response.status_code == 200
    data = response.get_json()
    assert data["stopped_early"] is True
    assert len(data["buys"]) == 1


def test_simulate_constant_product(client):
    response = client.post("/curve/simulate", json={
        "model_type": "constant_product",
        "deposit_eth": "0.1",
        "buy_amounts": ["0.1"],
    })
    assert response.status_code == 200
    data = response.get_json()
    assert Decimal(data["buys"][0]["tokens_out"]) == Decimal("2500000")
    assert Decimal(data["metadata"]["burned_tokens"]) == Decimal("995000000")


@pytest.mark.parametrize(
    "body, fragment",
    [
        ({"model_type": "constant_product", "buy_amounts": [1]}, "requires 'deposit_eth'"),
        ({"price_range_multiplier": 1, "buy_amounts": [1]}, "greater than 1"),
        ({"buy_amounts": [1, -1]}, "non-negative"),
        ({"model_type": "constant_product", "deposit_eth": 50, "buy_amounts": [1]}, "cannot exceed"),
    ]
)
def test_simulate_bad_request(client, body, fragment):
    response = client.post("/curve/simulate", json=body)
    assert response.status_code == 400
    assert fragment in response.get_json()["error"]


def test_simulate_schema_error(client):
    """Requests that do not match the schema never reach the engine."""
    response = client.post("/curve/simulate", json={"model_type": "bonding"})
    assert response.status_code == 422


def test_status_defaults(client):
    response = client.get("/curve/status")
    assert response.status_code == 200
    data = response.get_json()
    assert Decimal(data["price_lower"]) == Decimal("2E-8")
    assert Decimal(data["price_upper"]) == Decimal("0.000002")
    assert Decimal(data["position_eth"]) == 0
    assert int(data["sqrt_price_x96"]) > 0


def test_status_query(client):
    response = client.get("/curve/status?fdv_eth=20&price_range_multiplier=10")
    assert response.status_code == 200
    max_eth_in = Decimal(response.get_json()["max_eth_in"])
    assert Decimal("63") < max_eth_in < Decimal("64")


def test_status_invalid(client):
    response = client.get("/curve/status?price_range_multiplier=0.5")
    assert response.status_code == 400
    assert "greater than 1" in response.get_json()["error"]
