import json
import os
from decimal import Decimal
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from loguru import logger
from pydantic import BaseModel, Field, field_validator

from launchpad_core.common.constants import (
    CREATOR_FEE_BPS,
    DEFAULT_FDV_ETH,
    DEFAULT_TOTAL_SUPPLY,
    PRICE_RANGE_MULTIPLIER,
)
from launchpad_core.common.model import CurveParameters

_CONFIG_ENV_KEY = "LAUNCHPAD_CONFIG"
_DEFAULT_CONFIG_FILENAME = "launchpad.json"

DEFAULT_BUY_AMOUNTS = [
    Decimal("0.001"), Decimal("0.01"), Decimal("0.1"), Decimal("1"), Decimal("5"), Decimal("10"),
]


class SimulationConfig(BaseModel):
    """Defaults for CLI and API runs. Every field can be overridden per call."""
    total_supply: Decimal = Field(DEFAULT_TOTAL_SUPPLY, gt=0, description="Token supply in whole tokens")
    fdv_eth: Decimal = Field(DEFAULT_FDV_ETH, gt=0, description="Fully diluted valuation in ETH")
    price_range_multiplier: Decimal = Field(PRICE_RANGE_MULTIPLIER, gt=1)
    lp_fee_pips: int = Field(0, ge=0, lt=1_000_000, description="Pool fee taken from each buy")
    creator_fee_bps: int = Field(CREATOR_FEE_BPS, ge=0, le=10_000)
    buy_amounts: List[Decimal] = Field(default_factory=lambda: list(DEFAULT_BUY_AMOUNTS))
    stop_on_out_of_range: bool = False
    report_format: str = "console"
    log_level: str = "WARNING"

    @field_validator("buy_amounts")
    @classmethod
    def _non_negative_buys(cls, v: List[Decimal]) -> List[Decimal]:
        if any(a < 0 for a in v):
            raise ValueError("Buy amounts must be non-negative.")
        return v

    @field_validator("report_format")
    @classmethod
    def _known_format(cls, v: str) -> str:
        if v.lower() not in ("console", "json", "csv"):
            raise ValueError(f"Unknown report format '{v}'.")
        return v.lower()

    def curve_parameters(self) -> CurveParameters:
        return CurveParameters(
            total_supply=self.total_supply,
            fdv_eth=self.fdv_eth,
            price_range_multiplier=self.price_range_multiplier,
        )

    def curve_options(self) -> Dict[str, Any]:
        return {"lp_fee_pips": self.lp_fee_pips, "creator_fee_bps": self.creator_fee_bps}


def resolve_config_path(path: Union[str, Path, None] = None) -> Path:
    if path is not None:
        return Path(path).expanduser()

    env_path = os.getenv(_CONFIG_ENV_KEY, "").strip()
    if env_path:
        return Path(env_path).expanduser()

    return Path.cwd() / _DEFAULT_CONFIG_FILENAME


def load_config_json(path: Union[str, Path, None] = None, require_exists: bool = False) -> Dict[str, Any]:
    cfg_path = resolve_config_path(path)
    if not cfg_path.exists():
        if require_exists:
            raise FileNotFoundError(f"Config file not found: {cfg_path}")
        return {}
    try:
        return json.loads(cfg_path.read_text())
    except json.JSONDecodeError as e:
        raise ValueError(f"Config file {cfg_path} is not valid JSON: {e}") from e


def load_config(path: Union[str, Path, None] = None, require_exists: bool = False) -> SimulationConfig:
    """
    Loads a SimulationConfig from JSON. Missing file means defaults, unless
    'require_exists' is set or the path was given explicitly.
    """
    raw = load_config_json(path, require_exists=require_exists or path is not None)
    config = SimulationConfig.model_validate(raw)
    logger.debug(f"Loaded config from {resolve_config_path(path)}: {config}")
    return config


def merge_overrides(config: SimulationConfig, overrides: Optional[Dict[str, Any]]) -> SimulationConfig:
    """Returns a copy of 'config' with the non-None overrides applied and re-validated."""
    values = config.model_dump()
    values.update({k: v for k, v in (overrides or {}).items() if v is not None})
    return SimulationConfig.model_validate(values)
