import csv
import io
import json
from abc import ABC, abstractmethod
from typing import Any, Dict, Iterable, List

from launchpad_core.common.enums import PricingModelType
from launchpad_core.common.model import BuyResult, SimulationResult
from launchpad_core.reporting.formatters import (
    format_pct,
    format_price,
    format_token_amount,
    share_of_supply,
)


class Reporter(ABC):
    """Turns simulation results into text. Reporters never touch the engine state."""

    @abstractmethod
    def render(self, result: SimulationResult) -> str:
        pass

    def render_many(self, results: Iterable[SimulationResult]) -> str:
        return "\n".join(self.render(r) for r in results)


def buy_to_row(buy: BuyResult, total_supply) -> Dict[str, Any]:
    """Flat, string-valued view of a BuyResult for machine-readable output."""
    return {
        "eth_in": str(buy.eth_in),
        "status": buy.status.value,
        "tokens_out": str(buy.tokens_out),
        "supply_pct": str(share_of_supply(buy.tokens_out, total_supply)),
        "price_before": str(buy.price_before) if buy.price_before is not None else "",
        "new_price": str(buy.new_price),
        "price_change_pct": str(buy.price_change_pct),
        "pool_tokens_remaining": str(buy.pool_tokens_remaining),
        "pool_eth_after": str(buy.pool_eth_after) if buy.pool_eth_after is not None else "",
        "fee_eth": str(buy.fee_eth),
    }


class ConsoleTableReporter(Reporter):
    """Fixed-width tables for a terminal, one block per scenario."""

    def __init__(self, width: int = 78):
        self.width = width

    def _header(self, result: SimulationResult) -> List[str]:
        lines = ["=" * self.width, result.label, "=" * self.width]
        meta = result.metadata
        if result.model_type == PricingModelType.CONCENTRATED:
            if "price_lower" in meta:
                lines.append(
                    f"Price range: {format_price(meta['price_lower'])} - "
                    f"{format_price(meta['price_upper'])} ETH/token"
                )
            if "liquidity" in meta:
                lines.append(f"Liquidity L: {format_price(meta['liquidity'])}")
        else:
            if "token_liquidity" in meta:
                lines.append(
                    f"Initial liquidity: {format_token_amount(meta['token_liquidity'])} tokens "
                    f"({format_pct(share_of_supply(meta['token_liquidity'], result.total_supply), 4)})"
                )
            if "burned_tokens" in meta:
                lines.append(
                    f"Burned: {format_token_amount(meta['burned_tokens'])} tokens "
                    f"({format_pct(share_of_supply(meta['burned_tokens'], result.total_supply), 4)})"
                )
        lines.append(f"Initial price: {format_price(result.initial_price)} ETH/token")
        return lines

    def _row(self, buy: BuyResult, total_supply) -> str:
        eth = str(buy.eth_in).ljust(9)
        if not buy.filled:
            return f"{eth} | OUT OF RANGE - price exceeds upper bound"
        pct = format_pct(share_of_supply(buy.tokens_out, total_supply), 4)
        return (
            f"{eth} | "
            f"{format_token_amount(buy.tokens_out).ljust(13)} | "
            f"{pct.ljust(10)} | "
            f"{format_price(buy.new_price).ljust(16)} | "
            f"{format_pct(buy.price_change_pct, signed=True).ljust(11)} | "
            f"{format_token_amount(buy.pool_tokens_remaining)}"
        )

    def render(self, result: SimulationResult) -> str:
        lines = self._header(result)
        lines.append("-" * self.width)
        lines.append("ETH In    | Tokens Out    | % Supply   | New Price        | Price Δ     | Pool Left")
        lines.append("-" * self.width)
        for buy in result.results:
            lines.append(self._row(buy, result.total_supply))
        lines.append("-" * self.width)
        lines.append(
            f"Remaining in pool: {format_token_amount(result.tokens_remaining)} tokens "
            f"({format_pct(share_of_supply(result.tokens_remaining, result.total_supply))})"
        )
        if result.stopped_early:
            lines.append("Stopped at first out-of-range buy.")
        return "\n".join(lines) + "\n"


class JsonReporter(Reporter):
    """One JSON document per scenario; Decimals are written as strings."""

    def __init__(self, indent: int = 2):
        self.indent = indent

    def to_dict(self, result: SimulationResult) -> Dict[str, Any]:
        return {
            "label": result.label,
            "model_type": result.model_type.value,
            "total_supply": str(result.total_supply),
            "initial_price": str(result.initial_price),
            "final_price": str(result.final_price),
            "tokens_sold": str(result.tokens_sold),
            "tokens_remaining": str(result.tokens_remaining),
            "stopped_early": result.stopped_early,
            "metadata": {k: str(v) for k, v in result.metadata.items()},
            "buys": [buy_to_row(b, result.total_supply) for b in result.results],
        }

    def render(self, result: SimulationResult) -> str:
        return json.dumps(self.to_dict(result), indent=self.indent)

    def render_many(self, results: Iterable[SimulationResult]) -> str:
        return json.dumps([self.to_dict(r) for r in results], indent=self.indent)


class CsvReporter(Reporter):
    """One row per buy, prefixed with the scenario label."""

    FIELDS = [
        "label", "model_type", "eth_in", "status", "tokens_out", "supply_pct", "price_before",
        "new_price", "price_change_pct", "pool_tokens_remaining", "pool_eth_after", "fee_eth",
    ]

    def _write(self, results: Iterable[SimulationResult]) -> str:
        buf = io.StringIO()
        writer = csv.DictWriter(buf, fieldnames=self.FIELDS, lineterminator="\n")
        writer.writeheader()
        for result in results:
            for buy in result.results:
                row = buy_to_row(buy, result.total_supply)
                row["label"] = result.label
                row["model_type"] = result.model_type.value
                writer.writerow(row)
        return buf.getvalue()

    def render(self, result: SimulationResult) -> str:
        return self._write([result])

    def render_many(self, results: Iterable[SimulationResult]) -> str:
        return self._write(results)


REPORTERS = {
    "console": ConsoleTableReporter,
    "json": JsonReporter,
    "csv": CsvReporter,
}


def get_reporter(name: str) -> Reporter:
    try:
        return REPORTERS[name.lower()]()
    except KeyError:
        raise ValueError(f"Unknown report format '{name}'. Choose from {sorted(REPORTERS)}.") from None
