from __future__ import annotations

import json
import logging

import typer
from landingzone.catalog import Catalog, LivePricingCache
from landingzone.spec import AdditionalCost, Tier
from pydantic import ValidationError
from rich.console import Console
from rich.logging import RichHandler

_err_console = Console(stderr=True)


def ctx_obj(ctx: typer.Context) -> dict:
    """Resolve ctx.obj through the parent chain when invoked via a sub-app."""
    obj = ctx.obj or (ctx.parent.obj if ctx.parent else None)
    return obj or {}


def configure_logging(verbose: bool) -> None:
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(message)s",
            handlers=[RichHandler(console=_err_console, show_path=False)],
            force=True,
        )


def handle_error(ctx: typer.Context, e: Exception) -> None:
    """Print a clean error message and exit 1."""
    obj = ctx_obj(ctx)
    verbose = obj.get("verbose", False)
    json_mode = obj.get("json", False)

    if isinstance(e, FileNotFoundError):
        msg = f"File not found: {e}"
    elif isinstance(e, ValidationError):
        msg = f"Invalid input: {e.errors()[0]['msg']}"
    elif isinstance(e, ValueError):
        msg = str(e)
    else:
        msg = f"Error: {e}"

    if json_mode:
        print(json.dumps({"error": msg}))
    else:
        _err_console.print(f"[red]Error:[/red] {msg}")

    if verbose:
        _err_console.print_exception()

    raise typer.Exit(1)


def build_catalog(live_pricing: bool = False, region: str | None = None) -> Catalog:
    """Static catalog, optionally overlaid with a freshly fetched live pricing snapshot."""
    if not live_pricing:
        return Catalog()
    cache = LivePricingCache(region=region)
    cache.refresh(force=True)
    return Catalog(pricing_cache=cache)


def resolve_tier(catalog: Catalog, tier_id: str) -> Tier:
    tier = catalog.get_tier(tier_id)
    if tier is None:
        choices = ", ".join(t.size for t in catalog.tiers)
        raise ValueError(f"Unknown tier {tier_id!r}. Choose one of: {choices}")
    return tier


def parse_additional_costs(values: list[str] | None) -> list[AdditionalCost]:
    """Parse repeated ``"description=amount"`` options."""
    costs: list[AdditionalCost] = []
    for raw in values or []:
        description, sep, amount = raw.rpartition("=")
        if not sep:
            raise ValueError(f"Additional cost {raw!r} must look like 'description=amount'")
        try:
            value = float(amount.replace(",", "").lstrip("$"))
        except ValueError:
            raise ValueError(f"Additional cost amount {amount!r} is not a number") from None
        costs.append(AdditionalCost(description=description, amount=value))
    return costs


def with_mandatory(tier: Tier, features: list[str] | None) -> list[str]:
    """Selected feature IDs with the tier's mandatory features always included."""
    selected = list(tier.mandatory_features)
    for fid in features or []:
        if fid not in selected:
            selected.append(fid)
    return selected
