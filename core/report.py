# core/report.py
import time
from pathlib import Path
from typing import Dict, List, Optional, Sequence

from jinja2 import Environment, FileSystemLoader

from core.models import CatalogEntry, Source, SourceStatus
from core.view import ItemView

# Resolve template directory relative to this file
TEMPLATE_DIR = Path(__file__).resolve().parent.parent / "templates"

NO_MARKET_DATA = "No recent market data available"

STATUS_LABELS = {
    Source.CATALOG: "Wiki Mapping",
    Source.PRICES: "Wiki Prices",
    Source.ATTRIBUTES: "OSRSBox",
}


def format_number(num: Optional[float]) -> str:
    if num is None:
        return "N/A"
    if num >= 1_000_000_000:
        return f"{num / 1_000_000_000:.2f}B"
    if num >= 1_000_000:
        return f"{num / 1_000_000:.2f}M"
    if num >= 1_000:
        return f"{num / 1_000:.1f}K"
    return str(int(num))


def format_exact(num: Optional[float]) -> str:
    if num is None:
        return "N/A"
    return f"{int(num):,}"


def format_time_ago(timestamp: Optional[int], now: Optional[float] = None) -> str:
    if timestamp is None:
        return "never"
    current = time.time() if now is None else now
    seconds = max(0, int(current - timestamp))
    if seconds < 60:
        return f"{seconds}s ago"
    minutes = seconds // 60
    if minutes < 60:
        return f"{minutes}m ago"
    hours = minutes // 60
    if hours < 24:
        return f"{hours}h ago"
    return f"{hours // 24}d ago"


def _or_label(value: Optional[int], label: str) -> str:
    # Zero alch/store values are as uninformative as missing ones.
    return format_exact(value) if value else label


def _signed(value: int) -> str:
    return f"+{value}" if value > 0 else str(value)


env = Environment(
    loader=FileSystemLoader(str(TEMPLATE_DIR)),
    trim_blocks=True,
    lstrip_blocks=True,
    keep_trailing_newline=True,
)
env.filters["compact"] = format_number
env.filters["exact"] = format_exact
env.filters["signed"] = _signed


def build_results_text(
    query: str,
    results: Sequence[CatalogEntry],
    views: Dict[int, ItemView],
) -> str:
    template = env.get_template("results.txt")
    rows = []
    for pos, entry in enumerate(results, start=1):
        view = views.get(entry.entry_id)
        price = view.current_price if view else None
        rows.append(
            {
                "pos": pos,
                "name": entry.display_name,
                "members": entry.members_only,
                "price_str": format_number(price) if price is not None else "no data",
            }
        )
    return template.render(query=query, rows=rows)


def build_item_text(view: ItemView, now: Optional[float] = None) -> str:
    template = env.get_template("item.txt")
    entry = view.entry

    market = None
    if view.has_market_data:
        quote = view.quote
        roi = view.roi
        market = {
            "buy_str": format_exact(quote.instant_buy_price),
            "buy_age": format_time_ago(quote.instant_buy_timestamp, now),
            "sell_str": format_exact(quote.instant_sell_price),
            "sell_age": format_time_ago(quote.instant_sell_timestamp, now),
            "margin_str": format_exact(view.margin),
            "roi_str": f"{roi:.2f}%" if roi is not None else "N/A",
        }

    combat = None
    if view.has_combat_stats:
        attrs = view.attributes
        eq = attrs.equipment
        combat = {
            "attack": None,
            "defence": None,
            "other": None,
            "slot": eq.slot if eq else "",
            "speed": attrs.weapon.attack_speed if attrs.weapon else None,
            "weight": attrs.weight,
            "requirements": sorted(eq.requirements.items()) if eq else [],
        }
        if eq:
            combat["attack"] = [
                ("Stab", eq.attack_stab), ("Slash", eq.attack_slash), ("Crush", eq.attack_crush),
                ("Magic", eq.attack_magic), ("Ranged", eq.attack_ranged),
            ]
            combat["defence"] = [
                ("Stab", eq.defence_stab), ("Slash", eq.defence_slash), ("Crush", eq.defence_crush),
                ("Magic", eq.defence_magic), ("Ranged", eq.defence_ranged),
            ]
            combat["other"] = [
                ("Melee Str", _signed(eq.melee_strength)),
                ("Ranged Str", _signed(eq.ranged_strength)),
                ("Magic Dmg", f"{eq.magic_damage}%"),
                ("Prayer", _signed(eq.prayer)),
            ]

    ctx = {
        "name": entry.display_name,
        "entry_id": entry.entry_id,
        "members": entry.members_only,
        "examine": entry.flavor_text,
        "icon_url": entry.icon_url,
        "market": market,
        "no_market_data": NO_MARKET_DATA,
        "limit_str": _or_label(entry.purchase_limit, "Unknown"),
        "high_alch_str": _or_label(entry.high_alch_value, "N/A"),
        "low_alch_str": _or_label(entry.low_alch_value, "N/A"),
        "value_str": _or_label(entry.store_value, "N/A"),
        "combat": combat,
    }
    return template.render(**ctx)


def build_status_text(statuses: Dict[Source, SourceStatus]) -> str:
    template = env.get_template("status.txt")
    rows: List[dict] = [
        {"label": STATUS_LABELS[source], "status": statuses[source].value}
        for source in Source
        if source in statuses
    ]
    return template.render(rows=rows)
