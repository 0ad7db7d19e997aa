# core/models.py
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, Optional, Tuple

ICON_BASE_URL = "https://oldschool.runescape.wiki/images/"


class Source(str, Enum):
    CATALOG = "catalog"
    PRICES = "prices"
    ATTRIBUTES = "attributes"


class SourceStatus(str, Enum):
    PENDING = "pending"
    ONLINE = "online"
    OFFLINE = "offline"


def _opt_int(value: Any) -> Optional[int]:
    if value is None or isinstance(value, bool):
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def _opt_float(value: Any) -> Optional[float]:
    if value is None or isinstance(value, bool):
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


@dataclass(frozen=True)
class CatalogEntry:
    """
    One searchable item from the catalog provider.
    Identity is entry_id; the rest is display data and static values.
    """
    entry_id: int
    display_name: str
    flavor_text: str = ""
    members_only: bool = False
    low_alch_value: Optional[int] = None
    high_alch_value: Optional[int] = None
    purchase_limit: Optional[int] = None
    store_value: int = 0
    icon_key: str = ""

    @property
    def icon_url(self) -> str:
        if not self.icon_key:
            return ""
        return ICON_BASE_URL + self.icon_key.replace(" ", "_")

    @classmethod
    def from_json(cls, raw: Dict[str, Any]) -> "CatalogEntry":
        return cls(
            entry_id=int(raw["id"]),
            display_name=str(raw.get("name") or "").strip(),
            flavor_text=str(raw.get("examine") or ""),
            members_only=bool(raw.get("members", False)),
            low_alch_value=_opt_int(raw.get("lowalch")),
            high_alch_value=_opt_int(raw.get("highalch")),
            purchase_limit=_opt_int(raw.get("limit")),
            store_value=_opt_int(raw.get("value")) or 0,
            icon_key=str(raw.get("icon") or ""),
        )


@dataclass(frozen=True)
class PriceQuote:
    # Unix timestamps (seconds); any side may be missing when it has not traded.
    instant_buy_price: Optional[int] = None
    instant_buy_timestamp: Optional[int] = None
    instant_sell_price: Optional[int] = None
    instant_sell_timestamp: Optional[int] = None

    @classmethod
    def from_json(cls, raw: Dict[str, Any]) -> "PriceQuote":
        return cls(
            instant_buy_price=_opt_int(raw.get("high")),
            instant_buy_timestamp=_opt_int(raw.get("highTime")),
            instant_sell_price=_opt_int(raw.get("low")),
            instant_sell_timestamp=_opt_int(raw.get("lowTime")),
        )


@dataclass(frozen=True)
class EquipmentStats:
    attack_stab: int = 0
    attack_slash: int = 0
    attack_crush: int = 0
    attack_magic: int = 0
    attack_ranged: int = 0
    defence_stab: int = 0
    defence_slash: int = 0
    defence_crush: int = 0
    defence_magic: int = 0
    defence_ranged: int = 0
    melee_strength: int = 0
    ranged_strength: int = 0
    magic_damage: int = 0
    prayer: int = 0
    slot: str = ""
    requirements: Dict[str, int] = field(default_factory=dict)

    @classmethod
    def from_json(cls, raw: Dict[str, Any]) -> "EquipmentStats":
        bonuses = {
            name: _opt_int(raw.get(name)) or 0
            for name in (
                "attack_stab", "attack_slash", "attack_crush", "attack_magic", "attack_ranged",
                "defence_stab", "defence_slash", "defence_crush", "defence_magic", "defence_ranged",
                "melee_strength", "ranged_strength", "magic_damage", "prayer",
            )
        }
        requirements = raw.get("requirements") or {}
        if not isinstance(requirements, dict):
            requirements = {}
        return cls(
            slot=str(raw.get("slot") or ""),
            requirements={
                str(skill): level
                for skill, level in ((k, _opt_int(v)) for k, v in requirements.items())
                if level is not None
            },
            **bonuses,
        )


@dataclass(frozen=True)
class WeaponStats:
    attack_speed: Optional[int] = None
    weapon_type: str = ""

    @classmethod
    def from_json(cls, raw: Dict[str, Any]) -> "WeaponStats":
        return cls(
            attack_speed=_opt_int(raw.get("attack_speed")),
            weapon_type=str(raw.get("weapon_type") or ""),
        )


@dataclass(frozen=True)
class AttributeRecord:
    entry_id: int
    equipment: Optional[EquipmentStats] = None
    weapon: Optional[WeaponStats] = None
    weight: Optional[float] = None

    @property
    def has_combat_stats(self) -> bool:
        return self.equipment is not None or self.weapon is not None

    @classmethod
    def from_json(cls, raw: Dict[str, Any], entry_id: Optional[int] = None) -> "AttributeRecord":
        equipment = raw.get("equipment")
        weapon = raw.get("weapon")
        return cls(
            entry_id=entry_id if entry_id is not None else int(raw["id"]),
            equipment=EquipmentStats.from_json(equipment) if isinstance(equipment, dict) else None,
            weapon=WeaponStats.from_json(weapon) if isinstance(weapon, dict) else None,
            weight=_opt_float(raw.get("weight")),
        )


@dataclass(frozen=True)
class MarketSnapshot:
    """Everything one load() produced, tagged with its generation."""
    generation: int
    entries: Tuple[CatalogEntry, ...]
    prices: Dict[int, PriceQuote]
    attributes: Dict[int, AttributeRecord]
    loaded_at: datetime
    committed: bool = True
