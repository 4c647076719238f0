from __future__ import annotations

from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any

import holidays as pyholidays
import yaml

DEFAULT_OPEN_HOUR = 7
DEFAULT_CLOSE_HOUR = 22
DEFAULT_TABLES = tuple(f"T{i}" for i in range(1, 11))


@dataclass(frozen=True)
class VenueConfig:
    open_hour: int = DEFAULT_OPEN_HOUR
    close_hour: int = DEFAULT_CLOSE_HOUR
    tables: tuple[str, ...] = field(default=DEFAULT_TABLES)
    holiday_country: str | None = None

    def __post_init__(self) -> None:
        if not 0 <= self.open_hour <= 23 or not 0 <= self.close_hour <= 23:
            raise ValueError("open_hour and close_hour must be between 0 and 23.")
        if self.open_hour > self.close_hour:
            raise ValueError("open_hour must not be later than close_hour.")
        if not self.tables:
            raise ValueError("tables must not be empty.")
        if len(set(self.tables)) != len(self.tables):
            raise ValueError("tables must not contain duplicates.")
        if any(not str(table).strip() for table in self.tables):
            raise ValueError("table identifiers must not be blank.")
        if self.holiday_country is not None and self.holiday_country not in pyholidays.list_supported_countries():
            raise ValueError(f"Unsupported holiday_country: {self.holiday_country}")

    def is_known_table(self, table: str) -> bool:
        return table in self.tables

    def hours_label(self) -> str:
        return f"{self.open_hour:02d}:00-{self.close_hour:02d}:59"


PROFILES: dict[str, VenueConfig] = {
    "default": VenueConfig(),
    "late-opening": VenueConfig(open_hour=8),
}


def get_profile(name: str) -> VenueConfig:
    try:
        return PROFILES[name]
    except KeyError:
        raise ValueError(f"Unknown venue profile: {name}") from None


def load_venue_config(path: str | Path) -> VenueConfig:
    """Build a VenueConfig from a YAML file.

    The file may name a base ``profile`` and override ``open_hour``,
    ``close_hour``, ``tables`` and ``holiday_country`` individually.
    """
    config_path = Path(path)
    try:
        payload = yaml.safe_load(config_path.read_text(encoding="utf-8"))
    except (OSError, yaml.YAMLError) as error:
        raise ValueError(f"Could not read venue config: {config_path}") from error

    if payload is None:
        return PROFILES["default"]
    if not isinstance(payload, dict):
        raise ValueError("Venue config must be a mapping.")
    return venue_config_from_dict(payload)


def venue_config_from_dict(data: dict[str, Any]) -> VenueConfig:
    base = get_profile(str(data.get("profile", "default")))
    overrides: dict[str, Any] = {}
    for key in ("open_hour", "close_hour"):
        if key in data:
            try:
                overrides[key] = int(data[key])
            except (TypeError, ValueError):
                raise ValueError(f"{key} must be an integer.") from None
    if "tables" in data:
        tables = data["tables"]
        if not isinstance(tables, list):
            raise ValueError("tables must be a list.")
        overrides["tables"] = tuple(str(table).strip() for table in tables)
    if "holiday_country" in data:
        country = data["holiday_country"]
        overrides["holiday_country"] = str(country).upper() if country else None
    return replace(base, **overrides)
