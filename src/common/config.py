"""Configuration helpers for loading YAML files with environment expansion."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping, MutableMapping

import yaml

DEFAULT_WS_URL = "wss://api.ledgerx.com/ws"
DEFAULT_API_URL = "https://api.ledgerx.com"
DEFAULT_TRADE_URL = "https://trade.ledgerx.com/api"
UNKNOWN_CONTRACT_POLICIES = ("raise", "skip")


def load_config(path: str | os.PathLike[str]) -> dict[str, Any]:
    """Load a YAML configuration file and expand environment variables.

    Args:
        path: Path to the YAML configuration file.

    Returns:
        Parsed configuration dictionary. Returns an empty dict if the file is
        empty.
    """

    config_path = Path(path)
    raw_text = config_path.read_text()
    expanded = os.path.expandvars(raw_text)
    data = yaml.safe_load(expanded) or {}
    if not isinstance(data, Mapping):
        raise ValueError(f"Config root must be a mapping, got {type(data)!r}")
    return dict(data)


def _as_mapping(value: object) -> MutableMapping[str, Any]:
    if isinstance(value, MutableMapping):
        return value
    return {}


def _as_int(value: object, default: int) -> int:
    try:
        if value is None:
            return default
        return int(value)
    except (TypeError, ValueError):
        return default


@dataclass(frozen=True)
class VenueSettings:
    """Endpoints and credentials for one venue deployment."""

    ws_url: str = DEFAULT_WS_URL
    api_url: str = DEFAULT_API_URL
    trade_url: str = DEFAULT_TRADE_URL
    api_key: str = ""
    unknown_contract_policy: str = "raise"
    max_events: int = 0

    @classmethod
    def from_config(cls, config: Mapping[str, Any]) -> "VenueSettings":
        venue = _as_mapping(config.get("venue"))
        contracts = _as_mapping(config.get("contracts"))
        app = _as_mapping(config.get("app"))

        policy = str(contracts.get("unknown_contract_policy", "raise")).lower()
        if policy not in UNKNOWN_CONTRACT_POLICIES:
            raise ValueError(
                f"contracts.unknown_contract_policy must be one of "
                f"{UNKNOWN_CONTRACT_POLICIES}, got {policy!r}"
            )

        api_key = str(venue.get("api_key") or "")
        # An unset variable survives expandvars as the literal placeholder.
        if api_key.startswith("${"):
            api_key = ""

        return cls(
            ws_url=str(venue.get("ws_url") or DEFAULT_WS_URL),
            api_url=str(venue.get("api_url") or DEFAULT_API_URL).rstrip("/"),
            trade_url=str(venue.get("trade_url") or DEFAULT_TRADE_URL).rstrip("/"),
            api_key=api_key,
            unknown_contract_policy=policy,
            max_events=max(_as_int(app.get("max_events"), 0), 0),
        )


__all__ = ["VenueSettings", "load_config"]
