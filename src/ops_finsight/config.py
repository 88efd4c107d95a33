# Ops FinSight - Financial analytics engine for business-unit dashboards
# Copyright (c) 2025 Maxence Bernard (maxencebernardhub)
# Licensed under the MIT License. See LICENSE file for details.

"""
Configuration helpers for Ops FinSight.

This module is responsible for:
- loading the analytics configuration from a TOML file,
- validating the reporting options (period, granularity, link key),
- exposing them as a typed, immutable dataclass.

Expected layout
---------------
    [analytics]
    currency = "AED"
    link_key = "seminar_id"
    fallback_label_prefix = "Seminar"
    default_period = "all"
    default_granularity = "monthly"

    [display]
    decimals = 2

Every key is optional; missing keys fall back to the defaults of
``AnalyticsConfig``.
"""

import tomllib
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional

from .calendar_grid import MONTHLY, check_granularity
from .periods import ALL, check_period
from .profitability import DEFAULT_FALLBACK_PREFIX
from .transactions import DEFAULT_LINK_KEY

DEFAULT_CONFIG_FILE = "ops_finsight_config.toml"


@dataclass(frozen=True)
class AnalyticsConfig:
    """
    Reporting options shared by the dashboard pipeline and the CLI.

    Attributes
    ----------
    currency :
        Reporting currency the amounts were normalized to (display only).
    link_key :
        Metadata key attributing a transaction to a seminar/project.
    fallback_label_prefix :
        Prefix of the placeholder name of unresolved seminar/project ids.
    default_period :
        Period selector used when none is requested ('all', 'ytd', ...).
    default_granularity :
        Bucket size of continuous series ('daily', 'weekly', 'monthly').
    decimals :
        Number of decimals used when rendering amounts.
    """

    currency: str = "AED"
    link_key: str = DEFAULT_LINK_KEY
    fallback_label_prefix: str = DEFAULT_FALLBACK_PREFIX
    default_period: str = ALL
    default_granularity: str = MONTHLY
    decimals: int = 2


def _load_toml(path: Path) -> dict[str, Any]:
    """
    Load a TOML file and return its content as a dictionary.

    Raises:
        FileNotFoundError: if the file does not exist.
        ValueError: if the TOML content cannot be parsed.
    """
    if not path.is_file():
        raise FileNotFoundError(f"Config file not found: {path}")

    try:
        return tomllib.loads(path.read_text(encoding="utf-8"))
    except tomllib.TOMLDecodeError as exc:
        raise ValueError(f"Failed to parse TOML config file: {path}") from exc


def _section(raw: Mapping[str, Any], name: str) -> Mapping[str, Any]:
    section = raw.get(name) or {}
    if not isinstance(section, Mapping):
        raise ValueError(f"Config section [{name}] must be a table.")
    return section


def parse_config(raw: Mapping[str, Any]) -> AnalyticsConfig:
    """
    Build an AnalyticsConfig from parsed TOML data.

    Raises:
        ValueError: if a period, granularity or decimals value is invalid.
    """
    defaults = AnalyticsConfig()
    analytics = _section(raw, "analytics")
    display = _section(raw, "display")

    default_period = str(analytics.get("default_period", defaults.default_period))
    check_period(default_period)

    default_granularity = str(
        analytics.get("default_granularity", defaults.default_granularity)
    )
    check_granularity(default_granularity)

    link_key = str(analytics.get("link_key") or defaults.link_key).strip()

    try:
        decimals = int(display.get("decimals", defaults.decimals))
    except (TypeError, ValueError) as exc:
        raise ValueError(
            "Invalid value for 'display.decimals' in the configuration. "
            "Expected an integer."
        ) from exc
    if decimals < 0:
        raise ValueError("'display.decimals' cannot be negative.")

    return AnalyticsConfig(
        currency=str(analytics.get("currency") or defaults.currency),
        link_key=link_key,
        fallback_label_prefix=str(
            analytics.get("fallback_label_prefix", defaults.fallback_label_prefix)
        ),
        default_period=default_period,
        default_granularity=default_granularity,
        decimals=decimals,
    )


def load_config(config_path: Optional[str] = None) -> AnalyticsConfig:
    """
    Load the Ops FinSight configuration.

    With an explicit ``config_path`` the file must exist. Without one,
    ``ops_finsight_config.toml`` in the current directory is used when
    present, otherwise the built-in defaults are returned.
    """
    if config_path is None:
        config_file = Path(DEFAULT_CONFIG_FILE).resolve()
        if not config_file.is_file():
            return AnalyticsConfig()
    else:
        config_file = Path(config_path).resolve()

    return parse_config(_load_toml(config_file))
