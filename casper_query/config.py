"""Configuration loader — reads config.yaml, interpolates env vars, validates."""
from __future__ import annotations

import logging
import os
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml
from dotenv import load_dotenv

from .encoding import decode_base64

logger = logging.getLogger(__name__)

PUBLIC_KEY_SIZE = 32

# ---------------------------------------------------------------------------
# Frozen config dataclasses
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class NodeConfig:
    url: str = ""
    timeout: int = 30


@dataclass(frozen=True)
class ListingConfig:
    page_size: int = 5


@dataclass(frozen=True)
class AccountConfig:
    name: str = ""
    public_key_base64: str = ""


@dataclass(frozen=True)
class AppConfig:
    node: NodeConfig = field(default_factory=NodeConfig)
    listing: ListingConfig = field(default_factory=ListingConfig)
    accounts: tuple[AccountConfig, ...] = ()


# ---------------------------------------------------------------------------
# Env interpolation
# ---------------------------------------------------------------------------

_ENV_VAR_RE = re.compile(r"\$\{([^}]+)}")


def _interpolate_env(value: Any) -> Any:
    """Recursively replace ${VAR} references with environment variable values."""
    if isinstance(value, str):
        return _ENV_VAR_RE.sub(lambda m: os.environ.get(m.group(1), ""), value)
    if isinstance(value, dict):
        return {k: _interpolate_env(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_interpolate_env(item) for item in value]
    return value


# ---------------------------------------------------------------------------
# YAML → dataclass builders
# ---------------------------------------------------------------------------


def _build_node(raw: dict[str, Any]) -> NodeConfig:
    return NodeConfig(
        url=str(raw.get("url", "")),
        timeout=int(raw.get("timeout", 30)),
    )


def _build_listing(raw: dict[str, Any]) -> ListingConfig:
    return ListingConfig(page_size=int(raw.get("page_size", 5)))


def _build_accounts(raw: list[dict[str, Any]]) -> tuple[AccountConfig, ...]:
    accounts: list[AccountConfig] = []
    for a in raw:
        accounts.append(
            AccountConfig(
                name=a.get("name", ""),
                public_key_base64=a.get("public_key_base64", ""),
            )
        )
    return tuple(accounts)


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def load_config(config_path: str | Path | None = None) -> AppConfig:
    """Load and validate application configuration from YAML + .env.

    Args:
        config_path: Path to config.yaml. Defaults to ``config.yaml`` in the
            project root (two levels up from this file).
    """
    load_dotenv()

    if config_path is None:
        config_path = Path(__file__).resolve().parent.parent / "config.yaml"
    config_path = Path(config_path)

    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(config_path) as f:
        raw = yaml.safe_load(f) or {}

    raw = _interpolate_env(raw)

    cfg = AppConfig(
        node=_build_node(raw.get("node", {})),
        listing=_build_listing(raw.get("listing", {})),
        accounts=_build_accounts(raw.get("accounts", [])),
    )

    _validate(cfg)
    logger.info("Configuration loaded from %s", config_path)
    return cfg


def _validate(cfg: AppConfig) -> None:
    """Raise on invalid configuration."""
    if not cfg.node.url:
        raise ValueError("Node url must be configured")

    if cfg.listing.page_size <= 0:
        raise ValueError("Listing page_size must be positive")

    seen: set[str] = set()
    for account in cfg.accounts:
        if not account.name:
            raise ValueError("Every account needs a name")
        if account.name in seen:
            raise ValueError(f"Duplicate account name '{account.name}'")
        seen.add(account.name)

        try:
            key = decode_base64(account.public_key_base64)
        except ValueError as e:
            raise ValueError(
                f"Account '{account.name}' has an invalid public key"
            ) from e
        if len(key) != PUBLIC_KEY_SIZE:
            raise ValueError(
                f"Account '{account.name}' public key must be {PUBLIC_KEY_SIZE} bytes"
            )
