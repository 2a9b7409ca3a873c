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

logger = logging.getLogger(__name__)

REQUIRED_CONTRACTS = ("FlowLend", "FlowToken", "FungibleToken")

# ---------------------------------------------------------------------------
# Frozen config dataclasses
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class LedgerConfig:
    access_node_endpoints: tuple[str, ...] = ("https://rest-testnet.onflow.org",)
    request_timeout: int = 30
    discovery_wallet: str = "https://fcl-discovery.onflow.org/testnet/authn"
    seal_poll_interval: float = 1.0


@dataclass(frozen=True)
class AppDetailConfig:
    title: str = "FlowLend"
    icon: str = ""


@dataclass(frozen=True)
class RiskConfig:
    collateral_factor: float = 0.75
    liquidation_threshold: float = 1.05


@dataclass(frozen=True)
class TransactionConfig:
    compute_limit: int = 9999


@dataclass(frozen=True)
class WalletConfig:
    address: str = ""
    walletconnect_project_id: str = ""


@dataclass(frozen=True)
class MonitorConfig:
    refresh_interval_seconds: int = 30


@dataclass(frozen=True)
class AppConfig:
    ledger: LedgerConfig = field(default_factory=LedgerConfig)
    app: AppDetailConfig = field(default_factory=AppDetailConfig)
    contracts: dict[str, str] = field(default_factory=dict)
    risk: RiskConfig = field(default_factory=RiskConfig)
    transactions: TransactionConfig = field(default_factory=TransactionConfig)
    wallet: WalletConfig = field(default_factory=WalletConfig)
    monitor: MonitorConfig = field(default_factory=MonitorConfig)


# ---------------------------------------------------------------------------
# Env interpolation
# ---------------------------------------------------------------------------

_ENV_VAR_RE = re.compile(r"\$\{([^}]+)}")
_ADDRESS_RE = re.compile(r"^0x[0-9a-fA-F]{1,16}$")


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


def _build_ledger(raw: dict[str, Any]) -> LedgerConfig:
    endpoints = raw.get("access_node_endpoints", list(LedgerConfig.access_node_endpoints))
    return LedgerConfig(
        access_node_endpoints=tuple(e.rstrip("/") for e in endpoints if e),
        request_timeout=int(raw.get("request_timeout", 30)),
        discovery_wallet=raw.get("discovery_wallet", LedgerConfig.discovery_wallet),
        seal_poll_interval=float(raw.get("seal_poll_interval", 1.0)),
    )


def _build_app_detail(raw: dict[str, Any]) -> AppDetailConfig:
    return AppDetailConfig(
        title=raw.get("title", "FlowLend"),
        icon=raw.get("icon", ""),
    )


def _build_risk(raw: dict[str, Any]) -> RiskConfig:
    return RiskConfig(
        collateral_factor=float(raw.get("collateral_factor", 0.75)),
        liquidation_threshold=float(raw.get("liquidation_threshold", 1.05)),
    )


def _build_transactions(raw: dict[str, Any]) -> TransactionConfig:
    return TransactionConfig(compute_limit=int(raw.get("compute_limit", 9999)))


def _build_wallet(raw: dict[str, Any]) -> WalletConfig:
    return WalletConfig(
        address=raw.get("address", "") or "",
        walletconnect_project_id=raw.get("walletconnect_project_id", "") or "",
    )


def _build_monitor(raw: dict[str, Any]) -> MonitorConfig:
    return MonitorConfig(
        refresh_interval_seconds=int(raw.get("refresh_interval_seconds", 30)),
    )


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
        ledger=_build_ledger(raw.get("ledger") or {}),
        app=_build_app_detail(raw.get("app") or {}),
        contracts={str(k): str(v) for k, v in (raw.get("contracts") or {}).items()},
        risk=_build_risk(raw.get("risk") or {}),
        transactions=_build_transactions(raw.get("transactions") or {}),
        wallet=_build_wallet(raw.get("wallet") or {}),
        monitor=_build_monitor(raw.get("monitor") or {}),
    )

    _validate(cfg)
    logger.info("Configuration loaded from %s", config_path)
    return cfg


def _validate(cfg: AppConfig) -> None:
    """Raise on invalid configuration."""
    if not cfg.ledger.access_node_endpoints:
        raise ValueError("At least one access node endpoint must be configured")

    for name in REQUIRED_CONTRACTS:
        address = cfg.contracts.get(name)
        if not address:
            raise ValueError(f"Contract '{name}' has no address")
        if not _ADDRESS_RE.match(address):
            raise ValueError(f"Contract '{name}' has invalid address '{address}'")

    if cfg.wallet.address and not _ADDRESS_RE.match(cfg.wallet.address):
        raise ValueError(f"Wallet address '{cfg.wallet.address}' is not a Flow address")

    if not 0 < cfg.risk.collateral_factor <= 1:
        raise ValueError("risk.collateral_factor must be in (0, 1]")
    if cfg.risk.liquidation_threshold <= 0:
        raise ValueError("risk.liquidation_threshold must be positive")
    if cfg.transactions.compute_limit <= 0:
        raise ValueError("transactions.compute_limit must be positive")
