"""Shared test fixtures and sample data."""
from __future__ import annotations

import textwrap
from pathlib import Path

import pytest

from flowlend.auth import WalletAuth
from flowlend.config import (
    AppConfig,
    AppDetailConfig,
    LedgerConfig,
    MonitorConfig,
    RiskConfig,
    TransactionConfig,
    WalletConfig,
)
from flowlend.models import Position
from tests.fakes import CONTRACTS, WALLET, FakeLedger

# ---------------------------------------------------------------------------
# Config fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def sample_ledger_config() -> LedgerConfig:
    return LedgerConfig(
        access_node_endpoints=("https://node1.example.com", "https://node2.example.com"),
        request_timeout=5,
        seal_poll_interval=0,
    )


@pytest.fixture()
def sample_app_config(sample_ledger_config: LedgerConfig) -> AppConfig:
    return AppConfig(
        ledger=sample_ledger_config,
        app=AppDetailConfig(title="FlowLend", icon=""),
        contracts=dict(CONTRACTS),
        risk=RiskConfig(collateral_factor=0.75, liquidation_threshold=1.05),
        transactions=TransactionConfig(compute_limit=9999),
        wallet=WalletConfig(address=WALLET, walletconnect_project_id="wc-project"),
        monitor=MonitorConfig(refresh_interval_seconds=5),
    )


@pytest.fixture()
def sample_position() -> Position:
    return Position(collateral="100.00000000", borrowed="50.00000000")


# ---------------------------------------------------------------------------
# Config YAML fixture
# ---------------------------------------------------------------------------

SAMPLE_YAML = textwrap.dedent("""\
    ledger:
      access_node_endpoints: ["https://rest-testnet.example.com/"]
      request_timeout: 10
      seal_poll_interval: 0.5
    app:
      title: FlowLend
    contracts:
      FlowLend: "0xcf265b057b710867"
      FlowToken: "0x7e60df042a9c0868"
      FungibleToken: "0x9a0766d93b6608b7"
    risk:
      collateral_factor: 0.75
      liquidation_threshold: 1.05
    transactions:
      compute_limit: 9999
    wallet:
      address: "0x01cf0e2f2f715450"
      walletconnect_project_id: ""
""")


@pytest.fixture()
def sample_yaml_path(tmp_path: Path) -> Path:
    cfg_file = tmp_path / "config.yaml"
    cfg_file.write_text(SAMPLE_YAML)
    return cfg_file


# ---------------------------------------------------------------------------
# Collaborator fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def ledger() -> FakeLedger:
    fake = FakeLedger()
    fake.set_position(WALLET, collateral=100.0, borrowed=0.0)
    return fake


@pytest.fixture()
def auth(sample_app_config: AppConfig) -> WalletAuth:
    return WalletAuth(sample_app_config)
