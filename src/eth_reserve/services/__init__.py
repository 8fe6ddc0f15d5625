"""Service layer: reconciliation pipeline, purchase ledger, wallet refresh, alerts."""
from eth_reserve.services.alerts import AlertDispatcher
from eth_reserve.services.enrichment import MarketDataEnricher
from eth_reserve.services.purchases import PurchaseLedger
from eth_reserve.services.rules import Thresholds, pct_change
from eth_reserve.services.snapshot_engine import SnapshotEngine
from eth_reserve.services.wallets import WalletRefresher

__all__ = [
    "AlertDispatcher",
    "MarketDataEnricher",
    "PurchaseLedger",
    "SnapshotEngine",
    "Thresholds",
    "WalletRefresher",
    "pct_change",
]
