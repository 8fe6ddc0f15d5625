"""Database package: models and session management."""
from eth_reserve.db.models import (AccountingType, Company, CompanyStatus,
                                   CompanyWallet, MarketCapTracking, Purchase,
                                   PurchaseType, Snapshot, SnapshotCompany)

__all__ = [
    "AccountingType",
    "Company",
    "CompanyStatus",
    "CompanyWallet",
    "MarketCapTracking",
    "Purchase",
    "PurchaseType",
    "Snapshot",
    "SnapshotCompany",
]
