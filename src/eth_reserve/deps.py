"""FastAPI dependency injection: the DI container lives on app.state; Depends() resolves from it."""
from typing import Annotated

from fastapi import Depends, Request

from eth_reserve.config import Settings
from eth_reserve.container import Container
from eth_reserve.services import (AlertDispatcher, PurchaseLedger,
                                  SnapshotEngine, WalletRefresher)


def get_container(request: Request) -> Container:
    """Resolve the container created at app construction."""
    return request.app.state.container


def get_settings(request: Request) -> Settings:
    return get_container(request).settings()


def get_snapshot_engine(request: Request) -> SnapshotEngine:
    return get_container(request).snapshot_engine()


def get_purchase_ledger(request: Request) -> PurchaseLedger:
    return get_container(request).purchase_ledger()


def get_wallet_refresher(request: Request) -> WalletRefresher:
    return get_container(request).wallet_refresher()


def get_alert_dispatcher(request: Request) -> AlertDispatcher:
    return get_container(request).alert_dispatcher()


# Type aliases for route injection
SettingsDep = Annotated[Settings, Depends(get_settings)]
SnapshotEngineDep = Annotated[SnapshotEngine, Depends(get_snapshot_engine)]
PurchaseLedgerDep = Annotated[PurchaseLedger, Depends(get_purchase_ledger)]
WalletRefresherDep = Annotated[WalletRefresher, Depends(get_wallet_refresher)]
AlertDispatcherDep = Annotated[AlertDispatcher, Depends(get_alert_dispatcher)]
