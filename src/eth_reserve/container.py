"""DI container. Build with init_container(); routes resolve services through deps.py."""
from dependency_injector import containers, providers

from eth_reserve.config import Settings
from eth_reserve.db.sessions import create_db_engine, make_session_factory
from eth_reserve.providers import (AlchemyBalanceProvider, CoinGeckoProvider,
                                   ResendNotifier, YFinanceProvider)
from eth_reserve.services import (AlertDispatcher, MarketDataEnricher,
                                  PurchaseLedger, SnapshotEngine, Thresholds,
                                  WalletRefresher)


class Container(containers.DeclarativeContainer):
    settings = providers.Singleton(Settings.from_env)

    db_engine = providers.Singleton(
        create_db_engine,
        settings.provided.database_url,
        echo=settings.provided.sql_echo,
    )
    session_factory = providers.Singleton(make_session_factory, db_engine)

    # Providers (singletons; closed on shutdown)
    equity_provider = providers.Singleton(YFinanceProvider)
    crypto_provider = providers.Singleton(
        CoinGeckoProvider,
        api_key=settings.provided.coingecko_api_key,
        timeout=settings.provided.provider_timeout_seconds,
    )
    balance_provider = providers.Singleton(
        AlchemyBalanceProvider,
        api_key=settings.provided.alchemy_api_key,
        beaconchain_base_url=settings.provided.beaconchain_base_url,
    )
    notifier = providers.Singleton(
        ResendNotifier,
        api_key=settings.provided.resend_api_key,
        to_address=settings.provided.alert_email_to,
        from_address=settings.provided.alert_email_from,
    )

    thresholds = providers.Singleton(Thresholds.from_settings, settings)
    enricher = providers.Singleton(
        MarketDataEnricher,
        equity_provider,
        crypto_provider,
        timeout=settings.provided.provider_timeout_seconds,
    )
    snapshot_engine = providers.Singleton(
        SnapshotEngine,
        session_factory,
        enricher,
        crypto_provider,
        thresholds=thresholds,
        price_timeout=settings.provided.provider_timeout_seconds,
    )
    purchase_ledger = providers.Singleton(PurchaseLedger, session_factory, snapshot_engine)
    wallet_refresher = providers.Singleton(WalletRefresher, session_factory, balance_provider)
    alert_dispatcher = providers.Singleton(AlertDispatcher, notifier)


# Providers owning network clients, in shutdown order
CLOSABLE_PROVIDERS = ("crypto_provider", "equity_provider", "balance_provider", "notifier")


def init_container() -> Container:
    """Create the container. Tests override providers before the first resolve."""
    return Container()
