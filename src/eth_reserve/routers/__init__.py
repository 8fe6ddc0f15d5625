"""API routers.

Includes routes for:
- /cron - scheduled jobs (daily snapshots, wallet balance refresh), CRON_SECRET bearer
- /purchases - purchase ledger, ADMIN_TOKEN bearer
"""
from eth_reserve.routers.cron import router as cron_router
from eth_reserve.routers.purchases import router as purchases_router

__all__ = ["cron_router", "purchases_router"]
