"""Wallet balance provider: Alchemy JSON-RPC across EVM networks plus beacon chain validators."""
import asyncio
import logging
import os

import httpx

from eth_reserve.exceptions import BalanceUnavailableError
from eth_reserve.providers.chain.alchemy.models import (NETWORKS,
                                                        AlchemyNetwork,
                                                        JsonRpcRequest)
from eth_reserve.providers.chain.balance_provider_abc import \
    BalanceProviderABC
from eth_reserve.providers.core.utils import GWEI

logger = logging.getLogger(__name__)

_ZERO_BALANCE = "0x" + "0" * 64


class AlchemyBalanceProvider(BalanceProviderABC):
    """Sums native ETH, ETH-derivative token and staked validator balances for an address.

    One shared httpx client is used for every network. A network that fails is
    logged and counted as zero; the call only fails when every source failed.
    """

    name = "alchemy"
    VALIDATOR_PAGE_SIZE = 200
    VALIDATOR_CONCURRENCY = 4

    def __init__(
        self,
        api_key: str | None = None,
        beaconchain_base_url: str = "https://beaconcha.in",
        networks: tuple[AlchemyNetwork, ...] = NETWORKS,
        timeout: float = 20.0,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialize the balance provider.

        Args:
            api_key: Alchemy API key. Defaults to ALCHEMY_API_KEY env var.
            beaconchain_base_url: Base URL of the beaconcha.in API.
            networks: Networks to scan.
            timeout: Per-request timeout in seconds.
            client: Preconfigured client (tests inject one with a mock transport).
        """
        self._api_key = api_key or os.getenv("ALCHEMY_API_KEY", "")
        self._beacon_base = beaconchain_base_url.rstrip("/")
        self._networks = networks
        self._client = client or httpx.AsyncClient(
            headers={"Accept": "application/json"}, timeout=timeout
        )

    def _rpc_url(self, network: AlchemyNetwork) -> str:
        return f"https://{network.slug}.g.alchemy.com/v2/{self._api_key}"

    async def _rpc(self, network: AlchemyNetwork, method: str, params: list):
        payload = JsonRpcRequest(method=method, params=params).model_dump()
        response = await self._client.post(self._rpc_url(network), json=payload)
        response.raise_for_status()
        body = response.json()
        if "error" in body:
            raise ValueError(f"{network.name} {method} error: {body['error']}")
        return body["result"]

    async def _network_balance(self, network: AlchemyNetwork, address: str) -> int:
        """Native balance plus listed token balances on one network, in wei."""
        total = 0
        if network.native_eth:
            total += int(await self._rpc(network, "eth_getBalance", [address, "latest"]), 16)
        if network.tokens:
            result = await self._rpc(
                network, "alchemy_getTokenBalances", [address, list(network.tokens.values())]
            )
            for token in result.get("tokenBalances", []):
                raw = token.get("tokenBalance")
                if raw and raw != _ZERO_BALANCE and not token.get("error"):
                    total += int(raw, 16)
        return total

    async def _validator_keys(self, address: str) -> list[str]:
        keys: list[str] = []
        offset = 0
        while True:
            response = await self._client.get(
                f"{self._beacon_base}/api/v1/validator/withdrawalCredentials/{address}",
                params={"limit": self.VALIDATOR_PAGE_SIZE, "offset": offset},
            )
            response.raise_for_status()
            body = response.json()
            if body.get("status") != "OK":
                raise ValueError(f"beaconcha.in status {body.get('status')}")
            page = body.get("data") or []
            keys.extend(v["publickey"] for v in page)
            if len(page) < self.VALIDATOR_PAGE_SIZE:
                return keys
            offset += self.VALIDATOR_PAGE_SIZE

    async def _validator_balance(self, pubkey: str, limit: asyncio.Semaphore) -> int:
        async with limit:
            response = await self._client.get(f"{self._beacon_base}/api/v1/validator/{pubkey}")
        if response.status_code != 200:
            logger.warning("Validator %s balance lookup failed: %s", pubkey, response.status_code)
            return 0
        body = response.json()
        if body.get("status") != "OK":
            logger.warning("Validator %s balance lookup returned %s", pubkey, body.get("status"))
            return 0
        return int(body["data"]["effectivebalance"]) * GWEI

    async def get_validator_balance_wei(self, address: str) -> int:
        """Sum of effective balances of validators withdrawing to address, in wei."""
        keys = await self._validator_keys(address)
        limit = asyncio.Semaphore(self.VALIDATOR_CONCURRENCY)
        balances = await asyncio.gather(*(self._validator_balance(k, limit) for k in keys))
        return sum(balances)

    async def get_balance_wei(self, address: str) -> int:
        """Total ETH-equivalent balance of an address across networks and validators."""
        results = await asyncio.gather(
            *(self._network_balance(n, address) for n in self._networks),
            self.get_validator_balance_wei(address),
            return_exceptions=True,
        )
        sources = [n.name for n in self._networks] + ["validators"]
        total = 0
        failures = 0
        for source, result in zip(sources, results):
            if isinstance(result, Exception):
                failures += 1
                logger.warning("Balance for %s on %s failed: %s", address, source, result)
                continue
            total += result
        if failures == len(results):
            raise BalanceUnavailableError(f"No balance source answered for {address}")
        return total

    async def close(self) -> None:
        """Close the HTTP client."""
        await self._client.aclose()
