"""Network and token configuration for the Alchemy balance provider."""
from pydantic import BaseModel, Field


class AlchemyNetwork(BaseModel):
    """One EVM network scanned for ETH and ETH-derivative balances."""

    name: str
    slug: str  # subdomain in https://<slug>.g.alchemy.com/v2/<key>
    native_eth: bool = True
    tokens: dict[str, str] = Field(default_factory=dict)


class JsonRpcRequest(BaseModel):
    jsonrpc: str = "2.0"
    id: int = 1
    method: str
    params: list


NETWORKS: tuple[AlchemyNetwork, ...] = (
    AlchemyNetwork(
        name="Ethereum Mainnet",
        slug="eth-mainnet",
        tokens={
            "stETH": "0xae7ab96520DE3A18E5e111B5EaAb095312D7fE84",
            "rETH": "0xae78736Cd615f374D3085123A210448E74Fc6393",
            "WETH": "0xC02aaA39b223FE8D0A0E5C4F27eAD9083C756Cc2",
            "wstETH": "0x7f39c581f595b53c5cb19bd0b3f8da6c935e2ca0",
            "aEthWETH": "0x4d5F47FA6A74757f35C14fD3a6Ef8E3C9BC514E8",
            "aEthwstETH": "0x0B925eD163218f6662a35e0f0371Ac234f9E9371",
            "aEthweETH": "0xBdfa7b7893081B35Fb54027489e2Bc7A38275129",
            "oETH": "0x856c4Efb76C1D1AE02e20CEB03A2A6a08b0b8dC3",
            "ankrETH": "0xE95A203B1a91a908F9B9CE46459d101078c2c3cb",
            "ETHx": "0xA35b1B31Ce002FBF2058D22F30f95D405200A15b",
            "rsETH": "0xA1290d69c65A6Fe4DF752f95823fae25cB99e5A7",
            "eETH": "0x35fA164735182de50811E8e2E824cFb9B6118ac2",
            "weETH": "0xCd5fE23C85820F7B72D0926FC9b05b43E359b7ee",
            "osETH": "0xf1C9acDc66974dFB6dEcB12aA385b9cD01190E38",
            "frxETH": "0x5E8422345238F34275888049021821E8E08CAa1f",
            "sfrxETH": "0xac3E018457B222d93114458476f3E3416Abbe38F",
        },
    ),
    AlchemyNetwork(
        name="Base Mainnet",
        slug="base-mainnet",
        tokens={
            "wstETH": "0xc1CBa3fCea344f92D9239c08C0568f6F2F0ee452",
            "WETH": "0x4200000000000000000000000000000000000006",
            "aBasWETH": "0xD4a0e0b9149BCee3C920d2E00b5dE09138fd8bb7",
            "aBaswstETH": "0x99CBC45ea5bb7eF3a5BC08FB1B7E56bB2442Ef0D",
        },
    ),
    AlchemyNetwork(
        name="Optimism",
        slug="opt-mainnet",
        tokens={
            "WETH": "0x4200000000000000000000000000000000000006",
            "wstETH": "0x1F32b1c2345538c0c6f582fCB022739c4A194Ebb",
        },
    ),
    AlchemyNetwork(
        name="Arbitrum",
        slug="arb-mainnet",
        tokens={
            "WETH": "0x82aF49447D8a07e3bd95BD0d56f35241523fBab1",
            "wstETH": "0x5979D7b546E38E414F7E9822514be443A4800529",
            "rETH": "0xEC70Dcb4A1EFa46b8F2D97C310C9c4790ba5ffA8",
        },
    ),
    AlchemyNetwork(name="zkSync", slug="zksync-mainnet"),
    AlchemyNetwork(name="Linea", slug="linea-mainnet"),
    AlchemyNetwork(
        name="Gnosis",
        slug="gnosis-mainnet",
        native_eth=False,
        tokens={
            "WETH": "0x6A023CCd1ff6F2045C3309768eAd9E68F978f6e1",
            "wstETH": "0x6C76971f98945AE98dD7d4DFcA8711ebea946eA6",
            "rETH": "0xc791240D1F2dEf5938E2031364Ff4ed887133C3d",
        },
    ),
    AlchemyNetwork(name="Arbitrum Nova", slug="arbnova-mainnet"),
)
