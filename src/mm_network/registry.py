"""Network Registry: static table from chain id to endpoint and contracts.

Adding a network means adding a row to NETWORK_TABLE; nothing else changes.
Contract addresses are the deployed EpicMint asset / marketplace contracts;
the zero address marks a network where they are not deployed yet.
"""

from collections.abc import Mapping

from src.mm_common.errors import UnsupportedNetworkError
from src.mm_network.domain.models import NativeCurrency, NetworkConfig

_UNDEPLOYED = "0x0000000000000000000000000000000000000000"

_ETHER = NativeCurrency("Ether", "ETH", 18)

NETWORK_TABLE: tuple[dict, ...] = (
    {
        "chain_id": 1,
        "name": "Ethereum Mainnet",
        "rpc_url": "https://mainnet.infura.io/v3/YOUR_INFURA_KEY",
        "block_explorer": "https://etherscan.io",
        "native_currency": _ETHER,
        "asset_contract": _UNDEPLOYED,
        "marketplace_contract": _UNDEPLOYED,
    },
    {
        "chain_id": 5,
        "name": "Goerli Testnet",
        "rpc_url": "https://goerli.infura.io/v3/YOUR_INFURA_KEY",
        "block_explorer": "https://goerli.etherscan.io",
        "native_currency": NativeCurrency("Goerli Ether", "GoerliETH", 18),
        "asset_contract": _UNDEPLOYED,
        "marketplace_contract": _UNDEPLOYED,
    },
    {
        "chain_id": 11155111,
        "name": "Sepolia Testnet",
        "rpc_url": "https://sepolia.infura.io/v3/YOUR_INFURA_KEY",
        "block_explorer": "https://sepolia.etherscan.io",
        "native_currency": NativeCurrency("Sepolia Ether", "SepoliaETH", 18),
        "asset_contract": _UNDEPLOYED,
        "marketplace_contract": _UNDEPLOYED,
    },
    {
        "chain_id": 137,
        "name": "Polygon Mainnet",
        "rpc_url": "https://polygon-rpc.com",
        "block_explorer": "https://polygonscan.com",
        "native_currency": NativeCurrency("MATIC", "MATIC", 18),
        "asset_contract": _UNDEPLOYED,
        "marketplace_contract": _UNDEPLOYED,
    },
)


class NetworkRegistry:
    """Read-only lookup over a network table.

    ``rpc_overrides`` replaces endpoint URLs per chain id (e.g. to inject an
    API key from settings) without touching the table itself.
    """

    def __init__(
        self,
        table: tuple[dict, ...] = NETWORK_TABLE,
        rpc_overrides: Mapping[int, str] | None = None,
    ) -> None:
        overrides = dict(rpc_overrides or {})
        self._networks: dict[int, NetworkConfig] = {}
        for row in table:
            row = dict(row)
            if row["chain_id"] in overrides:
                row["rpc_url"] = overrides[row["chain_id"]]
            self._networks[row["chain_id"]] = NetworkConfig(**row)

    def resolve(self, chain_id: int) -> NetworkConfig:
        network = self._networks.get(chain_id)
        if network is None:
            raise UnsupportedNetworkError(chain_id)
        return network

    def is_supported(self, chain_id: int | None) -> bool:
        return chain_id in self._networks

    @property
    def supported_ids(self) -> list[int]:
        return list(self._networks)

    def name_for(self, chain_id: int | None) -> str:
        if chain_id is None:
            return "Unknown"
        network = self._networks.get(chain_id)
        return network.name if network else f"Network {chain_id}"
