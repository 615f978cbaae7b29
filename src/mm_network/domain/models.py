"""Domain models for mm_network: pure dataclasses."""

from dataclasses import dataclass


@dataclass(frozen=True)
class NativeCurrency:
    name: str
    symbol: str
    decimals: int = 18


@dataclass(frozen=True)
class NetworkConfig:
    chain_id: int
    name: str
    rpc_url: str
    block_explorer: str
    native_currency: NativeCurrency
    asset_contract: str        # ERC-721 asset contract
    marketplace_contract: str  # marketplace contract

    @property
    def chain_id_hex(self) -> str:
        return hex(self.chain_id)

    def to_add_chain_params(self) -> dict:
        """Payload for the signer's add-network request (wallet_addEthereumChain)."""
        return {
            "chainId": self.chain_id_hex,
            "chainName": self.name,
            "rpcUrls": [self.rpc_url],
            "nativeCurrency": {
                "name": self.native_currency.name,
                "symbol": self.native_currency.symbol,
                "decimals": self.native_currency.decimals,
            },
            "blockExplorerUrls": [self.block_explorer],
        }
