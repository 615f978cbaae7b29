"""AssetRegistryService: mint, batch mint, transfer, approve, burn.

Metadata is pinned by the caller *before* mint; this service only ever
receives the resolved reference, so a failed upload can never leave a
minted asset pointing at nothing.
"""

import logging

from eth_utils import to_checksum_address

from src.mm_asset.domain import contract
from src.mm_asset.domain.events import AssetMinted
from src.mm_asset.domain.models import AssetDetails, MintRequest, RoyaltyInfo
from src.mm_chain.application.orchestrator import LedgerCallOrchestrator
from src.mm_chain.domain.abi import ContractFunction
from src.mm_chain.domain.models import MutatingCallRequest
from src.mm_common.errors import ExpectedEventMissingError, InvalidMetadataError, NotOwnerError
from src.mm_common.units import BPS_DENOMINATOR, validate_bps
from src.mm_network.domain.models import NetworkConfig
from src.mm_session.application.service import AccountSession

logger = logging.getLogger(__name__)


class AssetRegistryService:
    def __init__(
        self,
        orchestrator: LedgerCallOrchestrator,
        session: AccountSession,
        default_royalty_bps: int,
    ) -> None:
        validate_bps(default_royalty_bps)
        self._orchestrator = orchestrator
        self._session = session
        self._default_royalty_bps = default_royalty_bps

    def _network(self) -> NetworkConfig:
        snap = self._session.require_connected()
        return self._session.registry.resolve(snap.network_id)

    def _request(self, fn: ContractFunction, *args) -> MutatingCallRequest:
        return MutatingCallRequest(
            target=self._network().asset_contract,
            data=fn.encode_call(*args),
            label=fn.name,
        )

    def _resolve_mint_args(self, item: MintRequest, account: str) -> tuple[str, str, str, int]:
        if not item.metadata_reference:
            raise InvalidMetadataError("metadata reference is empty; pin metadata before minting")
        bps = self._default_royalty_bps if item.royalty_bps is None else item.royalty_bps
        validate_bps(bps)
        return (
            to_checksum_address(item.to),
            item.metadata_reference,
            to_checksum_address(item.royalty_recipient or account),
            bps,
        )

    # ------------------------------------------------------------------
    # Minting
    # ------------------------------------------------------------------

    async def mint(
        self,
        to: str,
        metadata_reference: str,
        royalty_recipient: str | None = None,
        royalty_bps: int | None = None,
    ) -> int:
        snap = self._session.require_connected()
        args = self._resolve_mint_args(
            MintRequest(to, metadata_reference, royalty_recipient, royalty_bps), snap.account_id
        )
        result = await self._orchestrator.execute(
            self._request(contract.MINT_NFT, *args), expect=AssetMinted
        )
        token_id = result.first.token_id
        logger.info("Asset minted. token=%d tx=%s", token_id, result.tx_hash)
        return token_id

    async def batch_mint(self, items: list[MintRequest]) -> list[int]:
        """Mint all items in one call; token ids come back in emission order."""
        snap = self._session.require_connected()
        if not items:
            return []
        resolved = [self._resolve_mint_args(item, snap.account_id) for item in items]
        recipients, references, royalty_recipients, royalty_bps = (
            list(column) for column in zip(*resolved)
        )
        request = self._request(
            contract.BATCH_MINT_NFT, recipients, references, royalty_recipients, royalty_bps
        )
        result = await self._orchestrator.execute(request, expect=AssetMinted, batch=True)
        token_ids = [event.token_id for event in result.events]
        if len(token_ids) != len(items):
            raise ExpectedEventMissingError(
                f"{AssetMinted.EVENT.name} ({len(token_ids)} of {len(items)})", result.tx_hash
            )
        logger.info("Batch minted %d assets. tx=%s", len(token_ids), result.tx_hash)
        return token_ids

    # ------------------------------------------------------------------
    # Ownership-gated operations
    # ------------------------------------------------------------------

    async def _require_owner(self, token_id: int) -> str:
        snap = self._session.require_connected()
        owner = await self.owner_of(token_id)
        if owner.lower() != snap.account_id.lower():
            raise NotOwnerError(token_id, owner, snap.account_id)
        return snap.account_id

    async def transfer(self, token_id: int, to: str) -> str:
        account = await self._require_owner(token_id)
        request = self._request(
            contract.SAFE_TRANSFER_FROM,
            to_checksum_address(account),
            to_checksum_address(to),
            token_id,
        )
        result = await self._orchestrator.execute(request)
        logger.info("Asset %d transferred to %s. tx=%s", token_id, to, result.tx_hash)
        return result.tx_hash

    async def burn(self, token_id: int) -> str:
        await self._require_owner(token_id)
        result = await self._orchestrator.execute(self._request(contract.BURN, token_id))
        logger.info("Asset %d burned. tx=%s", token_id, result.tx_hash)
        return result.tx_hash

    # ------------------------------------------------------------------
    # Marketplace approval
    # ------------------------------------------------------------------

    async def approve(self, token_id: int) -> str:
        marketplace = self._network().marketplace_contract
        result = await self._orchestrator.execute(
            self._request(contract.APPROVE, to_checksum_address(marketplace), token_id)
        )
        logger.info("Asset %d approved for marketplace. tx=%s", token_id, result.tx_hash)
        return result.tx_hash

    async def set_approval_for_all(self, approved: bool) -> str:
        marketplace = self._network().marketplace_contract
        result = await self._orchestrator.execute(
            self._request(contract.SET_APPROVAL_FOR_ALL, to_checksum_address(marketplace), approved)
        )
        logger.info("Approval for all set to %s. tx=%s", approved, result.tx_hash)
        return result.tx_hash

    async def is_approved_for_all(self) -> bool:
        snap = self._session.require_connected()
        network = self._network()
        (approved,) = await self._orchestrator.call(
            network.asset_contract,
            contract.IS_APPROVED_FOR_ALL,
            to_checksum_address(snap.account_id),
            to_checksum_address(network.marketplace_contract),
        )
        return approved

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    async def owner_of(self, token_id: int) -> str:
        (owner,) = await self._orchestrator.call(
            self._network().asset_contract, contract.OWNER_OF, token_id
        )
        return to_checksum_address(owner)

    async def token_uri(self, token_id: int) -> str:
        (uri,) = await self._orchestrator.call(
            self._network().asset_contract, contract.TOKEN_URI, token_id
        )
        return uri

    async def royalty_info(self, token_id: int, sale_price: int = BPS_DENOMINATOR) -> RoyaltyInfo:
        recipient, amount = await self._orchestrator.call(
            self._network().asset_contract, contract.ROYALTY_INFO, token_id, sale_price
        )
        return RoyaltyInfo(to_checksum_address(recipient), amount, sale_price)

    async def get_details(self, token_id: int) -> AssetDetails:
        return AssetDetails(
            token_id=token_id,
            owner=await self.owner_of(token_id),
            metadata_reference=await self.token_uri(token_id),
            royalty=await self.royalty_info(token_id),
        )

    async def tokens_of_owner(self, owner: str | None = None) -> list[int]:
        snap = self._session.require_connected()
        (token_ids,) = await self._orchestrator.call(
            self._network().asset_contract,
            contract.GET_TOKENS_BY_OWNER,
            to_checksum_address(owner or snap.account_id),
        )
        return list(token_ids)

    async def current_token_id(self) -> int:
        (token_id,) = await self._orchestrator.call(
            self._network().asset_contract, contract.GET_CURRENT_TOKEN_ID
        )
        return token_id
