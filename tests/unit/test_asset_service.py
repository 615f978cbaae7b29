"""Tests for mm_asset: mint, batch mint, ownership-gated operations."""

from unittest.mock import AsyncMock

import pytest

from src.mm_asset.application.service import AssetRegistryService
from src.mm_asset.domain.events import AssetMinted
from src.mm_asset.domain.models import MintRequest, RoyaltyInfo
from src.mm_chain.application.orchestrator import LedgerCallOrchestrator
from src.mm_chain.domain.models import ExecutionResult, FinalReceipt
from src.mm_common.errors import (
    ExpectedEventMissingError,
    InvalidBasisPointsError,
    InvalidMetadataError,
    NotOwnerError,
)
from src.mm_session.application.service import AccountSession
from tests.fakes import ALICE, BOB, CAROL, MARKETPLACE_ADDRESS, FakeLedger, FakeSigner


class TestMint:
    @pytest.mark.asyncio
    async def test_default_royalty_reads_back_250(
        self, connected: AccountSession, assets: AssetRegistryService
    ) -> None:
        token_id = await assets.mint(ALICE, "ipfs://QmMeta")
        royalty = await assets.royalty_info(token_id)
        assert royalty.bps == 250
        assert royalty.recipient == ALICE

    @pytest.mark.asyncio
    async def test_recipient_defaults_to_minting_account(
        self, connected: AccountSession, assets: AssetRegistryService
    ) -> None:
        token_id = await assets.mint(BOB, "ipfs://QmMeta", royalty_bps=500)
        details = await assets.get_details(token_id)
        assert details.owner == BOB
        assert details.metadata_reference == "ipfs://QmMeta"
        assert details.royalty.recipient == ALICE
        assert details.royalty.bps == 500

    @pytest.mark.asyncio
    async def test_explicit_recipient(
        self, connected: AccountSession, assets: AssetRegistryService
    ) -> None:
        token_id = await assets.mint(ALICE, "ipfs://QmMeta", royalty_recipient=CAROL)
        royalty = await assets.royalty_info(token_id, sale_price=10**18)
        assert royalty.recipient == CAROL
        assert royalty.amount == 25 * 10**15

    @pytest.mark.asyncio
    async def test_bps_validated_before_any_call(
        self, connected: AccountSession, assets: AssetRegistryService, ledger: FakeLedger
    ) -> None:
        with pytest.raises(InvalidBasisPointsError):
            await assets.mint(ALICE, "ipfs://QmMeta", royalty_bps=10_001)
        assert ledger.estimates == []

    @pytest.mark.asyncio
    async def test_empty_reference_rejected(
        self, connected: AccountSession, assets: AssetRegistryService, ledger: FakeLedger
    ) -> None:
        with pytest.raises(InvalidMetadataError):
            await assets.mint(ALICE, "")
        assert ledger.estimates == []

    def test_configured_default_is_validated(
        self, orchestrator: LedgerCallOrchestrator, session: AccountSession
    ) -> None:
        with pytest.raises(InvalidBasisPointsError):
            AssetRegistryService(orchestrator, session, default_royalty_bps=20_000)


class TestBatchMint:
    @pytest.mark.asyncio
    async def test_ids_in_emission_order(
        self, connected: AccountSession, assets: AssetRegistryService, ledger: FakeLedger
    ) -> None:
        items = [
            MintRequest(ALICE, "ipfs://a"),
            MintRequest(BOB, "ipfs://b", royalty_bps=0),
            MintRequest(CAROL, "ipfs://c", royalty_recipient=BOB),
        ]
        token_ids = await assets.batch_mint(items)

        assert token_ids == [1, 2, 3]
        assert len(ledger.sent) == 1
        assert await assets.token_uri(2) == "ipfs://b"
        assert (await assets.royalty_info(2)).bps == 0
        assert (await assets.royalty_info(3)).recipient == BOB
        assert await assets.current_token_id() == 3

    @pytest.mark.asyncio
    async def test_empty_batch(
        self, connected: AccountSession, assets: AssetRegistryService, ledger: FakeLedger
    ) -> None:
        assert await assets.batch_mint([]) == []
        assert ledger.sent == []

    @pytest.mark.asyncio
    async def test_one_bad_item_fails_the_whole_batch(
        self, connected: AccountSession, assets: AssetRegistryService, ledger: FakeLedger
    ) -> None:
        items = [MintRequest(ALICE, "ipfs://a"), MintRequest(ALICE, "ipfs://b", royalty_bps=-1)]
        with pytest.raises(InvalidBasisPointsError):
            await assets.batch_mint(items)
        assert ledger.sent == []

    @pytest.mark.asyncio
    async def test_short_event_list_is_surfaced(
        self,
        connected: AccountSession,
        orchestrator: LedgerCallOrchestrator,
        assets: AssetRegistryService,
    ) -> None:
        receipt = FinalReceipt(
            tx_hash="0xbeef", block_number=10, status=1, gas_used=0, logs=(), confirmations=1
        )
        one_event = AssetMinted(1, ALICE, ALICE, "ipfs://a", 250)
        orchestrator.execute = AsyncMock(  # type: ignore[method-assign]
            return_value=ExecutionResult(receipt=receipt, events=(one_event,))
        )
        items = [MintRequest(ALICE, "ipfs://a"), MintRequest(BOB, "ipfs://b"), MintRequest(CAROL, "ipfs://c")]

        with pytest.raises(ExpectedEventMissingError) as exc_info:
            await assets.batch_mint(items)
        assert "0xbeef" in exc_info.value.message
        assert "1 of 3" in exc_info.value.message


class TestOwnership:
    @pytest.mark.asyncio
    async def test_transfer(
        self, connected: AccountSession, assets: AssetRegistryService
    ) -> None:
        token_id = await assets.mint(ALICE, "ipfs://QmMeta")
        await assets.transfer(token_id, BOB)
        assert await assets.owner_of(token_id) == BOB
        assert await assets.tokens_of_owner(BOB) == [token_id]
        assert await assets.tokens_of_owner() == []

    @pytest.mark.asyncio
    async def test_transfer_by_non_owner(
        self,
        connected: AccountSession,
        assets: AssetRegistryService,
        ledger: FakeLedger,
        signer: FakeSigner,
    ) -> None:
        token_id = await assets.mint(ALICE, "ipfs://QmMeta")
        signer.set_accounts([BOB])
        estimates_before = len(ledger.estimates)

        with pytest.raises(NotOwnerError) as exc_info:
            await assets.transfer(token_id, CAROL)
        assert exc_info.value.code == 5001
        assert len(ledger.estimates) == estimates_before

    @pytest.mark.asyncio
    async def test_burn(
        self, connected: AccountSession, assets: AssetRegistryService, ledger: FakeLedger
    ) -> None:
        token_id = await assets.mint(ALICE, "ipfs://QmMeta")
        await assets.burn(token_id)
        assert token_id not in ledger.state.owners

    @pytest.mark.asyncio
    async def test_burn_by_non_owner(
        self, connected: AccountSession, assets: AssetRegistryService, signer: FakeSigner
    ) -> None:
        token_id = await assets.mint(ALICE, "ipfs://QmMeta")
        signer.set_accounts([BOB])
        with pytest.raises(NotOwnerError):
            await assets.burn(token_id)


class TestApprovals:
    @pytest.mark.asyncio
    async def test_approve_targets_marketplace(
        self, connected: AccountSession, assets: AssetRegistryService, ledger: FakeLedger
    ) -> None:
        token_id = await assets.mint(ALICE, "ipfs://QmMeta")
        await assets.approve(token_id)
        assert ledger.state.token_approvals[token_id].lower() == MARKETPLACE_ADDRESS.lower()

    @pytest.mark.asyncio
    async def test_approval_for_all(
        self, connected: AccountSession, assets: AssetRegistryService
    ) -> None:
        assert not await assets.is_approved_for_all()
        await assets.set_approval_for_all(True)
        assert await assets.is_approved_for_all()
        await assets.set_approval_for_all(False)
        assert not await assets.is_approved_for_all()


class TestRoyaltyInfo:
    def test_bps_from_amount(self) -> None:
        assert RoyaltyInfo(ALICE, 250, 10_000).bps == 250

    def test_zero_price(self) -> None:
        assert RoyaltyInfo(ALICE, 0, 0).bps == 0
