"""Tests for mm_session.infrastructure.local_signer."""

from unittest.mock import AsyncMock, MagicMock

import pytest
from eth_account import Account
from eth_account.messages import encode_defunct, encode_typed_data

from src.mm_common.errors import SignerError
from src.mm_network.registry import NetworkRegistry
from src.mm_session.application.service import AccountSession
from src.mm_session.domain.signer import CHAIN_CHANGED, SignaturePayload
from src.mm_session.infrastructure.local_signer import LocalAccountSigner

PRIVATE_KEY = "0x" + "4c" * 32


def _ledgers(ledger: AsyncMock) -> MagicMock:
    ledgers = MagicMock()
    ledgers.for_network.return_value = ledger
    return ledgers


def _ledger() -> AsyncMock:
    ledger = AsyncMock()
    ledger.get_balance.return_value = 5 * 10**18
    ledger.gas_price.return_value = 2_000_000_000
    ledger.get_transaction_count.return_value = 7
    ledger.send_raw_transaction.return_value = "0x" + "ee" * 32
    return ledger


class TestLocalAccountSigner:
    @pytest.mark.asyncio
    async def test_accounts_and_balance(self) -> None:
        ledger = _ledger()
        signer = LocalAccountSigner(PRIVATE_KEY, _ledgers(ledger), 11155111)
        assert await signer.request_accounts() == [Account.from_key(PRIVATE_KEY).address]
        assert await signer.request_chain_id() == 11155111
        assert await signer.request_balance(signer.address) == 5 * 10**18

    @pytest.mark.asyncio
    async def test_personal_signature_recovers(self) -> None:
        signer = LocalAccountSigner(PRIVATE_KEY, _ledgers(_ledger()), 11155111)
        payload = SignaturePayload(kind="personal", account=signer.address, message="gm")
        signature = await signer.request_signature(payload)
        recovered = Account.recover_message(encode_defunct(text="gm"), signature=signature)
        assert recovered == signer.address

    @pytest.mark.asyncio
    async def test_typed_signature_recovers(self) -> None:
        signer = LocalAccountSigner(PRIVATE_KEY, _ledgers(_ledger()), 11155111)
        typed_data = {
            "domain": {"name": "EpicMint", "version": "1", "chainId": 11155111},
            "types": {"Mail": [{"name": "contents", "type": "string"}]},
            "primaryType": "Mail",
            "message": {"contents": "hello"},
        }
        signature = await signer.request_signature(
            SignaturePayload(kind="typed", account=signer.address, typed_data=typed_data)
        )
        full = {
            **typed_data,
            "types": {
                "EIP712Domain": [
                    {"name": "name", "type": "string"},
                    {"name": "version", "type": "string"},
                    {"name": "chainId", "type": "uint256"},
                ],
                **typed_data["types"],
            },
        }
        recovered = Account.recover_message(encode_typed_data(full_message=full), signature=signature)
        assert recovered == signer.address

    @pytest.mark.asyncio
    async def test_foreign_account_refused(self) -> None:
        signer = LocalAccountSigner(PRIVATE_KEY, _ledgers(_ledger()), 11155111)
        payload = SignaturePayload(kind="personal", account="0x" + "00" * 20, message="gm")
        with pytest.raises(SignerError) as exc_info:
            await signer.request_signature(payload)
        assert exc_info.value.signer_code == 4100

    @pytest.mark.asyncio
    async def test_unknown_chain_is_4902_until_added(self) -> None:
        signer = LocalAccountSigner(PRIVATE_KEY, _ledgers(_ledger()), 11155111)
        changes: list[str] = []
        signer.subscribe(CHAIN_CHANGED, changes.append)

        with pytest.raises(SignerError) as exc_info:
            await signer.request_network_switch(137)
        assert exc_info.value.signer_code == SignerError.UNRECOGNIZED_CHAIN

        await signer.request_add_network(NetworkRegistry().resolve(137).to_add_chain_params())
        await signer.request_network_switch(137)
        assert await signer.request_chain_id() == 137
        assert changes == ["0x89"]

    @pytest.mark.asyncio
    async def test_send_transaction_signs_and_broadcasts(self) -> None:
        ledger = _ledger()
        signer = LocalAccountSigner(PRIVATE_KEY, _ledgers(ledger), 11155111)
        tx_hash = await signer.send_transaction(
            {
                "from": signer.address,
                "to": "0x" + "22" * 20,
                "data": b"\x3c\xcf\xd6\x0b",
                "value": 0,
                "gas": 120_000,
            }
        )
        assert tx_hash == "0x" + "ee" * 32
        ledger.get_transaction_count.assert_awaited_once_with(signer.address)
        (raw,), _ = ledger.send_raw_transaction.await_args
        assert isinstance(raw, bytes)
        assert len(raw) > 0

    @pytest.mark.asyncio
    async def test_session_switch_through_local_signer(self) -> None:
        signer = LocalAccountSigner(PRIVATE_KEY, _ledgers(_ledger()), 11155111)
        session = AccountSession(signer, NetworkRegistry())
        await session.connect()
        await session.switch_network(137)
        assert session.network_id == 137
