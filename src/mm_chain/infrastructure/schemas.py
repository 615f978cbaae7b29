"""Pydantic schemas for JSON-RPC payloads (hex quantities -> int/bytes)."""

from typing import Any

from eth_utils import decode_hex
from pydantic import BaseModel, ConfigDict, Field, field_validator

from src.mm_chain.domain.models import LogEntry, TxReceipt


def _hex_to_int(value: Any) -> Any:
    if isinstance(value, str):
        return int(value, 16)
    return value


def _hex_to_bytes(value: Any) -> Any:
    if isinstance(value, str):
        return decode_hex(value)
    return value


class RpcLog(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    address: str
    topics: list[bytes]
    data: bytes
    log_index: int = Field(0, alias="logIndex")
    block_number: int = Field(0, alias="blockNumber")
    transaction_hash: str = Field("", alias="transactionHash")

    @field_validator("log_index", "block_number", mode="before")
    @classmethod
    def _quantity(cls, v: Any) -> Any:
        return _hex_to_int(v)

    @field_validator("data", mode="before")
    @classmethod
    def _data(cls, v: Any) -> Any:
        return _hex_to_bytes(v)

    @field_validator("topics", mode="before")
    @classmethod
    def _topics(cls, v: Any) -> Any:
        return [_hex_to_bytes(t) for t in v]

    def to_domain(self) -> LogEntry:
        return LogEntry(
            address=self.address,
            topics=tuple(self.topics),
            data=self.data,
            log_index=self.log_index,
            block_number=self.block_number,
            tx_hash=self.transaction_hash,
        )


class RpcReceipt(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    transaction_hash: str = Field(alias="transactionHash")
    block_number: int = Field(alias="blockNumber")
    status: int = 1
    gas_used: int = Field(0, alias="gasUsed")
    logs: list[RpcLog] = []
    contract_address: str | None = Field(None, alias="contractAddress")

    @field_validator("block_number", "status", "gas_used", mode="before")
    @classmethod
    def _quantity(cls, v: Any) -> Any:
        return _hex_to_int(v)

    def to_domain(self) -> TxReceipt:
        return TxReceipt(
            tx_hash=self.transaction_hash,
            block_number=self.block_number,
            status=self.status,
            gas_used=self.gas_used,
            logs=tuple(log.to_domain() for log in self.logs),
            contract_address=self.contract_address,
        )
