"""Minimal ABI layer: function call encoding and event log decoding.

Built on eth-abi / eth-utils rather than a full web3 client. Only the
shapes the EpicMint contracts use are modelled (static and dynamic
params, tuples, arrays; no indexed dynamic types).
"""

from dataclasses import dataclass
from typing import Any

from eth_abi import decode as abi_decode
from eth_abi import encode as abi_encode
from eth_utils import event_signature_to_log_topic, function_signature_to_4byte_selector

from src.mm_chain.domain.models import LogEntry


@dataclass(frozen=True)
class ContractFunction:
    name: str
    inputs: tuple[str, ...] = ()
    outputs: tuple[str, ...] = ()
    payable: bool = False

    @property
    def signature(self) -> str:
        return f"{self.name}({','.join(self.inputs)})"

    @property
    def selector(self) -> bytes:
        return function_signature_to_4byte_selector(self.signature)

    def encode_call(self, *args: Any) -> bytes:
        if len(args) != len(self.inputs):
            raise TypeError(
                f"{self.signature} takes {len(self.inputs)} arguments, got {len(args)}"
            )
        return self.selector + abi_encode(list(self.inputs), list(args))

    def decode_input(self, calldata: bytes) -> tuple:
        if calldata[:4] != self.selector:
            raise ValueError(f"Calldata is not a call to {self.signature}")
        return tuple(abi_decode(list(self.inputs), calldata[4:]))

    def decode_output(self, data: bytes) -> tuple:
        return tuple(abi_decode(list(self.outputs), data))


@dataclass(frozen=True)
class EventParam:
    name: str
    type: str
    indexed: bool = False


@dataclass(frozen=True)
class ContractEvent:
    name: str
    params: tuple[EventParam, ...]

    @property
    def signature(self) -> str:
        return f"{self.name}({','.join(p.type for p in self.params)})"

    @property
    def topic(self) -> bytes:
        return event_signature_to_log_topic(self.signature)

    def matches(self, log: LogEntry, emitter: str | None = None) -> bool:
        if not log.topics or log.topics[0] != self.topic:
            return False
        return emitter is None or log.address.lower() == emitter.lower()

    def decode(self, log: LogEntry) -> dict[str, Any]:
        """Decode a matching log into {param_name: value}."""
        indexed = [p for p in self.params if p.indexed]
        plain = [p for p in self.params if not p.indexed]
        if len(log.topics) != len(indexed) + 1:
            raise ValueError(
                f"{self.name}: expected {len(indexed) + 1} topics, got {len(log.topics)}"
            )

        values: dict[str, Any] = {}
        for param, topic in zip(indexed, log.topics[1:]):
            values[param.name] = abi_decode([param.type], topic)[0]
        decoded = abi_decode([p.type for p in plain], log.data)
        for param, value in zip(plain, decoded):
            values[param.name] = value
        return values

    def encode_log(self, address: str, values: dict[str, Any], **log_fields: Any) -> LogEntry:
        """Build a LogEntry as a node would emit it (used by local simulations)."""
        topics = [self.topic]
        topics += [abi_encode([p.type], [values[p.name]]) for p in self.params if p.indexed]
        plain = [p for p in self.params if not p.indexed]
        data = abi_encode([p.type for p in plain], [values[p.name] for p in plain])
        return LogEntry(address=address, topics=tuple(topics), data=data, **log_fields)
