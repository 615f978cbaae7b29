"""Pinning collaborator interface (Protocol)."""

from typing import Any, Protocol

from src.mm_pinning.domain.models import PinResult


class PinningProtocol(Protocol):
    async def upload(self, file_bytes: bytes, name_hint: str) -> PinResult: ...

    async def upload_json(self, obj: dict[str, Any], name_hint: str) -> PinResult: ...
