"""Pinata content-pinning client over httpx.

Upload failures of any kind (HTTP status, transport, malformed response)
surface as PinningError with the raw cause attached; nothing is retried,
since the caller mints only after a successful upload.
"""

import json
import logging
from typing import Any

import httpx
from pydantic import ValidationError

from config.settings import Settings
from src.mm_common.errors import PinningError
from src.mm_pinning.domain.metadata import gateway_url, validate_metadata
from src.mm_pinning.domain.models import PinResult
from src.mm_pinning.infrastructure.schemas import PinataPinResponse

logger = logging.getLogger(__name__)

PIN_FILE_PATH = "/pinning/pinFileToIPFS"
PIN_JSON_PATH = "/pinning/pinJSONToIPFS"


class PinataClient:
    def __init__(
        self,
        api_key: str,
        api_secret: str,
        base_url: str = "https://api.pinata.cloud",
        gateway: str = "https://gateway.pinata.cloud/ipfs/",
        timeout: float = 60.0,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._gateway = gateway
        self._client = client or httpx.AsyncClient(timeout=timeout)
        self._base_url = base_url.rstrip("/")
        self._headers = {
            "pinata_api_key": api_key,
            "pinata_secret_api_key": api_secret,
        }

    @classmethod
    def from_settings(cls, settings: Settings) -> "PinataClient":
        return cls(
            api_key=settings.PINATA_API_KEY,
            api_secret=settings.PINATA_API_SECRET,
            base_url=settings.PINATA_API_URL,
            gateway=settings.IPFS_GATEWAY_URL,
        )

    async def upload(self, file_bytes: bytes, name_hint: str) -> PinResult:
        files = {"file": (name_hint, file_bytes)}
        data = {"pinataMetadata": json.dumps({"name": name_hint})}
        result = await self._post(PIN_FILE_PATH, name_hint, files=files, data=data)
        logger.info("Pinned file %s -> %s (%d bytes)", name_hint, result.cid, result.size_bytes)
        return result

    async def upload_json(self, obj: dict[str, Any], name_hint: str) -> PinResult:
        body = {"pinataContent": obj, "pinataMetadata": {"name": name_hint}}
        result = await self._post(PIN_JSON_PATH, name_hint, json=body)
        logger.info("Pinned JSON %s -> %s", name_hint, result.cid)
        return result

    async def upload_metadata(self, metadata: dict[str, Any], name_hint: str) -> PinResult:
        """Validate asset metadata, then pin it as JSON."""
        validate_metadata(metadata)
        return await self.upload_json(metadata, name_hint)

    def gateway_url(self, reference: str) -> str:
        return gateway_url(reference, self._gateway)

    async def _post(self, path: str, name_hint: str, **kwargs: Any) -> PinResult:
        try:
            resp = await self._client.post(
                f"{self._base_url}{path}", headers=self._headers, **kwargs
            )
            resp.raise_for_status()
        except httpx.HTTPStatusError as exc:
            raise PinningError(
                f"HTTP {exc.response.status_code}: {exc.response.text}"
            ) from exc
        except httpx.HTTPError as exc:
            raise PinningError(repr(exc)) from exc

        try:
            parsed = PinataPinResponse.model_validate(resp.json())
        except (ValueError, ValidationError) as exc:
            raise PinningError(f"malformed response: {exc}") from exc
        return PinResult.from_cid(parsed.ipfs_hash, parsed.pin_size, name_hint)

    async def aclose(self) -> None:
        await self._client.aclose()
