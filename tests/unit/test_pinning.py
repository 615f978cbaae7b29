"""Tests for mm_pinning: metadata checks and the Pinata client."""

import json

import httpx
import pytest

from config.settings import Settings
from src.mm_common.errors import InvalidMetadataError, PinningError
from src.mm_pinning.domain.metadata import build_metadata, gateway_url, validate_metadata
from src.mm_pinning.domain.models import PinResult, cid_of
from src.mm_pinning.infrastructure.pinata_client import PinataClient

CID = "QmYwAPJzv5CZsnA625s3Xf2nemtYgPpHdWEz79ojWnPbdG"


def _pinata(handler) -> PinataClient:
    transport = httpx.MockTransport(handler)
    return PinataClient(
        api_key="key",
        api_secret="secret",
        base_url="https://pinata.test",
        gateway="https://gw.test/ipfs/",
        client=httpx.AsyncClient(transport=transport),
    )


def _ok(request: httpx.Request) -> httpx.Response:
    return httpx.Response(200, json={"IpfsHash": CID, "PinSize": 1234, "Timestamp": "2026-01-01"})


class TestMetadata:
    def test_valid(self) -> None:
        validate_metadata({"name": "A", "description": "B", "image": "ipfs://img", "attributes": []})

    @pytest.mark.parametrize("missing", ["name", "description", "image"])
    def test_required_fields(self, missing: str) -> None:
        metadata = {"name": "A", "description": "B", "image": "ipfs://img"}
        del metadata[missing]
        with pytest.raises(InvalidMetadataError, match=missing):
            validate_metadata(metadata)

    def test_attributes_must_be_list(self) -> None:
        with pytest.raises(InvalidMetadataError) as exc_info:
            validate_metadata({"name": "A", "description": "B", "image": "x", "attributes": {}})
        assert exc_info.value.code == 6001

    def test_build(self) -> None:
        metadata = build_metadata("A", "B", "ipfs://img", [{"trait_type": "Eyes", "value": "Blue"}])
        assert metadata["attributes"][0]["value"] == "Blue"
        assert "external_url" not in metadata


class TestReferences:
    def test_pin_result(self) -> None:
        result = PinResult.from_cid(CID, 10, "meta.json")
        assert result.reference == f"ipfs://{CID}"
        assert cid_of(result.reference) == CID

    def test_gateway_url(self) -> None:
        assert gateway_url(f"ipfs://{CID}", "https://gw.test/ipfs/") == f"https://gw.test/ipfs/{CID}"

    def test_non_ipfs_passthrough(self) -> None:
        assert gateway_url("https://example.com/a.png", "https://gw.test/ipfs") == "https://example.com/a.png"


class TestPinataClient:
    @pytest.mark.asyncio
    async def test_upload_file(self) -> None:
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return _ok(request)

        result = await _pinata(handler).upload(b"\x89PNG...", "art.png")
        assert result == PinResult(f"ipfs://{CID}", CID, 1234, "art.png")
        assert seen[0].url == "https://pinata.test/pinning/pinFileToIPFS"
        assert seen[0].headers["pinata_api_key"] == "key"
        assert seen[0].headers["pinata_secret_api_key"] == "secret"
        assert b"art.png" in seen[0].content

    @pytest.mark.asyncio
    async def test_upload_json(self) -> None:
        bodies: list[dict] = []

        def handler(request: httpx.Request) -> httpx.Response:
            bodies.append(json.loads(request.content))
            return _ok(request)

        result = await _pinata(handler).upload_json({"name": "A"}, "meta.json")
        assert result.reference == f"ipfs://{CID}"
        assert bodies[0] == {"pinataContent": {"name": "A"}, "pinataMetadata": {"name": "meta.json"}}

    @pytest.mark.asyncio
    async def test_upload_metadata_validates_first(self) -> None:
        calls: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            calls.append(request)
            return _ok(request)

        with pytest.raises(InvalidMetadataError):
            await _pinata(handler).upload_metadata({"name": "A"}, "meta.json")
        assert calls == []

    @pytest.mark.asyncio
    async def test_http_error(self) -> None:
        client = _pinata(lambda request: httpx.Response(401, text="Invalid API key"))
        with pytest.raises(PinningError) as exc_info:
            await client.upload_json({"name": "A"}, "meta.json")
        assert "401" in exc_info.value.raw
        assert "Invalid API key" in exc_info.value.raw

    @pytest.mark.asyncio
    async def test_malformed_response(self) -> None:
        client = _pinata(lambda request: httpx.Response(200, json={"unexpected": True}))
        with pytest.raises(PinningError, match="malformed"):
            await client.upload(b"x", "x.bin")

    def test_gateway_from_settings(self) -> None:
        client = PinataClient.from_settings(Settings(IPFS_GATEWAY_URL="https://gw.example/ipfs/"))
        assert client.gateway_url(f"ipfs://{CID}") == f"https://gw.example/ipfs/{CID}"
