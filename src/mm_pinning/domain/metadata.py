"""Asset metadata checks and gateway URL helpers."""

from typing import Any

from src.mm_common.errors import InvalidMetadataError
from src.mm_pinning.domain.models import cid_of

REQUIRED_FIELDS = ("name", "description", "image")


def validate_metadata(metadata: dict[str, Any]) -> None:
    for field in REQUIRED_FIELDS:
        if not metadata.get(field):
            raise InvalidMetadataError(f"missing required field '{field}'")
    attributes = metadata.get("attributes")
    if attributes is not None and not isinstance(attributes, list):
        raise InvalidMetadataError("'attributes' must be a list")


def build_metadata(
    name: str,
    description: str,
    image_reference: str,
    attributes: list[dict[str, Any]] | None = None,
    external_url: str | None = None,
) -> dict[str, Any]:
    metadata: dict[str, Any] = {
        "name": name,
        "description": description,
        "image": image_reference,
        "attributes": list(attributes or []),
    }
    if external_url:
        metadata["external_url"] = external_url
    validate_metadata(metadata)
    return metadata


def gateway_url(reference: str, gateway: str) -> str:
    """https URL for an ipfs:// reference; non-ipfs references are returned as-is."""
    if not reference.startswith("ipfs://"):
        return reference
    return f"{gateway.rstrip('/')}/{cid_of(reference)}"
