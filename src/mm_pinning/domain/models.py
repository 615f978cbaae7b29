"""Domain models for mm_pinning: pure dataclasses."""

from dataclasses import dataclass

IPFS_SCHEME = "ipfs://"


@dataclass(frozen=True)
class PinResult:
    reference: str   # "ipfs://<cid>", opaque to the asset registry
    cid: str
    size_bytes: int
    name: str = ""

    @classmethod
    def from_cid(cls, cid: str, size_bytes: int, name: str = "") -> "PinResult":
        return cls(reference=f"{IPFS_SCHEME}{cid}", cid=cid, size_bytes=size_bytes, name=name)


def cid_of(reference: str) -> str:
    """Strip the ipfs:// scheme; plain CIDs pass through."""
    if reference.startswith(IPFS_SCHEME):
        return reference[len(IPFS_SCHEME):]
    return reference
