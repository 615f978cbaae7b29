"""Domain models for mm_asset: pure dataclasses."""

from dataclasses import dataclass

from src.mm_common.units import BPS_DENOMINATOR


@dataclass(frozen=True)
class MintRequest:
    """One asset to mint. ``metadata_reference`` must already be pinned."""

    to: str
    metadata_reference: str
    royalty_recipient: str | None = None  # defaults to the minting account
    royalty_bps: int | None = None        # defaults to the configured 250


@dataclass(frozen=True)
class RoyaltyInfo:
    recipient: str
    amount: int       # royalty owed on sale_price, wei
    sale_price: int

    @property
    def bps(self) -> int:
        """Effective rate; exact when queried with sale_price = 10000."""
        if self.sale_price == 0:
            return 0
        return self.amount * BPS_DENOMINATOR // self.sale_price


@dataclass(frozen=True)
class AssetDetails:
    token_id: int
    owner: str
    metadata_reference: str
    royalty: RoyaltyInfo
