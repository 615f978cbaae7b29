"""Pinata API response schemas."""

from pydantic import BaseModel, ConfigDict, Field


class PinataPinResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    ipfs_hash: str = Field(alias="IpfsHash", min_length=1)
    pin_size: int = Field(alias="PinSize", ge=0)
    timestamp: str | None = Field(default=None, alias="Timestamp")
