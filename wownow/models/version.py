"""
Version snapshot models.

``RegionVersion`` is one row of a product's versions response.
``ProductVersions`` groups a product's rows in response order.
``Snapshot`` is the aggregate of one invocation: a single UTC
``retrieval_datetime`` shared by every product, plus the products in
registry order.

``SummaryRecord`` is one row of the TACT ``summary`` listing, used to
discover products when not restricted to the live registry.

All models are frozen.  Builds are stored as strings: the service sends a
decimal build id, but sentinel values have been seen and leading zeros or
very large ids must survive unchanged.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

from wownow.utils.time_utils import to_iso_utc


class RegionVersion(BaseModel):
    """The version and build currently served for one region.

    Attributes:
        region: Region code, e.g. ``"us"``, ``"eu"``, ``"kr"``, ``"cn"``, ``"tw"``.
        version: Dotted version string, e.g. ``"10.2.5"``. Not validated.
        build: Build id as a string; integers are accepted and converted.
    """

    model_config = ConfigDict(frozen=True)

    region: str = Field(min_length=1)
    version: str
    build: str

    @field_validator("build", mode="before")
    @classmethod
    def coerce_build(cls, v: Union[str, int]) -> str:
        if isinstance(v, bool):
            raise ValueError("build must be a string or integer, got bool.")
        if isinstance(v, int):
            return str(v)
        return v


class ProductVersions(BaseModel):
    """A product and its per-region versions, in response row order."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(min_length=1)
    versions: tuple[RegionVersion, ...]

    @field_validator("versions")
    @classmethod
    def validate_unique_regions(
        cls, v: tuple[RegionVersion, ...]
    ) -> tuple[RegionVersion, ...]:
        seen: set[str] = set()
        for rv in v:
            if rv.region in seen:
                raise ValueError(f"Duplicate region '{rv.region}' in versions.")
            seen.add(rv.region)
        return v

    def regions(self) -> list[str]:
        """Region codes in row order."""
        return [rv.region for rv in self.versions]


class Snapshot(BaseModel):
    """One coherent, timestamped view of every requested product.

    Attributes:
        retrieval_datetime: UTC instant captured before any fetch started.
        products: Products in registry order (never completion order).
    """

    model_config = ConfigDict(frozen=True)

    retrieval_datetime: datetime
    products: tuple[ProductVersions, ...]

    @field_validator("retrieval_datetime")
    @classmethod
    def validate_utc(cls, v: datetime) -> datetime:
        if v.tzinfo is None or v.utcoffset() is None:
            raise ValueError("retrieval_datetime must be timezone-aware.")
        return v.astimezone(timezone.utc)

    def product_names(self) -> list[str]:
        return [p.name for p in self.products]

    def get(self, name: str) -> ProductVersions:
        """Return the product called ``name``.

        Raises:
            KeyError: If the product is not in this snapshot.
        """
        for product in self.products:
            if product.name == name:
                return product
        raise KeyError(name)

    def to_dict(self) -> dict[str, Any]:
        """JSON-ready representation used by the output formatter."""
        return {
            "retrieval_datetime": to_iso_utc(self.retrieval_datetime),
            "products": [
                {
                    "name": p.name,
                    "versions": [rv.model_dump() for rv in p.versions],
                }
                for p in self.products
            ],
        }


class SummaryRecord(BaseModel):
    """One row of the TACT ``summary`` listing.

    Attributes:
        product: Product id, e.g. ``"wow_classic_era"``.
        seqn: Sequence number of that product's latest published data.
        flags: Empty for the main endpoint; ``"cdn"`` / ``"bgdl"`` mark
            auxiliary listings.
    """

    model_config = ConfigDict(frozen=True)

    product: str = Field(min_length=1)
    seqn: int = Field(ge=0)
    flags: str = ""
