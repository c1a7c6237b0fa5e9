"""Tests for version snapshot models."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest
from pydantic import ValidationError

from wownow.models.version import ProductVersions, RegionVersion, Snapshot, SummaryRecord

_FIXED_DT = datetime(2024, 2, 6, 17, 3, 12, 123456, tzinfo=timezone.utc)


def _product(name: str = "wow", regions: tuple[str, ...] = ("us", "eu")) -> ProductVersions:
    return ProductVersions(
        name=name,
        versions=tuple(RegionVersion(region=r, version="10.2.5", build="53584") for r in regions),
    )


class TestRegionVersion:
    def test_integer_build_stored_as_string(self):
        rv = RegionVersion(region="us", version="10.2.5", build=53584)
        assert rv.build == "53584"

    def test_string_build_kept_verbatim(self):
        assert RegionVersion(region="us", version="1", build="00123").build == "00123"

    def test_bool_build_rejected(self):
        with pytest.raises(ValidationError):
            RegionVersion(region="us", version="1", build=True)

    def test_empty_region_rejected(self):
        with pytest.raises(ValidationError, match="region"):
            RegionVersion(region="", version="1", build="1")

    def test_frozen(self):
        rv = RegionVersion(region="us", version="1", build="1")
        with pytest.raises(ValidationError):
            rv.region = "eu"


class TestProductVersions:
    def test_regions_in_order(self):
        assert _product(regions=("kr", "us", "eu")).regions() == ["kr", "us", "eu"]

    def test_duplicate_region_rejected(self):
        with pytest.raises(ValidationError, match="Duplicate region"):
            _product(regions=("us", "us"))

    def test_empty_versions_allowed_by_model(self):
        assert ProductVersions(name="wow", versions=()).versions == ()


class TestSnapshot:
    def test_to_dict_shape(self):
        snap = Snapshot(retrieval_datetime=_FIXED_DT, products=(_product(),))
        assert snap.to_dict() == {
            "retrieval_datetime": "2024-02-06T17:03:12.123456Z",
            "products": [
                {
                    "name": "wow",
                    "versions": [
                        {"region": "us", "version": "10.2.5", "build": "53584"},
                        {"region": "eu", "version": "10.2.5", "build": "53584"},
                    ],
                }
            ],
        }

    def test_naive_datetime_rejected(self):
        with pytest.raises(ValidationError, match="timezone-aware"):
            Snapshot(retrieval_datetime=datetime(2024, 2, 6), products=())

    def test_offset_normalised_to_utc(self):
        plus_two = timezone(timedelta(hours=2))
        snap = Snapshot(
            retrieval_datetime=datetime(2024, 2, 6, 19, 3, 12, tzinfo=plus_two),
            products=(),
        )
        assert snap.retrieval_datetime == _FIXED_DT.replace(microsecond=0)
        assert snap.retrieval_datetime.utcoffset() == timedelta(0)

    def test_get_by_name(self):
        snap = Snapshot(
            retrieval_datetime=_FIXED_DT,
            products=(_product("wow"), _product("wow_classic")),
        )
        assert snap.get("wow_classic").name == "wow_classic"
        assert snap.product_names() == ["wow", "wow_classic"]
        with pytest.raises(KeyError):
            snap.get("wow_classic_era")


class TestSummaryRecord:
    def test_defaults(self):
        assert SummaryRecord(product="wow", seqn=1).flags == ""

    def test_negative_seqn_rejected(self):
        with pytest.raises(ValidationError):
            SummaryRecord(product="wow", seqn=-1)
