"""
Tests for record types and validation.
"""

import pytest

from mallmatch.schema import BrandRecord, MatchResult, validate_brand_record, validate_threshold


class TestBrandRecord:
    """Test brand record construction."""

    def test_from_camel_case(self):
        rec = BrandRecord.from_dict({
            "brandName": " Nike ",
            "productId": "N1",
            "variations": "Nike Inc",
            "offlineRedeemUrl": "https://example.com",
        })
        assert rec == BrandRecord("Nike", "N1", "Nike Inc", "https://example.com")

    def test_from_snake_case(self):
        rec = BrandRecord.from_dict({"brand_name": "Nike", "product_id": 42})
        assert rec.product_id == "42"
        assert rec.variations == ""

    def test_missing_values_become_empty(self):
        assert BrandRecord.from_dict({}) == BrandRecord("", "", "", "")

    def test_frozen(self):
        rec = BrandRecord("Nike", "N1")
        with pytest.raises(Exception):
            rec.brand_name = "Puma"


class TestValidateBrandRecord:
    """Test required-field validation."""

    def test_valid(self):
        assert validate_brand_record(BrandRecord("Nike", "N1")) == []

    def test_missing_fields(self):
        errors = validate_brand_record(BrandRecord("  ", ""))
        assert len(errors) == 2
        assert any("brand_name" in e for e in errors)
        assert any("product_id" in e for e in errors)


class TestValidateThreshold:
    """Test threshold contract checks."""

    @pytest.mark.parametrize("value", [0, 70, 100])
    def test_valid(self, value):
        assert validate_threshold(value) == value

    @pytest.mark.parametrize("value", [-1, 101, "70", 70.0, False, None])
    def test_invalid(self, value):
        with pytest.raises(ValueError):
            validate_threshold(value)


class TestMatchResult:
    """Test output shapes."""

    @pytest.fixture
    def match(self):
        return MatchResult(
            brand_name="Nike",
            product_id="N1",
            matched_store_name=" Nike Store ",
            matched_variant="Nike",
            score=100,
            offline_redeem_url="u",
        )

    def test_to_product(self, match):
        assert match.to_product() == {"brandName": "Nike", "productId": "N1", "storeName": "Nike Store"}

    def test_to_dict(self, match):
        data = match.to_dict()
        assert data["matchedStoreName"] == " Nike Store "
        assert data["score"] == 100
        assert data["offlineRedeemUrl"] == "u"
