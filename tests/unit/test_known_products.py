"""
Unit tests for the override table, heuristic guesses and the product record model.
"""

import pytest
from pydantic import ValidationError

from medscan.models.product import ProductRecord, ProductCategory
from medscan.services.barcode import OverrideTable, default_override_table, guess_product
from medscan.services.barcode.overrides import KnownProduct


class TestOverrideTable:

    def test_exact_match(self):
        record = default_override_table.lookup("050428462701")
        assert record.name == "CVS Health Allergy Relief"
        assert record.manufacturer == "CVS Health"
        assert record.barcode == "050428462701"

    def test_claritin_entries(self):
        assert default_override_table.lookup("041100010174").name == "Claritin 24-Hour Allergy Relief"
        assert default_override_table.lookup("041100010167").description == "Loratadine 10mg Tablets (10 count)"

    def test_match_with_one_zero_added(self):
        record = default_override_table.lookup("41100766613")
        assert record.name == "Claritin 24-Hour Allergy Relief"
        assert record.barcode == "41100766613"

    def test_match_with_one_zero_removed(self):
        table = OverrideTable({"12345": KnownProduct("Thing", "A thing", "Acme")})
        record = table.lookup("012345")
        assert record.name == "Thing"
        assert record.barcode == "012345"

    def test_miss(self):
        assert default_override_table.lookup("123456789012") is None
        assert default_override_table.lookup("") is None
        assert "123456789012" not in default_override_table
        assert "050428462701" in default_override_table

    def test_each_lookup_returns_a_fresh_record(self):
        first = default_override_table.lookup("050428462701")
        first.name = "Edited by user"
        second = default_override_table.lookup("050428462701")
        assert second.name == "CVS Health Allergy Relief"


class TestHeuristics:

    def test_antihistamine_family(self):
        record = guess_product("12341100999")
        assert record.name == "Claritin Product"
        assert record.description == "Loratadine Allergy Relief"
        assert record.manufacturer == "Bayer"
        assert record.barcode == "12341100999"

    def test_retail_brand_family(self):
        record = guess_product("950429999999")
        assert record.name == "CVS Health Product"
        assert record.manufacturer == "CVS Health"

    def test_first_family_wins(self):
        assert guess_product("41100504200").manufacturer == "Bayer"

    def test_no_guess_without_known_fragment(self):
        assert guess_product("123456789012") is None


class TestProductRecord:

    def test_defaults(self):
        record = ProductRecord(name="Aspirin", barcode="123456789012")
        assert record.category == ProductCategory.OTC
        assert record.manufacturer == "Unknown"
        assert record.expiration_date is None

    def test_barcode_is_immutable(self):
        record = ProductRecord(name="Aspirin", barcode="123456789012")
        with pytest.raises(ValidationError):
            record.barcode = "999999999999"

    def test_other_fields_are_editable(self):
        record = ProductRecord(name="Aspirin", barcode="123456789012")
        record.name = "Aspirin 81mg"
        record.category = ProductCategory.PRESCRIPTION
        assert record.name == "Aspirin 81mg"
        assert record.category == ProductCategory.PRESCRIPTION

    @pytest.mark.parametrize("name", ["", "   ", "\t\n"])
    def test_name_must_not_be_blank(self, name):
        with pytest.raises(ValidationError):
            ProductRecord(name=name, barcode="123456789012")

    def test_name_is_trimmed(self):
        record = ProductRecord(name="  Aspirin 81mg ", barcode="123456789012")
        assert record.name == "Aspirin 81mg"

    def test_blank_name_rejected_on_edit(self):
        record = ProductRecord(name="Aspirin", barcode="123456789012")
        with pytest.raises(ValidationError):
            record.name = "  "

    @pytest.mark.parametrize("barcode", ["", "12-34", "123456789012345"])
    def test_barcode_must_be_canonical(self, barcode):
        with pytest.raises(ValidationError):
            ProductRecord(name="Aspirin", barcode=barcode)

    def test_category_display_names(self):
        assert ProductCategory.PRESCRIPTION.display_name == "Prescription"
        assert ProductCategory.OTC.display_name == "Over-The-Counter"
