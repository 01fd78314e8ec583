"""
Unit tests for the marketplace listing board
"""

import pytest

from marketplace import Marketplace, ListingError, CROP_IMAGES, DEFAULT_IMAGE


@pytest.fixture
def board():
    return Marketplace()


def new_listing(**overrides):
    fields = {
        "crop_name": "Rice",
        "quantity": 20,
        "price": 2100,
        "location": "Thanjavur",
        "farmer_name": "Kavya",
        "contact": "+91 90000 00000",
    }
    fields.update(overrides)
    return fields


class TestListings:

    def test_seeded_with_samples(self, board):
        names = [l["crop_name"] for l in board.list_listings()]

        assert names == ["Rice", "Wheat", "Cotton", "Corn"]

    def test_new_listing_goes_first(self, board):
        listing = board.add_listing(**new_listing())

        assert board.list_listings()[0] == listing
        assert listing["image"] == CROP_IMAGES["rice"]

    def test_unknown_crop_gets_default_image(self, board):
        listing = board.add_listing(**new_listing(crop_name="Millet"))

        assert listing["image"] == DEFAULT_IMAGE

    def test_ids_are_unique(self, board):
        a = board.add_listing(**new_listing())
        b = board.add_listing(**new_listing())

        assert a["id"] != b["id"]

    @pytest.mark.parametrize("field", ["crop_name", "location", "farmer_name", "contact"])
    def test_blank_field_rejected(self, board, field):
        with pytest.raises(ListingError, match="Please fill all fields"):
            board.add_listing(**new_listing(**{field: "  "}))

    def test_empty_board(self):
        assert Marketplace(seed=False).list_listings() == []


class TestFilters:

    def test_no_filters_returns_all(self, board):
        assert len(board.filter_listings()) == 4

    def test_search_matches_crop_or_location(self, board):
        assert [l["crop_name"] for l in board.filter_listings(search="RICE")] == ["Rice"]
        assert [l["crop_name"] for l in board.filter_listings(search="guj")] == ["Cotton"]

    def test_crop_filter_is_exact(self, board):
        board.add_listing(**new_listing(crop_name="Rice Bran"))

        assert [l["crop_name"] for l in board.filter_listings(crop="rice")] == ["Rice"]

    def test_location_filter_is_substring(self, board):
        result = board.filter_listings(location="har")

        assert [l["location"] for l in result] == ["Haryana"]

    def test_filters_combine(self, board):
        assert board.filter_listings(search="wheat", location="punjab") == []
