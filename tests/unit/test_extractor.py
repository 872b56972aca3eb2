"""Unit tests for order and price-edit extraction."""
from decimal import Decimal

import pytest

from quickbite.services.chat.extractor import (
    clean_item_name,
    extract_order_items,
    extract_price_edit,
    parse_price,
)


def pairs(items):
    return [(item.name, item.quantity) for item in items]


class TestExtractOrderItems:
    """Test order phrase parsing."""

    def test_digit_quantity_with_cart_suffix(self):
        assert pairs(extract_order_items("Add 2 Classic Burger to my cart")) == [("classic burger", 2)]

    def test_cart_suffix_without_my(self):
        assert pairs(extract_order_items("add 3 tiramisu to cart")) == [("tiramisu", 3)]

    def test_several_digit_quantities(self):
        items = extract_order_items("I want 3 pizzas and 2 cokes")
        assert pairs(items) == [("pizzas", 3), ("cokes", 2)]

    def test_times_suffix(self):
        assert pairs(extract_order_items("order 2x coca-cola")) == [("coca-cola", 2)]

    def test_word_quantity(self):
        assert pairs(extract_order_items("order two iced latte please")) == [("iced latte", 2)]

    def test_number_word_inside_other_word_is_ignored(self):
        assert extract_order_items("someone ordered") == []

    def test_bare_items_split_on_articles(self):
        items = extract_order_items("can I get a coke and a burger please")
        assert pairs(items) == [("coke", 1), ("burger", 1)]

    def test_bare_item_keeps_and_inside_name(self):
        assert pairs(extract_order_items("order fish and chip")) == [("fish and chip", 1)]

    def test_menu_name_scan(self):
        items = extract_order_items("I'd love the Tiramisu", ["Classic Burger", "Tiramisu"])
        assert pairs(items) == [("Tiramisu", 1)]

    def test_menu_name_scan_uses_default_names(self):
        assert pairs(extract_order_items("anything with Iced Latte?")) == [("Iced Latte", 1)]

    def test_first_strategy_with_results_wins(self):
        """Digit quantities stop the scan before word quantities are tried."""
        items = extract_order_items("order 2 burgers and two cokes")
        assert ("burgers", 2) in pairs(items)
        assert all(item.name != "cokes" for item in items)

    def test_no_order(self):
        assert extract_order_items("hello") == []
        assert extract_order_items("") == []

    def test_zero_quantity_is_dropped(self):
        assert extract_order_items("order 0 burgers") == []

    @pytest.mark.parametrize(
        "text,expected",
        [
            ("add 3 caesar salad to my cart", [("caesar salad", 3)]),
            ("order two pudding", [("pudding", 2)]),
        ],
    )
    def test_documented_examples(self, text, expected):
        assert pairs(extract_order_items(text)) == expected

    def test_quantities_are_positive(self):
        for text in ["add 5 pizza to my cart", "order twelve cokes", "get me a tiramisu"]:
            assert all(item.quantity >= 1 for item in extract_order_items(text))


class TestCleanItemName:
    @pytest.mark.parametrize(
        "raw,expected",
        [
            ("a burger", "burger"),
            ("me some fries please", "fries"),
            ("the pizza now", "pizza"),
            ("coke", "coke"),
        ],
    )
    def test_clean_item_name(self, raw, expected):
        assert clean_item_name(raw) == expected


class TestExtractPriceEdit:
    """Test admin price change parsing."""

    def test_price_of_template(self):
        request = extract_price_edit("Change the price of Tiramisu to RM 12")
        assert request.item_name == "Tiramisu"
        assert request.new_price == Decimal("12.00")

    def test_modify_with_decimal_price(self):
        request = extract_price_edit("modify the price of Classic Burger to RM 15.00")
        assert request.item_name == "Classic Burger"
        assert request.new_price == Decimal("15.00")

    def test_price_of_template_without_article(self):
        request = extract_price_edit("change price of Classic Burger to rm12.5")
        assert request.item_name == "Classic Burger"
        assert request.new_price == Decimal("12.50")

    def test_item_price_template(self):
        request = extract_price_edit("Set Margherita Pizza price to RM 18")
        assert request.item_name == "Margherita Pizza"
        assert request.new_price == Decimal("18.00")

    def test_possessive_is_stripped(self):
        request = extract_price_edit("Tiramisu's price to RM 11")
        assert request.item_name == "Tiramisu"
        assert request.new_price == Decimal("11.00")

    def test_non_positive_price(self):
        assert extract_price_edit("change the price of Tiramisu to RM 0") is None

    @pytest.mark.parametrize(
        "text",
        [
            "change the price of Tiramisu",
            "change the price of Tiramisu to 12",
            "how much is the tiramisu",
            "",
        ],
    )
    def test_unparseable(self, text):
        assert extract_price_edit(text) is None


class TestParsePrice:
    @pytest.mark.parametrize(
        "value,expected",
        [
            ("12", Decimal("12.00")),
            ("9.999", Decimal("10.00")),
            ("3.5", Decimal("3.50")),
            ("abc", None),
            ("-1", None),
            ("0", None),
        ],
    )
    def test_parse_price(self, value, expected):
        assert parse_price(value) == expected
