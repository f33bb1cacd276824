"""Domain tests for the pricing engine."""

import pytest
from storefront.pricing import FLAT_SHIPPING, empty_pricing, price_lines, round2


def _parts_add_up(pricing):
    return round2(pricing.items_price) + round2(pricing.shipping_price) + round2(pricing.tax_price) == round2(
        pricing.total_price
    )


class TestPriceLines:
    def test_cart_of_85_pays_shipping_and_tax(self):
        pricing = price_lines([(42.5, 2)])

        assert pricing.items_price == 85.0
        assert pricing.shipping_price == 9.99
        assert pricing.tax_price == 8.5
        assert pricing.total_price == 103.49

    def test_exactly_100_still_pays_shipping(self):
        pricing = price_lines([(50.0, 2)])

        assert pricing.items_price == 100.0
        assert pricing.shipping_price == float(FLAT_SHIPPING)
        assert pricing.tax_price == 10.0
        assert pricing.total_price == 119.99

    def test_just_over_100_ships_free(self):
        pricing = price_lines([(100.01, 1)])

        assert pricing.shipping_price == 0.0
        assert pricing.tax_price == 10.0
        assert pricing.total_price == 110.01

    def test_tax_rounds_half_up(self):
        pricing = price_lines([(10.25, 1)])

        assert pricing.tax_price == 1.03

    def test_items_price_sums_every_line(self):
        pricing = price_lines([(19.99, 3), (5.5, 2)])

        assert pricing.items_price == 70.97

    @pytest.mark.parametrize(
        "lines",
        [
            [(0.1, 3)],
            [(33.33, 3)],
            [(19.99, 7), (0.01, 1)],
            [(99.995, 1)],
        ],
    )
    def test_total_is_sum_of_parts_to_the_cent(self, lines):
        assert _parts_add_up(price_lines(lines))


class TestEmptyPricing:
    def test_everything_is_zero(self):
        pricing = empty_pricing()

        assert pricing.items_price == 0.0
        assert pricing.shipping_price == 0.0
        assert pricing.tax_price == 0.0
        assert pricing.total_price == 0.0


class TestRound2:
    def test_half_cent_rounds_up(self):
        assert str(round2(2.675)) == "2.68"

    def test_integer_gets_two_places(self):
        assert str(round2(7)) == "7.00"
