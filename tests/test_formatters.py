"""
tests/test_formatters.py
------------------------
Indian number, price, market cap, change and volume formatting.
"""

import unittest

from sharesathi.utils.formatters import (
    format_change,
    format_indian_number,
    format_market_cap,
    format_percent,
    format_price,
    format_volume,
)


class TestIndianNumber(unittest.TestCase):

    def test_grouping(self):
        self.assertEqual(format_indian_number(1234567), "12,34,567")
        self.assertEqual(format_indian_number(100000), "1,00,000")
        self.assertEqual(format_indian_number(123456789), "12,34,56,789")

    def test_small_numbers_not_grouped(self):
        self.assertEqual(format_indian_number(999), "999")
        self.assertEqual(format_indian_number(0), "0")

    def test_fractions_get_two_decimals(self):
        self.assertEqual(format_indian_number(1234567.5), "12,34,567.50")

    def test_explicit_decimals(self):
        self.assertEqual(format_indian_number(1234, decimals=2), "1,234.00")
        self.assertEqual(format_indian_number(2.71828, decimals=4), "2.7183")

    def test_negative(self):
        self.assertEqual(format_indian_number(-1234.5), "-1,234.50")

    def test_negative_rounding_to_zero_has_no_sign(self):
        self.assertEqual(format_indian_number(-0.001), "0.00")


class TestPriceAndCap(unittest.TestCase):

    def test_price(self):
        self.assertEqual(format_price(2456.5), "₹2,456.50")
        self.assertEqual(format_price(123456.789), "₹1,23,456.79")

    def test_market_cap_lakh_crore(self):
        self.assertEqual(format_market_cap(1734000), "₹17.34L Cr")

    def test_market_cap_thousand_crore(self):
        self.assertEqual(format_market_cap(5000), "₹5.00K Cr")

    def test_market_cap_small(self):
        self.assertEqual(format_market_cap(999.5), "₹999.50 Cr")


class TestChange(unittest.TestCase):

    def test_positive(self):
        self.assertEqual(format_change(12.5, 1.25), "+₹12.50 (+1.25%)")

    def test_negative(self):
        self.assertEqual(format_change(-3.4, -0.5), "-₹3.40 (-0.50%)")

    def test_zero_is_positive(self):
        self.assertEqual(format_change(0, 0), "+₹0.00 (+0.00%)")

    def test_percent(self):
        self.assertEqual(format_percent(2), "+2.00%")
        self.assertEqual(format_percent(-1.234), "-1.23%")


class TestVolume(unittest.TestCase):

    def test_crore(self):
        self.assertEqual(format_volume(25000000), "2.50 Cr")

    def test_lakh(self):
        self.assertEqual(format_volume(150000), "1.50 L")

    def test_thousand(self):
        self.assertEqual(format_volume(1500), "1.50 K")

    def test_small(self):
        self.assertEqual(format_volume(999), "999")


if __name__ == "__main__":
    unittest.main()
