"""Unit tests for Product stock helpers"""

from datetime import date

from src.domain.product import Product


def make_product(**kwargs):
    defaults = dict(id="prod_1", name="Cetirizine 10mg", barcode="890000000001")
    defaults.update(kwargs)
    return Product(**defaults)


class TestLowStock:
    def test_at_minimum_is_low(self):
        assert make_product(available_quantity=5, minimum_quantity=5).is_low_stock()

    def test_above_minimum_is_not_low(self):
        assert not make_product(available_quantity=6, minimum_quantity=5).is_low_stock()


class TestExpiry:
    today = date(2025, 1, 1)

    def test_no_expiry_date(self):
        product = make_product(expiry_date=None)

        assert not product.is_expired(today=self.today)
        assert not product.is_expiring_soon(today=self.today)

    def test_expired(self):
        product = make_product(expiry_date=date(2024, 12, 31))

        assert product.is_expired(today=self.today)
        assert not product.is_expiring_soon(today=self.today)

    def test_expiring_within_window(self):
        product = make_product(expiry_date=date(2025, 1, 31))

        assert not product.is_expired(today=self.today)
        assert product.is_expiring_soon(days=30, today=self.today)
        assert not product.is_expiring_soon(days=29, today=self.today)
