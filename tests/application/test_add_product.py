"""Integration tests for the AddProduct use case."""

import pytest

from stockbook.application.add_product import AddProductHandler
from stockbook.domain.exceptions import ValidationError
from stockbook.domain.model.product import Product
from tests.fakes import FakeUnitOfWork


class TestAddProduct:

    def test_auto_assigns_numeric_id(self):
        uow = FakeUnitOfWork(products=[Product(id="7", name="Bench")])
        product = AddProductHandler(uow).handle("Treadmill", model_number=" TM-200 ")
        assert product.id == "8"
        assert product.model_number == "TM-200"
        assert product.todays_stock == 0
        assert uow.products.get_by_id("8") is not None

    def test_first_product_gets_id_one(self):
        product = AddProductHandler(FakeUnitOfWork()).handle("Treadmill")
        assert product.id == "1"

    def test_explicit_id(self):
        uow = FakeUnitOfWork()
        product = AddProductHandler(uow).handle("Treadmill", product_id="TM")
        assert product.id == "TM"

    def test_duplicate_name_rejected(self):
        uow = FakeUnitOfWork(products=[Product(id="1", name="Treadmill")])
        with pytest.raises(ValidationError, match="already exists"):
            AddProductHandler(uow).handle("treadmill")

    def test_duplicate_id_rejected(self):
        uow = FakeUnitOfWork(products=[Product(id="TM", name="Treadmill")])
        with pytest.raises(ValidationError, match="ID 'TM' already exists"):
            AddProductHandler(uow).handle("Bench", product_id="TM")

    def test_blank_name_rejected(self):
        with pytest.raises(ValidationError, match="name is required"):
            AddProductHandler(FakeUnitOfWork()).handle("  ")

    def test_padded_id_matches_existing_product(self):
        existing = Product(id="P1", name="Bike", todays_stock=42)
        uow = FakeUnitOfWork(products=[existing])

        with pytest.raises(ValidationError, match="ID 'P1' already exists"):
            AddProductHandler(uow).handle("Treadmill", product_id=" P1 ")

        assert uow.products.get_by_id("P1") == Product(id="P1", name="Bike", todays_stock=42)

    def test_padded_id_is_stored_stripped(self):
        uow = FakeUnitOfWork()
        product = AddProductHandler(uow).handle("Treadmill", product_id="  TM ")
        assert product.id == "TM"
        assert uow.products.get_by_id("TM") is not None

    def test_blank_id_rejected(self):
        with pytest.raises(ValidationError, match="Product ID is required"):
            AddProductHandler(FakeUnitOfWork()).handle("Treadmill", product_id="   ")
