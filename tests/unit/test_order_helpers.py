from decimal import Decimal
from types import SimpleNamespace
from schemas.order_schemas import OrderItemInput
from services.order_service import compose_address, expected_cart_total, to_cents, _is_missing
from services.product_service import main_image


def test_compose_address_with_governorate():
    assert compose_address("Rue X", "Tunis") == "Rue X, Tunis"


def test_compose_address_without_governorate():
    assert compose_address("Rue X", None) == "Rue X"
    assert compose_address("Rue X", "  ") == "Rue X"


def test_expected_cart_total_includes_shipping():
    items = [
        OrderItemInput(product_id=1, quantity=2, price=Decimal("10.00")),
        OrderItemInput(product_id=2, quantity=1, price=Decimal("4.50")),
    ]

    assert expected_cart_total(items, Decimal("7.00")) == Decimal("31.50")


def test_missing_values():
    assert _is_missing(None)
    assert _is_missing("")
    assert _is_missing("   ")
    assert _is_missing(0)
    assert not _is_missing("Amira")
    assert not _is_missing(Decimal("0.5"))


def image(image_id, is_main):
    return SimpleNamespace(id=image_id, is_main=is_main)


def test_main_image_prefers_flagged_image():
    assert main_image([image(1, False), image(2, True)]).id == 2


def test_main_image_falls_back_to_first():
    assert main_image([image(1, False), image(2, False)]).id == 1


def test_main_image_of_no_images():
    assert main_image([]) is None


def test_to_cents_rounds_half_up():
    assert to_cents(Decimal("31.990000000000002")) == Decimal("31.99")
    assert to_cents(Decimal("2.345")) == Decimal("2.35")
