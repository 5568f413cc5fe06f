from app.services.cart_components.cart_engine import CartEngine
from app.services.cart_components.catalog import Catalog
from app.services.cart_components.checkout_assembler import build_order_request, to_order_lines

from conftest import make_product


def _catalog():
    return Catalog([
        make_product("P", category="Mens-Clothing", sizes=[{"name": "M", "price": 120}]),
        make_product("rice", offer_price=80),
    ])


def test_order_lines_skip_unresolvable_entries():
    cart = CartEngine.from_stored({"P-M": 2, "X123": 1, "rice": 3}, catalog=_catalog())

    lines = {line.product: line for line in to_order_lines(cart)}
    assert set(lines) == {"P", "rice"}
    assert lines["P"].quantity == 2
    assert lines["P"].size == "M"
    assert lines["rice"].size is None


def test_order_lines_use_a_fresher_catalog():
    cart = CartEngine.from_stored({"P-M": 1, "rice": 1}, catalog=_catalog())
    delisted = Catalog([make_product("rice", offer_price=80)])

    assert [line.product for line in to_order_lines(cart, delisted)] == ["rice"]


def test_order_request_body():
    cart = CartEngine(_catalog())
    cart.add_item("P", "M", "Red", 120)
    cart.add_item("P", "M", "Red", 120)

    body = build_order_request(cart, "addr-1").model_dump(by_alias=True)
    assert body == {
        "items": [{"product": "P", "quantity": 2, "size": "M", "color": "Red"}],
        "address": "addr-1",
    }
