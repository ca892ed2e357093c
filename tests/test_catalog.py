import pytest

from catalog import PRODUCTS, Product, find_product, get_all_products


@pytest.mark.parametrize("product", PRODUCTS, ids=lambda p: p.id)
def test_find_product_returns_matching_record(product):
    assert find_product(product.id) is product


@pytest.mark.parametrize("product_id", ["", "0", "999", "p1", " 1", None])
def test_find_product_unknown_id(product_id):
    assert find_product(product_id) is None


def test_find_product_in_custom_list():
    items = [Product(id="a", name="A", description="", price=1, stock=1, category="x", images=("/a.png",))]
    assert find_product("a", items) is items[0]
    assert find_product("1", items) is None


def test_catalog_invariants():
    ids = [p.id for p in get_all_products()]
    assert len(ids) == len(set(ids))
    for p in PRODUCTS:
        assert p.stock >= 0
        assert isinstance(p.price, int)
        assert p.images, "every product needs at least one image"


def test_to_dict_and_in_stock():
    product = find_product("4")
    data = product.to_dict()
    assert data["id"] == "4"
    assert data["stock"] == 0
    assert isinstance(data["images"], list)
    assert product.in_stock is False
    assert find_product("1").in_stock is True
