import pytest
from core.exceptions import ValidationError
from services.admin_service import final_price
from services.product_service import parse_sort


def test_final_price_applies_discount_percentage():
    assert final_price(10000, 0) == 10000
    assert final_price(10000, 15) == 8500
    assert final_price(19.99, 10) == 17.99


def test_parse_sort_directions():
    assert parse_sort(None) is None
    assert "ASC" in str(parse_sort("final_price_asc")).upper()
    assert "DESC" in str(parse_sort("created_at_desc")).upper()


@pytest.mark.parametrize("sort", ["price", "password_hash_asc", "name; DROP TABLE products_asc"])
def test_parse_sort_rejects_unknown_columns(sort):
    with pytest.raises(ValidationError):
        parse_sort(sort)
