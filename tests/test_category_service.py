from services.category_service import (
    get_all_categories, get_category_icon, get_category_info, get_category_name,
)


def test_lookup_searches_both_tables():
    assert get_category_info("scholarship").type == "income"
    assert get_category_info("food").type == "expense"
    assert get_category_name("part-time") == "Part-time Job"
    assert get_category_icon("books") == "📚"


def test_unknown_key_degrades_to_placeholder():
    info = get_category_info("crypto")
    assert info.key == "crypto"
    assert info.name == "Unknown"
    assert info.icon == "❓"
    assert not info.is_known
    assert get_category_name("") == "Unknown"


def test_get_all_categories():
    assert len(get_all_categories("income")) == 4
    assert len(get_all_categories("expense")) == 8
    assert len(get_all_categories()) == 12
    assert get_all_categories("transfer") == []

