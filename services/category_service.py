from models.category import CategoryInfo
from utils.constants import EXPENSE_CATEGORIES, INCOME_CATEGORIES, UNKNOWN_CATEGORY

_TABLES = {
    "income": INCOME_CATEGORIES,
    "expense": EXPENSE_CATEGORIES,
}


def get_category_info(key: str) -> CategoryInfo:
    """Look a key up in both tables; unknown keys get the 'Unknown' placeholder."""
    for type_, table in _TABLES.items():
        entry = table.get(key)
        if entry:
            return CategoryInfo(key=key, name=entry["name"], icon=entry["icon"], type=type_)
    return CategoryInfo(
        key=key, name=UNKNOWN_CATEGORY["name"], icon=UNKNOWN_CATEGORY["icon"], type="unknown"
    )


def get_category_name(key: str) -> str:
    return get_category_info(key).name


def get_category_icon(key: str) -> str:
    return get_category_info(key).icon


def get_all_categories(type_: str | None = None) -> list[CategoryInfo]:
    """All categories, or only those of one type. Unknown types give []."""
    if type_ is not None:
        table = _TABLES.get(type_, {})
        return [get_category_info(k) for k in table]
    return [get_category_info(k) for table in _TABLES.values() for k in table]

