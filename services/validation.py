"""Entry-layer validation. Nothing past this point re-validates its input."""
from datetime import date

from utils.constants import FREQUENCIES, TRANSACTION_TYPES
from utils.currency import to_money
from utils.date_helpers import parse_date
from utils.errors import ValidationError


def _check_amount(data: dict, errors: list, field: str = "amount", allow_zero: bool = False):
    raw = data.get(field)
    if raw is None or raw == "":
        errors.append((field, "Amount must be greater than 0"))
        return
    try:
        amount = to_money(raw)
    except ValueError:
        errors.append((field, "Amount must be a number"))
        return
    if amount < 0 or (amount == 0 and not allow_zero):
        errors.append((field, "Amount must be greater than 0"))


def _check_type(data: dict, errors: list):
    if data.get("type") not in TRANSACTION_TYPES:
        errors.append(("type", "Type must be either income or expense"))


def _check_required_text(data: dict, errors: list, field: str, label: str):
    value = data.get(field)
    if not isinstance(value, str) or not value.strip():
        errors.append((field, f"{label} is required"))


def validate_transaction_data(data: dict) -> None:
    """Raise ValidationError listing every problem with a manual transaction."""
    errors: list[tuple[str, str]] = []
    _check_amount(data, errors)
    _check_required_text(data, errors, "description", "Description")
    _check_required_text(data, errors, "category", "Category")
    raw_date = data.get("date")
    if not raw_date:
        errors.append(("date", "Date is required"))
    elif not isinstance(raw_date, date) and parse_date(raw_date) is None:
        errors.append(("date", "Date must be YYYY-MM-DD"))
    _check_type(data, errors)
    if errors:
        raise ValidationError(errors)


def validate_rule_data(data: dict) -> None:
    errors: list[tuple[str, str]] = []
    _check_amount(data, errors)
    _check_required_text(data, errors, "description", "Description")
    _check_required_text(data, errors, "category", "Category")
    _check_type(data, errors)
    day = data.get("day")
    if isinstance(day, bool) or not isinstance(day, int) or not 1 <= day <= 31:
        errors.append(("day", "Day must be between 1 and 31"))
    if data.get("frequency", FREQUENCIES[0]) not in FREQUENCIES:
        errors.append(("frequency", f"Frequency must be one of: {', '.join(FREQUENCIES)}"))
    if errors:
        raise ValidationError(errors)


def validate_bank_data(data: dict) -> None:
    errors: list[tuple[str, str]] = []
    _check_required_text(data, errors, "id", "Bank id")
    _check_required_text(data, errors, "name", "Bank name")
    if data.get("balance") not in (None, ""):
        try:
            to_money(data["balance"])
        except ValueError:
            errors.append(("balance", "Balance must be a number"))
    if errors:
        raise ValidationError(errors)


def validate_budget_limit(category: str, limit) -> None:
    errors: list[tuple[str, str]] = []
    if not category:
        errors.append(("category", "Category is required"))
    _check_amount({"limit": limit}, errors, field="limit", allow_zero=True)
    if errors:
        raise ValidationError(errors)
