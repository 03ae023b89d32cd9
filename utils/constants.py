APP_NAME = "Student Money Tracker"
DB_FILE = "money_tracker.db"

DATE_FORMAT = "%Y-%m-%d"

TRANSACTION_TYPES = ("income", "expense")

# Only monthly rules are processed; anything else stored on a rule is inert.
FREQUENCY_MONTHLY = "monthly"
FREQUENCIES = [FREQUENCY_MONTHLY]

DEFAULT_BANK_ID = "main"
DEFAULT_BANKS = [
    {"id": DEFAULT_BANK_ID, "name": "Main Account", "type": "savings",
     "balance": "0", "color": "#4f46e5"},
]

RECURRING_MARKER = " (Auto)"
RECURRING_NOTES = "Automatically added from recurring transaction"
RECURRING_NOTIFICATION = "New recurring transactions have been added automatically"

# Storage keys, namespaced per user in the user_data table
KEY_TRANSACTIONS = "transactions"
KEY_RECURRING = "recurring"
KEY_BANKS = "banks"
KEY_BUDGET = "budget"

BUDGET_ALERT_THRESHOLD = 75.0   # percent
UPCOMING_REMINDER_DAYS = 7
HIGH_SPENDING_RATIO = 0.8

DEFAULT_CURRENCY = "BDT"
CURRENCY_SYMBOLS = {
    "BDT": "৳",
    "USD": "$",
    "EUR": "€",
    "GBP": "£",
}

INCOME_CATEGORIES = {
    "scholarship":  {"name": "Scholarship",      "icon": "🎓"},
    "allowance":    {"name": "Family Allowance", "icon": "👨‍👩‍👧‍👦"},
    "part-time":    {"name": "Part-time Job",    "icon": "💼"},
    "other-income": {"name": "Other Income",     "icon": "💰"},
}

EXPENSE_CATEGORIES = {
    "food":          {"name": "Food & Dining",    "icon": "🍔"},
    "transport":     {"name": "Transportation",   "icon": "🚌"},
    "books":         {"name": "Books & Supplies", "icon": "📚"},
    "rent":          {"name": "Rent & Utilities", "icon": "🏠"},
    "entertainment": {"name": "Entertainment",    "icon": "🎬"},
    "clothing":      {"name": "Clothing",         "icon": "👕"},
    "health":        {"name": "Healthcare",       "icon": "🏥"},
    "other":         {"name": "Others",           "icon": "📦"},
}

UNKNOWN_CATEGORY = {"name": "Unknown", "icon": "❓"}

CHART_COLORS = [
    "#4f46e5", "#06b6d4", "#10b981", "#f59e0b", "#ef4444",
    "#8b5cf6", "#f97316", "#84cc16", "#ec4899", "#6366f1",
]
INCOME_COLOR = "#4CAF50"
EXPENSE_COLOR = "#F44336"

SEVERITY_ORDER = {"error": 0, "warning": 1, "info": 2}
