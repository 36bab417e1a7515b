from decimal import Decimal

APP_NAME = "Expense Tracker"
APP_WIDTH = 1100
APP_HEIGHT = 720
DB_FILE = "expenses.db"

DATE_FORMAT = "%Y-%m-%d"
DATETIME_FORMAT = "%Y-%m-%d %H:%M:%S"

MAX_AMOUNT = Decimal("999999999.99")
MAX_AMOUNT_DECIMALS = 2
MAX_DESCRIPTION_LENGTH = 200
MAX_CATEGORY_NAME_LENGTH = 30
FUTURE_DATE_TOLERANCE_MS = 86_400_000  # one day, absorbs timezone skew

DEFAULT_PAGE_SIZE = 20
CUSTOM_CATEGORY_SORT_ORDER = 999

DEFAULT_CATEGORIES = [
    {"name": "Food",          "icon": "🍔", "color_hex": "#FF6B6B", "sort_order": 1},
    {"name": "Transport",     "icon": "🚗", "color_hex": "#4ECDC4", "sort_order": 2},
    {"name": "Entertainment", "icon": "🎬", "color_hex": "#45B7D1", "sort_order": 3},
    {"name": "Shopping",      "icon": "🛍️", "color_hex": "#FFA07A", "sort_order": 4},
    {"name": "Bills",         "icon": "📄", "color_hex": "#98D8C8", "sort_order": 5},
    {"name": "Healthcare",    "icon": "⚕️", "color_hex": "#F7DC6F", "sort_order": 6},
    {"name": "Other",         "icon": "📦", "color_hex": "#B19CD9", "sort_order": 7},
]

CATEGORY_ICONS = [
    "🍔", "🚗", "🎬", "🛍️", "📄", "⚕️", "📦", "💰", "🏠", "✈️", "📱", "⚽",
    "🎮", "🎨", "🎵", "📚", "☕", "🎯",
]

CATEGORY_COLORS = [
    "#FF6B6B", "#4ECDC4", "#45B7D1", "#FFA07A", "#98D8C8", "#F7DC6F",
    "#B19CD9", "#FF8C94", "#E74C3C", "#3498DB", "#2ECC71", "#F39C12",
]

DEFAULT_SETTINGS = [
    ("appearance_mode", "system"),
    ("currency", "INR"),
    ("date_format", "YYYY-MM-DD"),
    ("page_size", str(DEFAULT_PAGE_SIZE)),
]

ERROR_COLOR = "#F44336"
SUCCESS_COLOR = "#4CAF50"
INFO_COLOR = "#2196F3"
