"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

COMPULSORY_FEES = ("tuition", "exam")
OPTIONAL_FEES = ("hostel", "library", "sports", "development", "medical", "transport")
FEE_TYPES = COMPULSORY_FEES + OPTIONAL_FEES

FEE_TYPE_LABELS = {
    "tuition": "Tuition Fee",
    "exam": "Exam Fee",
    "hostel": "Hostel Fee",
    "library": "Library Fee",
    "sports": "Sports Fee",
    "development": "Development Fee",
    "medical": "Medical Fee",
    "transport": "Transport Fee",
}

PAYMENT_METHODS = ("online", "cash", "cheque", "bank_transfer")

UNKNOWN_STATUS = "-"

FINAL_EXAM_ID = "final"
FINAL_MAX_MARKS = 100
DEFAULT_MAX_MARKS = 30

MIN_PASSWORD_LENGTH = 6
DEFAULT_STUDENT_PASSWORD = "123456"

MAX_BOOKS_PER_STUDENT = 5
LOAN_PERIOD_DAYS = 30
FINE_PER_DAY = 5

DEFAULT_PAYMENT_HISTORY_LIMIT = 10
