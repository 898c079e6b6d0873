import os
from pathlib import Path

BASE_DIR = Path(__file__).resolve().parent.parent.parent

DATABASE_URL = os.getenv("CLASSBOOK_DATABASE_URL", f"sqlite:///{BASE_DIR}/classbook.db")
LOG_LEVEL = os.getenv("CLASSBOOK_LOG_LEVEL", "INFO").upper()

# Grading policy
DEFAULT_MAX_SCORE = 100  # items without a max score are out of 100
PASSING_PERCENTAGE = 70  # a student passes with at least one item at or above this

# Weekly activity window
DEFAULT_ACTIVITY_WEEKS = 12
MAX_ACTIVITY_WEEKS = 52
