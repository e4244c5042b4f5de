import os
from decimal import Decimal, InvalidOperation
from dotenv import load_dotenv

load_dotenv()

# -----------------------
# Database Config
# -----------------------
DB_TYPE = os.getenv("DB_TYPE", "sqlite").lower()

if DB_TYPE == "postgres":
    DATABASE_URL = os.getenv("DATABASE_URL")
    if not DATABASE_URL:
        raise ValueError("DATABASE_URL is required for Postgres setup")
elif DB_TYPE == "sqlite":
    DATABASE_URL = os.getenv("DATABASE_URL", "sqlite+aiosqlite:///./discounts.db")
else:
    raise ValueError(f"Unsupported DB_TYPE: {DB_TYPE}")

SQL_ECHO = os.getenv("SQL_ECHO", "false").lower() in ("1", "true", "yes")

# -----------------------
# Discount Config
# -----------------------
try:
    MAX_DISCOUNT_RATIO = Decimal(os.getenv("MAX_DISCOUNT_RATIO", "0.5"))
except InvalidOperation:
    raise ValueError("MAX_DISCOUNT_RATIO must be a decimal number")

if not (Decimal("0") < MAX_DISCOUNT_RATIO <= Decimal("1")):
    raise ValueError("MAX_DISCOUNT_RATIO must be greater than 0 and at most 1")

# -----------------------
# Logging Config
# -----------------------
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
