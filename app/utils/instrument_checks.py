from datetime import datetime, timezone
from fastapi import HTTPException

MIN_CODE_LENGTH = 3
MAX_CODE_LENGTH = 50  # matches the String(50) code columns


def check_percentage(discount_type: str, discount_value) -> None:
    if discount_type == "percentage" and discount_value is not None and discount_value > 100:
        raise HTTPException(status_code=400, detail="Percentage discount cannot exceed 100")


def check_expiration(expiration_date: datetime) -> None:
    if expiration_date.tzinfo is None:
        expiration_date = expiration_date.replace(tzinfo=timezone.utc)
    if expiration_date <= datetime.now(timezone.utc):
        raise HTTPException(status_code=400, detail="Expiration date must be in the future")


def check_usage(usage_limit: int, used_count: int) -> None:
    if used_count > usage_limit:
        raise HTTPException(
            status_code=400,
            detail=f"Usage limit ({usage_limit}) cannot be lower than the current usage count ({used_count})",
        )


def clean_code(code: str, label: str) -> str:
    code = code.strip()
    if len(code) < MIN_CODE_LENGTH:
        raise HTTPException(status_code=400, detail=f"{label} code must be at least {MIN_CODE_LENGTH} characters")
    if len(code) > MAX_CODE_LENGTH:
        raise HTTPException(status_code=400, detail=f"{label} code must be at most {MAX_CODE_LENGTH} characters")
    return code
