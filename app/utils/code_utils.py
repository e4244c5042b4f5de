# app/utils/code_utils.py
import random
import string

CODE_ALPHABET = string.ascii_uppercase + string.digits


def generate_code(prefix: str, length: int = 8) -> str:
    suffix = "".join(random.choices(CODE_ALPHABET, k=length))
    return f"{prefix}-{suffix}"
