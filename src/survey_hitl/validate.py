from __future__ import annotations
import re
from typing import Any

PHONE_SHAPE_RE = re.compile(r"^0\d{1,4}-?\d{1,4}-?\d{4}$")
EMAIL_SHAPE_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
POSTAL_SHAPE_RE = re.compile(r"^\d{3}-?\d{4}$")
EMAIL_RE = re.compile(r"[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}")

def digits_only(s: str) -> str:
    return re.sub(r"\D", "", s)

def is_valid_phone_digits(digits: str) -> bool:
    return digits.startswith("0") and len(digits) in (10, 11)

def format_phone(digits: str) -> str:
    # 11 digits: mobile / IP phone (3-4-4); 10 digits: Tokyo/Osaka (2-4-4) or other areas (3-3-4)
    if len(digits) == 11:
        return f"{digits[:3]}-{digits[3:7]}-{digits[7:]}"
    if len(digits) == 10:
        if digits[:2] in ("03", "06"):
            return f"{digits[:2]}-{digits[2:6]}-{digits[6:]}"
        return f"{digits[:3]}-{digits[3:6]}-{digits[6:]}"
    return digits

def postal_digits(code: str) -> str | None:
    d = digits_only(code)
    return d if len(d) == 7 else None

def format_postal(digits: str) -> str:
    return f"{digits[:3]}-{digits[3:]}"

def clean_email_candidate(s: str) -> str:
    s = re.sub(r"\s+", "", s)
    return s.replace("。", ".").replace("．", ".").replace("＠", "@")

def validate_email(s: str) -> bool:
    return bool(EMAIL_SHAPE_RE.match(s))

def parse_int(s: str) -> int:
    # raises ValueError on garbage; callers treat that as "rule did not match"
    return int(s.strip())

def suggest_corrections(values: dict[str, Any]) -> dict[str, str]:
    """
    Suggest fixes a human reviewer can accept with one click:
    - phone without hyphens -> hyphenated
    - a 7-digit run inside the address -> postal code
    """
    suggestions: dict[str, str] = {}

    phone = values.get("phone")
    if isinstance(phone, str) and "-" not in phone:
        d = digits_only(phone)
        if is_valid_phone_digits(d):
            suggestions["phone"] = format_phone(d)

    address = values.get("address")
    if isinstance(address, str) and not values.get("postal_code"):
        m = re.search(r"(?<!\d)(\d{3})(\d{4})(?!\d)", address)
        if m:
            suggestions["postal_code"] = f"{m.group(1)}-{m.group(2)}"

    return suggestions
