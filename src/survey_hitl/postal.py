from __future__ import annotations

import logging
import re
import time
from dataclasses import dataclass
from typing import Protocol

import requests

from .extractors.base import Extraction
from .extractors.postal import HYPHENS
from .validate import format_postal, postal_digits

logger = logging.getLogger(__name__)

STREET_NUMBER_RE = re.compile(rf"\d+[{HYPHENS}]\d+(?:[{HYPHENS}]\d+)?")


@dataclass(frozen=True)
class PostalAddress:
    postal_code: str  # NNN-NNNN
    prefecture: str
    city: str
    town: str

    @property
    def full_address(self) -> str:
        return f"{self.prefecture}{self.city}{self.town}"


class PostalLookup(Protocol):
    def lookup(self, code: str) -> PostalAddress | None:
        """`code` is the 7-digit postal code without separators."""
        ...


class ZipcloudClient:
    """
    Postal code -> address through the zipcloud search API.
    - retries with exponential backoff on transient failures/timeouts
    - any failure ends as None; completion is best effort
    """
    def __init__(self, url: str = "https://zipcloud.ibsnet.co.jp/api/search", timeout_s: int = 10, max_retries: int = 2):
        self.url = url
        self.timeout_s = timeout_s
        self.max_retries = max_retries

    def lookup(self, code: str) -> PostalAddress | None:
        if postal_digits(code) != code:
            return None

        for attempt in range(1, self.max_retries + 1):
            try:
                r = requests.get(self.url, params={"zipcode": code}, timeout=self.timeout_s)
                r.raise_for_status()
                data = r.json()
            except (requests.RequestException, ValueError) as e:
                logger.warning("postal lookup attempt %d/%d for %s failed: %s", attempt, self.max_retries, code, e)
                if attempt < self.max_retries:
                    time.sleep(min(2 ** attempt, 8))
                continue

            results = data.get("results") or []
            if data.get("status") != 200 or not results:
                logger.info("postal lookup found no address for %s", code)
                return None
            first = results[0]
            return PostalAddress(
                postal_code=format_postal(code),
                prefecture=first.get("address1", ""),
                city=first.get("address2", ""),
                town=first.get("address3", ""),
            )

        return None


def complete_address(extr: dict[str, Extraction], lookup: PostalLookup | None) -> None:
    """
    Replace the guessed address with the postal-code address, keeping the
    street number the guess already had. Runs only when a postal code was read.
    """
    if lookup is None:
        return
    postal = extr.get("postal_code")
    if postal is None or postal.value is None:
        return
    code = postal_digits(str(postal.value))
    if code is None:
        return

    resolved = lookup.lookup(code)
    if resolved is None:
        return

    guess = extr.get("address")
    guessed_text = guess.value if guess is not None and isinstance(guess.value, str) else ""
    street = STREET_NUMBER_RE.search(guessed_text)
    address = resolved.full_address + (street.group(0) if street else "")

    reasons = list(guess.reasons) if guess is not None else []
    extr["address"] = Extraction(
        "address", address, "lookup", guessed_text or None, 0.90, reasons + ["postal_lookup"], rule="postal_lookup",
    )
    postal.value = resolved.postal_code
    postal.reasons.append("postal_lookup_canonical")
    logger.info("postal lookup %s -> %s", resolved.postal_code, address)
