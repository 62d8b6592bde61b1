from __future__ import annotations

import re
from typing import Any, Iterable

from app.canonical.v1.buyer import BuyerCanonicalV1, DuplicateGroupV1
from app.services.records import ensure_list


_PHONE_JUNK = re.compile(r"[\s()\-]")
_UA_FULL = re.compile(r"^380\d{9}$", re.ASCII)
_UA_LOCAL = re.compile(r"^0\d{9}$", re.ASCII)


def normalize_phone(raw: Any) -> str:
    """
    Canonicalize a phone to +380XXXXXXXXX where it is recognisably Ukrainian.

    Foreign numbers with a leading "+" are kept; anything else non-conforming
    passes through cleaned rather than being rejected.
    """
    s = str(raw if raw is not None else "").strip()
    if not s:
        return ""
    s = _PHONE_JUNK.sub("", s)
    if s.startswith("00"):
        s = "+" + s[2:]
    if s.startswith("+380"):
        return s
    if _UA_FULL.match(s):
        return "+" + s
    if _UA_LOCAL.match(s):
        return "+38" + s
    return s


def normalize_email(raw: Any) -> str:
    return str(raw if raw is not None else "").strip().lower()


def _first_present(raw: dict[str, Any], *keys: str) -> Any:
    for k in keys:
        v = raw.get(k)
        if v is not None and v != "":
            return v
    return None


def _as_id(value: Any) -> int | str | None:
    if value is None or value == "":
        return None
    if isinstance(value, bool):
        return str(value)
    if isinstance(value, (int, str)):
        return value
    return str(value)


def _entry_value(entry: Any, *keys: str) -> Any:
    # Some accounts return contact entries as objects: {"phone": "..."} / {"value": "..."}
    if isinstance(entry, dict):
        return _first_present(entry, *keys)
    return entry


def _unique(values: Iterable[str]) -> list[str]:
    seen: set[str] = set()
    out: list[str] = []
    for v in values:
        if v and v not in seen:
            seen.add(v)
            out.append(v)
    return out


def _buyer_name(raw: dict[str, Any]) -> str:
    for key in ("name", "full_name", "fullname"):
        value = raw.get(key)
        name = str(value).strip() if value is not None else ""
        if name:
            return name
    first, last = raw.get("first_name"), raw.get("last_name")
    if first and last:
        return f"{first} {last}".strip()
    return ""


def _company_id(raw: dict[str, Any]) -> int | str | None:
    if raw.get("company_id") is not None:
        return _as_id(raw["company_id"])
    company = raw.get("company")
    if isinstance(company, dict):
        return _as_id(company.get("id"))
    return None


def map_buyer(raw: Any) -> BuyerCanonicalV1:
    if not isinstance(raw, dict):
        return BuyerCanonicalV1()

    phones = ensure_list(raw.get("phone") or raw.get("phones"))
    emails = ensure_list(raw.get("email") or raw.get("emails"))

    return BuyerCanonicalV1(
        id=_as_id(_first_present(raw, "id", "buyer_id")),
        name=_buyer_name(raw),
        phones=_unique(normalize_phone(_entry_value(p, "phone", "value")) for p in phones),
        emails=_unique(normalize_email(_entry_value(e, "email", "value")) for e in emails),
        company_id=_company_id(raw),
    )


def find_duplicates(buyers: Iterable[BuyerCanonicalV1]) -> list[DuplicateGroupV1]:
    """
    Group buyers sharing a dedupe key. Only keys carried by two or more
    buyers are reported, in first-seen key order.
    """
    by_key: dict[str, list[BuyerCanonicalV1]] = {}
    for b in buyers:
        for key in b.dedupe_keys:
            by_key.setdefault(key, []).append(b)

    return [
        DuplicateGroupV1(key=key, ids=[b.id for b in members])
        for key, members in by_key.items()
        if len(members) > 1
    ]
