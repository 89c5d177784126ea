"""Match-key normalization for company deduplication.

These functions are applied both when a company is stored and when a
candidate is matched, so they must stay deterministic.
"""

import re

LEGAL_SUFFIXES = frozenset(
    {
        "inc",
        "incorporated",
        "llc",
        "llp",
        "lp",
        "co",
        "corp",
        "corporation",
        "company",
        "ltd",
        "limited",
        "plc",
        "pc",
        "pllc",
    }
)

_PUNCTUATION_RE = re.compile(r"[^\w\s]")
_WHITESPACE_RE = re.compile(r"\s+")
_NON_DIGIT_RE = re.compile(r"\D")


def normalize_company_name(name: str | None) -> str:
    """Lowercase, drop punctuation, collapse whitespace, strip trailing legal suffixes.

    >>> normalize_company_name("  ABC  Plumbing, Inc. ")
    'abc plumbing'

    A name made only of suffix words keeps its words, so "Co." stays "co".
    """
    if not name:
        return ""
    cleaned = _PUNCTUATION_RE.sub(" ", name.lower())
    tokens = _WHITESPACE_RE.split(cleaned.strip())
    tokens = [t for t in tokens if t]
    stripped = list(tokens)
    while stripped and stripped[-1] in LEGAL_SUFFIXES:
        stripped.pop()
    return " ".join(stripped or tokens)


def normalize_email(email: str | None) -> str:
    if not email:
        return ""
    return email.strip().lower()


def normalize_phone(phone: str | None) -> str:
    if not phone:
        return ""
    return _NON_DIGIT_RE.sub("", phone)


def normalize_industries(industries: list[str] | None) -> list[str]:
    """Trim entries, drop blanks and case-insensitive repeats, keep first spelling."""
    result: list[str] = []
    seen: set[str] = set()
    for item in industries or []:
        value = (item or "").strip()
        key = value.casefold()
        if value and key not in seen:
            seen.add(key)
            result.append(value)
    return result
