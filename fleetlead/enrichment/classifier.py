"""Job-title rules that decide which contacts are worth enriching."""

import re

_CONTAINS = (
    re.compile(r"\bowner\b"),
    re.compile(r"\bfounder\b"),
    re.compile(r"\bceo\b"),
    re.compile(r"\bchief executive\b"),
)
_PRESIDENT = re.compile(r"\bpresident\b")
_VICE = re.compile(r"\bvice\b|\bvp\b")

_EXACT = frozenset(
    {
        "admin",
        "director",
        "principal",
        "proprietor",
        "managing director",
        "superintendent",
    }
)


def is_executive(job_title: str | None) -> bool:
    """Owner, founder, CEO, president (not vice) and a few exact titles.

    >>> is_executive("Owner & Operator")
    True
    >>> is_executive("Vice President of Sales")
    False
    """
    if not job_title:
        return False
    title = " ".join(job_title.lower().split())
    if any(pattern.search(title) for pattern in _CONTAINS):
        return True
    if _PRESIDENT.search(title) and not _VICE.search(title):
        return True
    return title in _EXACT
