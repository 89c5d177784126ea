"""Offline parsing client for local runs and tests.

Reads the company straight off the OCR text with regular expressions instead
of asking a model. Register real providers in ParserFactory.
"""

import json
import re

from fleetlead.parsing.client_base import BaseParsingClient, CompletionRequest

_EMAIL = re.compile(r"[\w.+-]+@[\w-]+(?:\.[\w-]+)+")
_PHONE = re.compile(r"\(?\d{3}\)?[\s.-]?\d{3}[\s.-]?\d{4}")
_WEBSITE = re.compile(r"(?<![@\w.-])(?:www\.)?[a-z0-9-]+\.(?:com|net|org|biz|us|co)\b", re.I)
_TRADES = (
    "plumbing",
    "heating",
    "cooling",
    "hvac",
    "electric",
    "roofing",
    "landscaping",
    "painting",
    "pest control",
)


def _first(pattern: re.Pattern[str], text: str) -> str:
    match = pattern.search(text)
    return match.group(0) if match else ""


def _name(lines: list[str]) -> str:
    for line in lines:
        if any(p.search(line) for p in (_EMAIL, _PHONE, _WEBSITE)):
            continue
        if any(ch.isalpha() for ch in line):
            return line
    return ""


class ExampleClientAdapter(BaseParsingClient):
    def complete(self, request: CompletionRequest) -> str:
        text = request.source_text
        lines = [line.strip() for line in text.splitlines() if line.strip()]
        lowered = text.lower()
        return json.dumps(
            {
                "name": _name(lines),
                "industry": [trade for trade in _TRADES if trade in lowered],
                "email": _first(_EMAIL, text),
                "phone": re.sub(r"\D", "", _first(_PHONE, text)),
                "city": "",
                "state": "",
                "website": _first(_WEBSITE, text),
            }
        )
