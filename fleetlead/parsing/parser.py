"""Company parser: vehicle OCR text -> structured company fields via an LLM."""

import json
import re

from fleetlead.logging.logger import Log
from fleetlead.parsing.base import BaseCompanyParser
from fleetlead.parsing.client_base import BaseParsingClient, CompletionRequest
from fleetlead.parsing.exceptions import ParsingError
from fleetlead.parsing.models import ParsedCompany
from fleetlead.parsing.prompt_loader import PromptBundle, load_prompt_bundle
from fleetlead.parsing.validator import validate_and_build

SYSTEM_PROMPT = (
    "You read the lettering painted on commercial vehicles and reply with a "
    "single JSON object. You never add information that is not in the text."
)

# Van lettering is short; anything past this is OCR noise from the background.
MAX_OCR_CHARS = 4000
MAX_TEMPERATURE = 0.2

_FENCED = re.compile(r"^```[\w-]*\s*\n?(.*?)\n?\s*```$", re.DOTALL)
_SPACES = re.compile(r"[ \t]+")


def clean_ocr_text(text: str) -> str:
    lines = (_SPACES.sub(" ", line).strip() for line in text.splitlines())
    return "\n".join(line for line in lines if line)[:MAX_OCR_CHARS]


def decode_reply(raw: str) -> dict[str, object]:
    """Parse a model reply, tolerating a surrounding Markdown code fence."""
    cleaned = raw.strip()
    fenced = _FENCED.match(cleaned)
    if fenced:
        cleaned = fenced.group(1)
    try:
        payload = json.loads(cleaned)
    except json.JSONDecodeError as exc:
        raise ParsingError(f"Invalid JSON in model reply: {exc}") from exc
    if not isinstance(payload, dict):
        raise ParsingError("Model reply must be a JSON object")
    return payload


class CompanyParser(BaseCompanyParser):
    def __init__(
        self,
        *,
        client: BaseParsingClient,
        model: str,
        temperature: float = 0.0,
        prompt: PromptBundle | None = None,
    ) -> None:
        self._client = client
        self._model = model
        self._temperature = max(0.0, min(MAX_TEMPERATURE, temperature))
        self._prompt = prompt or load_prompt_bundle()

    def parse(self, text: str) -> ParsedCompany:
        ocr_text = clean_ocr_text(text)
        request = CompletionRequest(
            model=self._model,
            user_prompt=self._prompt.render(ocr_text),
            json_schema=self._prompt.schema,
            source_text=ocr_text,
            system_prompt=SYSTEM_PROMPT,
            temperature=self._temperature,
        )
        raw = self._client.complete(request)
        Log.debug("Parser reply received", model=self._model, chars=len(raw))

        result = validate_and_build(decode_reply(raw))
        Log.info(
            "Parsed vehicle lettering",
            name_found=bool(result.name),
            industries=len(result.industry),
        )
        return result
