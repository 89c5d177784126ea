import json
from dataclasses import dataclass
from pathlib import Path

from fleetlead.parsing.exceptions import ParsingError

_PROMPT_DIR = Path(__file__).parent / "prompts"


@dataclass(frozen=True)
class PromptBundle:
    """Extraction prompt template plus the JSON schema the reply must match."""

    template: str
    schema_text: str
    schema: dict[str, object]

    def render(self, ocr_text: str) -> str:
        return self.template.format(ocr_text=ocr_text, json_schema=self.schema_text)


def _read(path: Path, what: str) -> str:
    try:
        return path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ParsingError(f"Failed to load {what}: {exc}") from exc


def load_prompt_template(path: Path | None = None) -> str:
    """Read a template with ``{ocr_text}`` and ``{json_schema}`` placeholders."""
    return _read(path or _PROMPT_DIR / "extraction_prompt.txt", "prompt template")


def load_json_schema(path: Path | None = None) -> str:
    return _read(path or _PROMPT_DIR / "extraction_schema.json", "JSON schema")


def load_prompt_bundle(
    template_path: Path | None = None,
    schema_path: Path | None = None,
) -> PromptBundle:
    """Load template and schema together, checking the schema is a JSON object.

    Raises:
        ParsingError: if either file is unreadable or the schema is malformed.
    """
    schema_text = load_json_schema(schema_path)
    try:
        schema = json.loads(schema_text)
    except json.JSONDecodeError as exc:
        raise ParsingError(f"JSON schema is not valid JSON: {exc}") from exc
    if not isinstance(schema, dict):
        raise ParsingError("JSON schema must be an object")
    return PromptBundle(
        template=load_prompt_template(template_path),
        schema_text=schema_text,
        schema=schema,
    )
