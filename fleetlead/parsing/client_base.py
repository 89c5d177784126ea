from abc import ABC, abstractmethod
from dataclasses import dataclass, field


@dataclass(frozen=True)
class CompletionRequest:
    """One structured-output chat call.

    ``source_text`` is the cleaned OCR text the prompt was rendered from, kept
    so offline clients can answer without a model.
    """

    model: str
    user_prompt: str
    json_schema: dict[str, object] = field(default_factory=dict)
    source_text: str = ""
    system_prompt: str = ""
    temperature: float = 0.0


class BaseParsingClient(ABC):
    @abstractmethod
    def complete(self, request: CompletionRequest) -> str:
        """Return the raw text of the model's reply."""
