import httpx
import openai

from fleetlead.parsing.client_base import BaseParsingClient, CompletionRequest
from fleetlead.parsing.exceptions import ParsingError, ParsingNetworkError

_SCHEMA_NAME = "vehicle_company"


class OpenAIClientAdapter(BaseParsingClient):
    """Chat-completions client for OpenAI and every OpenAI-compatible host."""

    def __init__(
        self,
        *,
        api_key: str,
        timeout_seconds: int,
        base_url: str | None = None,
    ) -> None:
        # Local hosts such as Ollama accept any key, but the SDK insists on one.
        self._client = openai.OpenAI(
            api_key=api_key or "unused",
            timeout=timeout_seconds,
            base_url=base_url,
        )

    def complete(self, request: CompletionRequest) -> str:
        messages = []
        if request.system_prompt:
            messages.append({"role": "system", "content": request.system_prompt})
        messages.append({"role": "user", "content": request.user_prompt})

        try:
            response = self._client.chat.completions.create(
                model=request.model,
                temperature=request.temperature,
                messages=messages,
                response_format={
                    "type": "json_schema",
                    "json_schema": {
                        "name": _SCHEMA_NAME,
                        "strict": True,
                        "schema": request.json_schema,
                    },
                },
            )
        except (openai.APIConnectionError, httpx.TransportError) as exc:
            raise ParsingNetworkError(f"Parsing provider unreachable: {exc}") from exc
        except openai.APIStatusError as exc:
            if exc.status_code == 429 or exc.status_code >= 500:
                raise ParsingNetworkError(
                    f"Parsing provider unavailable ({exc.status_code})"
                ) from exc
            raise ParsingError(
                f"Parsing provider rejected the request ({exc.status_code}): {exc.message}"
            ) from exc
        except openai.APIError as exc:
            raise ParsingNetworkError(f"Parsing provider error: {exc}") from exc

        if not response.choices:
            raise ParsingError("Parsing provider returned no choices")
        choice = response.choices[0]
        if choice.finish_reason == "length":
            raise ParsingError("Parsing provider reply was truncated")
        content = choice.message.content
        if not content:
            raise ParsingError("Parsing provider returned an empty reply")
        return content
