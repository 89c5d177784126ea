from fleetlead.config.settings import Settings
from fleetlead.parsing.base import BaseCompanyParser
from fleetlead.parsing.example_client_adapter import ExampleClientAdapter
from fleetlead.parsing.openai_client_adapter import OpenAIClientAdapter
from fleetlead.parsing.parser import CompanyParser

_DEFAULT_TIMEOUT_SECONDS = 30

# Hosted OpenAI-compatible providers and where their API lives.
HOSTED_BASE_URLS: dict[str, str] = {
    "openrouter": "https://openrouter.ai/api/v1",
    "groq": "https://api.groq.com/openai/v1",
    "together": "https://api.together.xyz/v1",
    "deepseek": "https://api.deepseek.com/v1",
    "ollama": "http://localhost:11434/v1",
}

SUPPORTED_PROVIDERS = ("example", "openai", "openai_compatible", *sorted(HOSTED_BASE_URLS))


def _provider_setting(settings: Settings, provider: str, name: str, default: object) -> object:
    """Look up ``parsing_<provider>_<name>``; providers only declare what they need."""
    return getattr(settings, f"parsing_{provider}_{name}", default)


class ParserFactory:
    """Builds the company parser named by ``settings.parsing_provider``."""

    @classmethod
    def create(cls, settings: Settings) -> BaseCompanyParser:
        provider = settings.parsing_provider.strip().lower()
        if provider not in SUPPORTED_PROVIDERS:
            raise ValueError(
                f"Unknown parsing provider '{provider}'. "
                f"Choose from: {', '.join(SUPPORTED_PROVIDERS)}"
            )
        if provider == "example":
            return CompanyParser(client=ExampleClientAdapter(), model="example")

        model = str(_provider_setting(settings, provider, "model_name", "") or "").strip()
        if not model:
            raise ValueError(
                f"parsing_{provider}_model_name is required for parsing_provider={provider}"
            )
        client = OpenAIClientAdapter(
            api_key=str(_provider_setting(settings, provider, "api_key", "") or ""),
            timeout_seconds=int(
                _provider_setting(settings, provider, "timeout_seconds", _DEFAULT_TIMEOUT_SECONDS)
            ),
            base_url=cls._base_url(provider, settings),
        )
        return CompanyParser(
            client=client,
            model=model,
            temperature=float(_provider_setting(settings, provider, "temperature", 0.0)),
        )

    @staticmethod
    def _base_url(provider: str, settings: Settings) -> str | None:
        if provider == "openai":
            return None
        if provider == "openai_compatible":
            url = settings.parsing_openai_compatible_base_url.strip()
            if not url:
                raise ValueError(
                    "parsing_openai_compatible_base_url is required for "
                    "parsing_provider=openai_compatible"
                )
            return url
        return HOSTED_BASE_URLS[provider]
