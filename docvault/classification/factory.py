from typing import ClassVar

from docvault.classification.base import BaseClassifier
from docvault.classification.classifier import Classifier
from docvault.classification.example_client_adapter import ExampleClientAdapter
from docvault.classification.openai_client_adapter import OpenAIClientAdapter
from docvault.config.settings import Settings


class ClassifierFactory:
    """Creates the classifier for the configured provider."""

    OPENAI_COMPATIBLE_BASE_URLS: ClassVar[dict[str, str]] = {
        "openrouter": "https://openrouter.ai/api/v1",
        "groq": "https://api.groq.com/openai/v1",
        "ollama": "http://localhost:11434/v1",
    }

    @classmethod
    def create(cls, settings: Settings) -> BaseClassifier:
        provider = settings.classification_provider.lower()
        if provider == "example" or settings.disable_ai_processing:
            return Classifier(client=ExampleClientAdapter(), model="example")
        api_key, model_name, timeout = cls._resolve_credentials(provider, settings)
        client = OpenAIClientAdapter(
            api_key=api_key,
            timeout_seconds=timeout,
            base_url=cls._resolve_base_url(provider, settings),
        )
        return Classifier(
            client=client,
            model=model_name,
            temperature=settings.classification_temperature,
        )

    @classmethod
    def _resolve_base_url(cls, provider: str, settings: Settings) -> str | None:
        if provider == "openai":
            return None
        if provider == "openai_compatible":
            url = (settings.classification_openai_compatible_base_url or "").strip()
            if not url:
                raise ValueError(
                    "classification_openai_compatible_base_url is required for "
                    "classification_provider=openai_compatible"
                )
            return url
        default_base_url = cls.OPENAI_COMPATIBLE_BASE_URLS.get(provider)
        if default_base_url is not None:
            return default_base_url
        supported = [
            "example",
            "openai",
            "openai_compatible",
            *sorted(cls.OPENAI_COMPATIBLE_BASE_URLS),
        ]
        raise ValueError(
            f"Unknown classification provider '{provider}'. Choose from: {supported}"
        )

    @classmethod
    def _resolve_credentials(
        cls, provider: str, settings: Settings
    ) -> tuple[str, str, int]:
        credentials = {
            "openai": (
                settings.classification_openai_api_key,
                settings.classification_openai_model_name,
                settings.classification_openai_timeout_seconds,
            ),
            "openai_compatible": (
                settings.classification_openai_compatible_api_key,
                settings.classification_openai_compatible_model_name,
                settings.classification_openai_compatible_timeout_seconds,
            ),
            "openrouter": (
                settings.classification_openrouter_api_key,
                settings.classification_openrouter_model_name,
                settings.classification_openai_timeout_seconds,
            ),
            "groq": (
                settings.classification_groq_api_key,
                settings.classification_groq_model_name,
                settings.classification_openai_timeout_seconds,
            ),
            "ollama": (
                settings.classification_ollama_api_key,
                settings.classification_ollama_model_name,
                settings.classification_openai_timeout_seconds,
            ),
        }
        api_key, model_name, timeout = credentials.get(provider, ("", "", 30))
        return api_key or "", model_name or "", timeout or 30
