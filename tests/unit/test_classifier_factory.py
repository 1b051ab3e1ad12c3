from unittest.mock import patch

import pytest

from docvault.classification.classifier import Classifier
from docvault.classification.factory import ClassifierFactory
from docvault.config.settings import Settings


class TestClassifierFactory:
    def test_example_provider_works_offline(self) -> None:
        classifier = ClassifierFactory.create(Settings(classification_provider="example"))
        assert isinstance(classifier, Classifier)
        result = classifier.classify("Oficio circular de la dirección departamental", "oficio.pdf")
        assert result.category == "Administrativo"
        assert result.confidence == 0.5
        assert not result.is_fallback

    def test_disabled_ai_uses_example_client(self) -> None:
        settings = Settings(classification_provider="openai", disable_ai_processing=True)
        with patch("docvault.classification.factory.OpenAIClientAdapter") as mock_adapter:
            ClassifierFactory.create(settings)
        mock_adapter.assert_not_called()

    def test_openai_settings(self) -> None:
        settings = Settings(
            classification_provider="openai",
            classification_openai_api_key="openai-key",
            classification_openai_model_name="gpt-4o",
            classification_openai_timeout_seconds=42,
        )
        with patch("docvault.classification.factory.OpenAIClientAdapter") as mock_adapter:
            classifier = ClassifierFactory.create(settings)
        mock_adapter.assert_called_once_with(api_key="openai-key", timeout_seconds=42, base_url=None)
        assert isinstance(classifier, Classifier)

    @pytest.mark.parametrize(
        ("provider", "base_url"),
        [
            ("openrouter", "https://openrouter.ai/api/v1"),
            ("groq", "https://api.groq.com/openai/v1"),
            ("ollama", "http://localhost:11434/v1"),
        ],
    )
    def test_named_hosts_use_default_base_url(self, provider: str, base_url: str) -> None:
        settings = Settings(classification_provider=provider)
        with patch("docvault.classification.factory.OpenAIClientAdapter") as mock_adapter:
            ClassifierFactory.create(settings)
        assert mock_adapter.call_args.kwargs["base_url"] == base_url

    def test_openai_compatible_requires_base_url(self) -> None:
        settings = Settings(classification_provider="openai_compatible")
        with pytest.raises(ValueError, match="base_url is required"):
            ClassifierFactory.create(settings)

    def test_openai_compatible_uses_configured_base_url(self) -> None:
        settings = Settings(
            classification_provider="openai_compatible",
            classification_openai_compatible_base_url="http://llm.internal/v1",
            classification_openai_compatible_api_key="k",
            classification_openai_compatible_model_name="m",
        )
        with patch("docvault.classification.factory.OpenAIClientAdapter") as mock_adapter:
            ClassifierFactory.create(settings)
        mock_adapter.assert_called_once_with(
            api_key="k", timeout_seconds=30, base_url="http://llm.internal/v1"
        )

    def test_unknown_provider_raises(self) -> None:
        with patch("docvault.classification.factory.OpenAIClientAdapter"):
            with pytest.raises(ValueError, match="Unknown classification provider"):
                ClassifierFactory.create(Settings(classification_provider="watson"))
