"""AI-assisted document classifier with a never-raise fallback."""

import json
from pathlib import Path

from docvault.classification.base import BaseClassifier
from docvault.classification.client_base import BaseClassificationClient
from docvault.classification.exceptions import ClassificationError
from docvault.classification.models import CATEGORIES, ClassificationResult
from docvault.classification.prompt_loader import load_json_schema, load_prompt_template
from docvault.classification.validator import fallback_classification, validate_and_build
from docvault.logging.logger import Log

DEFAULT_SYSTEM_PROMPT = (
    "Eres un experto en clasificación de documentos gubernamentales del "
    "Ministerio de Educación de Guatemala. Respondes únicamente en formato JSON válido."
)


class Classifier(BaseClassifier):
    """Classifies extracted document text through an AI provider."""

    MAX_PROMPT_TEXT_CHARS = 2000
    MIN_TEXT_CHARS = 10

    def __init__(
        self,
        *,
        client: BaseClassificationClient,
        model: str,
        temperature: float = 0.3,
        prompt_template_path: Path | None = None,
        json_schema_path: Path | None = None,
        system_prompt: str = DEFAULT_SYSTEM_PROMPT,
    ) -> None:
        self._client = client
        self._model = model
        self._temperature = max(0.0, min(1.0, temperature))
        self._system_prompt = system_prompt
        self._prompt_template = load_prompt_template(prompt_template_path)
        schema_str = load_json_schema(json_schema_path)
        self._json_schema = schema_str
        self._json_schema_dict = json.loads(schema_str)

    def classify(self, text: str, filename: str) -> ClassificationResult:
        if len(text.strip()) < self.MIN_TEXT_CHARS:
            Log.info(f"Skipping classification of '{filename}': not enough text")
            return fallback_classification()

        prompt = self._build_prompt(text, filename)
        Log.debug(f"Classification prompt:\n{prompt}")

        try:
            raw_response = self._call_ai(prompt)
            Log.debug(f"AI raw response:\n{raw_response}")
            result = validate_and_build(self._parse_json(raw_response))
        except ClassificationError as exc:
            Log.warning(f"Classification of '{filename}' fell back: {exc}")
            return fallback_classification()
        except Exception as exc:
            Log.error(f"Unexpected classification failure for '{filename}': {exc}")
            return fallback_classification()

        Log.info(
            f"Classified '{filename}' as {result.category} "
            f"(confidence {result.confidence:.2f})"
        )
        return result

    def _build_prompt(self, text: str, filename: str) -> str:
        return self._prompt_template.format(
            categories="\n".join(f"- {c}" for c in CATEGORIES),
            filename=filename,
            document_text=text[: self.MAX_PROMPT_TEXT_CHARS],
            json_schema=self._json_schema,
        )

    def _call_ai(self, prompt: str) -> str:
        return self._client.create_chat_completion(
            model=self._model,
            temperature=self._temperature,
            system_prompt=self._system_prompt,
            user_prompt=prompt,
            json_schema=self._json_schema_dict,
        )

    @staticmethod
    def _parse_json(raw: str) -> dict[str, object]:
        cleaned = raw.strip()
        if cleaned.startswith("```"):
            lines = cleaned.splitlines()
            if lines and lines[0].startswith("```"):
                lines = lines[1:]
            if lines and lines[-1].strip() == "```":
                lines = lines[:-1]
            cleaned = "\n".join(lines)

        try:
            parsed = json.loads(cleaned)
        except json.JSONDecodeError as exc:
            raise ClassificationError(f"Invalid JSON response: {exc}") from exc

        if not isinstance(parsed, dict):
            raise ClassificationError("JSON response must be an object")
        return parsed
