from pathlib import Path

from docvault.classification.exceptions import ClassificationError

_DEFAULT_PROMPT_DIR = Path(__file__).parent / "prompts"


def load_prompt_template(path: Path | None = None) -> str:
    """Load the classification prompt template.

    Args:
        path: Template file. Defaults to the bundled classification_prompt.txt.

    Raises:
        ClassificationError: if the file cannot be read.
    """
    if path is None:
        path = _DEFAULT_PROMPT_DIR / "classification_prompt.txt"
    try:
        return path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ClassificationError(f"Failed to load prompt template: {exc}") from exc


def load_json_schema(path: Path | None = None) -> str:
    """Load the JSON schema the provider must answer with.

    Raises:
        ClassificationError: if the file cannot be read.
    """
    if path is None:
        path = _DEFAULT_PROMPT_DIR / "classification_schema.json"
    try:
        return path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ClassificationError(f"Failed to load JSON schema: {exc}") from exc
