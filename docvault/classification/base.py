from abc import ABC, abstractmethod

from docvault.classification.models import ClassificationResult


class BaseClassifier(ABC):
    """Contract for document classifiers."""

    @abstractmethod
    def classify(self, text: str, filename: str) -> ClassificationResult:
        """Categorize a document from its extracted text.

        Never raises: implementations return a fallback result on failure.
        """
