class ClassificationError(Exception):
    """Raised when a classification response cannot be obtained or parsed.

    Absorbed by Classifier, which substitutes the fallback result.
    """


class ClassificationNetworkError(ClassificationError):
    """Raised when the AI provider call fails due to network/infrastructure issues."""
