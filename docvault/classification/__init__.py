from docvault.classification.base import BaseClassifier
from docvault.classification.classifier import Classifier
from docvault.classification.factory import ClassifierFactory
from docvault.classification.models import ClassificationResult

__all__ = ["BaseClassifier", "ClassificationResult", "Classifier", "ClassifierFactory"]
