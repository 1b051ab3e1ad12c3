class ExtractionError(Exception):
    """Raised by an extraction engine when text cannot be obtained.

    Always absorbed by TextExtractor; never reaches the ingestion caller.
    """
