from dataclasses import dataclass


@dataclass(frozen=True)
class ExtractionOutcome:
    """Text pulled from an upload, plus whether the step had to degrade."""

    text: str
    method: str
    degraded: bool = False
    warning: str | None = None
