from abc import ABC, abstractmethod


class BaseClassificationClient(ABC):
    """Contract for provider-specific classification AI clients."""

    @abstractmethod
    def create_chat_completion(
        self,
        *,
        model: str,
        temperature: float,
        system_prompt: str,
        user_prompt: str,
        json_schema: dict[str, object],
    ) -> str:
        """Return the provider's raw text response.

        Raises:
            ClassificationNetworkError: on transport or API failures.
            ClassificationError: on an empty response.
        """
