import httpx
import openai

from docvault.classification.client_base import BaseClassificationClient
from docvault.classification.exceptions import (
    ClassificationError,
    ClassificationNetworkError,
)


class OpenAIClientAdapter(BaseClassificationClient):
    """Classification client for the OpenAI chat API and compatible hosts."""

    MAX_TOKENS = 500

    def __init__(
        self,
        *,
        api_key: str,
        timeout_seconds: int,
        base_url: str | None = None,
    ) -> None:
        self._client = openai.OpenAI(
            api_key=api_key,
            timeout=timeout_seconds,
            base_url=base_url,
            max_retries=1,
        )

    def create_chat_completion(
        self,
        *,
        model: str,
        temperature: float,
        system_prompt: str,
        user_prompt: str,
        json_schema: dict[str, object],
    ) -> str:
        try:
            response = self._client.chat.completions.create(
                model=model,
                temperature=temperature,
                max_tokens=self.MAX_TOKENS,
                response_format={
                    "type": "json_schema",
                    "json_schema": {
                        "name": "document_classification",
                        "strict": True,
                        "schema": json_schema,
                    },
                },
                messages=[
                    {"role": "system", "content": system_prompt},
                    {"role": "user", "content": user_prompt},
                ],
            )
        except (openai.APIConnectionError, httpx.ConnectError, httpx.TimeoutException) as exc:
            raise ClassificationNetworkError(
                f"AI provider network error: {exc}"
            ) from exc
        except openai.APIError as exc:
            raise ClassificationNetworkError(
                f"AI provider API error: {exc}"
            ) from exc

        if not response.choices:
            raise ClassificationError("AI returned no choices")
        content = response.choices[0].message.content
        if not content:
            raise ClassificationError("AI returned empty response")
        return content
