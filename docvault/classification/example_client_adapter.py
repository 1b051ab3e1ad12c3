"""Offline classification client.

Returns a fixed, valid classification without network calls. Used when AI
processing is disabled, in local development, and as a template for new
provider adapters.
"""

import json
from typing import ClassVar

from docvault.classification.client_base import BaseClassificationClient


class ExampleClientAdapter(BaseClassificationClient):
    DEFAULT_RESPONSE: ClassVar[dict[str, object]] = {
        "category": "Administrativo",
        "confidence": 0.5,
        "tags": ["documento"],
        "summary": "Clasificación local sin proveedor de IA",
        "language": "es",
        "priority": "medium",
        "classification_level": "internal",
    }

    def create_chat_completion(
        self,
        *,
        model: str,
        temperature: float,
        system_prompt: str,
        user_prompt: str,
        json_schema: dict[str, object],
    ) -> str:
        _ = model, temperature, system_prompt, user_prompt, json_schema
        return json.dumps(self.DEFAULT_RESPONSE)
