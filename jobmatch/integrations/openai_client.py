"""
OpenAI-compatible chat completions client.

Works against any endpoint that speaks the /chat/completions protocol
(OpenAI, Groq, local gateways).
"""

from typing import Optional

import requests

from .base import AnalysisClient
from jobmatch.core.errors import MalformedResponse, TransportFailure


class ChatCompletionsClient(AnalysisClient):
    """Runs match analyses against a chat completions HTTP endpoint."""

    DEFAULT_BASE_URL = "https://api.openai.com/v1"

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        base_url: Optional[str] = None,
        temperature: float = 0.3,
        session: Optional[requests.Session] = None,
    ):
        super().__init__(api_key=api_key, model=model)
        self.base_url = (base_url or self.DEFAULT_BASE_URL).rstrip("/")
        self.temperature = temperature
        self.session = session or requests.Session()

    @property
    def name(self) -> str:
        return "openai"

    @property
    def default_model(self) -> str:
        return "gpt-4-turbo"

    def complete(self, system_prompt: str, user_prompt: str, timeout: float) -> str:
        url = f"{self.base_url}/chat/completions"
        headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }
        payload = {
            "model": self.model,
            "messages": [
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_prompt},
            ],
            "temperature": self.temperature,
            "response_format": {"type": "json_object"},
        }

        try:
            response = self.session.post(url, headers=headers, json=payload, timeout=timeout)
        except requests.Timeout as e:
            raise TransportFailure(f"Request to {url} timed out after {timeout}s") from e
        except requests.RequestException as e:
            raise TransportFailure(f"Could not reach {url}: {e}") from e

        if response.status_code != 200:
            raise TransportFailure(
                f"{url} returned HTTP {response.status_code}: {response.text[:200]}",
                retryable=self.is_retryable_status(response.status_code),
                status_code=response.status_code,
            )

        try:
            data = response.json()
            content = data["choices"][0]["message"]["content"]
        except (ValueError, KeyError, IndexError, TypeError) as e:
            raise MalformedResponse(
                "Chat completion reply has an unexpected shape",
                raw_payload=response.text,
            ) from e

        if not isinstance(content, str) or not content.strip():
            raise MalformedResponse("Chat completion reply contained no text", raw_payload=response.text)

        return content
