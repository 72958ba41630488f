"""
Anthropic Messages API client.
"""

from typing import Optional

import anthropic

from .base import AnalysisClient
from jobmatch.core.errors import MalformedResponse, TransportFailure


class AnthropicAnalysisClient(AnalysisClient):
    """Runs match analyses through the Anthropic SDK."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        max_tokens: int = 2000,
        temperature: float = 0.3,
    ):
        super().__init__(api_key=api_key, model=model)
        self.max_tokens = max_tokens
        self.temperature = temperature
        # Retries are handled by ExternalAnalyzer
        self._client = anthropic.Anthropic(api_key=api_key, max_retries=0)

    @property
    def name(self) -> str:
        return "anthropic"

    @property
    def default_model(self) -> str:
        return "claude-sonnet-4-20250514"

    def complete(self, system_prompt: str, user_prompt: str, timeout: float) -> str:
        try:
            response = self._client.messages.create(
                model=self.model,
                max_tokens=self.max_tokens,
                temperature=self.temperature,
                system=system_prompt,
                messages=[{"role": "user", "content": user_prompt}],
                timeout=timeout,
            )
        except anthropic.APITimeoutError as e:
            raise TransportFailure(f"Anthropic request timed out after {timeout}s") from e
        except anthropic.APIConnectionError as e:
            raise TransportFailure(f"Could not reach Anthropic: {e}") from e
        except anthropic.APIStatusError as e:
            raise TransportFailure(
                f"Anthropic returned HTTP {e.status_code}: {e.message}",
                retryable=self.is_retryable_status(e.status_code),
                status_code=e.status_code,
            ) from e

        text = "".join(
            block.text for block in response.content if getattr(block, "type", None) == "text"
        )
        if not text:
            raise MalformedResponse("Anthropic reply contained no text", raw_payload=str(response))

        self.logger.debug(f"Anthropic reply: {len(text)} chars, stop_reason={response.stop_reason}")
        return text
