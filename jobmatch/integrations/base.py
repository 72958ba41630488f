"""
Base class for external analysis clients.
"""

from abc import ABC, abstractmethod
from typing import Optional
import logging

from jobmatch.core.errors import ConfigurationError


class AnalysisClient(ABC):
    """
    Abstract base class for text-generation collaborators.

    A client sends one system/user prompt pair and returns the raw reply text.
    It raises TransportFailure for anything that goes wrong on the way there
    or back; interpreting the reply is the caller's job.
    """

    def __init__(self, api_key: Optional[str] = None, model: Optional[str] = None):
        if self.requires_api_key and not api_key:
            raise ConfigurationError(
                f"{self.name} analysis requires an API key. "
                f"Set {self.name.upper()}_API_KEY or run: jobmatch config --set-api-key {self.name} KEY"
            )
        self.api_key = api_key
        self.model = model or self.default_model
        self.logger = logging.getLogger(self.__class__.__name__)

    @property
    @abstractmethod
    def name(self) -> str:
        """Provider name, also used for the API key lookup."""
        pass

    @property
    @abstractmethod
    def default_model(self) -> str:
        pass

    @property
    def requires_api_key(self) -> bool:
        return True

    @abstractmethod
    def complete(self, system_prompt: str, user_prompt: str, timeout: float) -> str:
        """
        Send a prompt and return the reply text.

        Args:
            system_prompt: Instructions and output schema
            user_prompt: The resume and job to analyze
            timeout: Seconds before the request is abandoned

        Returns:
            Raw reply text

        Raises:
            TransportFailure: On network, timeout, auth or HTTP status errors
            MalformedResponse: If the reply envelope has no text content
        """
        pass

    @staticmethod
    def is_retryable_status(status_code: int) -> bool:
        """Rate limits, timeouts, conflicts and server errors are worth retrying."""
        return status_code in (408, 409, 429) or status_code >= 500
