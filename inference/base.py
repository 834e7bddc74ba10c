from abc import ABC, abstractmethod
from typing import Iterable, Optional

from .types import ModelRequest, ModelResponse


class ModelBackend(ABC):
    """
    Abstract chat-completion boundary.
    The gateway must depend ONLY on this interface.

    A backend performs exactly one request per call and never raises for
    provider failures: it reports them through ModelResponse.status.
    """

    provider: str = "unknown"

    def __init__(self, json_mode_unsupported: Optional[Iterable[str]] = None):
        self._json_mode_unsupported = frozenset(json_mode_unsupported or ())

    def supports_json_mode(self, model: str) -> bool:
        """Whether response_format={"type": "json_object"} may be sent for model."""
        return model not in self._json_mode_unsupported

    @abstractmethod
    def generate(self, request: ModelRequest, api_key: str) -> ModelResponse:
        """Issue a single chat-completion request."""
        raise NotImplementedError
