from typing import Iterable, Optional

from .chat_completions import ChatCompletionsBackend

OPENROUTER_URL = "https://openrouter.ai/api/v1/chat/completions"

# Free models that have stayed available; tried in this order after any override.
OPENROUTER_FREE_MODELS = (
    "meta-llama/llama-3.1-8b-instruct:free",
    "mistralai/mistral-7b-instruct:free",
    "nousresearch/hermes-3-llama-3.1-8b:free",
    "qwen/qwen-2-7b-instruct:free",
    "google/gemma-2-9b-it:free",
)


class OpenRouterModelBackend(ChatCompletionsBackend):
    """
    OpenRouter backend.

    OpenRouter asks clients to identify themselves with the HTTP-Referer and
    X-Title attribution headers; both are sent on every request.
    """

    provider = "openrouter"

    def __init__(
        self,
        app_url: str = "https://questoesai.app",
        app_title: str = "Questões AÍ",
        url: str = OPENROUTER_URL,
        json_mode_unsupported: Optional[Iterable[str]] = None,
    ):
        super().__init__(
            url=url,
            extra_headers={"HTTP-Referer": app_url, "X-Title": app_title},
            json_mode_unsupported=json_mode_unsupported,
        )
