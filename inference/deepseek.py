from typing import Iterable, Optional

from .chat_completions import ChatCompletionsBackend

DEEPSEEK_URL = "https://api.deepseek.com/v1/chat/completions"
DEEPSEEK_MODELS = ("deepseek-chat",)


class DeepSeekModelBackend(ChatCompletionsBackend):
    """DeepSeek's OpenAI-compatible API. No attribution headers required."""

    provider = "deepseek"

    def __init__(self, url: str = DEEPSEEK_URL, json_mode_unsupported: Optional[Iterable[str]] = None):
        super().__init__(url=url, json_mode_unsupported=json_mode_unsupported)
