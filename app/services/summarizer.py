from typing import Optional, Protocol

from openai import OpenAI

from app.core.config import SummarizerConfig
from app.services.llm_client import get_client, get_deployment

SYSTEM = (
    "You summarize meeting transcripts and call notes. "
    "Follow the user's instruction for format and focus. "
    "Use only information present in the transcript; do not invent facts."
)

USER_TMPL = """Instruction: {prompt}

TRANSCRIPT:
{transcript}
"""


class SummarizationProvider(Protocol):
    def summarize(self, transcript: str, prompt: str) -> str:
        ...


class OpenAiSummarizer:
    """Chat-completions backed provider (OpenAI or Azure OpenAI via base_url)."""

    def __init__(
        self,
        config: SummarizerConfig,
        client: Optional[OpenAI] = None,
        temperature: float = 0.2,
    ):
        self._config = config
        self._client = client
        self._temperature = temperature

    def _get_client(self) -> OpenAI:
        if self._client is None:
            self._client = get_client(self._config)
        return self._client

    def summarize(self, transcript: str, prompt: str) -> str:
        client = self._get_client()
        deployment = get_deployment(self._config)

        resp = client.chat.completions.create(
            model=deployment,
            messages=[
                {"role": "system", "content": SYSTEM},
                {"role": "user", "content": USER_TMPL.format(prompt=prompt, transcript=transcript)},
            ],
            temperature=self._temperature,
        )
        return resp.choices[0].message.content or ""
