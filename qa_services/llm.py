"""
LLM service for answer generation
"""
from typing import Dict, List, Optional

from openai import AsyncOpenAI

from core.errors import ExternalServiceError

SYSTEM_PROMPT = "You are a helpful assistant."
FALLBACK_ANSWER = "No answer available."


class LLMService:
    """Answers questions about a document with one chat completion."""

    def __init__(self, model: str = "gpt-4", api_key: Optional[str] = None, client=None):
        # Delay client construction until first use so the app starts
        # without OPENAI_API_KEY set.
        self._client = client
        self.api_key = api_key
        self.model = model

    def _ensure_client(self):
        if self._client is None:
            if not self.api_key:
                raise ExternalServiceError(
                    "OpenAI client could not be initialized. Set the OPENAI_API_KEY environment variable."
                )
            self._client = AsyncOpenAI(api_key=self.api_key)
        return self._client

    async def generate_answer(self, question: str, document_text: str) -> str:
        """Return the first choice's content, or the fallback answer."""
        client = self._ensure_client()
        response = await client.chat.completions.create(
            model=self.model,
            messages=self.build_messages(question, document_text),
        )

        if not response.choices:
            return FALLBACK_ANSWER
        return response.choices[0].message.content or FALLBACK_ANSWER

    @staticmethod
    def build_messages(question: str, document_text: str) -> List[Dict[str, str]]:
        """Build the system and user messages with the text and question verbatim."""
        return [
            {"role": "system", "content": SYSTEM_PROMPT},
            {"role": "user", "content": LLMService._build_prompt(question, document_text)},
        ]

    @staticmethod
    def _build_prompt(question: str, document_text: str) -> str:
        return (
            f"The following is the text of a PDF document:\n\n{document_text}\n\n"
            f"Based on using only this text, answer the following question:\n{question}"
        )
