"""Together AI adapter for prompt-templated answers and summaries."""

import logging
from typing import Any, Optional

from together import AsyncTogether

from docqa_ui.core.config import DEFAULT_TOGETHER_MODEL
from docqa_ui.core.exceptions import (
    AIGenerationError,
    LLMConfigError,
    SummaryError,
)
from docqa_ui.models.schemas import AIResponse, TokenUsage

logger = logging.getLogger(__name__)

ANSWER_FALLBACK = "I couldn't generate an answer for this question."
SUMMARY_FALLBACK = "I couldn't generate a summary for this document."
SUMMARY_CONTENT_LIMIT = 3000
ANSWER_STOP_SEQUENCES = ["Human:", "Assistant:", "\n\n---"]
CONNECTION_TEST_PROMPT = "Test connection. Respond with 'OK'."


class TogetherAIClient:
    """Builds fixed-format prompts and calls the Together completions API."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: str = DEFAULT_TOGETHER_MODEL,
        client: Optional[Any] = None
    ) -> None:
        """Initialize the adapter.

        Args:
            api_key: Together API key, required unless a client is given
            model: Model identifier sent with every completion
            client: Pre-built SDK client exposing ``completions.create``
        """
        self.model = model or DEFAULT_TOGETHER_MODEL
        if client is not None:
            self.client = client
        elif api_key:
            self.client = AsyncTogether(api_key=api_key)
            logger.info("Together initialized with model %s", self.model)
        else:
            raise LLMConfigError("Together API key is not configured")

    def build_prompt(
        self,
        question: str,
        context: str,
        document_title: str
    ) -> str:
        """Create the question-answering prompt."""
        return (
            "# Document Q&A Assistant\n\n"
            "You are an AI assistant that answers questions based on document "
            "content. Use only the provided context to answer questions "
            "accurately and concisely.\n\n"
            f"Document: {document_title}\n\n"
            f"Context:\n{context}\n\n"
            f"Question: {question}\n\n"
            "Instructions:\n"
            "- Answer based only on the provided context\n"
            "- If the context doesn't contain enough information, say so\n"
            "- Be concise but thorough\n"
            "- Cite specific parts of the context when relevant\n"
            "- If you cannot answer based on the context, explain what "
            "information would be needed\n\n"
            "Answer:"
        )

    def build_summary_prompt(self, content: str, document_title: str) -> str:
        """Create the summary prompt from the first part of the content."""
        return (
            "# Document Summary Task\n\n"
            f"Document Title: {document_title}\n\n"
            "Content:\n"
            f"{content[:SUMMARY_CONTENT_LIMIT]}...\n\n"
            "Please provide a concise summary of this document in 2-3 "
            "paragraphs, highlighting the main topics and key points.\n\n"
            "Summary:"
        )

    async def generate_answer(
        self,
        question: str,
        context: str,
        document_title: str
    ) -> AIResponse:
        """Answer a question from the supplied context."""
        prompt = self.build_prompt(question, context, document_title)
        try:
            response = await self.client.completions.create(
                model=self.model,
                prompt=prompt,
                max_tokens=500,
                temperature=0.7,
                top_p=0.9,
                stop=ANSWER_STOP_SEQUENCES,
            )
        except Exception as e:
            logger.error(f"Together AI API error: {str(e)}")
            raise AIGenerationError() from e

        return self._to_ai_response(response, ANSWER_FALLBACK)

    async def generate_summary(
        self,
        content: str,
        document_title: str
    ) -> AIResponse:
        """Summarize a document in a few paragraphs."""
        prompt = self.build_summary_prompt(content, document_title)
        try:
            response = await self.client.completions.create(
                model=self.model,
                prompt=prompt,
                max_tokens=300,
                temperature=0.5,
                top_p=0.9,
            )
        except Exception as e:
            logger.error(f"Together AI API error: {str(e)}")
            raise SummaryError() from e

        return self._to_ai_response(response, SUMMARY_FALLBACK)

    async def test_connection(self) -> bool:
        """Test if the completion endpoint is reachable."""
        try:
            response = await self.client.completions.create(
                model=self.model,
                prompt=CONNECTION_TEST_PROMPT,
                max_tokens=10,
            )
            return "OK" in self._first_choice_text(response)
        except Exception as e:
            logger.error(f"Together AI connection test failed: {str(e)}")
            return False

    def _to_ai_response(self, response: Any, fallback: str) -> AIResponse:
        """Normalize an SDK completion into an AIResponse."""
        answer = self._first_choice_text(response).strip() or fallback
        return AIResponse(
            answer=answer,
            model=self.model,
            usage=self._extract_usage(response),
        )

    @staticmethod
    def _first_choice_text(response: Any) -> str:
        choices = getattr(response, "choices", None) or []
        if not choices:
            return ""
        return getattr(choices[0], "text", None) or ""

    @staticmethod
    def _extract_usage(response: Any) -> Optional[TokenUsage]:
        usage = getattr(response, "usage", None)
        if usage is None:
            return None

        token_usage = TokenUsage(
            prompt_tokens=usage.prompt_tokens,
            completion_tokens=usage.completion_tokens,
            total_tokens=usage.total_tokens,
        )
        expected = token_usage.prompt_tokens + token_usage.completion_tokens
        if token_usage.total_tokens != expected:
            # Passed through as reported
            logger.warning(
                "Token usage mismatch: total=%d, prompt+completion=%d",
                token_usage.total_tokens, expected
            )
        return token_usage
