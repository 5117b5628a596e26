"""LLM Client for Groq API integration."""
import time
from dataclasses import dataclass
from typing import Optional, Dict, Any
from groq import AsyncGroq
from groq import RateLimitError, AuthenticationError, APIError, APITimeoutError
import logging

from config import GROQ_API_KEY, GENERATION_MODEL, GENERATION_TIMEOUT, GENERATION_MAX_TOKENS

logger = logging.getLogger(__name__)


PROMPT_TEMPLATE = """You are a helpful AI assistant. Answer the user's question based ONLY on the provided context snippets.
If the answer is not in the context, say "I couldn't find the answer in the provided documents."
Do not make up information.

Context:
{context}

Question: {question}

Answer:"""


@dataclass
class LLMResponse:
    """Response from LLM generation."""
    text: str
    tokens_input: int
    tokens_output: int
    latency_ms: int
    model_used: str


@dataclass
class LLMError:
    """Structured error response from LLM operations."""
    code: str
    message: str
    details: Dict[str, Any]


class LLMClientError(Exception):
    """Custom exception for LLM client errors with structured error information."""

    def __init__(self, error: LLMError):
        self.error = error
        super().__init__(error.message)


class LLMClient:
    """Client for interfacing with Groq API for text generation."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: str = GENERATION_MODEL,
        timeout: float = GENERATION_TIMEOUT,
        max_tokens: int = GENERATION_MAX_TOKENS
    ):
        """
        Initialize LLM client with Groq API key.

        Args:
            api_key: Groq API key (defaults to GROQ_API_KEY from environment)
            model: Model used for every generation call
            timeout: Request timeout in seconds
            max_tokens: Maximum tokens to generate
        """
        self.api_key = api_key or GROQ_API_KEY
        if not self.api_key:
            raise ValueError("GROQ_API_KEY must be provided or set in environment")

        self.model = model
        self.max_tokens = max_tokens
        # Single attempt per call, no SDK retries
        self.client = AsyncGroq(api_key=self.api_key, timeout=timeout, max_retries=0)
        logger.info(f"LLMClient initialized successfully (model={model})")

    async def generate(self, prompt: str) -> LLMResponse:
        """
        Generate response using Groq API.

        Args:
            prompt: Complete prompt with context and question

        Returns:
            LLMResponse with text, token counts, and latency

        Raises:
            LLMClientError: Structured error with code, message, and details
        """
        model = self.model
        start_time = time.time()

        try:
            logger.debug(f"Generating response with model: {model}")

            response = await self.client.chat.completions.create(
                model=model,
                messages=[
                    {
                        "role": "user",
                        "content": prompt
                    }
                ],
                max_tokens=self.max_tokens,
                temperature=0.2
            )

        except RateLimitError as e:
            raise self._error(
                "RATE_LIMIT_ERROR",
                "Rate limit exceeded. Please try again in a few moments.",
                model, start_time, e, retry_after=60
            )

        except AuthenticationError as e:
            raise self._error(
                "AUTHENTICATION_ERROR",
                "Authentication failed. Please check your API key.",
                model, start_time, e
            )

        except APITimeoutError as e:
            raise self._error(
                "TIMEOUT_ERROR",
                "Request timed out. Please try again.",
                model, start_time, e
            )

        except APIError as e:
            raise self._error(
                "API_ERROR",
                f"Groq API error: {str(e)}",
                model, start_time, e
            )

        except Exception as e:
            raise self._error(
                "UNKNOWN_ERROR",
                f"Unexpected error during generation: {str(e)}",
                model, start_time, e, error_type=type(e).__name__
            )

        latency_ms = int((time.time() - start_time) * 1000)

        try:
            text = response.choices[0].message.content
            tokens_input = response.usage.prompt_tokens
            tokens_output = response.usage.completion_tokens
        except (AttributeError, IndexError, TypeError) as e:
            raise self._error(
                "MALFORMED_RESPONSE",
                "Unexpected API response format.",
                model, start_time, e
            )

        if not text or not text.strip():
            raise self._error(
                "EMPTY_RESPONSE",
                "Model returned an empty answer.",
                model, start_time
            )

        logger.info(
            f"Generated response: model={model}, "
            f"input_tokens={tokens_input}, output_tokens={tokens_output}, "
            f"latency={latency_ms}ms"
        )

        return LLMResponse(
            text=text,
            tokens_input=tokens_input,
            tokens_output=tokens_output,
            latency_ms=latency_ms,
            model_used=model
        )

    @staticmethod
    def _error(
        code: str,
        message: str,
        model: str,
        start_time: float,
        original: Optional[Exception] = None,
        **extra_details
    ) -> LLMClientError:
        """Build a structured LLMClientError, logging the failure."""
        latency_ms = int((time.time() - start_time) * 1000)
        details: Dict[str, Any] = {"model": model, "latency_ms": latency_ms, **extra_details}
        if original is not None:
            details["original_error"] = str(original)

        error = LLMError(code=code, message=message, details=details)
        logger.error(
            f"{code}: model={model}, latency={latency_ms}ms, error={original or message}",
            exc_info=original is not None,
            extra={"error_code": error.code, "error_details": error.details}
        )
        return LLMClientError(error)

    @staticmethod
    def build_prompt(question: str, context: str) -> str:
        """
        Build prompt template with context and question.

        Args:
            question: User question
            context: Assembled source context

        Returns:
            Complete prompt string
        """
        return PROMPT_TEMPLATE.format(context=context, question=question)
