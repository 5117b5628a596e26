"""Unit tests for LLMClient."""
import sys
from pathlib import Path

# Add backend to path
sys.path.insert(0, str(Path(__file__).parent.parent / "backend"))

import asyncio
import pytest
from unittest.mock import AsyncMock, Mock, patch
from services.llm_client import LLMClient, LLMResponse, LLMClientError
from groq import RateLimitError, AuthenticationError, APIError, APITimeoutError


def make_groq(mock_groq_class, **create_kwargs):
    """Wire a mocked AsyncGroq class whose completions.create is an AsyncMock."""
    mock_client = Mock()
    mock_client.chat.completions.create = AsyncMock(**create_kwargs)
    mock_groq_class.return_value = mock_client
    return mock_client


def completion(content):
    response = Mock()
    response.choices = [Mock(message=Mock(content=content))]
    response.usage = Mock(prompt_tokens=150, completion_tokens=12)
    return response


class TestLLMClient:
    """Test suite for LLMClient class."""

    @patch('services.llm_client.AsyncGroq')
    def test_initialization_with_api_key(self, mock_groq_class):
        """Test LLMClient initializes with provided API key and a single attempt."""
        client = LLMClient(api_key="test_key", timeout=12.5)

        assert client.api_key == "test_key"
        mock_groq_class.assert_called_once_with(api_key="test_key", timeout=12.5, max_retries=0)

    def test_initialization_without_api_key_raises_error(self):
        """Test LLMClient raises error when no API key provided."""
        with patch('services.llm_client.GROQ_API_KEY', None):
            with pytest.raises(ValueError, match="GROQ_API_KEY must be provided"):
                LLMClient()

    def test_build_prompt(self):
        """Test prompt building with context and question."""
        context = "Source 1 (a.txt):\nThe deadline is March 5."

        prompt = LLMClient.build_prompt("What is the deadline?", context)

        assert "based ONLY on the provided context" in prompt
        assert "I couldn't find the answer in the provided documents." in prompt
        assert prompt.endswith(f"Context:\n{context}\n\nQuestion: What is the deadline?\n\nAnswer:")

    def test_build_prompt_with_braces_in_question(self):
        """Test that braces in user input are kept literally."""
        prompt = LLMClient.build_prompt("What is {x}?", "ctx")

        assert "Question: What is {x}?" in prompt

    @patch('services.llm_client.AsyncGroq')
    def test_generate_success(self, mock_groq_class):
        """Test successful response generation."""
        mock_client = make_groq(mock_groq_class, return_value=completion("The deadline is March 5."))

        client = LLMClient(api_key="test_key", model="llama-3.1-8b-instant")
        response = asyncio.run(client.generate("prompt"))

        assert isinstance(response, LLMResponse)
        assert response.text == "The deadline is March 5."
        assert response.tokens_input == 150
        assert response.tokens_output == 12
        assert response.model_used == "llama-3.1-8b-instant"
        assert isinstance(response.latency_ms, int)
        assert response.latency_ms >= 0

        kwargs = mock_client.chat.completions.create.call_args.kwargs
        assert kwargs["model"] == "llama-3.1-8b-instant"
        assert kwargs["messages"] == [{"role": "user", "content": "prompt"}]

    @patch('services.llm_client.AsyncGroq')
    def test_generate_calls_api_once(self, mock_groq_class):
        """Test that a single API call is made per generation."""
        mock_client = make_groq(mock_groq_class, side_effect=Exception("boom"))

        client = LLMClient(api_key="test_key")
        with pytest.raises(LLMClientError):
            asyncio.run(client.generate("prompt"))

        assert mock_client.chat.completions.create.await_count == 1

    @patch('services.llm_client.AsyncGroq')
    @pytest.mark.parametrize("content", [None, "", "   \n"])
    def test_generate_empty_text_raises(self, mock_groq_class, content):
        """Test that empty model output is reported as an error."""
        make_groq(mock_groq_class, return_value=completion(content))

        client = LLMClient(api_key="test_key")
        with pytest.raises(LLMClientError) as exc_info:
            asyncio.run(client.generate("prompt"))

        assert exc_info.value.error.code == "EMPTY_RESPONSE"

    @patch('services.llm_client.AsyncGroq')
    def test_generate_malformed_response(self, mock_groq_class):
        """Test that a response without choices is reported as malformed."""
        response = Mock()
        response.choices = []
        make_groq(mock_groq_class, return_value=response)

        client = LLMClient(api_key="test_key")
        with pytest.raises(LLMClientError) as exc_info:
            asyncio.run(client.generate("prompt"))

        assert exc_info.value.error.code == "MALFORMED_RESPONSE"

    @patch('services.llm_client.AsyncGroq')
    def test_generate_handles_unknown_error(self, mock_groq_class):
        """Test that unexpected errors are raised with structured error."""
        make_groq(mock_groq_class, side_effect=Exception("API Error"))

        client = LLMClient(api_key="test_key", model="llama-3.1-8b-instant")
        with pytest.raises(LLMClientError) as exc_info:
            asyncio.run(client.generate("prompt"))

        error = exc_info.value.error
        assert error.code == "UNKNOWN_ERROR"
        assert "Unexpected error" in error.message
        assert error.details["model"] == "llama-3.1-8b-instant"
        assert error.details["error_type"] == "Exception"

    @patch('services.llm_client.AsyncGroq')
    def test_generate_handles_rate_limit_error(self, mock_groq_class):
        """Test that rate limit errors are handled with retry suggestion."""
        make_groq(mock_groq_class, side_effect=RateLimitError(
            message="Rate limit exceeded",
            response=Mock(status_code=429),
            body=None
        ))

        client = LLMClient(api_key="test_key")
        with pytest.raises(LLMClientError) as exc_info:
            asyncio.run(client.generate("prompt"))

        error = exc_info.value.error
        assert error.code == "RATE_LIMIT_ERROR"
        assert "Rate limit exceeded" in error.message
        assert error.details["retry_after"] == 60

    @patch('services.llm_client.AsyncGroq')
    def test_generate_handles_authentication_error(self, mock_groq_class):
        """Test that authentication errors are handled properly."""
        make_groq(mock_groq_class, side_effect=AuthenticationError(
            message="Invalid API key",
            response=Mock(status_code=401),
            body=None
        ))

        client = LLMClient(api_key="test_key")
        with pytest.raises(LLMClientError) as exc_info:
            asyncio.run(client.generate("prompt"))

        error = exc_info.value.error
        assert error.code == "AUTHENTICATION_ERROR"
        assert "Authentication failed" in error.message

    @patch('services.llm_client.AsyncGroq')
    def test_generate_handles_timeout_error(self, mock_groq_class):
        """Test that timeout errors are handled properly."""
        make_groq(mock_groq_class, side_effect=APITimeoutError(request=Mock()))

        client = LLMClient(api_key="test_key")
        with pytest.raises(LLMClientError) as exc_info:
            asyncio.run(client.generate("prompt"))

        error = exc_info.value.error
        assert error.code == "TIMEOUT_ERROR"
        assert "timed out" in error.message

    @patch('services.llm_client.AsyncGroq')
    def test_generate_handles_generic_api_error(self, mock_groq_class):
        """Test that generic API errors are handled properly."""
        make_groq(mock_groq_class, side_effect=APIError(
            message="Service unavailable",
            request=Mock(),
            body=None
        ))

        client = LLMClient(api_key="test_key")
        with pytest.raises(LLMClientError) as exc_info:
            asyncio.run(client.generate("prompt"))

        error = exc_info.value.error
        assert error.code == "API_ERROR"
        assert "Groq API error" in error.message

    @patch('services.llm_client.AsyncGroq')
    def test_error_includes_latency(self, mock_groq_class):
        """Test that errors include latency measurement."""
        make_groq(mock_groq_class, side_effect=APITimeoutError(request=Mock()))

        client = LLMClient(api_key="test_key")
        with pytest.raises(LLMClientError) as exc_info:
            asyncio.run(client.generate("prompt"))

        details = exc_info.value.error.details
        assert isinstance(details["latency_ms"], int)
        assert details["latency_ms"] >= 0
