import asyncio
import sys
import unittest
from pathlib import Path
from types import SimpleNamespace
from unittest.mock import patch

import httpx
from openai import APIStatusError

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from app.ai.config import AIConfig  # noqa: E402
from app.ai.factory import get_ai_client  # noqa: E402
from app.ai.providers.openai_provider import OpenAIProvider  # noqa: E402
from app.ai.types import AIConfigurationError, ChatMessage, GenerationBackendError  # noqa: E402


def _chunk(content):
    return SimpleNamespace(choices=[SimpleNamespace(delta=SimpleNamespace(content=content))])


class _FakeStream:
    def __init__(self, chunks):
        self._chunks = list(chunks)
        self.closed = False

    def __aiter__(self):
        return self._iterate()

    async def _iterate(self):
        for chunk in self._chunks:
            yield chunk

    async def close(self):
        self.closed = True


class _FakeCompletions:
    def __init__(self, result=None, error=None):
        self.result = result
        self.error = error
        self.calls = []

    async def create(self, **kwargs):
        self.calls.append(kwargs)
        if self.error is not None:
            raise self.error
        return self.result


def _provider(completions: _FakeCompletions) -> OpenAIProvider:
    provider = OpenAIProvider(model="gpt-4o-mini", api_key="test-key", temperature=0.2)
    provider._client = SimpleNamespace(chat=SimpleNamespace(completions=completions))
    return provider


async def _collect(provider: OpenAIProvider) -> list[str]:
    messages = [ChatMessage(role="system", content="sys"), ChatMessage(role="user", content="resume")]
    return [token async for token in provider.stream(messages)]


class OpenAIProviderTests(unittest.TestCase):
    def test_stream_yields_non_empty_deltas(self):
        stream = _FakeStream([_chunk("Jane"), _chunk(None), SimpleNamespace(choices=[]), _chunk(" Doe")])
        completions = _FakeCompletions(result=stream)

        tokens = asyncio.run(_collect(_provider(completions)))

        self.assertEqual(tokens, ["Jane", " Doe"])
        self.assertTrue(stream.closed)
        call = completions.calls[0]
        self.assertTrue(call["stream"])
        self.assertEqual(call["temperature"], 0.2)
        self.assertEqual(call["messages"][1], {"role": "user", "content": "resume"})

    def test_status_errors_keep_their_code(self):
        response = httpx.Response(429, request=httpx.Request("POST", "https://api.openai.com/v1/chat/completions"))
        error = APIStatusError("rate limited", response=response, body=None)

        with self.assertRaises(GenerationBackendError) as ctx:
            asyncio.run(_collect(_provider(_FakeCompletions(error=error))))

        self.assertEqual(ctx.exception.status_code, 429)


class AIClientFactoryTests(unittest.TestCase):
    def _config(self, **overrides) -> AIConfig:
        values = dict(
            provider="openai",
            model="gpt-4o-mini",
            api_key="test-key",
            base_url=None,
            timeout_s=30.0,
            max_retries=1,
            temperature=0.4,
        )
        values.update(overrides)
        return AIConfig(**values)

    def test_openai_provider_is_built(self):
        with patch("app.ai.factory.load_ai_config", return_value=self._config()):
            self.assertIsInstance(get_ai_client(), OpenAIProvider)

    def test_missing_key(self):
        with patch("app.ai.factory.load_ai_config", return_value=self._config(api_key=None)):
            with self.assertRaises(AIConfigurationError):
                get_ai_client()

    def test_unsupported_provider(self):
        with patch("app.ai.factory.load_ai_config", return_value=self._config(provider="other")):
            with self.assertRaises(AIConfigurationError):
                get_ai_client()


if __name__ == "__main__":
    unittest.main()
