import asyncio
import json
import unittest

import httpx

from career_tools.ai.providers.gemini_provider import GeminiProvider
from career_tools.ai.providers.openai_provider import OpenAIProvider
from career_tools.ai.types import GenerationParams, ProviderError

BASE_URL = "https://gemini.test/v1beta"
TEXT_PARAMS = GenerationParams(temperature=0.7, max_output_tokens=1024, top_k=40, top_p=0.95)
JSON_PARAMS = GenerationParams(temperature=0.3, max_output_tokens=2500, output_format="json")


def candidate(text):
    return {"candidates": [{"content": {"parts": [{"text": text}]}}]}


class GeminiProviderTests(unittest.TestCase):
    def complete(self, handler, params=TEXT_PARAMS, api_key="test-key"):
        provider = GeminiProvider("gemini-test", api_key, BASE_URL, transport=httpx.MockTransport(handler))

        async def run():
            try:
                return await provider.complete("prompt", params)
            finally:
                await provider.aclose()

        return asyncio.run(run())

    def test_sends_generation_config_and_returns_text(self):
        seen = {}

        def handler(request):
            seen["url"] = str(request.url)
            seen["key"] = request.headers["x-goog-api-key"]
            seen["body"] = json.loads(request.content)
            return httpx.Response(200, json=candidate("  generated  "))

        self.assertEqual(self.complete(handler, params=JSON_PARAMS), "generated")
        self.assertEqual(seen["url"], f"{BASE_URL}/models/gemini-test:generateContent")
        self.assertEqual(seen["key"], "test-key")
        config = seen["body"]["generationConfig"]
        self.assertEqual(config["maxOutputTokens"], 2500)
        self.assertEqual(config["responseMimeType"], "application/json")
        self.assertNotIn("topK", config)

    def test_status_codes_are_classified(self):
        for status, transient in ((429, False), (400, False), (503, True)):
            with self.subTest(status=status):
                with self.assertRaises(ProviderError) as ctx:
                    self.complete(lambda request, status=status: httpx.Response(status, json={}))
                self.assertEqual(ctx.exception.status_code, status)
                self.assertEqual(ctx.exception.transient, transient)
                self.assertEqual(ctx.exception.is_rate_limit, status == 429)

    def test_empty_candidates_are_transient(self):
        with self.assertRaises(ProviderError) as ctx:
            self.complete(lambda request: httpx.Response(200, json={"candidates": []}))
        self.assertTrue(ctx.exception.transient)

    def test_connection_errors_are_transient(self):
        def handler(request):
            raise httpx.ConnectError("refused", request=request)

        with self.assertRaises(ProviderError) as ctx:
            self.complete(handler)
        self.assertTrue(ctx.exception.transient)

    def test_missing_key_fails_without_a_request(self):
        calls = []

        def handler(request):
            calls.append(request)
            return httpx.Response(200, json=candidate("x"))

        with self.assertRaises(ProviderError) as ctx:
            self.complete(handler, api_key="")
        self.assertFalse(ctx.exception.transient)
        self.assertEqual(calls, [])


def chat_completion(content):
    return {
        "id": "chatcmpl-test",
        "object": "chat.completion",
        "created": 0,
        "model": "gpt-4o-mini",
        "choices": [
            {"index": 0, "message": {"role": "assistant", "content": content}, "finish_reason": "stop"}
        ],
    }


class OpenAIProviderTests(unittest.TestCase):
    def complete(self, handler, params=TEXT_PARAMS):
        async def run():
            http_client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
            provider = OpenAIProvider(
                model="gpt-4o-mini",
                api_key="test-key",
                base_url="https://openai.test/v1",
                http_client=http_client,
            )
            try:
                return await provider.complete("prompt", params)
            finally:
                await provider.aclose()

        return asyncio.run(run())

    def test_returns_completion_and_requests_json_mode(self):
        seen = {}

        def handler(request):
            seen["body"] = json.loads(request.content)
            return httpx.Response(200, json=chat_completion('  {"ok": true}  '))

        self.assertEqual(self.complete(handler, params=JSON_PARAMS), '{"ok": true}')
        self.assertEqual(seen["body"]["response_format"], {"type": "json_object"})
        self.assertEqual(seen["body"]["max_tokens"], 2500)

    def test_status_codes_are_classified(self):
        for status, transient in ((429, False), (401, False), (503, True)):
            with self.subTest(status=status):
                with self.assertRaises(ProviderError) as ctx:
                    self.complete(
                        lambda request, status=status: httpx.Response(
                            status, json={"error": {"message": "nope", "type": "error"}}
                        )
                    )
                self.assertEqual(ctx.exception.status_code, status)
                self.assertEqual(ctx.exception.transient, transient)
                self.assertEqual(ctx.exception.is_rate_limit, status == 429)

    def test_timeout_is_transient(self):
        def handler(request):
            raise httpx.ReadTimeout("slow", request=request)

        with self.assertRaises(ProviderError) as ctx:
            self.complete(handler)
        self.assertTrue(ctx.exception.transient)
        self.assertIsNone(ctx.exception.status_code)

    def test_empty_completion_is_transient(self):
        with self.assertRaises(ProviderError) as ctx:
            self.complete(lambda request: httpx.Response(200, json=chat_completion("   ")))
        self.assertTrue(ctx.exception.transient)

    def test_missing_key_is_not_transient(self):
        provider = OpenAIProvider(model="gpt-4o-mini", api_key=None)
        with self.assertRaises(ProviderError) as ctx:
            asyncio.run(provider.complete("prompt", TEXT_PARAMS))
        self.assertFalse(ctx.exception.transient)


if __name__ == "__main__":
    unittest.main()
