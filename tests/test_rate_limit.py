import unittest

from fastapi import FastAPI, Request
from fastapi.testclient import TestClient
from slowapi import Limiter, _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from career_tools.core import rate_limit
from career_tools.core.identity import client_key


def build_app() -> FastAPI:
    limiter = Limiter(key_func=client_key)
    app = FastAPI()
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

    @app.get("/ping")
    @limiter.limit("1/minute")
    async def ping(request: Request):
        return {"ok": True}

    return app


class CoarseRateLimitTests(unittest.TestCase):
    def test_app_limiter_uses_forwarded_client_key(self):
        self.assertIs(rate_limit.limiter._key_func, client_key)

    def test_callers_behind_one_proxy_get_separate_buckets(self):
        client = TestClient(build_app())

        first = client.get("/ping", headers={"CF-Connecting-IP": "203.0.113.7"})
        repeat = client.get("/ping", headers={"CF-Connecting-IP": "203.0.113.7"})
        other = client.get("/ping", headers={"CF-Connecting-IP": "198.51.100.4"})

        self.assertEqual(first.status_code, 200)
        self.assertEqual(repeat.status_code, 429)
        self.assertEqual(other.status_code, 200)


if __name__ == "__main__":
    unittest.main()
