import json
import os
import unittest

# Keep API tests deterministic: no coarse limiter, no real provider.
os.environ.setdefault("RATE_LIMIT_ENABLED", "0")
os.environ.setdefault("QUOTA_BACKEND", "memory")

from fastapi.testclient import TestClient

from career_tools.ai.types import ProviderError
from career_tools.api.v1.tools import get_generation_client
from career_tools.core.quota import InMemoryQuotaStore, get_quota_store
from career_tools.generation.client import GenerationClient
from career_tools.main import app

from test_parsing import LEADERSHIP_OUTPUT, SALARY_OUTPUT

COVER_PAYLOAD = {
    "resume": (
        "Jane Doe. Backend engineer with six years of Python, FastAPI and PostgreSQL. "
        "Cut API latency by 35% and led a migration to AWS."
    ),
    "jobDescription": "We need a Python backend engineer with cloud experience.",
}
SALARY_PAYLOAD = {"country": "Japan", "jobTitle": "Data Engineer", "yearsExperience": 5, "industry": "Gaming"}
LEADERSHIP_PAYLOAD = {
    "currentRole": "Senior Engineer",
    "targetRole": "Head of Engineering",
    "industry": "SaaS",
    "yearsExperience": 8,
    "teamSize": 4,
    "leadershipSkills": ["Delegation", "Project management"],
    "softSkills": {"Empathy": 4},
}


class FakeAIClient:
    def __init__(self, reply="", error=None):
        self.reply = reply
        self.error = error
        self.calls = 0

    async def complete(self, prompt, params):
        self.calls += 1
        if self.error is not None:
            raise self.error
        return self.reply

    async def aclose(self):
        return None


class FakeClock:
    def __init__(self, now: float = 1_700_000_000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now


# Longer than every burst and minute window, so only the hourly quota applies.
SPACING_SECONDS = 61


class ToolsApiTests(unittest.TestCase):
    @classmethod
    def setUpClass(cls):
        cls.client = TestClient(app)

    def setUp(self):
        self.clock = FakeClock()
        self.store = InMemoryQuotaStore(clock=self.clock)
        self.ai = FakeAIClient("Dear team, I build fast and reliable Python services.")
        app.dependency_overrides[get_quota_store] = lambda: self.store
        app.dependency_overrides[get_generation_client] = lambda: GenerationClient(self.ai, timeout_s=1.0)

    def tearDown(self):
        app.dependency_overrides.clear()

    def post(self, path, *, spaced=True, **kwargs):
        if spaced:
            self.clock.now += SPACING_SECONDS
        return self.client.post(path, **kwargs)

    def test_cover_letter_success(self):
        response = self.post("/api/cover-letter-generate", json=COVER_PAYLOAD)
        self.assertEqual(response.status_code, 200)
        body = response.json()

        self.assertEqual(body["coverLetter"], self.ai.reply)
        self.assertEqual(body["wordCount"], len(body["coverLetter"].split()))
        self.assertEqual(response.headers["X-RateLimit-Limit"], "3")
        self.assertEqual(response.headers["X-RateLimit-Remaining"], "2")
        self.assertIn("X-Processing-Time", response.headers)

    def test_fourth_request_in_window_is_rate_limited(self):
        for expected_remaining in ("2", "1", "0"):
            response = self.post("/api/cover-letter-generate", json=COVER_PAYLOAD)
            self.assertEqual(response.status_code, 200)
            self.assertEqual(response.headers["X-RateLimit-Remaining"], expected_remaining)

        response = self.post("/api/cover-letter-generate", json=COVER_PAYLOAD)
        self.assertEqual(response.status_code, 429)
        body = response.json()
        self.assertEqual(body["error"], "RATE_LIMIT_EXCEEDED")
        # The window opened with the first request, three spacings ago.
        self.assertEqual(body["retryAfter"], 3600 - 3 * SPACING_SECONDS)
        self.assertIn("3 free requests per hour", body["message"])
        self.assertEqual(response.headers["Retry-After"], str(body["retryAfter"]))
        self.assertEqual(response.headers["X-RateLimit-Remaining"], "0")
        self.assertTrue(response.headers["X-RateLimit-Reset"].endswith("Z"))
        self.assertEqual(self.ai.calls, 3)

    def test_rapid_second_request_hits_burst_tier(self):
        self.assertEqual(self.post("/api/cover-letter-generate", json=COVER_PAYLOAD).status_code, 200)
        response = self.post("/api/cover-letter-generate", json=COVER_PAYLOAD, spaced=False)

        self.assertEqual(response.status_code, 429)
        body = response.json()
        self.assertEqual(body["error"], "RATE_LIMIT_EXCEEDED")
        self.assertIn("burst tier", body["message"])
        self.assertEqual(body["retryAfter"], 20)
        self.assertEqual(response.headers["X-RateLimit-Limit"], "1")
        self.assertEqual(self.ai.calls, 1)

    def test_quota_is_tracked_per_tool(self):
        for _ in range(3):
            self.post("/api/cover-letter-generate", json=COVER_PAYLOAD)
        self.ai.reply = json.dumps(SALARY_OUTPUT)

        response = self.post("/api/salary-analyzer", json=SALARY_PAYLOAD)
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.headers["X-RateLimit-Limit"], "4")

    def test_quota_is_tracked_per_client_address(self):
        for _ in range(3):
            self.post("/api/cover-letter-generate", json=COVER_PAYLOAD, headers={"X-Forwarded-For": "10.0.0.1"})

        blocked = self.post("/api/cover-letter-generate", json=COVER_PAYLOAD, headers={"X-Forwarded-For": "10.0.0.1"})
        other = self.post(
            "/api/cover-letter-generate", json=COVER_PAYLOAD, headers={"X-Forwarded-For": "10.0.0.2, 10.0.0.1"}
        )
        self.assertEqual(blocked.status_code, 429)
        self.assertEqual(other.status_code, 200)

    def test_validation_error_names_field(self):
        payload = dict(COVER_PAYLOAD, resume="x" * 20000)
        response = self.post("/api/cover-letter-generate", json=payload)

        self.assertEqual(response.status_code, 400)
        body = response.json()
        self.assertEqual(body["error"], "VALIDATION_ERROR")
        self.assertEqual(body["field"], "resume")
        self.assertIn("15,000", body["message"])
        self.assertNotIn("retryAfter", body)
        self.assertEqual(self.ai.calls, 0)

    def test_malformed_json_body_is_a_validation_error(self):
        response = self.post(
            "/api/cover-letter-generate", content=b"{not json", headers={"Content-Type": "application/json"}
        )
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()["field"], "body")

    def test_oversized_body_is_rejected_before_any_work(self):
        body = json.dumps(dict(COVER_PAYLOAD, padding="x" * 60_000)).encode()
        response = self.post(
            "/api/cover-letter-generate", content=body, headers={"Content-Type": "application/json"}
        )

        self.assertEqual(response.status_code, 400)
        error = response.json()
        self.assertEqual(error["error"], "VALIDATION_ERROR")
        self.assertEqual(error["field"], "body")
        self.assertIn("50,000 bytes", error["message"])
        self.assertNotIn("X-RateLimit-Remaining", response.headers)
        self.assertEqual(self.ai.calls, 0)

        # No quota was charged for the rejected body.
        response = self.post("/api/cover-letter-generate", json=COVER_PAYLOAD)
        self.assertEqual(response.headers["X-RateLimit-Remaining"], "2")

    def test_upstream_failure_is_502(self):
        self.ai.error = ProviderError("server error", status_code=500, transient=True)
        response = self.post("/api/cover-letter-generate", json=COVER_PAYLOAD)

        self.assertEqual(response.status_code, 502)
        self.assertEqual(response.json()["error"], "UPSTREAM_ERROR")
        self.assertEqual(self.ai.calls, 2)
        self.assertEqual(response.headers["X-RateLimit-Remaining"], "2")

    def test_provider_rate_limit_is_429_without_retry_after(self):
        self.ai.error = ProviderError("too many", status_code=429)
        response = self.post("/api/cover-letter-generate", json=COVER_PAYLOAD)

        self.assertEqual(response.status_code, 429)
        body = response.json()
        self.assertEqual(body["error"], "UPSTREAM_ERROR")
        self.assertIn("AI service", body["message"])
        self.assertNotIn("retryAfter", body)
        self.assertNotIn("Retry-After", response.headers)
        self.assertEqual(self.ai.calls, 1)

    def test_unparseable_output_is_parse_error(self):
        self.ai.reply = "Sorry, I cannot help with that."
        response = self.post("/api/salary-analyzer", json=SALARY_PAYLOAD)

        self.assertEqual(response.status_code, 502)
        self.assertEqual(response.json()["error"], "PARSE_ERROR")

    def test_salary_currency_comes_from_country(self):
        # The model echoes EUR; Japan's currency wins.
        self.ai.reply = f"```json\n{json.dumps(SALARY_OUTPUT)}\n```"
        response = self.post("/api/salary-analyzer", json=SALARY_PAYLOAD)

        self.assertEqual(response.status_code, 200)
        salary_range = response.json()["salaryRange"]
        self.assertEqual(salary_range["currency"], "JPY")
        self.assertEqual(salary_range["currencySymbol"], "¥")

    def test_leadership_includes_static_recommendations(self):
        self.ai.reply = json.dumps(dict(LEADERSHIP_OUTPUT, overallScore=140))
        response = self.post("/api/leadership-readiness-score", json=LEADERSHIP_PAYLOAD)

        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertEqual(body["overallScore"], 100)
        names = [cert["name"] for cert in body["recommendedCertifications"]]
        self.assertEqual(
            names,
            [
                "Executive Leadership Certificate",
                "Leadership and Management Certificate",
                "PMP (Project Management Professional)",
            ],
        )
        self.assertEqual(len(body["recommendedResources"]), 6)
        self.assertEqual(response.headers["X-RateLimit-Limit"], "4")

    def test_health(self):
        response = self.client.get("/api/health")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json(), {"status": "healthy"})


if __name__ == "__main__":
    unittest.main()
