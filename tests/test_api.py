"""
API tests for /ask and /health using the in-process TestClient.
"""

import pytest
from fastapi.testclient import TestClient

from support_resolver.config.settings import Settings
from support_resolver.main import create_app
from support_resolver.services.policy.rules import POLICIES, PolicyId

from fakes import HOURS_Q, FailingEmbedder, FakeEmbedder, FakeGenerator


@pytest.fixture
def settings() -> Settings:
    return Settings(_env_file=None, LOG_LEVEL="WARNING")


@pytest.fixture
def client(settings, embedder, generator, faq_entries):
    app = create_app(settings, embedder=embedder, generator=generator, entries=faq_entries)
    with TestClient(app) as test_client:
        yield test_client


class TestAskEndpoint:
    def test_policy_answer(self, client, generator):
        response = client.post("/ask", json={"question": "How do I cancel my Luxe membership?"})

        assert response.status_code == 200
        data = response.json()
        assert data["answer"] == next(r for r in POLICIES if r.id == PolicyId.MEMBERSHIP).strict_answer
        assert data["policy"] == "membership"
        assert data["method"] == "regex"
        assert data["matched_sources"] == []
        assert generator.prompts == []

    def test_faq_answer(self, client):
        response = client.post("/ask", json={"question": HOURS_Q})

        assert response.status_code == 200
        data = response.json()
        assert data["answer"] == "Generated answer."
        assert data["policy"] is None
        assert data["matched_sources"] == [{"question": HOURS_Q, "category": "Store"}]

    def test_missing_question(self, client):
        response = client.post("/ask", json={})

        assert response.status_code == 200
        assert response.json()["matched_sources"] == []

    def test_long_question_is_answered(self, client, generator):
        response = client.post("/ask", json={"question": HOURS_Q * 200})

        assert response.status_code == 200
        assert response.json()["answer"] == "Generated answer."
        # Only the truncated question reaches the prompt
        assert len(generator.prompts[0]) < len(HOURS_Q) * 200

    @pytest.mark.parametrize("value, expected", [(12345, "12345"), (1.5, "1.5"), (True, "true"), (None, "")])
    def test_non_string_question_is_coerced(self, client, generator, value, expected):
        response = client.post("/ask", json={"question": value})

        assert response.status_code == 200
        assert f"User asked: {expected}\n" in generator.prompts[0]

    def test_generation_failure_returns_ai_error(self, settings, embedder, faq_entries):
        app = create_app(settings, embedder=embedder, generator=FakeGenerator(fail=True), entries=faq_entries)
        with TestClient(app) as client:
            response = client.post("/ask", json={"question": HOURS_Q})

        assert response.status_code == 500
        assert response.json() == {"error": "AI error"}

    def test_embedding_outage_degrades(self, settings, faq_entries):
        generator = FakeGenerator(reply="Happy to help.")
        app = create_app(settings, embedder=FailingEmbedder(), generator=generator, entries=faq_entries)
        with TestClient(app) as client:
            # No policy or FAQ can match, the generator still answers
            response = client.post("/ask", json={"question": HOURS_Q})

        assert response.status_code == 200
        assert response.json()["answer"] == "Happy to help."
        assert response.json()["matched_sources"] == []


class TestHealthEndpoint:
    def test_healthy_after_build(self, client):
        # Any request that reaches the embedding stage waits for the cache
        client.post("/ask", json={"question": HOURS_Q})

        response = client.get("/health")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert data["embeddings_ready"] is True
        assert data["faq_total"] == 2
        assert data["faq_embedded"] == 2
        assert data["policy_total"] == len(POLICIES)
        assert data["policy_embedded"] == len(POLICIES)
        assert data["failures"] == 0

    def test_degraded_when_embeddings_fail(self, settings, faq_entries):
        embedder = FakeEmbedder(fail_on={HOURS_Q})
        app = create_app(settings, embedder=embedder, generator=FakeGenerator(), entries=faq_entries)
        with TestClient(app) as client:
            client.post("/ask", json={"question": "Do you sell dog beds?"})
            data = client.get("/health").json()

        assert data["status"] == "degraded"
        assert data["faq_embedded"] == 1
        assert data["failures"] == 1
