"""
API tests for the Geni AI routes (in-process TestClient, no MongoDB, no LLM).
"""
from datetime import datetime
from unittest.mock import patch

import pytest

from conftest import FakeContentProvider
from genia.models.generation import PipelineState
from genia.models.session import Plan, Session
from genia.services.account_service import account_service
from genia.services.pipeline import GenerationPipeline

FIXED_NOW = datetime(2026, 10, 15, 10, 0)


@pytest.fixture(autouse=True)
def isolated_account(store, fake_provider):
    """Point the global account service at test doubles."""
    original = (account_service.store, account_service.pipeline, account_service.session)
    account_service.store = store
    account_service.pipeline = GenerationPipeline(provider=fake_provider, store=store, output_dir=None)
    account_service.session = None
    yield account_service
    account_service.store, account_service.pipeline, account_service.session = original


def login(client, email="user@example.com"):
    response = client.post("/api/genia/auth/login", json={"email": email})
    assert response.status_code == 200
    return response.json()


class TestAuth:
    def test_login_rejects_non_email(self, client):
        response = client.post("/api/genia/auth/login", json={"email": "nobody"})
        assert response.status_code == 400
        assert response.json()["detail"]["error_code"] == "INVALID_EMAIL"

    def test_login_me_logout(self, client):
        body = login(client)
        assert body["plan"] == "free"
        assert body["quota"] == 1

        me = client.get("/api/genia/auth/me")
        assert me.status_code == 200
        assert me.json()["uid"] == body["uid"]

        assert client.post("/api/genia/auth/logout").json() == {"logged_out": True}
        assert client.get("/api/genia/auth/me").status_code == 401

    def test_logout_refused_while_generating(self, client, isolated_account):
        login(client)
        isolated_account.pipeline.state = PipelineState.WRITING
        response = client.post("/api/genia/auth/logout")
        assert response.status_code == 409
        assert response.json()["detail"]["error_code"] == "PIPELINE_BUSY"
        assert client.get("/api/genia/auth/me").status_code == 200

    @pytest.mark.parametrize("path", [
        "/api/genia/auth/me",
        "/api/genia/account/stats",
        "/api/genia/licensing/transaction",
    ])
    def test_session_required(self, client, path):
        response = client.get(path)
        assert response.status_code == 401
        assert response.json()["detail"]["error_code"] == "NOT_LOGGED_IN"


class TestGenerate:
    def test_requires_login(self, client):
        response = client.post("/api/genia/generate", json={"subject": "Finance"})
        assert response.status_code == 401

    def test_generate_document_then_quota_exhausted(self, client, fake_provider):
        login(client)
        response = client.post(
            "/api/genia/generate",
            json={"subject": "Finance", "kind": "document", "section_count": 12},
        )
        assert response.status_code == 200
        assert response.headers["content-type"] == "application/pdf"
        assert "Finance.pdf" in response.headers["content-disposition"]
        assert response.headers["x-genia-quota"] == "0"
        assert response.content.startswith(b"%PDF")
        assert fake_provider.outline_args["count"] == 5

        again = client.post("/api/genia/generate", json={"subject": "Finance"})
        assert again.status_code == 402
        assert again.json()["detail"]["error_code"] == "QUOTA_EXHAUSTED"

    def test_generate_deck(self, client):
        login(client)
        response = client.post("/api/genia/generate", json={"subject": "Finance", "kind": "deck"})
        assert response.status_code == 200
        assert "PPT_Finance.pptx" in response.headers["content-disposition"]
        assert response.content.startswith(b"PK")

        stats = client.get("/api/genia/account/stats").json()
        assert stats["ppt_count"] == 1
        assert stats["quota"] == 0

    def test_empty_subject(self, client):
        login(client)
        response = client.post("/api/genia/generate", json={"subject": "  "})
        assert response.status_code == 400
        assert account_service.session.quota == 1

    def test_stage_failure_is_not_charged(self, client, isolated_account, store, png_bytes):
        isolated_account.pipeline = GenerationPipeline(
            provider=FakeContentProvider(image=png_bytes, fail_write_at=1),
            store=store,
            output_dir=None,
        )
        login(client)
        response = client.post("/api/genia/generate", json={"subject": "Finance"})
        assert response.status_code == 502
        assert response.json()["detail"]["error_code"] == "STAGE_FAILED"
        assert account_service.session.quota == 1

    def test_status(self, client):
        response = client.get("/api/genia/generate/status")
        assert response.json() == {"state": "IDLE", "busy": False}


class TestLicensing:
    @pytest.fixture
    def fixed_clock(self):
        with patch("genia.services.security_formula.datetime") as mock_datetime:
            mock_datetime.now.return_value = FIXED_NOW
            yield mock_datetime

    def test_transaction(self, client, fixed_clock):
        account_service.session = Session(uid="100123", email="user@example.com")
        body = client.get("/api/genia/licensing/transaction").json()
        assert body["transaction_id"] == "100123-15-10-1"
        assert body["request_url"].startswith("https://wa.me/")
        assert body["credits"] == 3

    def test_activate(self, client, fixed_clock, store):
        account_service.session = Session(uid="100123", email="user@example.com", quota=1)

        wrong = client.post("/api/genia/licensing/activate", json={"code": "214"})
        assert wrong.status_code == 400
        assert wrong.json()["detail"]["error_code"] == "CODE_MISMATCH"
        assert account_service.session.quota == 1

        ok = client.post("/api/genia/licensing/activate", json={"code": "0213"})
        assert ok.status_code == 200
        assert ok.json() == {"plan": "pro", "quota": 4, "purchase_index": 2, "credits_added": 3}
        assert account_service.session.plan == Plan.PRO
        store.save.assert_awaited()

        replay = client.post("/api/genia/licensing/activate", json={"code": "213"})
        assert replay.status_code == 400

    def test_activate_requires_login(self, client):
        response = client.post("/api/genia/licensing/activate", json={"code": "1234"})
        assert response.status_code == 401


class TestHealth:
    def test_health(self, client):
        assert client.get("/api/health").json()["status"] == "healthy"

    def test_root(self, client):
        assert client.get("/api").json()["service"] == "Geni AI Studio"
