"""Tests for the RateLimitGate middleware against a minimal app."""

import pytest
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse, PlainTextResponse, StreamingResponse
from fastapi.testclient import TestClient
from starlette.middleware.sessions import SessionMiddleware

from what_to_cook.api.middleware import HandlerResult, RateLimitGate
from what_to_cook.api.middleware.rate_limit import merge_quota_fields
from what_to_cook.infrastructure.rate_limit import COUNT_KEY, QuotaPolicy
from what_to_cook.tests.fakes import JSON_HEADERS, FakeClock

MAX_REQUESTS = 3


def build_app(policy: QuotaPolicy) -> FastAPI:
    app = FastAPI()

    @app.post("/api/v1/recipes")
    async def create():
        return JSONResponse(status_code=201, content={"recipe": {"title": "Soup"}})

    @app.post("/api/v1/recipes/ok")
    async def create_ok():
        return {"recipe": {"title": "Salad"}}

    @app.post("/api/v1/recipes/fail")
    async def create_fail():
        return JSONResponse(status_code=422, content={"error": "Ingredients cannot be empty"})

    @app.post("/api/v1/recipes/text")
    async def create_text():
        return PlainTextResponse("created", status_code=201)

    @app.post("/api/v1/recipes/list")
    async def create_list():
        return JSONResponse(status_code=201, content=[1, 2, 3])

    @app.post("/api/v1/recipes/broken")
    async def create_broken():
        async def body():
            yield b'{"recipe":'
            raise RuntimeError("model stream dropped")

        return StreamingResponse(body(), status_code=201, media_type="application/json")

    @app.post("/other")
    async def other():
        return JSONResponse(status_code=201, content={"ok": True})

    @app.get("/session")
    async def session(request: Request):
        return dict(request.session)

    app.add_middleware(RateLimitGate, policy=policy, path_prefix="/api/v1/recipes")
    app.add_middleware(SessionMiddleware, secret_key="test-secret")
    return app


@pytest.fixture
def gate_clock():
    return FakeClock()


@pytest.fixture
def gate_client(gate_clock):
    policy = QuotaPolicy(max_requests=MAX_REQUESTS, window_seconds=3600, clock=gate_clock)
    with TestClient(build_app(policy)) as client:
        yield client


def session_state(client):
    return client.get("/session").json()


class TestGating:
    """Test which requests the gate applies to."""

    def test_counts_matching_request(self, gate_client):
        """Test a JSON POST under the prefix is counted."""
        response = gate_client.post("/api/v1/recipes", headers=JSON_HEADERS)

        assert response.status_code == 201
        assert response.json()["remaining_requests"] == MAX_REQUESTS - 1
        assert session_state(gate_client)[COUNT_KEY] == 1

    def test_other_path_passes_through(self, gate_client):
        """Test requests outside the prefix are untouched and not counted."""
        response = gate_client.post("/other", headers=JSON_HEADERS)

        assert response.status_code == 201
        assert response.json() == {"ok": True}
        assert COUNT_KEY not in session_state(gate_client)

    def test_non_json_accept_passes_through(self, gate_client):
        """Test requests not accepting JSON bypass the gate."""
        response = gate_client.post("/api/v1/recipes", headers={"Accept": "text/html"})

        assert response.status_code == 201
        assert "remaining_requests" not in response.json()
        assert COUNT_KEY not in session_state(gate_client)

    def test_get_passes_through(self, gate_client):
        """Test non-POST methods bypass the gate."""
        gate_client.get("/api/v1/recipes", headers=JSON_HEADERS)
        assert COUNT_KEY not in session_state(gate_client)


class TestAccounting:
    """Test when requests consume quota."""

    def test_remaining_decreases_each_success(self, gate_client):
        """Test remaining_requests drops by one per successful request."""
        remaining = [
            gate_client.post("/api/v1/recipes", headers=JSON_HEADERS).json()["remaining_requests"]
            for _ in range(MAX_REQUESTS)
        ]
        assert remaining == [2, 1, 0]

    def test_status_200_counts(self, gate_client):
        """Test 200 is a success as well as 201."""
        response = gate_client.post("/api/v1/recipes/ok", headers=JSON_HEADERS)

        assert response.status_code == 200
        assert response.json()["remaining_requests"] == MAX_REQUESTS - 1

    def test_failure_not_counted(self, gate_client):
        """Test a failed handler response passes through and consumes nothing."""
        response = gate_client.post("/api/v1/recipes/fail", headers=JSON_HEADERS)

        assert response.status_code == 422
        assert response.json() == {"error": "Ingredients cannot be empty"}
        assert session_state(gate_client)[COUNT_KEY] == 0

    def test_failure_then_success(self, gate_client):
        """Test a failure before a success leaves MAX - 1 remaining."""
        gate_client.post("/api/v1/recipes/fail", headers=JSON_HEADERS)
        response = gate_client.post("/api/v1/recipes", headers=JSON_HEADERS)

        assert response.json()["remaining_requests"] == MAX_REQUESTS - 1

    def test_limit_reached_on_last_success(self, gate_client):
        """Test the request that uses the last slot carries limit metadata and keeps 201."""
        for _ in range(MAX_REQUESTS - 1):
            gate_client.post("/api/v1/recipes", headers=JSON_HEADERS)

        response = gate_client.post("/api/v1/recipes", headers=JSON_HEADERS)
        payload = response.json()

        assert response.status_code == 201
        assert payload["recipe"] == {"title": "Soup"}
        assert payload["limit_reached"] is True
        assert payload["remaining_requests"] == 0
        assert "60 minutes" in payload["message"]
        assert response.headers["content-length"] == str(len(response.content))

    def test_rejects_after_limit(self, gate_client):
        """Test the request after the limit gets 429 without reaching the handler."""
        for _ in range(MAX_REQUESTS):
            gate_client.post("/api/v1/recipes", headers=JSON_HEADERS)

        response = gate_client.post("/api/v1/recipes", headers=JSON_HEADERS)

        assert response.status_code == 429
        assert response.json() == {
            "error": "Rate limit exceeded. Please try again later.",
            "remaining_requests": 0,
            "reset_in_minutes": 60,
            "message": "Please try again in 60 minutes",
        }
        assert session_state(gate_client)[COUNT_KEY] == MAX_REQUESTS

    def test_rejection_minutes_round_up(self, gate_client, gate_clock):
        """Test reset_in_minutes rounds partial minutes up."""
        for _ in range(MAX_REQUESTS):
            gate_client.post("/api/v1/recipes", headers=JSON_HEADERS)
        gate_clock.advance(3600 - 59)

        response = gate_client.post("/api/v1/recipes", headers=JSON_HEADERS)

        assert response.json()["reset_in_minutes"] == 1
        assert response.json()["message"] == "Please try again in 1 minute"

    def test_window_rollover(self, gate_client, gate_clock):
        """Test quota is restored once the window has elapsed."""
        for _ in range(MAX_REQUESTS):
            gate_client.post("/api/v1/recipes", headers=JSON_HEADERS)
        gate_clock.advance(3600)

        response = gate_client.post("/api/v1/recipes", headers=JSON_HEADERS)

        assert response.status_code == 201
        assert response.json()["remaining_requests"] == MAX_REQUESTS - 1

    def test_sessions_are_independent(self, gate_client, gate_clock):
        """Test another browser session has its own quota."""
        for _ in range(MAX_REQUESTS):
            gate_client.post("/api/v1/recipes", headers=JSON_HEADERS)

        policy = QuotaPolicy(max_requests=MAX_REQUESTS, window_seconds=3600, clock=gate_clock)
        with TestClient(build_app(policy)) as other_client:
            response = other_client.post("/api/v1/recipes", headers=JSON_HEADERS)

        assert response.status_code == 201

    def test_failed_stream_not_counted(self, gate_clock):
        """Test a 201 whose body fails mid-stream becomes a 500 and consumes nothing."""
        policy = QuotaPolicy(max_requests=MAX_REQUESTS, window_seconds=3600, clock=gate_clock)
        with TestClient(build_app(policy), raise_server_exceptions=False) as client:
            client.post("/api/v1/recipes", headers=JSON_HEADERS)
            response = client.post("/api/v1/recipes/broken", headers=JSON_HEADERS)
            state = session_state(client)

        assert response.status_code == 500
        assert response.json() == {
            "error": "An unexpected error occurred",
            "remaining_requests": MAX_REQUESTS - 1,
        }
        assert state[COUNT_KEY] == 1


class TestBodyRewrite:
    """Test response augmentation on unusual bodies."""

    def test_non_json_body_untouched(self, gate_client):
        """Test a plain text success is returned as-is but still counted."""
        response = gate_client.post("/api/v1/recipes/text", headers=JSON_HEADERS)

        assert response.status_code == 201
        assert response.text == "created"
        assert session_state(gate_client)[COUNT_KEY] == 1

    def test_json_array_untouched(self, gate_client):
        """Test a JSON body that is not an object is left alone."""
        response = gate_client.post("/api/v1/recipes/list", headers=JSON_HEADERS)

        assert response.json() == [1, 2, 3]

    def test_merge_keeps_status_and_headers(self):
        """Test merge_quota_fields only changes the body."""
        result = HandlerResult(
            status_code=201,
            headers=[(b"content-type", b"application/json"), (b"x-extra", b"1")],
            body=b'{"recipe": {"id": 1}}',
        )

        merged = merge_quota_fields(result, {"remaining_requests": 2})
        response = merged.to_response()

        assert merged.status_code == 201
        assert merged.headers == result.headers
        assert response.headers["x-extra"] == "1"
        assert response.headers["content-length"] == str(len(merged.body))
        assert merged.body == b'{"recipe":{"id":1},"remaining_requests":2}'

    def test_merge_invalid_json_returns_original(self):
        """Test unparseable bodies come back unchanged."""
        result = HandlerResult(status_code=200, headers=[], body=b"\xff\xfe not json")
        assert merge_quota_fields(result, {"remaining_requests": 1}) is result


def test_gate_without_session_passes_through(gate_clock):
    """Test a missing SessionMiddleware does not break the request."""
    app = FastAPI()

    @app.post("/api/v1/recipes")
    async def create():
        return JSONResponse(status_code=201, content={"ok": True})

    policy = QuotaPolicy(max_requests=1, window_seconds=3600, clock=gate_clock)
    app.add_middleware(RateLimitGate, policy=policy)

    with TestClient(app) as client:
        response = client.post("/api/v1/recipes", headers=JSON_HEADERS)

    assert response.status_code == 201
    assert response.json() == {"ok": True}
