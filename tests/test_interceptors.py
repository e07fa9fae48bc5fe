"""Tests for response interception adapters."""

import re

import httpx
import pytest
from fastapi import FastAPI
from fastapi.responses import PlainTextResponse
from fastapi.testclient import TestClient

from fieldfill.core.config import Settings
from fieldfill.interceptors import (
    FillResponseMiddleware,
    InterceptorConfig,
    create_filling_client,
    should_intercept,
)
from fieldfill.models.generation import GenerationResult
from fieldfill.models.options import FillOptions
from fieldfill.services.filler import FieldFiller


class TestShouldIntercept:
    """Tests for URL and method filters."""

    def test_defaults_match_everything(self):
        assert should_intercept(InterceptorConfig(), "https://api.test/users", "GET")

    def test_disabled(self):
        assert not should_intercept(InterceptorConfig(enabled=False), "https://api.test/", "GET")

    def test_substring_patterns(self):
        config = InterceptorConfig(url_patterns=["/api/"])
        assert should_intercept(config, "https://x.test/api/users")
        assert not should_intercept(config, "https://x.test/static/app.js")

    def test_regex_patterns(self):
        config = InterceptorConfig(url_patterns=[re.compile(r"/users/\d+$")])
        assert should_intercept(config, "https://x.test/users/42")
        assert not should_intercept(config, "https://x.test/users/me")

    def test_exclude_wins(self):
        config = InterceptorConfig(url_patterns=["/api/"], exclude_patterns=["/api/auth"])
        assert not should_intercept(config, "https://x.test/api/auth/token")

    def test_methods(self):
        config = InterceptorConfig(methods=["get", "POST"])
        assert should_intercept(config, "https://x.test/", "GET")
        assert should_intercept(config, "https://x.test/", "post")
        assert not should_intercept(config, "https://x.test/", "DELETE")


def _upstream(request: httpx.Request) -> httpx.Response:
    if request.url.path == "/users":
        return httpx.Response(200, json={"id": 7, "email": None, "profile": {"city": ""}})
    if request.url.path == "/broken":
        return httpx.Response(200, content=b"{oops", headers={"content-type": "application/json"})
    if request.url.path == "/scalar":
        return httpx.Response(200, json="just text")
    return httpx.Response(200, text="plain", headers={"x-upstream": "yes"})


class TestFillingTransport:
    """Tests for the httpx transport."""

    @pytest.mark.asyncio
    async def test_fills_json_response(self, filler):
        async with create_filling_client(
            filler, transport=httpx.MockTransport(_upstream), base_url="https://api.test"
        ) as client:
            response = await client.get("/users")

        data = response.json()
        assert response.status_code == 200
        assert data["id"] == 7
        assert "@" in data["email"]
        assert data["profile"]["city"]
        assert int(response.headers["content-length"]) == len(response.content)

    @pytest.mark.asyncio
    async def test_non_json_untouched(self, filler):
        async with create_filling_client(
            filler, transport=httpx.MockTransport(_upstream), base_url="https://api.test"
        ) as client:
            response = await client.get("/page")

        assert response.text == "plain"
        assert response.headers["x-upstream"] == "yes"

    @pytest.mark.asyncio
    async def test_invalid_or_scalar_json_untouched(self, filler):
        async with create_filling_client(
            filler, transport=httpx.MockTransport(_upstream), base_url="https://api.test"
        ) as client:
            broken = await client.get("/broken")
            scalar = await client.get("/scalar")

        assert broken.content == b"{oops"
        assert scalar.json() == "just text"

    @pytest.mark.asyncio
    async def test_excluded_url_untouched(self, filler):
        config = InterceptorConfig(exclude_patterns=["/users"])
        async with create_filling_client(
            filler, config, transport=httpx.MockTransport(_upstream), base_url="https://api.test"
        ) as client:
            response = await client.get("/users")

        assert response.json()["email"] is None

    @pytest.mark.asyncio
    async def test_fill_options_are_used(self, filler):
        config = InterceptorConfig(fill_options=FillOptions(null_only=True))
        async with create_filling_client(
            filler, config, transport=httpx.MockTransport(_upstream), base_url="https://api.test"
        ) as client:
            response = await client.get("/users")

        data = response.json()
        assert "@" in data["email"]
        assert data["profile"]["city"] == ""

    @pytest.mark.asyncio
    async def test_fill_failure_returns_original(self, mock_provider):
        settings = Settings(_env_file=None, use_ai=False, max_retries=1)
        mock_provider.generate_for_fields.return_value = GenerationResult(success=False)
        filler = FieldFiller(settings=settings, provider=mock_provider)

        def upstream(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json={"zorbix": None})

        async with create_filling_client(filler, transport=httpx.MockTransport(upstream)) as client:
            response = await client.get("https://api.test/x")

        assert response.json() == {"zorbix": None}


def _make_app(filler: FieldFiller, config: InterceptorConfig) -> FastAPI:
    app = FastAPI()
    app.add_middleware(FillResponseMiddleware, filler=filler, config=config)

    @app.get("/api/users")
    async def users():
        return {"name": None, "email": "", "id": 3}

    @app.get("/api/raw")
    async def raw():
        return PlainTextResponse("hello")

    @app.get("/health")
    async def health():
        return {"status": None}

    return app


class TestFillResponseMiddleware:
    """Tests for the ASGI middleware."""

    def test_fills_matching_json(self, filler):
        client = TestClient(_make_app(filler, InterceptorConfig(url_patterns=["/api/"])))

        response = client.get("/api/users")

        data = response.json()
        assert data["id"] == 3
        assert isinstance(data["name"], str) and data["name"]
        assert "@" in data["email"]
        assert int(response.headers["content-length"]) == len(response.content)

    def test_non_matching_url_untouched(self, filler):
        client = TestClient(_make_app(filler, InterceptorConfig(url_patterns=["/api/"])))
        assert client.get("/health").json() == {"status": None}

    def test_non_json_untouched(self, filler):
        client = TestClient(_make_app(filler, InterceptorConfig()))
        assert client.get("/api/raw").text == "hello"

    def test_method_filter(self, filler):
        client = TestClient(_make_app(filler, InterceptorConfig(methods=["POST"])))
        assert client.get("/api/users").json()["name"] is None
