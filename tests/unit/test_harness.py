"""
Unit tests for the root-path contract harness.
Each test serves a small app on a live loopback socket so the harness
exercises real HTTP, including the failure paths.
"""

import asyncio
import logging
import socket

import pytest
import requests
from fastapi import FastAPI
from fastapi.responses import PlainTextResponse, RedirectResponse, StreamingResponse

from hello_world.app import create_app
from hello_world.exceptions import (
    HarnessError,
    ResponseMismatchError,
    ResponseTimeoutError,
    ServerUnreachableError,
)
from hello_world.harness import run_root_get_test
from hello_world.server import LiveServer


def make_app(body: str, status_code: int = 200, delay: float = 0.0) -> FastAPI:
    """Build a stand-in server whose root answers with the given response."""
    app = FastAPI()

    @app.get("/")
    async def root():
        if delay:
            await asyncio.sleep(delay)
        return PlainTextResponse(body, status_code=status_code)

    return app


@pytest.fixture
def unused_url():
    """URL of a loopback port nothing is listening on."""
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as sock:
        sock.bind(("127.0.0.1", 0))
        port = sock.getsockname()[1]
    return f"http://127.0.0.1:{port}"


class TestPassingContract:
    """The real application satisfies the contract."""

    def test_returns_response_on_match(self, live_server):
        response = run_root_get_test(live_server.url)

        assert response.status_code == 200
        assert response.content == b"Hello World\n"

    def test_trailing_slash_in_base_url(self, live_server):
        response = run_root_get_test(live_server.url + "/")

        assert response.url == live_server.url + "/"

    def test_repeated_runs_are_identical(self, live_server):
        with requests.Session() as session:
            responses = [run_root_get_test(live_server.url, session=session) for _ in range(5)]

        assert {(r.status_code, r.content) for r in responses} == {(200, b"Hello World\n")}


class TestMismatch:
    """Any deviation in status or body fails the check."""

    def test_missing_trailing_newline_fails(self):
        with LiveServer(make_app("Hello World")) as server:
            with pytest.raises(ResponseMismatchError) as exc_info:
                run_root_get_test(server.url)

        err = exc_info.value
        assert err.actual_body == "Hello World"
        assert err.expected_body == "Hello World\n"
        assert "'Hello World\\n'" in str(err)
        assert "status" not in str(err)

    @pytest.mark.parametrize("body", ["hello world\n", " Hello World\n", "Hello World\n\n"])
    def test_body_comparison_is_exact(self, body):
        with LiveServer(make_app(body)) as server:
            with pytest.raises(ResponseMismatchError):
                run_root_get_test(server.url)

    def test_wrong_status_fails(self):
        with LiveServer(make_app("Hello World\n", status_code=201)) as server:
            with pytest.raises(ResponseMismatchError) as exc_info:
                run_root_get_test(server.url)

        err = exc_info.value
        assert (err.expected_status, err.actual_status) == (200, 201)
        assert "expected 200, got 201" in str(err)
        assert "body" not in str(err)

    def test_redirect_is_not_followed(self):
        """A 302 at / fails even when the target serves the right body."""
        app = FastAPI()

        @app.get("/")
        async def root():
            return RedirectResponse("/elsewhere", status_code=302)

        @app.get("/elsewhere")
        async def elsewhere():
            return PlainTextResponse("Hello World\n")

        with LiveServer(app) as server:
            with pytest.raises(ResponseMismatchError) as exc_info:
                run_root_get_test(server.url)

        assert exc_info.value.actual_status == 302

    def test_mismatch_is_logged(self, caplog):
        with LiveServer(make_app("Hello World")) as server:
            with caplog.at_level(logging.WARNING, logger="hello_world"):
                with pytest.raises(ResponseMismatchError):
                    run_root_get_test(server.url)

        assert any("returned 200" in record.getMessage() for record in caplog.records)

    def test_mismatch_is_an_assertion_error(self):
        """pytest reports mismatches as failed assertions."""
        with LiveServer(make_app("Goodbye\n", status_code=500)) as server:
            with pytest.raises(AssertionError) as exc_info:
                run_root_get_test(server.url)

        message = str(exc_info.value)
        assert "expected 200, got 500" in message
        assert "'Goodbye\\n'" in message


class TestTransportFailures:
    """Transport errors are terminal and never retried."""

    def test_connection_refused(self, unused_url):
        with pytest.raises(ServerUnreachableError) as exc_info:
            run_root_get_test(unused_url)

        assert isinstance(exc_info.value, HarnessError)
        assert isinstance(exc_info.value.__cause__, requests.exceptions.ConnectionError)

    def test_timeout(self):
        with LiveServer(make_app("Hello World\n", delay=1.0)) as server:
            with pytest.raises(ResponseTimeoutError):
                run_root_get_test(server.url, timeout=0.1)

    def test_body_stall_is_a_timeout(self):
        """Headers arrive, then the body stalls past the read timeout."""
        app = FastAPI()

        async def stalled_body():
            yield b"Hello "
            await asyncio.sleep(1.0)
            yield b"World\n"

        @app.get("/")
        async def root():
            return StreamingResponse(stalled_body(), media_type="text/plain")

        with LiveServer(app) as server:
            with pytest.raises(ResponseTimeoutError):
                run_root_get_test(server.url, timeout=0.2)

    def test_default_timeout_comes_from_settings(self, monkeypatch):
        monkeypatch.setenv("HELLO_WORLD_REQUEST_TIMEOUT", "0.1")

        with LiveServer(make_app("Hello World\n", delay=1.0)) as server:
            with pytest.raises(ResponseTimeoutError) as exc_info:
                run_root_get_test(server.url)

        assert "0.1s" in str(exc_info.value)

    def test_stopped_server_is_unreachable(self, settings):
        server = LiveServer(create_app(settings)).start()
        url = server.url
        server.stop()

        with pytest.raises(ServerUnreachableError):
            run_root_get_test(url)
