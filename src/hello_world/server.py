"""
In-process uvicorn server for tests.

Runs an ASGI app on a daemon thread bound to an ephemeral port so tests can
talk to it over a real socket, then shuts it down on exit.
"""
import threading
import time
from typing import Optional

import uvicorn

from hello_world.exceptions import ServerStartupError
from hello_world.logger import logger


class LiveServer:
    """A uvicorn server running on a background thread.

    Args:
        app: ASGI application to serve
        host: Interface to bind (default: loopback)
        port: Port to bind; 0 picks a free one
        startup_timeout: Seconds to wait for uvicorn to start listening
    """

    def __init__(self, app, host: str = "127.0.0.1", port: int = 0, startup_timeout: float = 5.0):
        self.app = app
        self.host = host
        self.port = port
        self.startup_timeout = startup_timeout
        self._server: Optional[uvicorn.Server] = None
        self._thread: Optional[threading.Thread] = None

    @property
    def url(self) -> str:
        return f"http://{self.host}:{self.port}"

    def start(self) -> "LiveServer":
        """Start serving and block until the socket is listening."""
        config = uvicorn.Config(
            self.app,
            host=self.host,
            port=self.port,
            log_level="warning",
            lifespan="off",
        )
        self._server = uvicorn.Server(config)
        self._thread = threading.Thread(target=self._server.run, daemon=True)
        self._thread.start()

        deadline = time.monotonic() + self.startup_timeout
        while not self._server.started:
            if not self._thread.is_alive() or time.monotonic() > deadline:
                self.stop()
                raise ServerStartupError(
                    f"server on {self.host}:{self.port} did not start within {self.startup_timeout}s"
                )
            time.sleep(0.01)

        # Resolve the real port when an ephemeral one was requested
        sockets = self._server.servers[0].sockets
        self.port = sockets[0].getsockname()[1]
        logger.info("Live server listening on %s", self.url)
        return self

    def stop(self) -> None:
        """Request a graceful shutdown and wait for the thread to exit."""
        if self._server is not None:
            self._server.should_exit = True
        if self._thread is not None:
            self._thread.join(timeout=self.startup_timeout)
            logger.info("Live server on %s stopped", self.url)
        self._server = None
        self._thread = None

    def __enter__(self) -> "LiveServer":
        return self.start()

    def __exit__(self, exc_type, exc, tb) -> None:
        self.stop()
