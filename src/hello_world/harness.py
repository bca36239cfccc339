"""
Root-path contract check.

Issues a single GET / against a running server and compares the response to
the expected status and body. No retries and no redirects: the first observed
response, or the first transport error, decides the outcome.
"""
from typing import Optional

import requests
from urllib3.exceptions import ReadTimeoutError

from hello_world.app import HELLO_WORLD_BODY
from hello_world.config import get_settings
from hello_world.exceptions import (
    ResponseMismatchError,
    ResponseTimeoutError,
    ServerUnreachableError,
)
from hello_world.logger import logger

EXPECTED_STATUS = 200
EXPECTED_BODY = HELLO_WORLD_BODY
ROOT_PATH = "/"


def _is_body_read_timeout(error: requests.exceptions.ConnectionError) -> bool:
    """requests re-raises a timeout while reading the body as ConnectionError."""
    cause = error.args[0] if error.args else None
    return isinstance(cause, ReadTimeoutError) or isinstance(error.__context__, ReadTimeoutError)


def run_root_get_test(
    base_url: str,
    timeout: Optional[float] = None,
    session: Optional[requests.Session] = None,
) -> requests.Response:
    """Verify that GET / answers 200 with exactly "Hello World\\n".

    Args:
        base_url: Address of the server under test, e.g. http://127.0.0.1:8000
        timeout: Seconds to wait for the connection and each read; defaults to
            the request_timeout setting
        session: Optional requests session to issue the call through

    Returns:
        The response, when both status and body match

    Raises:
        ServerUnreachableError: The connection could not be made or broke off
        ResponseTimeoutError: No response within timeout
        ResponseMismatchError: Status or body differ from the expected values
    """
    if timeout is None:
        timeout = get_settings().request_timeout
    url = base_url.rstrip("/") + ROOT_PATH
    http = session or requests
    logger.debug("GET %s (timeout=%ss)", url, timeout)

    try:
        response = http.get(url, timeout=timeout, allow_redirects=False)
    except requests.exceptions.Timeout as e:
        logger.warning("GET %s timed out after %ss", url, timeout)
        raise ResponseTimeoutError(f"GET {url} timed out after {timeout}s") from e
    except requests.exceptions.ConnectionError as e:
        if _is_body_read_timeout(e):
            logger.warning("GET %s stalled mid-body past %ss", url, timeout)
            raise ResponseTimeoutError(f"GET {url} timed out after {timeout}s reading the body") from e
        logger.warning("GET %s failed: %s", url, e)
        raise ServerUnreachableError(f"GET {url} could not connect: {e}") from e
    except requests.exceptions.RequestException as e:
        logger.warning("GET %s failed: %s", url, e)
        raise ServerUnreachableError(f"GET {url} failed: {e}") from e

    # Compare raw bytes so no charset guessing can mask a difference
    body = response.content.decode("utf-8", errors="replace")
    if response.status_code != EXPECTED_STATUS or response.content != EXPECTED_BODY.encode("utf-8"):
        logger.warning("GET %s returned %d %r", url, response.status_code, body)
        raise ResponseMismatchError(EXPECTED_STATUS, response.status_code, EXPECTED_BODY, body)

    return response
