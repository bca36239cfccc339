"""Failures reported by the root-path contract harness."""


class HarnessError(Exception):
    """Base exception for harness failures."""
    pass


class ServerUnreachableError(HarnessError):
    """The server refused or dropped the connection."""
    pass


class ResponseTimeoutError(HarnessError):
    """No response arrived within the request timeout."""
    pass


class ServerStartupError(HarnessError):
    """The in-process server did not start listening in time."""
    pass


class ResponseMismatchError(HarnessError, AssertionError):
    """Status code or body differed from the expected response."""

    def __init__(self, expected_status: int, actual_status: int, expected_body: str, actual_body: str):
        self.expected_status = expected_status
        self.actual_status = actual_status
        self.expected_body = expected_body
        self.actual_body = actual_body
        lines = ["GET / did not return the expected response"]
        if actual_status != expected_status:
            lines.append(f"  status: expected {expected_status}, got {actual_status}")
        if actual_body != expected_body:
            lines.append(f"  body:   expected {expected_body!r}, got {actual_body!r}")
        super().__init__("\n".join(lines))
