"""Dagger module that tests the Hello World API in containers.

Unit tests run against the app in-process; the service functions start the
app with uvicorn and check the GET / contract through a service binding.
"""

import asyncio

import dagger as dg
from dagger import dag, function, object_type

EXPECTED_ROOT_BODY = "Hello World\n"


@object_type
class DaggerTestingExample:
    """Containerized test runs for the Hello World API using uv.

    This module provides:
    - Unit tests in isolated containers
    - Unit tests across multiple Python versions
    - The API as a Dagger service
    - Integration tests against the bound service
    """

    # Base container creation
    @function
    def test_container(
        self, source: dg.Directory, python_version: str = "3.12"
    ) -> dg.Container:
        """Create a base container with uv and source code.

        Args:
            source: Directory containing the source code
            python_version: Python version to use (default: 3.12)

        Returns:
            Container configured with uv and source code
        """
        uv_cache = dag.cache_volume("uv")

        return (
            dag.container()
            .from_(f"ghcr.io/astral-sh/uv:python{python_version}-bookworm-slim")
            .with_mounted_cache("/root/.cache/uv", uv_cache)
            .with_directory("/app", source)
            .with_workdir("/app")
            .with_env_variable("UV_SYSTEM_PYTHON", "1")
        )

    # Unit testing functions
    @function
    async def unit_test(
        self, source: dg.Directory, python_version: str = "3.12"
    ) -> str:
        """Run unit tests with pytest."""
        return await self.run_test(source, "tests/unit", python_version)

    @function
    async def unit_test_matrix(
        self, source: dg.Directory, versions: str = "3.10,3.11,3.12"
    ) -> str:
        """Run unit tests concurrently on multiple Python versions.

        Args:
            source: Directory containing the source code
            versions: Comma-separated list of Python versions

        Returns:
            Formatted test results for all versions
        """
        version_list = [v.strip() for v in versions.split(",") if v.strip()]

        async def test_version(version: str) -> str:
            try:
                result = await self.unit_test(source, version)
            except dg.ExecError as e:
                return f"Python {version}: FAILED\n{e.stdout}{e.stderr}"
            except dg.DaggerError as e:
                return f"Python {version}: FAILED\n{e}"
            return f"Python {version}: PASSED\n{result}"

        results = await asyncio.gather(*[test_version(v) for v in version_list])

        output_lines = ["=== MULTI-VERSION TEST RESULTS ===", ""]
        for result in results:
            output_lines.extend([result, "=" * 50, ""])

        return "\n".join(output_lines)

    @function
    async def run_test(
        self, source: dg.Directory, path: str, python_version: str = "3.12"
    ) -> str:
        """Run tests at a specific path.

        Args:
            source: Directory containing the source code
            path: Path to test files or directory
            python_version: Python version to use

        Returns:
            Test output from pytest
        """
        return await (
            self.test_container(source, python_version)
            .with_exec(["uv", "pip", "install", "-e", ".[test]"])
            .with_exec(["pytest", path, "-v", "--tb=short"])
            .stdout()
        )

    # Service-related functions
    @function
    def api_service(
        self, source: dg.Directory, python_version: str = "3.12"
    ) -> dg.Service:
        """Run the Hello World API as a service on port 8000.

        Args:
            source: Directory containing the application code
            python_version: Python version to use (default: 3.12)

        Returns:
            A Dagger service running the application
        """
        return (
            self.test_container(source, python_version)
            .with_exec(["uv", "pip", "install", "-e", "."])
            .with_env_variable("HELLO_WORLD_HOST", "0.0.0.0")
            .with_env_variable("HELLO_WORLD_PORT", "8000")
            .with_exposed_port(8000)
            .as_service(args=["python", "-m", "hello_world"])
        )

    @function
    async def test_api_service(
        self, source: dg.Directory, python_version: str = "3.12"
    ) -> str:
        """Check the running service over HTTP with curl.

        GET / must answer 200 with exactly "Hello World\\n"; GET /health is
        reported as-is.

        Args:
            source: Directory containing the source code
            python_version: Python version to use

        Returns:
            Test results showing API responses

        Raises:
            ValueError: The root endpoint broke its contract
        """
        api_svc = self.api_service(source, python_version)

        test_client = (
            dag.container()
            .from_("alpine:latest")
            .with_exec(["apk", "add", "--no-cache", "curl"])
            .with_service_binding("api", api_svc)
        )

        # -w appends the three-digit status right after the body
        root_output = await test_client.with_exec(
            ["curl", "-s", "-w", "%{http_code}", "http://api:8000/"]
        ).stdout()
        root_body, root_status = root_output[:-3], root_output[-3:]

        health_response = await test_client.with_exec(
            ["curl", "-s", "-f", "http://api:8000/health"]
        ).stdout()

        if root_status != "200" or root_body != EXPECTED_ROOT_BODY:
            raise ValueError(
                f"GET / expected 200 {EXPECTED_ROOT_BODY!r}, "
                f"got {root_status} {root_body!r}"
            )

        result_lines = [
            "=== API SERVICE TEST RESULTS ===",
            "",
            "Root Endpoint (GET /):",
            f"{root_status} {root_body!r}",
            "",
            "Health Endpoint (GET /health):",
            health_response,
            "",
            "All endpoints responded successfully!",
        ]

        return "\n".join(result_lines)

    @function
    async def integration_test(
        self, source: dg.Directory, python_version: str = "3.12"
    ) -> str:
        """Run the e2e suite against the bound API service.

        API_BASE_URL points the suite at the service instead of an
        in-process server.

        Args:
            source: Directory containing the source code
            python_version: Python version to use

        Returns:
            Integration test results from pytest
        """
        api_svc = self.api_service(source, python_version)

        return await (
            self.test_container(source, python_version)
            .with_service_binding("api", api_svc)
            .with_env_variable("API_BASE_URL", "http://api:8000")
            .with_exec(["uv", "pip", "install", "-e", ".[test]"])
            .with_exec(["pytest", "tests/e2e", "-v", "--tb=short"])
            .stdout()
        )
