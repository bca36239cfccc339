"""
Hello World HTTP service and the root-path contract harness that checks it.
"""
from hello_world.app import create_app
from hello_world.harness import run_root_get_test

__all__ = ["create_app", "run_root_get_test"]

__version__ = "1.0.0"
