"""Test configuration for the user store."""

from tests.fixtures import *  # noqa: F401,F403
