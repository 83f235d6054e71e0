"""Pytest configuration and shared fixtures."""

# Load environment variables from .env file at test startup
# so settings read at import time see the same values as the app
from dotenv import load_dotenv
load_dotenv()

# Import the fake backend and app client fixtures
pytest_plugins = [
    "tests.fixtures.backend",
]
