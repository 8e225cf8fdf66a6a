"""Shared fixtures.

The database URL must point at in-memory SQLite before the package is
imported, since the engine is created at import time.
"""
import os

os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["ENVIRONMENT"] = "production"
os.environ["GEMINI_API_KEY"] = ""
os.environ["OPENAI_API_KEY"] = ""

import pytest
from fastapi.testclient import TestClient

from interface_compiler.main import app
from interface_compiler.services.llm_base import BaseLLMProvider


class FakeProvider(BaseLLMProvider):
    """Returns canned text, or raises the given exception, instead of calling an SDK."""

    name = "fake"

    def __init__(self, text: str = "", error: Exception = None, timeout: float = 5):
        super().__init__(api_key="test", model_name="fake-model", timeout=timeout)
        self.text = text
        self.error = error
        self.prompts = []

    def _sync_generate(self, prompt):
        self.prompts.append(prompt)
        if self.error is not None:
            raise self.error
        return self.text


@pytest.fixture
def client():
    """App client with a fresh in-memory database per test."""
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture
def form_components():
    return [
        {"type": "text", "content": "Contact Us", "variant": "h1"},
        {
            "type": "form",
            "fields": [{"label": "Email", "type": "email", "required": True}],
            "submitText": "Send",
        },
    ]
