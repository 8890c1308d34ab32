"""Pytest configuration for the voice assistant tests."""

from unittest.mock import AsyncMock, MagicMock

import pytest

from storefront.core.config import VoiceConfig
from storefront.core.state import AssistantState
from storefront.core.stores import InMemoryNavigator, InMemoryPaymentForm, Page
from voice_agent.gateway import ClassifierGateway
from voice_agent.interpreters import InterpreterContext


# ---------------------------------------------------------------------------
# OpenAI mock: no test reaches the network. Answers are scripted per test,
# one entry per classifier call; Exception instances are raised instead.
# ---------------------------------------------------------------------------

def completion(text):
    """Build an object shaped like a chat completion response."""
    message = MagicMock()
    message.content = text
    choice = MagicMock()
    choice.message = message
    response = MagicMock()
    response.choices = [choice]
    return response


@pytest.fixture
def llm():
    client = MagicMock()
    client.chat.completions.create = AsyncMock(return_value=completion("unknown"))

    def script(*answers):
        client.chat.completions.create.side_effect = [
            a if isinstance(a, Exception) else completion(a) for a in answers
        ]

    client.script = script
    return client


@pytest.fixture
def config():
    return VoiceConfig()


@pytest.fixture
def gateway(llm, config):
    return ClassifierGateway(client=llm, model="test-model", temperature=0, timeout=1.0)


@pytest.fixture
def navigator():
    return InMemoryNavigator(start=Page.HOME)


@pytest.fixture
def context(gateway, navigator, config):
    return InterpreterContext.in_memory(gateway=gateway, navigator=navigator, config=config)


@pytest.fixture
def payment_context(gateway, config):
    """Context positioned on the payment page."""
    return InterpreterContext.in_memory(
        gateway=gateway,
        navigator=InMemoryNavigator(start=Page.PAYMENT),
        payment_form=InMemoryPaymentForm(),
        config=config,
    )


@pytest.fixture
def assistant_state(config):
    return AssistantState(log_size=config.action_log_size)
