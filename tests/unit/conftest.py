"""Pytest unit test fixtures."""

import pytest

from backend.chat.orchestrator import ChatOrchestrator
from backend.chat.state import ChatStateMachine
from backend.core.metrics import MetricsCollector
from backend.init_data import seed_inventory
from backend.memory.inventory import Inventory
from backend.memory.models import ConversationLog
from backend.memory.services import ServiceHistory
from backend.tools.bridge import ToolCallBridge


@pytest.fixture()
def inventory():
    items = Inventory()
    seed_inventory(items)
    return items


@pytest.fixture()
def service_history():
    return ServiceHistory()


@pytest.fixture()
def orchestrator(fake_model, recording_transport, inventory, service_history):
    return ChatOrchestrator(
        log=ConversationLog(),
        state=ChatStateMachine(),
        model=fake_model,
        bridge=ToolCallBridge(recording_transport),
        services=service_history,
        inventory=inventory,
        metrics=MetricsCollector(),
    )
