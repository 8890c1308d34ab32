"""Tests for the in-memory storefront collaborators, the event bus and the action log."""
import pytest

from storefront.core.capture import QueueCaptureSource
from storefront.core.events import STATUS, EventBus
from storefront.core.state import AssistantState
from storefront.core.stores import (
    FilterSelection,
    InMemoryFilterStore,
    InMemoryNavigator,
    InMemoryProfileStore,
    Page,
    Route,
    StaticCatalog,
    UserProfile,
)
from storefront.utils.redact import MASK, redact_sensitive_data, redact_utterance
from voice_agent.errors import CaptureUnavailable


# ---------------------------------------------------------------------------
# Filter store
# ---------------------------------------------------------------------------

def test_apply_merge_is_additive():
    store = InMemoryFilterStore(FilterSelection(colors=["Black"], price=(0, 100)))
    store.apply_merge(FilterSelection(colors=["Blue", "Black"], brands=["Nike"]))
    selection = store.snapshot()
    assert selection.colors == ["Black", "Blue"]
    assert selection.brands == ["Nike"]
    assert selection.price == (0, 100)

    store.apply_merge(FilterSelection(price=(20, 40)))
    assert store.snapshot().price == (20, 40)


def test_snapshot_is_a_copy():
    store = InMemoryFilterStore()
    store.snapshot().colors.append("Red")
    assert store.snapshot().is_empty()


def test_remove_values_and_clear():
    store = InMemoryFilterStore(FilterSelection(sizes=["S", "M"], price=(0, 50)))
    store.remove_values("sizes", ["S"])
    store.remove_price_range()
    assert store.snapshot().to_dict()["sizes"] == ["M"]
    assert store.snapshot().price is None
    store.clear_all()
    assert store.snapshot().is_empty()


# ---------------------------------------------------------------------------
# Profile, navigation, catalog
# ---------------------------------------------------------------------------

def test_profile_merge_keeps_other_fields():
    store = InMemoryProfileStore(UserProfile(name="Ada", email="ada@example.com"))
    profile = store.merge_update({"address": "12 Analytical Way", "favourite_colour": "green"})
    assert profile.name == "Ada"
    assert profile.address == "12 Analytical Way"
    assert not hasattr(profile, "favourite_colour")


def test_profile_merge_of_nothing_leaves_profile_unchanged():
    store = InMemoryProfileStore(UserProfile(name="Ada", card_number="4242424242424242", expiry_date="12/29"))
    before = store.read_snapshot()
    store.merge_update({})
    assert store.read_snapshot() == before
    assert store.read_snapshot().model_dump() == before.model_dump()


def test_navigator_history_and_paths():
    nav = InMemoryNavigator()
    nav.navigate(Route.RUNNING)
    nav.navigate(Route.PRODUCT, product_id="run-002")
    assert nav.path == "/product/run-002"
    nav.navigate(Route.BACK)
    assert nav.path == "/products/jogging"
    assert nav.page == Page.CATEGORY
    nav.navigate(Route.BACK)
    nav.navigate(Route.BACK)
    assert nav.page == Page.HOME


def test_catalog_lookup():
    catalog = StaticCatalog()
    assert catalog.get("yoga-001").name == "PRO Yoga Mat"
    assert catalog.get("nope") is None


# ---------------------------------------------------------------------------
# Events, action log, redaction
# ---------------------------------------------------------------------------

def test_event_bus_isolates_failing_subscribers():
    bus = EventBus()
    received = []

    def broken(event):
        raise RuntimeError("toast crashed")

    bus.subscribe(STATUS, broken)
    bus.subscribe(STATUS, received.append)
    bus.status("Opened your cart", success=True)

    assert received[0].data == {"message": "Opened your cart", "success": True}
    bus.unsubscribe(STATUS, received.append)
    bus.status("again", success=True)
    assert len(received) == 1
    assert len(bus.history(STATUS)) == 2


def test_action_log_is_bounded():
    state = AssistantState(log_size=3)
    for i in range(5):
        state.record(f"command {i}", success=True)
    assert len(state) == 3
    assert [e.description for e in state.recent()] == ["command 2", "command 3", "command 4"]
    assert state.recent(limit=1)[0].to_dict()["description"] == "command 4"


def test_failure_counter():
    state = AssistantState()
    assert state.mark_failure() == 1
    assert state.mark_failure() == 2
    state.mark_success()
    assert state.recovery_counter == 0


def test_redact_sensitive_data():
    redacted = redact_sensitive_data({
        "name": "Ada",
        "card_number": "4242424242424242",
        "expiry_date": "12/29",
        "nested": {"cvv": "123"},
    })
    assert redacted["name"] == "Ada"
    assert redacted["card_number"] == MASK
    assert redacted["expiry_date"] == "**/**"
    assert redacted["nested"]["cvv"] == MASK



def test_redact_utterance_masks_digit_runs():
    assert redact_utterance("my card is 4111 1111 1111 1111 and cvv 987") == (
        f"my card is {MASK} {MASK} {MASK} {MASK} and cvv {MASK}"
    )
    assert redact_utterance("size 10 please") == "size 10 please"
    assert redact_utterance("") == ""


# ---------------------------------------------------------------------------
# Queue capture
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_queue_capture_session_yields_started_then_results():
    source = QueueCaptureSource()
    source.push("  Go Home ")
    source.push("   ")
    assert source.pending() == 1

    session = source.open_session()
    session.start()
    events = session.events()
    first = await events.__anext__()
    second = await events.__anext__()
    assert first.kind.value == "started"
    assert second.text == "go home"
    session.close()
    await events.aclose()


def test_closed_session_cannot_start():
    session = QueueCaptureSource().open_session()
    session.close()
    with pytest.raises(CaptureUnavailable):
        session.start()
