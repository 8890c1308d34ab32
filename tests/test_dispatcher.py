"""
End-to-end dispatch scenarios: classification, routing, chaining and the
status/action-log side effects.

Uses mocks for OpenAI so tests run without an API key.
"""
import json
import logging
from unittest.mock import AsyncMock

import pytest

from storefront.core.capture import CaptureEvent, QueueCaptureSource
from storefront.core.events import STATUS
from storefront.core.listener import ListeningLoop
from storefront.core.state import AssistantState
from storefront.core.stores import FilterSelection, InMemoryProfileStore, Page, UserProfile
from voice_agent.action_registry import IntentCategory
from voice_agent.dispatcher import NOT_RECOGNIZED, CommandDispatcher, create_dispatcher
from voice_agent.interpreters import InterpretResult


def _awaits(llm):
    return llm.chat.completions.create.await_count


@pytest.fixture
def dispatcher(context, assistant_state):
    return create_dispatcher(context, assistant_state)


@pytest.mark.asyncio
async def test_category_navigation_chains_filter_step(dispatcher, context, llm, navigator):
    context.filters.apply_merge(FilterSelection(colors=["Black"]))
    llm.script("category_navigation", "yoga", "{}")

    outcome = await dispatcher.dispatch("show me yoga mats")

    assert outcome.category == IntentCategory.CATEGORY_NAVIGATION
    assert outcome.handled
    assert outcome.filter_status == "unknown"
    assert navigator.path == "/products/yoga"
    assert context.filters.snapshot().to_dict() == FilterSelection(colors=["Black"]).to_dict()
    assert _awaits(llm) == 3


@pytest.mark.asyncio
async def test_category_navigation_with_filters(dispatcher, context, llm, navigator):
    llm.script("category_navigation", "running", json.dumps({"colors": ["blue"], "price": [0, 80]}))

    outcome = await dispatcher.dispatch("running gear in blue under 80 dollars")

    assert outcome.filter_status == "filters_updated"
    assert navigator.path == "/products/jogging"
    selection = context.filters.snapshot()
    assert selection.colors == ["Blue"]
    assert selection.price == (0, 80)
    assert "Applied filters" in outcome.message


@pytest.mark.asyncio
async def test_clear_all_filters_makes_no_classifier_call(dispatcher, context, llm, assistant_state):
    context.filters.apply_merge(FilterSelection(brands=["Nike"], price=(10, 50)))

    outcome = await dispatcher.dispatch("clear all filters")

    assert outcome.handled
    assert outcome.category == IntentCategory.CLEAR_FILTERS
    assert context.filters.snapshot().is_empty()
    assert _awaits(llm) == 0
    assert assistant_state.recent()[-1].success


@pytest.mark.asyncio
async def test_place_order_on_payment_page_submits(payment_context, llm, assistant_state):
    payment_context.profile = InMemoryProfileStore(UserProfile(
        name="Ada Lovelace",
        email="ada@example.com",
        address="12 Analytical Way",
        card_number="4242424242424242",
        expiry_date="12/29",
        cvv="123",
    ))
    dispatcher = create_dispatcher(payment_context, assistant_state)
    llm.script("order_completion")

    outcome = await dispatcher.dispatch("place my order")

    assert outcome.handled
    assert payment_context.payment_form.submitted
    assert payment_context.navigator.page == Page.PAYMENT
    assert payment_context.navigator.visited == []


@pytest.mark.asyncio
async def test_unrecognized_category_falls_back_to_general(dispatcher, llm, navigator):
    llm.script("shopping_list", "goToCart")

    outcome = await dispatcher.dispatch("take me to my basket")

    assert outcome.category == IntentCategory.GENERAL_COMMAND
    assert outcome.handled
    assert navigator.page == Page.CART


@pytest.mark.asyncio
async def test_classifier_outage_is_unhandled(dispatcher, context, llm, assistant_state):
    llm.script(RuntimeError("connection reset"), RuntimeError("connection reset"))

    outcome = await dispatcher.dispatch("show me something nice")

    assert not outcome.handled
    assert outcome.category == IntentCategory.GENERAL_COMMAND
    assert not assistant_state.recent()[-1].success
    assert context.events.history(STATUS)[-1].data == {"message": NOT_RECOGNIZED, "success": False}


@pytest.mark.asyncio
async def test_one_status_per_dispatch(dispatcher, context, llm):
    llm.script("navigation", '{"action": "home"}')
    await dispatcher.dispatch("go home")
    statuses = context.events.history(STATUS)
    assert len(statuses) == 1
    assert statuses[0].data["success"] is True


@pytest.mark.asyncio
async def test_custom_interpreter_table(context, assistant_state):
    classifier = AsyncMock()
    classifier.classify.return_value = IntentCategory.CART
    cart = AsyncMock()
    cart.interpret.return_value = InterpretResult.done("Opened your cart")
    dispatcher = CommandDispatcher(
        context, assistant_state, classifier=classifier,
        interpreters={IntentCategory.CART: cart},
    )

    outcome = await dispatcher.dispatch("cart please")

    cart.interpret.assert_awaited_once_with("cart please")
    assert outcome.message == "Opened your cart"


@pytest.mark.asyncio
async def test_unparsable_filter_counts_as_failure_in_loop(context, llm, assistant_state, config):
    dispatcher = create_dispatcher(context, assistant_state)
    loop = ListeningLoop(dispatcher, QueueCaptureSource(), assistant_state, events=context.events, config=config)
    loop.start()
    llm.script("apply_filter", "colors: blue, definitely")

    await loop.handle_event(CaptureEvent.result("Blue Ones Please"))

    assert assistant_state.recovery_counter == 1
    entry = assistant_state.recent()[-1]
    assert not entry.success
    assert "blue ones please" in entry.description
    assert context.filters.snapshot().is_empty()
    loop.stop()


@pytest.mark.asyncio
async def test_create_dispatcher_shares_the_loop_state(context, llm):
    state = AssistantState(log_size=50)
    dispatcher = create_dispatcher(context, state)
    assert dispatcher.state is state

    await dispatcher.dispatch("clear all filters")

    assert len(state) == 1
    assert state.recent()[-1].success


@pytest.mark.asyncio
async def test_spoken_card_details_never_reach_logs_or_action_log(context, llm, assistant_state, config):
    records = []
    handler = logging.Handler(level=logging.DEBUG)
    handler.emit = lambda record: records.append(record.getMessage())
    loggers = [logging.getLogger("voice_agent"), logging.getLogger("storefront")]
    levels = [lg.level for lg in loggers]
    for lg in loggers:
        lg.addHandler(handler)
        lg.setLevel(logging.DEBUG)

    dispatcher = create_dispatcher(context, assistant_state)
    loop = ListeningLoop(dispatcher, QueueCaptureSource(), assistant_state, events=context.events, config=config)
    llm.script("user_info", json.dumps({"card_number": "4111 1111 1111 1111", "cvv": "987"}))
    try:
        loop.start()
        await loop.handle_event(CaptureEvent.result("my card number is 4111111111111111 cvv 987"))
        loop.stop()
    finally:
        for lg, level in zip(loggers, levels):
            lg.removeHandler(handler)
            lg.setLevel(level)

    assert any("Processing command" in r for r in records)
    written = records + [e.description for e in assistant_state.recent()]
    assert not any("4111" in line or "987" in line for line in written)
    profile = context.profile.read_snapshot()
    assert (profile.card_number, profile.cvv) == ("4111111111111111", "987")
