"""
Unit tests for the per-intent interpreters.

Uses mocks for OpenAI so tests run without an API key.
"""
import json
import logging

import pytest

from storefront.core.events import PROFILE_UPDATED
from storefront.core.stores import (
    FilterSelection,
    InMemoryNavigator,
    InMemoryPaymentForm,
    InMemoryProfileStore,
    Page,
    Route,
    UserProfile,
)
from storefront.data.products import PRODUCTS
from voice_agent.interpreters import InterpreterContext
from voice_agent.interpreters.checkout import OrderCompletionInterpreter, missing_order_fields
from voice_agent.interpreters.general import GeneralCommandInterpreter, match_clear_phrase
from voice_agent.interpreters.navigation import (
    CartInterpreter,
    CategoryNavigationInterpreter,
    NavigationInterpreter,
)
from voice_agent.interpreters.product import (
    ProductActionInterpreter,
    ProductNavigationInterpreter,
    match_product,
)
from voice_agent.interpreters.user_info import UserInfoInterpreter


COMPLETE_PROFILE = UserProfile(
    name="Ada Lovelace",
    email="ada@example.com",
    address="12 Analytical Way",
    card_number="4242424242424242",
    expiry_date="12/29",
    cvv="123",
)


def _awaits(llm):
    return llm.chat.completions.create.await_count


# ---------------------------------------------------------------------------
# Navigation
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_navigation_back_and_home(context, llm, navigator):
    llm.script('{"action": "home"}', '{"action": "back"}')
    navigator.navigate(Route.CART)

    assert await NavigationInterpreter(context).interpret("take me home")
    assert navigator.page == Page.HOME
    assert await NavigationInterpreter(context).interpret("go back")
    assert navigator.page == Page.CART


@pytest.mark.asyncio
async def test_navigation_unknown_tag_is_not_handled(context, llm, navigator):
    llm.script('{"action": "teleport"}')
    result = await NavigationInterpreter(context).interpret("beam me up")
    assert not result.handled
    assert navigator.visited == []


@pytest.mark.asyncio
async def test_category_navigation(context, llm, navigator):
    llm.script("yoga")
    result = await CategoryNavigationInterpreter(context).interpret("show me yoga mats")
    assert result.handled
    assert navigator.path == "/products/yoga"


@pytest.mark.asyncio
async def test_category_navigation_none(context, llm, navigator):
    llm.script("none")
    assert not await CategoryNavigationInterpreter(context).interpret("what's the weather")
    assert navigator.visited == []


@pytest.mark.asyncio
async def test_cart_interpreter(context, llm, navigator):
    llm.script('{"action": "goToCart"}', '{"action": "checkout", "extra": 1}')
    assert await CartInterpreter(context).interpret("open my cart")
    assert navigator.page == Page.CART
    assert await CartInterpreter(context).interpret("let's check out")
    assert navigator.page == Page.PAYMENT


# ---------------------------------------------------------------------------
# Products
# ---------------------------------------------------------------------------

def test_match_product_strategies():
    assert match_product("pro yoga mat", PRODUCTS).id == "yoga-001"          # exact
    assert match_product("ghost", PRODUCTS).id == "run-002"                  # substring
    assert match_product("the windrunner please", PRODUCTS).id == "run-003"  # keyword
    assert match_product("spaceship", PRODUCTS) is None
    assert match_product("  ", PRODUCTS) is None


@pytest.mark.asyncio
async def test_product_navigation(context, llm, navigator):
    llm.script('{"product": "Travel Yoga Mat"}')
    result = await ProductNavigationInterpreter(context).interpret("open the travel yoga mat")
    assert result.handled
    assert navigator.page == Page.PRODUCT
    assert navigator.product_id == "yoga-005"


@pytest.mark.asyncio
async def test_product_navigation_no_match(context, llm, navigator):
    llm.script('{"product": "flux capacitor"}')
    assert not await ProductNavigationInterpreter(context).interpret("open the flux capacitor")
    assert navigator.visited == []


@pytest.mark.asyncio
async def test_product_action_requires_product_page(context, llm):
    result = await ProductActionInterpreter(context).interpret("add to cart")
    assert not result.handled
    assert _awaits(llm) == 0


@pytest.fixture
def product_context(gateway, config):
    return InterpreterContext.in_memory(
        gateway=gateway,
        navigator=InMemoryNavigator(start=Page.PRODUCT, product_id="gym-003"),
        config=config,
    )


@pytest.mark.asyncio
async def test_product_action_size_quantity_add(product_context, llm):
    llm.script(
        '{"action": "size", "size": "xl"}',
        '{"action": "quantity", "quantity": "2"}',
        '{"action": "addToCart"}',
    )
    interpreter = ProductActionInterpreter(product_context)

    assert (await interpreter.interpret("extra large")).message == "Selected size XL"
    assert await interpreter.interpret("two of them")
    assert await interpreter.interpret("add it to my cart")

    page = product_context.product_page
    assert page.size == "XL"
    assert page.quantity == 2
    line = page._cart.lines[0]
    assert (line.product_id, line.size, line.quantity) == ("gym-003", "XL", 2)


@pytest.mark.asyncio
async def test_product_action_rejects_unavailable_size(product_context, llm):
    llm.script('{"action": "size", "size": "xs"}')
    result = await ProductActionInterpreter(product_context).interpret("extra small")
    assert not result.handled
    assert product_context.product_page.size is None


@pytest.mark.asyncio
async def test_product_action_rejects_bad_quantity(product_context, llm):
    llm.script('{"action": "quantity", "quantity": 0}')
    assert not await ProductActionInterpreter(product_context).interpret("zero")
    assert product_context.product_page.quantity == 1


# ---------------------------------------------------------------------------
# Order completion
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_order_completion_off_payment_page_navigates(context, llm, navigator):
    result = await OrderCompletionInterpreter(context).interpret("place my order")
    assert result.handled
    assert navigator.page == Page.PAYMENT
    assert _awaits(llm) == 0


@pytest.mark.asyncio
async def test_order_completion_submits_with_complete_profile(payment_context):
    payment_context.profile = InMemoryProfileStore(COMPLETE_PROFILE)
    result = await OrderCompletionInterpreter(payment_context).interpret("place my order")
    assert result.handled
    assert payment_context.payment_form.submitted
    assert payment_context.navigator.visited == []


@pytest.mark.asyncio
async def test_order_completion_missing_fields(payment_context):
    payment_context.profile = InMemoryProfileStore(COMPLETE_PROFILE.model_copy(update={"cvv": None}))
    result = await OrderCompletionInterpreter(payment_context).interpret("complete the order")
    assert not result.handled
    assert "CVV" in result.message
    assert not payment_context.payment_form.submitted


@pytest.mark.asyncio
async def test_order_completion_without_submit_control_opens_confirmation(payment_context):
    payment_context.profile = InMemoryProfileStore(COMPLETE_PROFILE)
    payment_context.payment_form = InMemoryPaymentForm(has_submit=False)
    result = await OrderCompletionInterpreter(payment_context).interpret("finish")
    assert result.handled
    assert payment_context.navigator.page == Page.CONFIRMATION


def test_missing_order_fields():
    assert missing_order_fields(COMPLETE_PROFILE) == []
    assert missing_order_fields(UserProfile(name="A", email="  ")) == [
        "card_number", "expiry_date", "cvv", "email", "address",
    ]


# ---------------------------------------------------------------------------
# User info
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_user_info_merges_only_stated_fields(context, llm):
    context.profile = InMemoryProfileStore(UserProfile(name="Ada", address="12 Analytical Way"))
    received = []
    context.events.subscribe(PROFILE_UPDATED, received.append)
    llm.script(json.dumps({"email": "ADA @example.com", "card_number": "4242 4242 4242 4242", "unrelated": "x"}))

    result = await UserInfoInterpreter(context).interpret("my email is ada at example dot com")

    profile = context.profile.read_snapshot()
    assert result.handled
    assert profile.name == "Ada"
    assert profile.address == "12 Analytical Way"
    assert profile.email == "ada@example.com"
    assert profile.card_number == "4242424242424242"
    assert received[0].data["changed_fields"] == ["email", "card_number"]
    assert received[0].data["summary"] == "Updated your email and card number"


@pytest.mark.asyncio
async def test_user_info_never_logs_card_details(context, llm):
    records = []
    handler = logging.Handler(level=logging.DEBUG)
    handler.emit = lambda record: records.append(record.getMessage())
    agent_logger = logging.getLogger("voice_agent")
    previous_level = agent_logger.level
    agent_logger.addHandler(handler)
    agent_logger.setLevel(logging.DEBUG)
    try:
        llm.script(json.dumps({"card_number": "4111111111111111", "cvv": "987"}))
        await UserInfoInterpreter(context).interpret("card four one one one")
    finally:
        agent_logger.removeHandler(handler)
        agent_logger.setLevel(previous_level)

    assert records
    assert not any("4111111111111111" in r or "987" in r for r in records)
    assert context.profile.read_snapshot().cvv == "987"


@pytest.mark.asyncio
async def test_user_info_empty_answer_leaves_profile(context, llm):
    before = context.profile.read_snapshot()
    llm.script("{}")
    result = await UserInfoInterpreter(context).interpret("hmm")
    assert not result.handled
    assert context.profile.read_snapshot() == before


# ---------------------------------------------------------------------------
# General fallback
# ---------------------------------------------------------------------------

def test_match_clear_phrase():
    assert match_clear_phrase("please clear all filters") == "clear all filter"
    assert match_clear_phrase("let's start over") == "start over"
    assert match_clear_phrase("show me shoes") is None


@pytest.mark.asyncio
async def test_general_fast_path_skips_classifier(context, llm):
    context.filters.apply_merge(FilterSelection(colors=["Red"]))
    result = await GeneralCommandInterpreter(context).interpret("reset filters now")
    assert result.handled
    assert context.filters.snapshot().is_empty()
    assert _awaits(llm) == 0


@pytest.mark.asyncio
async def test_general_function_selection(context, llm, navigator):
    llm.script("showRunningGear")
    result = await GeneralCommandInterpreter(context).interpret("i want to go jogging")
    assert result.handled
    assert navigator.path == "/products/jogging"


@pytest.mark.asyncio
async def test_general_unknown_function(context, llm, navigator):
    llm.script("unknown")
    result = await GeneralCommandInterpreter(context).interpret("sing me a song")
    assert not result.handled
    assert navigator.visited == []
