"""
Intent and action registry for the voice assistant.

Defines the closed set of intent categories the primary classifier may
return, and the fixed registry of named functions the fallback interpreter
chooses from. Classifier output is validated against these tables; nothing
downstream switches on a raw model string.
"""
import re
from enum import Enum
from typing import Dict, List, Optional

from pydantic import BaseModel, Field

from storefront.core.stores import Route


class IntentCategory(str, Enum):
    """Coarse intent category for a single utterance."""
    NAVIGATION = "navigation"
    ORDER_COMPLETION = "order_completion"
    USER_INFO = "user_info"
    CART = "cart"
    PRODUCT_ACTION = "product_action"
    PRODUCT_NAVIGATION = "product_navigation"
    REMOVE_FILTER = "remove_filter"
    CATEGORY_NAVIGATION = "category_navigation"
    APPLY_FILTER = "apply_filter"
    CLEAR_FILTERS = "clear_filters"
    GENERAL_COMMAND = "general_command"


FALLBACK_CATEGORY = IntentCategory.GENERAL_COMMAND

_CATEGORY_BY_VALUE = {c.value: c for c in IntentCategory}


def parse_category(raw: Optional[str]) -> IntentCategory:
    """
    Map classifier text to a category.

    Tolerates quotes, trailing punctuation, surrounding prose on a single
    line and hyphen/space variants ("order-completion"). Anything
    unrecognized maps to the fallback category.
    """
    if not raw:
        return FALLBACK_CATEGORY
    text = raw.strip().lower()
    token = re.sub(r"[\s\-]+", "_", text.strip("`'\". "))
    if token in _CATEGORY_BY_VALUE:
        return _CATEGORY_BY_VALUE[token]
    # Model added words around the tag ("Category: cart")
    for word in re.findall(r"[a-z_]+", text.replace("-", "_")):
        if word in _CATEGORY_BY_VALUE:
            return _CATEGORY_BY_VALUE[word]
    return FALLBACK_CATEGORY


class GeneralAction(BaseModel):
    """A function the fallback interpreter may select."""
    name: str = Field(..., description="Function name the classifier must return verbatim")
    description: str = Field(..., description="Description shown to the classifier")
    route: Optional[Route] = Field(default=None, description="Navigation target, if the action navigates")
    clears_filters: bool = Field(default=False, description="Action clears every applied filter")


GENERAL_ACTIONS: List[GeneralAction] = [
    GeneralAction(
        name="showGymClothes",
        description="Execute this function if the user is interested in gym clothes or any related activities or equipment associated with the gym only.",
        route=Route.GYM,
    ),
    GeneralAction(
        name="showYogaEquipment",
        description="Execute this function if the user is interested in any yoga activities or asks about yoga in general.",
        route=Route.YOGA,
    ),
    GeneralAction(
        name="showRunningGear",
        description="Execute this function if the user is interested in running, jogging, or any running-related activities or equipment",
        route=Route.RUNNING,
    ),
    GeneralAction(
        name="goToCart",
        description="Navigate to shopping cart",
        route=Route.CART,
    ),
    GeneralAction(
        name="checkout",
        description="Start checkout process",
        route=Route.PAYMENT,
    ),
    GeneralAction(
        name="clearFilters",
        description="Clear all applied filters on the product listing page",
        clears_filters=True,
    ),
]

GENERAL_ACTION_REGISTRY: Dict[str, GeneralAction] = {a.name.lower(): a for a in GENERAL_ACTIONS}


def get_general_action(name: Optional[str]) -> Optional[GeneralAction]:
    """Look up a registry action by the classifier's answer (case-insensitive)."""
    if not name:
        return None
    return GENERAL_ACTION_REGISTRY.get(name.strip().strip("`'\".").lower())


def describe_general_actions() -> str:
    return "\n".join(f"- {a.name}: {a.description}" for a in GENERAL_ACTIONS)


# Category keyword → route for category navigation
CATEGORY_ROUTES: Dict[str, Route] = {
    "gym": Route.GYM,
    "yoga": Route.YOGA,
    "running": Route.RUNNING,
    "jogging": Route.RUNNING,
}
