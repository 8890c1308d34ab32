"""Back/home navigation, category browsing and cart/checkout navigation."""
import logging
from typing import Literal

from pydantic import BaseModel, ValidationError

from storefront.core.stores import Route
from ..action_registry import CATEGORY_ROUTES
from ..errors import ParseFailure
from ..prompts import CART_PROMPT, CATEGORY_PROMPT, NAVIGATION_PROMPT
from .base import InterpretResult, Interpreter

logger = logging.getLogger("voice_agent.interpreters.navigation")


class NavigationAction(BaseModel):
    action: Literal["back", "home", "none"] = "none"


class CartAction(BaseModel):
    action: Literal["goToCart", "checkout", "none"] = "none"


class NavigationInterpreter(Interpreter):
    """Previous page / home page."""

    name = "navigation"

    async def interpret(self, utterance: str) -> InterpretResult:
        data = await self.gateway.classify_json(NAVIGATION_PROMPT, utterance=utterance)
        if isinstance(data, ParseFailure):
            return InterpretResult.not_handled("Navigation command not understood")
        try:
            action = NavigationAction.model_validate(data)
        except ValidationError:
            logger.warning(f"Unexpected navigation action: {data}")
            return InterpretResult.not_handled("Navigation command not understood")

        if action.action == "back":
            self.context.navigator.navigate(Route.BACK)
            return InterpretResult.done("Went back to the previous page")
        if action.action == "home":
            self.context.navigator.navigate(Route.HOME)
            return InterpretResult.done("Opened the home page")
        return InterpretResult.not_handled("No navigation target recognized")


class CategoryNavigationInterpreter(Interpreter):
    """Opens the gym, yoga or running listing."""

    name = "category_navigation"

    async def interpret(self, utterance: str) -> InterpretResult:
        raw = await self.gateway.classify(CATEGORY_PROMPT, utterance=utterance)
        route = CATEGORY_ROUTES.get(raw.strip().strip("`'\".").lower())
        if route is None:
            logger.info(f"No category recognized (raw={raw!r})")
            return InterpretResult.not_handled("No category recognized")
        self.context.navigator.navigate(route)
        return InterpretResult.done(f"Showing {route.value} products")


class CartInterpreter(Interpreter):
    """Shopping cart or checkout/payment page."""

    name = "cart"

    async def interpret(self, utterance: str) -> InterpretResult:
        data = await self.gateway.classify_json(CART_PROMPT, utterance=utterance)
        if isinstance(data, ParseFailure):
            return InterpretResult.not_handled("Cart command not understood")
        try:
            action = CartAction.model_validate(data)
        except ValidationError:
            logger.warning(f"Unexpected cart action: {data}")
            return InterpretResult.not_handled("Cart command not understood")

        if action.action == "goToCart":
            self.context.navigator.navigate(Route.CART)
            return InterpretResult.done("Opened your cart")
        if action.action == "checkout":
            self.context.navigator.navigate(Route.PAYMENT)
            return InterpretResult.done("Opened checkout")
        return InterpretResult.not_handled("No cart action recognized")
