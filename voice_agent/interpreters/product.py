"""Product detail navigation and actions on the product page."""
import logging
import re
from typing import List, Literal, Optional

from pydantic import BaseModel, ValidationError

from storefront.core.stores import Page, Route
from storefront.data.products import Product
from ..errors import ParseFailure
from ..prompts import PRODUCT_ACTION_PROMPT, PRODUCT_NAVIGATION_PROMPT
from .base import InterpretResult, Interpreter

logger = logging.getLogger("voice_agent.interpreters.product")

MAX_QUANTITY = 99


class ProductAction(BaseModel):
    action: Literal["size", "quantity", "addToCart", "none"] = "none"
    size: Optional[str] = None
    quantity: Optional[int] = None


class ProductReference(BaseModel):
    product: Optional[str] = None


def match_product(reference: str, products: List[Product]) -> Optional[Product]:
    """
    Resolve a spoken product reference against the catalog.

    Tried in order, first hit wins:
    1. exact name (case-insensitive)
    2. substring containment in either direction
    3. any catalog name word longer than 3 characters appears in the reference
    """
    ref = reference.strip().lower()
    if not ref:
        return None

    for product in products:
        if product.name.lower() == ref:
            return product

    for product in products:
        name = product.name.lower()
        if ref in name or name in ref:
            return product

    ref_words = set(re.findall(r"[a-z0-9\-]+", ref))
    for product in products:
        keywords = [w for w in re.findall(r"[a-z0-9\-]+", product.name.lower()) if len(w) > 3]
        if any(w in ref_words for w in keywords):
            return product
    return None


class ProductNavigationInterpreter(Interpreter):
    """Opens the detail page of a named product."""

    name = "product_navigation"

    async def interpret(self, utterance: str) -> InterpretResult:
        products = self.context.catalog.list_products()
        data = await self.gateway.classify_json(
            PRODUCT_NAVIGATION_PROMPT,
            utterance=utterance,
            product_names="\n".join(f"- {p.name}" for p in products),
        )
        if isinstance(data, ParseFailure):
            return InterpretResult.not_handled("Product not understood")
        try:
            reference = ProductReference.model_validate(data)
        except ValidationError:
            return InterpretResult.not_handled("Product not understood")
        if not reference.product:
            return InterpretResult.not_handled("No product mentioned")

        product = match_product(reference.product, products)
        if product is None:
            logger.info(f"No catalog match for '{reference.product}'")
            return InterpretResult.not_handled(f"Could not find a product called {reference.product}")

        self.context.navigator.navigate(Route.PRODUCT, product_id=product.id)
        return InterpretResult.done(f"Opened {product.name}")


class ProductActionInterpreter(Interpreter):
    """Size, quantity and add-to-cart on the current product page."""

    name = "product_action"

    async def interpret(self, utterance: str) -> InterpretResult:
        page_state = self.context.page_state
        if page_state.page != Page.PRODUCT or not page_state.product_id:
            return InterpretResult.not_handled("Open a product first to choose a size or add it to the cart")
        product = self.context.catalog.get(page_state.product_id)
        if product is None:
            logger.warning(f"Product page shows unknown product {page_state.product_id}")
            return InterpretResult.not_handled("This product is not available")

        data = await self.gateway.classify_json(
            PRODUCT_ACTION_PROMPT,
            utterance=utterance,
            product_name=product.name,
            sizes=", ".join(product.sizes) or "none",
        )
        if isinstance(data, ParseFailure):
            return InterpretResult.not_handled("Product command not understood")
        try:
            action = ProductAction.model_validate(data)
        except ValidationError:
            logger.warning(f"Unexpected product action: {data}")
            return InterpretResult.not_handled("Product command not understood")

        page = self.context.product_page
        if action.action == "size":
            size = self._resolve_size(action.size, product)
            if size is None:
                if not action.size:
                    return InterpretResult.not_handled("No size recognized")
                return InterpretResult.not_handled(f"Size {action.size} is not available")
            page.select_size(size)
            return InterpretResult.done(f"Selected size {size}")
        if action.action == "quantity":
            if action.quantity is None or not 1 <= action.quantity <= MAX_QUANTITY:
                return InterpretResult.not_handled("Quantity not understood")
            page.set_quantity(action.quantity)
            return InterpretResult.done(f"Quantity set to {action.quantity}")
        if action.action == "addToCart":
            page.add_to_cart()
            return InterpretResult.done(f"Added {product.name} to your cart")
        return InterpretResult.not_handled("No product action recognized")

    def _resolve_size(self, raw: Optional[str], product: Product) -> Optional[str]:
        if not raw:
            return None
        size = self.context.normalizer.normalize("sizes", raw)
        offered = {s.lower(): s for s in product.sizes}
        return offered.get(size.strip().lower())
