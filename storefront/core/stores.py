"""
State collaborators for the voice assistant.

The command pipeline never touches UI code directly. It talks to the
storefront through the small structural interfaces declared here: the filter
store, the persisted user profile, the navigation registry, the page-state
query, the product page and payment form controls, and the product catalog.

The in-memory implementations back the HTTP server, the demo script and the
tests. A browser or native front end plugs in its own objects with the same
methods.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional, Protocol, Sequence, Tuple

from pydantic import BaseModel

from storefront.data.products import FILTER_DIMENSIONS, PRODUCTS, Product
from storefront.utils.logger import get_logger

logger = get_logger("core.stores")


# ============================================================================
# Value types
# ============================================================================

@dataclass
class FilterSelection:
    """Filters applied to the product listing. Lists keep insertion order."""
    colors: List[str] = field(default_factory=list)
    sizes: List[str] = field(default_factory=list)
    materials: List[str] = field(default_factory=list)
    genders: List[str] = field(default_factory=list)
    brands: List[str] = field(default_factory=list)
    subCategories: List[str] = field(default_factory=list)
    price: Optional[Tuple[float, float]] = None

    def values(self, dimension: str) -> List[str]:
        return getattr(self, dimension)

    def is_empty(self) -> bool:
        return self.price is None and not any(self.values(d) for d in FILTER_DIMENSIONS)

    def copy(self) -> "FilterSelection":
        return FilterSelection(
            **{d: list(self.values(d)) for d in FILTER_DIMENSIONS},
            price=self.price,
        )

    def to_dict(self) -> Dict[str, object]:
        data: Dict[str, object] = {d: list(self.values(d)) for d in FILTER_DIMENSIONS}
        data["price"] = list(self.price) if self.price is not None else None
        return data


class UserProfile(BaseModel):
    """Contact and payment details captured for checkout."""
    name: Optional[str] = None
    email: Optional[str] = None
    address: Optional[str] = None
    phone: Optional[str] = None
    card_name: Optional[str] = None
    card_number: Optional[str] = None
    expiry_date: Optional[str] = None
    cvv: Optional[str] = None


PROFILE_FIELDS = tuple(UserProfile.model_fields.keys())


class Page(str, Enum):
    """Pages the assistant can be on; used for interpreter preconditions."""
    HOME = "home"
    CATEGORY = "category"
    PRODUCT = "product"
    CART = "cart"
    PAYMENT = "payment"
    CONFIRMATION = "confirmation"


class Route(str, Enum):
    """Named navigation destinations. Raw paths never leave the navigator."""
    GYM = "gym"
    YOGA = "yoga"
    RUNNING = "running"
    CART = "cart"
    PAYMENT = "payment"
    CONFIRMATION = "confirmation"
    BACK = "back"
    HOME = "home"
    PRODUCT = "product"


ROUTE_PATHS: Dict[Route, str] = {
    Route.GYM: "/products/gym",
    Route.YOGA: "/products/yoga",
    Route.RUNNING: "/products/jogging",
    Route.CART: "/cart",
    Route.PAYMENT: "/payment",
    Route.CONFIRMATION: "/confirmation",
    Route.HOME: "/",
}

ROUTE_PAGES: Dict[Route, Page] = {
    Route.GYM: Page.CATEGORY,
    Route.YOGA: Page.CATEGORY,
    Route.RUNNING: Page.CATEGORY,
    Route.CART: Page.CART,
    Route.PAYMENT: Page.PAYMENT,
    Route.CONFIRMATION: Page.CONFIRMATION,
    Route.HOME: Page.HOME,
    Route.PRODUCT: Page.PRODUCT,
}


# ============================================================================
# Collaborator interfaces
# ============================================================================

class FilterStore(Protocol):
    def snapshot(self) -> FilterSelection: ...

    def apply_merge(self, partial: FilterSelection) -> None: ...

    def remove_values(self, dimension: str, values: Sequence[str]) -> None: ...

    def remove_price_range(self) -> None: ...

    def clear_all(self) -> None: ...


class ProfileStore(Protocol):
    def read_snapshot(self) -> UserProfile: ...

    def merge_update(self, partial: Dict[str, str]) -> UserProfile: ...


class PageState(Protocol):
    @property
    def page(self) -> Page: ...

    @property
    def product_id(self) -> Optional[str]: ...


class Navigator(Protocol):
    def navigate(self, route: Route, product_id: Optional[str] = None) -> None: ...


class ProductPage(Protocol):
    def select_size(self, size: str) -> None: ...

    def set_quantity(self, quantity: int) -> None: ...

    def add_to_cart(self) -> None: ...


class PaymentForm(Protocol):
    def submit(self) -> bool: ...


class ProductCatalog(Protocol):
    def list_products(self) -> List[Product]: ...

    def get(self, product_id: str) -> Optional[Product]: ...


# ============================================================================
# In-memory implementations
# ============================================================================

class InMemoryFilterStore:
    """Filter selection held in process memory."""

    def __init__(self, initial: Optional[FilterSelection] = None):
        self._selection = initial.copy() if initial else FilterSelection()

    def snapshot(self) -> FilterSelection:
        return self._selection.copy()

    def apply_merge(self, partial: FilterSelection) -> None:
        """Union each dimension into the current selection; a price replaces the range."""
        for dimension in FILTER_DIMENSIONS:
            current = self._selection.values(dimension)
            for value in partial.values(dimension):
                if value not in current:
                    current.append(value)
        if partial.price is not None:
            self._selection.price = partial.price
        logger.info(f"Filters merged: {self._selection.to_dict()}")

    def remove_values(self, dimension: str, values: Sequence[str]) -> None:
        current = self._selection.values(dimension)
        current[:] = [v for v in current if v not in values]
        logger.info(f"Removed {list(values)} from {dimension}")

    def remove_price_range(self) -> None:
        self._selection.price = None
        logger.info("Price range removed")

    def clear_all(self) -> None:
        self._selection = FilterSelection()
        logger.info("All filters cleared")


class InMemoryProfileStore:
    """User profile held in process memory."""

    def __init__(self, initial: Optional[UserProfile] = None):
        self._profile = initial or UserProfile()

    def read_snapshot(self) -> UserProfile:
        return self._profile.model_copy()

    def merge_update(self, partial: Dict[str, str]) -> UserProfile:
        update = {k: v for k, v in partial.items() if k in PROFILE_FIELDS}
        self._profile = self._profile.model_copy(update=update)
        return self.read_snapshot()


def _default_path(page: Page, product_id: Optional[str]) -> str:
    if page == Page.PRODUCT and product_id:
        return f"/product/{product_id}"
    for route, route_page in ROUTE_PAGES.items():
        if route_page == page and route in ROUTE_PATHS:
            return ROUTE_PATHS[route]
    return "/"


class InMemoryNavigator:
    """
    Navigation registry plus page state.

    Keeps a history stack of visited routes so BACK returns to the previous
    page; BACK on an empty history stays put.
    """

    def __init__(self, start: Page = Page.HOME, product_id: Optional[str] = None):
        self._page = start
        self._product_id = product_id
        self._path = _default_path(start, product_id)
        self._history: List[Tuple[Page, Optional[str], str]] = []
        self.visited: List[str] = []

    @property
    def page(self) -> Page:
        return self._page

    @property
    def product_id(self) -> Optional[str]:
        return self._product_id

    @property
    def path(self) -> str:
        return self._path

    def navigate(self, route: Route, product_id: Optional[str] = None) -> None:
        if route == Route.BACK:
            if self._history:
                self._page, self._product_id, self._path = self._history.pop()
            self.visited.append(self.path)
            return
        self._history.append((self._page, self._product_id, self._path))
        self._page = ROUTE_PAGES[route]
        self._product_id = product_id if route == Route.PRODUCT else None
        self._path = ROUTE_PATHS.get(route) or _default_path(self._page, self._product_id)
        self.visited.append(self.path)
        logger.info(f"Navigated to {self.path}")


@dataclass
class CartLine:
    product_id: str
    size: Optional[str]
    quantity: int


class Cart:
    """Shopping cart line items."""

    def __init__(self):
        self.lines: List[CartLine] = []

    def add(self, product_id: str, size: Optional[str], quantity: int) -> None:
        for line in self.lines:
            if line.product_id == product_id and line.size == size:
                line.quantity += quantity
                return
        self.lines.append(CartLine(product_id=product_id, size=size, quantity=quantity))


class InMemoryProductPage:
    """Size/quantity controls of the product detail page currently shown."""

    def __init__(self, page_state: PageState, cart: Cart):
        self._page_state = page_state
        self._cart = cart
        self.size: Optional[str] = None
        self.quantity = 1

    def select_size(self, size: str) -> None:
        self.size = size

    def set_quantity(self, quantity: int) -> None:
        self.quantity = quantity

    def add_to_cart(self) -> None:
        product_id = self._page_state.product_id
        if product_id is None:
            return
        self._cart.add(product_id, self.size, self.quantity)
        logger.info(f"Added {self.quantity} x {product_id} (size={self.size}) to cart")


class InMemoryPaymentForm:
    """Payment page form. has_submit=False models a page without a submit control."""

    def __init__(self, has_submit: bool = True):
        self.has_submit = has_submit
        self.submitted = False

    def submit(self) -> bool:
        if not self.has_submit:
            return False
        self.submitted = True
        return True


class StaticCatalog:
    """Read-only catalog backed by the bundled product list."""

    def __init__(self, products: Optional[List[Product]] = None):
        self._products = list(products if products is not None else PRODUCTS)

    def list_products(self) -> List[Product]:
        return list(self._products)

    def get(self, product_id: str) -> Optional[Product]:
        return next((p for p in self._products if p.id == product_id), None)
