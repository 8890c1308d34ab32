"""
Shared plumbing for intent interpreters.

Each interpreter turns one utterance into at most one classifier call, a
normalization pass and one state mutation. Interpreters fail closed: a
classifier or parse failure is reported as not handled and nothing is
mutated.
"""
from dataclasses import dataclass, field
from typing import Optional

from storefront.core.config import VoiceConfig, get_config
from storefront.core.events import EventBus
from storefront.core.stores import (
    Cart,
    FilterStore,
    InMemoryFilterStore,
    InMemoryNavigator,
    InMemoryPaymentForm,
    InMemoryProductPage,
    InMemoryProfileStore,
    Navigator,
    PageState,
    PaymentForm,
    ProductCatalog,
    ProductPage,
    ProfileStore,
    StaticCatalog,
)
from ..gateway import ClassifierGateway
from ..normalizer import ValueNormalizer

FILTERS_UPDATED = "filters_updated"
UNKNOWN = "unknown"


@dataclass
class InterpretResult:
    """
    Outcome of one interpreter run.

    handled is the boolean the dispatcher aggregates; message is the status
    line shown to the user. Filter interpreters also set status to
    "filters_updated" or "unknown".
    """
    handled: bool
    message: str
    status: Optional[str] = None

    def __bool__(self) -> bool:
        return self.handled

    @classmethod
    def done(cls, message: str, status: Optional[str] = None) -> "InterpretResult":
        return cls(handled=True, message=message, status=status)

    @classmethod
    def not_handled(cls, message: str, status: Optional[str] = None) -> "InterpretResult":
        return cls(handled=False, message=message, status=status)


@dataclass
class InterpreterContext:
    """Collaborators shared by every interpreter."""
    gateway: ClassifierGateway
    filters: FilterStore
    profile: ProfileStore
    navigator: Navigator
    page_state: PageState
    product_page: ProductPage
    payment_form: PaymentForm
    catalog: ProductCatalog
    events: EventBus = field(default_factory=EventBus)
    normalizer: ValueNormalizer = field(default_factory=ValueNormalizer)
    config: VoiceConfig = field(default_factory=get_config)

    @classmethod
    def in_memory(cls, gateway: Optional[ClassifierGateway] = None, **overrides) -> "InterpreterContext":
        """Context wired to the in-memory storefront (server, demo script, tests)."""
        navigator = overrides.pop("navigator", None) or InMemoryNavigator()
        cart = overrides.pop("cart", None) or Cart()
        values = dict(
            gateway=gateway or ClassifierGateway(),
            filters=InMemoryFilterStore(),
            profile=InMemoryProfileStore(),
            navigator=navigator,
            page_state=navigator,
            product_page=InMemoryProductPage(navigator, cart),
            payment_form=InMemoryPaymentForm(),
            catalog=StaticCatalog(),
        )
        values.update(overrides)
        return cls(**values)


class Interpreter:
    """Base class: subclasses implement interpret()."""

    name = "interpreter"

    def __init__(self, context: InterpreterContext):
        self.context = context

    @property
    def gateway(self) -> ClassifierGateway:
        return self.context.gateway

    async def interpret(self, utterance: str) -> InterpretResult:
        raise NotImplementedError
