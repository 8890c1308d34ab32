"""
Command dispatcher: one utterance in, one outcome out.

Responsibilities:
1. Clear-filter fast path (deterministic phrases skip the classifier)
2. Primary intent classification
3. Routing to the interpreter for that category; category navigation is
   chained into filter interpretation on the same utterance
4. Recording the outcome in the action log and publishing one status update

The dispatcher never guesses: if the selected pathway does not handle the
utterance, no state is touched and the outcome is recorded as unhandled.
"""
import logging
from dataclasses import dataclass
from typing import Dict, Optional

from storefront.core.state import AssistantState
from storefront.utils.redact import redact_utterance
from .action_registry import IntentCategory
from .classifier import PrimaryClassifier
from .interpreters import (
    CartInterpreter,
    CategoryNavigationInterpreter,
    ClearFiltersInterpreter,
    FilterInterpreter,
    FilterRemovalInterpreter,
    GeneralCommandInterpreter,
    Interpreter,
    InterpreterContext,
    InterpretResult,
    NavigationInterpreter,
    OrderCompletionInterpreter,
    ProductActionInterpreter,
    ProductNavigationInterpreter,
    UserInfoInterpreter,
)
from .interpreters.general import match_clear_phrase

logger = logging.getLogger("voice_agent.dispatcher")

NOT_RECOGNIZED = "Sorry, I didn't understand that command"


@dataclass
class DispatchOutcome:
    """What happened to one utterance."""
    utterance: str
    category: IntentCategory
    handled: bool
    message: str
    filter_status: Optional[str] = None


class CommandDispatcher:
    def __init__(
        self,
        context: InterpreterContext,
        state: AssistantState,
        classifier: Optional[PrimaryClassifier] = None,
        interpreters: Optional[Dict[IntentCategory, Interpreter]] = None,
    ):
        self.context = context
        self.state = state
        self.classifier = classifier if classifier is not None else PrimaryClassifier(context.gateway)
        self.interpreters = interpreters if interpreters is not None else build_interpreters(context)

    async def dispatch(self, utterance: str) -> DispatchOutcome:
        if match_clear_phrase(utterance):
            category = IntentCategory.CLEAR_FILTERS
        else:
            category = await self.classifier.classify(utterance)

        result = await self.interpreters[category].interpret(utterance)
        outcome = DispatchOutcome(
            utterance=utterance,
            category=category,
            handled=result.handled,
            message=result.message,
            filter_status=result.status,
        )

        if category == IntentCategory.CATEGORY_NAVIGATION and result.handled:
            # "yoga mats under fifty dollars in blue" both navigates and filters
            filter_result = await self.interpreters[IntentCategory.APPLY_FILTER].interpret(utterance)
            outcome.filter_status = filter_result.status
            if filter_result.handled:
                outcome.message = f"{result.message}. {filter_result.message}"

        self._record(outcome)
        return outcome

    def _record(self, outcome: DispatchOutcome) -> None:
        description = redact_utterance(f"[{outcome.category.value}] '{outcome.utterance}': {outcome.message}")
        self.state.record(description, success=outcome.handled)
        if outcome.handled:
            logger.info(f"Command handled {description}")
            self.context.events.status(outcome.message, success=True)
        else:
            logger.info(f"Command not handled {description}")
            self.context.events.status(outcome.message or NOT_RECOGNIZED, success=False)


def build_interpreters(context: InterpreterContext) -> Dict[IntentCategory, Interpreter]:
    """One interpreter per category."""
    return {
        IntentCategory.NAVIGATION: NavigationInterpreter(context),
        IntentCategory.ORDER_COMPLETION: OrderCompletionInterpreter(context),
        IntentCategory.USER_INFO: UserInfoInterpreter(context),
        IntentCategory.CART: CartInterpreter(context),
        IntentCategory.PRODUCT_ACTION: ProductActionInterpreter(context),
        IntentCategory.PRODUCT_NAVIGATION: ProductNavigationInterpreter(context),
        IntentCategory.REMOVE_FILTER: FilterRemovalInterpreter(context),
        IntentCategory.CATEGORY_NAVIGATION: CategoryNavigationInterpreter(context),
        IntentCategory.APPLY_FILTER: FilterInterpreter(context),
        IntentCategory.CLEAR_FILTERS: ClearFiltersInterpreter(context),
        IntentCategory.GENERAL_COMMAND: GeneralCommandInterpreter(context),
    }


def create_dispatcher(context: InterpreterContext, state: Optional[AssistantState] = None) -> CommandDispatcher:
    """Factory wiring a dispatcher with the default classifier and interpreters."""
    # AssistantState defines __len__, so a fresh one is falsy
    if state is None:
        state = AssistantState(log_size=context.config.action_log_size)
    return CommandDispatcher(context, state)
