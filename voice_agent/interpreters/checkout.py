"""Order completion: submit the payment form or move the user to it."""
import logging
from typing import List

from storefront.core.stores import Page, Route, UserProfile
from .base import InterpretResult, Interpreter

logger = logging.getLogger("voice_agent.interpreters.checkout")

# Fields that must be present before an order may be submitted
REQUIRED_ORDER_FIELDS = ("card_number", "expiry_date", "cvv", "name", "email", "address")

FIELD_LABELS = {
    "name": "name",
    "email": "email",
    "address": "address",
    "phone": "phone number",
    "card_name": "name on card",
    "card_number": "card number",
    "expiry_date": "expiry date",
    "cvv": "CVV",
}


def missing_order_fields(profile: UserProfile) -> List[str]:
    return [f for f in REQUIRED_ORDER_FIELDS if not (getattr(profile, f) or "").strip()]


class OrderCompletionInterpreter(Interpreter):
    """
    "Place my order" and similar.

    Off the payment page the request becomes navigation to the payment page.
    On it, the order is submitted only when every required profile field is
    present; a page without a submit control falls back to opening the
    confirmation step directly. The category alone carries the intent, so
    no classifier call is made.
    """

    name = "order_completion"

    async def interpret(self, utterance: str) -> InterpretResult:
        if self.context.page_state.page != Page.PAYMENT:
            self.context.navigator.navigate(Route.PAYMENT)
            return InterpretResult.done("Opened the payment page to complete your order")

        missing = missing_order_fields(self.context.profile.read_snapshot())
        if missing:
            labels = ", ".join(FIELD_LABELS[f] for f in missing)
            logger.info(f"Order not submitted, missing fields: {missing}")
            return InterpretResult.not_handled(f"Cannot place the order yet. Missing: {labels}")

        if self.context.payment_form.submit():
            logger.info("Payment form submitted")
            return InterpretResult.done("Order placed")

        logger.info("No submit control on payment page, opening confirmation")
        self.context.navigator.navigate(Route.CONFIRMATION)
        return InterpretResult.done("Order placed")
