"""
Primary intent classifier.

One classifier call per utterance picks the coarse category that selects the
interpreter pathway. The answer is validated against IntentCategory; a failed
call or an unrecognized tag routes to the general command fallback so the
dispatcher always has something to try.
"""
import logging

from storefront.utils.redact import redact_utterance
from .action_registry import IntentCategory, parse_category
from .gateway import ClassifierGateway
from .prompts import PRIMARY_INTENT_PROMPT

logger = logging.getLogger("voice_agent.classifier")


class PrimaryClassifier:
    def __init__(self, gateway: ClassifierGateway):
        self.gateway = gateway

    async def classify(self, utterance: str) -> IntentCategory:
        raw = await self.gateway.classify(PRIMARY_INTENT_PROMPT, utterance=utterance)
        category = parse_category(raw)
        logger.info(f"Primary intent for '{redact_utterance(utterance)[:60]}': {category.value} (raw={raw!r})")
        return category
