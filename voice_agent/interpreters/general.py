"""Fallback interpreter for commands no specialised category claimed."""
import logging
from typing import Optional

from storefront.utils.redact import redact_utterance
from ..action_registry import describe_general_actions, get_general_action
from ..prompts import GENERAL_COMMAND_PROMPT
from .base import InterpretResult, Interpreter

logger = logging.getLogger("voice_agent.interpreters.general")

CLEAR_FILTER_PHRASES = (
    "clear filter",
    "reset filter",
    "remove filter",
    "clear all filter",
    "reset all filter",
    "remove all filter",
    "clear the filter",
    "start over",
)


def match_clear_phrase(utterance: str) -> Optional[str]:
    """Return the clear-filters phrase contained in the utterance, if any."""
    text = utterance.lower()
    return next((p for p in CLEAR_FILTER_PHRASES if p in text), None)


class GeneralCommandInterpreter(Interpreter):
    """
    Clear-filter phrases are matched directly and never cost a classifier
    call. Everything else asks the classifier to pick one function from the
    fixed action registry.
    """

    name = "general_command"

    async def interpret(self, utterance: str) -> InterpretResult:
        phrase = match_clear_phrase(utterance)
        if phrase:
            logger.info(f"Direct match for clear filters detected ('{phrase}')")
            self.context.filters.clear_all()
            return InterpretResult.done("All filters cleared")

        answer = await self.gateway.classify(
            GENERAL_COMMAND_PROMPT,
            utterance=utterance,
            functions=describe_general_actions(),
        )
        action = get_general_action(answer)
        if action is None:
            logger.info(f"Unknown command: {redact_utterance(utterance)} (classifier answered {answer!r})")
            return InterpretResult.not_handled("Sorry, I didn't understand that command")

        if action.clears_filters:
            self.context.filters.clear_all()
            return InterpretResult.done("All filters cleared")

        self.context.navigator.navigate(action.route)
        logger.info(f"Interpreted action: {action.name} -> {action.route.value}")
        return InterpretResult.done(f"Opened {action.route.value}")
