"""Capture contact and payment details spoken by the user."""
import logging
import re
from typing import Dict, List, Optional

from pydantic import BaseModel, ValidationError, field_validator

from storefront.core.events import PROFILE_UPDATED
from storefront.utils.redact import redact_sensitive_data
from ..errors import ParseFailure
from ..prompts import USER_INFO_PROMPT
from .base import InterpretResult, Interpreter
from .checkout import FIELD_LABELS

logger = logging.getLogger("voice_agent.interpreters.user_info")

DIGIT_FIELDS = ("card_number", "cvv")


class ExtractedUserInfo(BaseModel):
    """Profile fields the classifier found in the utterance. Unknown keys are ignored."""
    name: Optional[str] = None
    email: Optional[str] = None
    address: Optional[str] = None
    phone: Optional[str] = None
    card_name: Optional[str] = None
    card_number: Optional[str] = None
    expiry_date: Optional[str] = None
    cvv: Optional[str] = None

    @field_validator("*", mode="before")
    @classmethod
    def _to_text(cls, value):
        if value is None:
            return None
        text = str(value).strip()
        return text or None

    def provided(self) -> Dict[str, str]:
        values = self.model_dump(exclude_none=True)
        for key in DIGIT_FIELDS:
            if key in values:
                values[key] = re.sub(r"\D", "", values[key])
                if not values[key]:
                    del values[key]
        if "email" in values:
            values["email"] = values["email"].replace(" ", "").lower()
        return values


def summarize_changes(changed: List[str]) -> str:
    labels = [FIELD_LABELS.get(f, f) for f in changed]
    if len(labels) == 1:
        return f"Updated your {labels[0]}"
    return f"Updated your {', '.join(labels[:-1])} and {labels[-1]}"


class UserInfoInterpreter(Interpreter):
    """Merges only the stated fields into the stored profile."""

    name = "user_info"

    async def interpret(self, utterance: str) -> InterpretResult:
        data = await self.gateway.classify_json(USER_INFO_PROMPT, utterance=utterance)
        if isinstance(data, ParseFailure):
            return InterpretResult.not_handled("Could not capture your details")
        try:
            extracted = ExtractedUserInfo.model_validate(data)
        except ValidationError:
            logger.warning("Unexpected user info payload")
            return InterpretResult.not_handled("Could not capture your details")

        update = extracted.provided()
        if not update:
            return InterpretResult.not_handled("No personal details recognized")

        before = self.context.profile.read_snapshot()
        changed = [k for k, v in update.items() if getattr(before, k) != v]
        self.context.profile.merge_update(update)
        logger.info(f"Profile update: {redact_sensitive_data(update)}")

        if not changed:
            return InterpretResult.done("Your details are already up to date")

        summary = summarize_changes(changed)
        self.context.events.publish(PROFILE_UPDATED, {"summary": summary, "changed_fields": changed})
        return InterpretResult.done(summary)
