"""
Redaction helpers for logging user profile data.

Card numbers and CVVs must never reach a log line in clear text. Profile
dicts have those keys replaced by a mask and the expiry date shown as
"**/**"; other fields are logged as they are. Free text (spoken utterances)
has every run of three or more digits masked, which covers CVVs and card
numbers spoken whole or in groups of four.
"""
import re
from typing import Any, Dict

MASK = "[REDACTED]"

_DIGIT_RUN_RE = re.compile(r"\d{3,}")

# Keys whose values are always replaced by MASK
SECRET_KEYS = ("card_number", "cvv", "cardnumber", "credit_card", "token", "api_key", "secret")


def mask_value(key: str, value: Any) -> Any:
    """Return a log-safe rendering of a single profile value."""
    if value is None or value == "":
        return value
    key_lower = key.lower()
    if any(secret in key_lower for secret in SECRET_KEYS):
        return MASK
    if key_lower == "expiry_date":
        return "**/**"
    return value


def redact_sensitive_data(data: Dict[str, Any]) -> Dict[str, Any]:
    """
    Redact sensitive data from a dict for logging.
    Nested dicts and lists of dicts are redacted recursively.
    """
    redacted = {}
    for key, value in data.items():
        if isinstance(value, dict):
            redacted[key] = redact_sensitive_data(value)
        elif isinstance(value, list):
            redacted[key] = [
                redact_sensitive_data(item) if isinstance(item, dict) else item
                for item in value
            ]
        else:
            redacted[key] = mask_value(key, value)
    return redacted


def redact_utterance(text: str) -> str:
    """Mask digit runs in an utterance before it is logged or recorded."""
    return _DIGIT_RUN_RE.sub(MASK, text or "")
