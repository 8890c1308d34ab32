"""
Classifier gateway: the only place the text-generation service is called.

Every interpreter goes through ClassifierGateway so the failure contract is
uniform:

- classify()      -> raw text, or UNKNOWN when the service fails
- classify_json() -> dict, or ParseFailure when the service fails or the
                     answer is not a JSON object

Transport errors are logged here and never reach callers.
"""
import json
import logging
import re
from typing import Any, Dict, Optional, Union

from openai import AsyncOpenAI

from storefront.core.config import get_config
from .errors import ParseFailure, TransportFailure

logger = logging.getLogger("voice_agent.gateway")

UNKNOWN = "unknown"

_FENCE_RE = re.compile(r"```(?:json|JSON)?")

StructuredResult = Union[Dict[str, Any], ParseFailure]


def strip_code_fences(text: str) -> str:
    """Remove markdown code fences (```json ... ```) around a model answer."""
    return _FENCE_RE.sub("", text or "").strip()


def parse_structured(raw: str) -> StructuredResult:
    """Parse a model answer into a JSON object, or describe why it failed."""
    cleaned = strip_code_fences(raw)
    if not cleaned:
        return ParseFailure(reason="empty response", raw=raw or "")
    try:
        parsed = json.loads(cleaned)
    except json.JSONDecodeError as e:
        # Some models wrap the object in a sentence; try the outermost braces
        start, end = cleaned.find("{"), cleaned.rfind("}")
        if start == -1 or end <= start:
            return ParseFailure(reason=f"invalid JSON: {e.msg}", raw=raw)
        try:
            parsed = json.loads(cleaned[start:end + 1])
        except json.JSONDecodeError as inner:
            return ParseFailure(reason=f"invalid JSON: {inner.msg}", raw=raw)
    if not isinstance(parsed, dict):
        return ParseFailure(reason=f"expected a JSON object, got {type(parsed).__name__}", raw=raw)
    return parsed


class ClassifierGateway:
    """Renders prompt templates and sends them to the chat completions API."""

    def __init__(
        self,
        client: Optional[AsyncOpenAI] = None,
        model: Optional[str] = None,
        temperature: Optional[float] = None,
        timeout: Optional[float] = None,
    ):
        config = get_config()
        self.model = model or config.model
        self.temperature = config.temperature if temperature is None else temperature
        self.timeout = timeout or config.request_timeout
        # Created lazily so a missing API key becomes a transport failure at
        # call time instead of preventing the assistant from starting.
        self._client = client

    @property
    def client(self) -> AsyncOpenAI:
        if self._client is None:
            # max_retries=0: a slow or failing call is reported once and the
            # listening loop moves on rather than stalling on retries.
            self._client = AsyncOpenAI(timeout=self.timeout, max_retries=0)
        return self._client

    @staticmethod
    def render(template: str, **substitutions: Any) -> str:
        return template.format(**substitutions)

    async def _complete(self, prompt: str) -> str:
        try:
            completion = await self.client.chat.completions.create(
                model=self.model,
                temperature=self.temperature,
                messages=[{"role": "user", "content": prompt}],
            )
            return (completion.choices[0].message.content or "").strip()
        except Exception as e:
            raise TransportFailure(str(e)) from e

    async def classify(self, template: str, **substitutions: Any) -> str:
        """Return the model's plain-text answer, or UNKNOWN on failure."""
        prompt = self.render(template, **substitutions)
        try:
            text = await self._complete(prompt)
        except TransportFailure as e:
            logger.error(f"Classifier call failed: {e}")
            return UNKNOWN
        return text or UNKNOWN

    async def classify_json(self, template: str, **substitutions: Any) -> StructuredResult:
        """Return the model's answer as a dict, or ParseFailure."""
        prompt = self.render(template, **substitutions)
        try:
            raw = await self._complete(prompt)
        except TransportFailure as e:
            logger.error(f"Classifier call failed: {e}")
            return ParseFailure(reason=f"transport failure: {e}")
        result = parse_structured(raw)
        if isinstance(result, ParseFailure):
            # Raw answers can echo card details back; only their shape is logged
            logger.warning(f"Unparsable classifier response ({result.reason}, {len(raw)} chars)")
        else:
            logger.debug(f"Structured response keys: {sorted(result)}")
        return result
