"""
LLM-based filter interpretation for the product listing.

Three pathways share the filter store:

- FilterInterpreter adds spoken filters to the current selection
  ("blue or black leggings under fifty dollars")
- FilterRemovalInterpreter subtracts named values, or the whole price range
  ("drop the nike filter", "remove the price limit")
- ClearFiltersInterpreter resets everything without a classifier call

Every value coming back from the classifier is normalized to the catalog's
own spelling before it is applied or matched.

Example:
  Command:   "show me medium under armour shorts up to 40 dollars"
  Response:  {"sizes": ["m"], "brands": ["under armour"], "subCategories": ["shorts"], "price": [0, 40]}
  Applied:   sizes=["M"], brands=["Under Armour"], subCategories=["Shorts"], price=(0, 40)
"""
from __future__ import annotations

import logging
import math
from typing import Any, Dict, List, Optional, Tuple

from pydantic import BaseModel, Field, field_validator

from storefront.core.stores import FilterSelection
from storefront.data.products import FILTER_DIMENSIONS, FILTER_OPTIONS
from ..errors import ParseFailure
from ..prompts import FILTER_PROMPT, FILTER_REMOVAL_PROMPT
from .base import FILTERS_UPDATED, UNKNOWN, InterpretResult, Interpreter

logger = logging.getLogger("voice_agent.interpreters.filters")


# ---------------------------------------------------------------------------
# Output schema
# ---------------------------------------------------------------------------

def _as_list(value: Any) -> List[Any]:
    if value is None:
        return []
    if not isinstance(value, (list, tuple)):
        # A single bare value ("colors": "blue")
        value = [value]
    # Only scalars can be filter values; nested objects are classifier noise
    return [v for v in value if isinstance(v, (str, int, float))]


class FilterPayload(BaseModel):
    """Filter lists returned by the classifier. Missing keys are empty."""
    colors: List[Any] = Field(default_factory=list)
    sizes: List[Any] = Field(default_factory=list)
    materials: List[Any] = Field(default_factory=list)
    genders: List[Any] = Field(default_factory=list)
    brands: List[Any] = Field(default_factory=list)
    subCategories: List[Any] = Field(default_factory=list)

    @field_validator(*FILTER_DIMENSIONS, mode="before")
    @classmethod
    def _listify(cls, value):
        return _as_list(value)


class FilterRemovalPayload(FilterPayload):
    removePrice: bool = False

    @field_validator("removePrice", mode="before")
    @classmethod
    def _truthy(cls, value):
        if isinstance(value, str):
            return value.strip().lower() in ("true", "yes", "1")
        return bool(value)


def coerce_price(value: Any, floor: float, ceiling: float) -> Optional[Tuple[float, float]]:
    """
    Turn a classifier price answer into an ordered (min, max) pair clamped to
    the listing's price range. Anything that is not two numbers is dropped.
    """
    if not isinstance(value, (list, tuple)) or len(value) != 2:
        return None
    try:
        low, high = (float(v) for v in value)
    except (TypeError, ValueError):
        return None
    if not (math.isfinite(low) and math.isfinite(high)):
        return None
    low, high = sorted((low, high))
    low = min(max(low, floor), ceiling)
    high = min(max(high, floor), ceiling)
    return low, high


def _parse_payload(model, data: Dict[str, Any]):
    try:
        return model.model_validate(data)
    except ValueError as e:
        logger.warning(f"Filter payload rejected: {e}")
        return None


# ---------------------------------------------------------------------------
# Interpreters
# ---------------------------------------------------------------------------

class FilterInterpreter(Interpreter):
    """Adds spoken filters to the existing selection."""

    name = "apply_filter"

    async def interpret(self, utterance: str) -> InterpretResult:
        config = self.context.config
        data = await self.gateway.classify_json(
            FILTER_PROMPT,
            utterance=utterance,
            price_floor=config.price_floor,
            price_ceiling=config.price_ceiling,
            **{d: ", ".join(values) for d, values in FILTER_OPTIONS.items()},
        )
        if isinstance(data, ParseFailure):
            return InterpretResult.not_handled("Filter command not understood", status=UNKNOWN)

        payload = _parse_payload(FilterPayload, data)
        if payload is None:
            return InterpretResult.not_handled("Filter command not understood", status=UNKNOWN)

        normalizer = self.context.normalizer
        selection = FilterSelection(
            **{d: normalizer.normalize_all(d, getattr(payload, d)) for d in FILTER_DIMENSIONS},
            price=coerce_price(data.get("price"), config.price_floor, config.price_ceiling),
        )
        if selection.is_empty():
            logger.info("No filters detected")
            return InterpretResult.not_handled("No filters detected", status=UNKNOWN)

        # Additive: merges into the existing selection rather than replacing it
        self.context.filters.apply_merge(selection)
        logger.info(f"Filters applied via voice: {selection.to_dict()}")
        return InterpretResult.done(f"Applied filters: {describe_selection(selection)}", status=FILTERS_UPDATED)


class FilterRemovalInterpreter(Interpreter):
    """Removes named filter values and/or the price range."""

    name = "remove_filter"

    async def interpret(self, utterance: str) -> InterpretResult:
        store = self.context.filters
        current = store.snapshot()
        if current.is_empty():
            return InterpretResult.not_handled("There are no filters to remove", status=UNKNOWN)

        data = await self.gateway.classify_json(
            FILTER_REMOVAL_PROMPT,
            utterance=utterance,
            applied=describe_selection(current),
        )
        if isinstance(data, ParseFailure):
            return InterpretResult.not_handled("Filter command not understood", status=UNKNOWN)

        payload = _parse_payload(FilterRemovalPayload, data)
        if payload is None:
            return InterpretResult.not_handled("Filter command not understood", status=UNKNOWN)

        normalizer = self.context.normalizer
        removed: List[str] = []
        for dimension in FILTER_DIMENSIONS:
            requested = {v.lower() for v in normalizer.normalize_all(dimension, getattr(payload, dimension))}
            matches = [v for v in current.values(dimension) if v.lower() in requested]
            if matches:
                store.remove_values(dimension, matches)
                removed.extend(matches)

        if payload.removePrice and current.price is not None:
            store.remove_price_range()
            removed.append("price range")

        if not removed:
            return InterpretResult.not_handled("None of those filters are applied", status=UNKNOWN)
        return InterpretResult.done(f"Removed filters: {', '.join(removed)}", status=FILTERS_UPDATED)


class ClearFiltersInterpreter(Interpreter):
    """Clears every filter. Deterministic, no classifier call."""

    name = "clear_filters"

    async def interpret(self, utterance: str) -> InterpretResult:
        self.context.filters.clear_all()
        return InterpretResult.done("All filters cleared", status=FILTERS_UPDATED)


def describe_selection(selection: FilterSelection) -> str:
    parts = [f"{d}: {', '.join(selection.values(d))}" for d in FILTER_DIMENSIONS if selection.values(d)]
    if selection.price is not None:
        low, high = selection.price
        parts.append(f"price: ${low:g}-${high:g}")
    return "; ".join(parts) or "none"
