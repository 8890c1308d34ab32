"""
Filter value normalization.

The classifier is asked to answer in lowercase, and speech is lowercased
anyway, but the storefront filters on the catalog's own spelling ("Under
Armour", "XL", "T-Shirts"). Every value is mapped back to the canonical
casing before it touches the filter store. Unknown values pass through
unchanged so nothing the user said is silently dropped.
"""
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence

from storefront.data.products import FILTER_OPTIONS


class ValueNormalizer:
    def __init__(self, options: Optional[Mapping[str, Sequence[str]]] = None):
        options = FILTER_OPTIONS if options is None else options
        self._lookup: Dict[str, Dict[str, str]] = {
            dimension: {value.lower(): value for value in values}
            for dimension, values in options.items()
        }

    def normalize(self, dimension: str, raw: Any) -> Any:
        """Return the catalog spelling of raw, or raw itself when no match exists."""
        if not isinstance(raw, str):
            return raw
        return self._lookup.get(dimension, {}).get(raw.strip().lower(), raw)

    def normalize_all(self, dimension: str, raws: Iterable[Any]) -> List[str]:
        """Normalize a list from the classifier, skipping null and blank entries."""
        values: List[str] = []
        for raw in raws:
            if raw is None:
                continue
            text = raw if isinstance(raw, str) else str(raw)
            if not text.strip():
                continue
            value = self.normalize(dimension, text.strip())
            if value not in values:
                values.append(value)
        return values

    def is_canonical(self, dimension: str, value: str) -> bool:
        return value in self._lookup.get(dimension, {}).values()


_default = ValueNormalizer()


def normalize(dimension: str, raw: Any) -> Any:
    """Normalize against the bundled catalog vocabulary."""
    return _default.normalize(dimension, raw)
