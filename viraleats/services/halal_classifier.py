"""
HalalClassifier — heuristic halal-compatibility judgement over restaurant text.

Two policies share the keyword tables in viraleats.utils.halal_keywords:

  exclusion  default halal; any deny keyword or any CJK / Kana character
             excludes the restaurant. Used to filter list results.
  inclusion  default not halal; needs an allow keyword and no deny keyword.
             Used when classifying freshly scraped Google places.

Both are lower-cased substring matches without tokenisation, so they are
imprecise by nature ("Bar Ber Shop" trips the "bar" alcohol term).
"""

from __future__ import annotations

import logging
from typing import Any, Iterable, Literal, Mapping, Optional

from viraleats.utils.halal_keywords import (
    EXCLUSION_DENY,
    INCLUSION_ALLOW,
    INCLUSION_DENY,
    NON_HALAL_SCRIPT_RANGES,
)

logger = logging.getLogger(__name__)

HalalPolicy = Literal["exclusion", "inclusion"]

# Row fields scanned by the exclusion policy
_ROW_TEXT_FIELDS = (
    "name", "address", "cuisine", "category", "must_try_dish",
    "tripadvisor_top_review_snippet",
)


def _join(parts: Iterable[Optional[str]]) -> str:
    return " ".join(p for p in parts if p).lower()


def _has_non_halal_script(value: str) -> bool:
    return any(
        low <= ch <= high for ch in value for low, high in NON_HALAL_SCRIPT_RANGES
    )


class HalalClassifier:
    """Stateless; one shared instance is enough."""

    def __init__(
        self,
        exclusion_deny: Iterable[str] = EXCLUSION_DENY,
        inclusion_allow: Iterable[str] = INCLUSION_ALLOW,
        inclusion_deny: Iterable[str] = INCLUSION_DENY,
    ) -> None:
        self._exclusion_deny = tuple(exclusion_deny)
        self._inclusion_allow = tuple(inclusion_allow)
        self._inclusion_deny = tuple(inclusion_deny)

    # ── Exclusion policy ─────────────────────────────────────────────────────

    def row_text(self, row: Mapping[str, Any]) -> str:
        """Lower-cased concatenation of every text field the filter looks at."""
        parts = [row.get(f) for f in _ROW_TEXT_FIELDS]
        tags = row.get("tripadvisor_tags") or []
        parts.extend(str(t) for t in tags)
        return _join(parts)

    def is_excluded_text(self, value: str) -> bool:
        """True when the text hits a deny keyword or contains CJK / Kana."""
        lowered = value.lower()
        if any(word in lowered for word in self._exclusion_deny):
            return True
        return _has_non_halal_script(value)

    def is_halal_compatible(self, row: Mapping[str, Any]) -> bool:
        """Exclusion policy over a restaurant row."""
        return not self.is_excluded_text(self.row_text(row))

    # ── Inclusion policy ─────────────────────────────────────────────────────

    def classify_place(
        self,
        name: Optional[str],
        types: Optional[Iterable[str]] = None,
        address: Optional[str] = None,
    ) -> bool:
        """
        Inclusion policy for a scraped place.
        Deny keywords in name + types + address short-circuit to False;
        otherwise an allow keyword must appear in name + address.
        """
        type_text = " ".join(types or [])
        all_text = _join([name, type_text, address])
        if any(word in all_text for word in self._inclusion_deny):
            return False

        search_text = _join([name, address])
        return any(word in search_text for word in self._inclusion_allow)

    def classify_row(self, row: Mapping[str, Any]) -> bool:
        """Inclusion policy applied to an already stored row."""
        tags = row.get("tripadvisor_tags") or []
        return self.classify_place(
            row.get("name"),
            [row.get("cuisine") or "", row.get("category") or "", *tags],
            row.get("address"),
        )

    # ── Dispatch ─────────────────────────────────────────────────────────────

    def matches(self, row: Mapping[str, Any], policy: HalalPolicy = "exclusion") -> bool:
        """Apply the configured policy to a restaurant row."""
        if policy == "inclusion":
            return self.classify_row(row)
        if policy != "exclusion":
            logger.warning("Unknown halal policy %r — falling back to exclusion", policy)
        return self.is_halal_compatible(row)
