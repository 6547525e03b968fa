"""
Name matching strategies

Each strategy scores one (source name, target key) pair or returns None.
The chain is evaluated in priority order and the first hit wins:
exact (100), normalized (95), alias (90), [snake_case / camelCase parts (90/85)],
partial (60), fuzzy (similarity x 50).
"""

import logging
import re
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Set

from recordmap.mapper.similarity import calculate_similarity, round_half_up

logger = logging.getLogger(__name__)

MAX_CUSTOM_ALIASES = 1000
FUZZY_THRESHOLD = 0.6

# Canonical target key -> source names known to mean the same thing
COMMON_FIELD_ALIASES: Dict[str, List[str]] = {
    "id": ["uuid", "guid", "external_id", "externalid"],
    "sku": ["product_code", "item_code", "code", "article_number", "part_number", "item_number", "product_sku"],
    "name": ["product_name", "title", "item_name", "full_name", "display_name", "label"],
    "slug": ["url_key", "handle", "permalink", "url_slug"],
    "description": ["desc", "long_description", "body", "body_html", "details", "summary"],
    "price": ["unit_price", "cost", "amount", "list_price", "sale_price", "retail_price"],
    "stockOnHand": ["stock", "quantity", "qty", "inventory", "stock_level", "on_hand"],
    "enabled": ["active", "is_active", "status", "published", "visible"],
    "emailAddress": ["email", "email_address", "mail", "e_mail"],
    "customerEmail": ["email", "customer_email", "buyer_email"],
    "firstName": ["first_name", "given_name", "fname", "forename"],
    "lastName": ["last_name", "surname", "family_name", "lname"],
    "phoneNumber": ["phone", "telephone", "mobile", "tel", "phone_number"],
    "facetValueCodes": ["tags", "attributes", "facets"],
    "featuredAssetUrl": ["image", "image_url", "main_image", "thumbnail", "photo"],
    "assetUrls": ["images", "gallery", "media", "photos"],
    "code": ["order_number", "order_code", "reference", "order_ref"],
    "orderPlacedAt": ["order_date", "placed_at", "ordered_at", "created_at"],
    "parentSlug": ["parent", "parent_category", "parent_handle"],
    "position": ["sort_order", "sort", "order_index"],
}

_CAMEL_BOUNDARY = re.compile(r"(?<=[a-z0-9])(?=[A-Z])")


@dataclass(frozen=True)
class NamePair:
    """Source name and target key in the forms the strategies compare."""

    source_name: str  # As written in the source
    source_cmp: str  # Case-folded unless matching is case sensitive
    source_norm: str  # Separators stripped, lowercase
    target_key: str
    target_cmp: str
    target_norm: str


@dataclass(frozen=True)
class NameScore:
    score: int
    reason: str


class MatchStrategy:
    """Base class for name matching strategies"""

    name = "base"

    def match(self, pair: NamePair) -> Optional[NameScore]:
        raise NotImplementedError


class ExactMatchStrategy(MatchStrategy):
    name = "exact"

    def match(self, pair: NamePair) -> Optional[NameScore]:
        if pair.source_cmp == pair.target_cmp:
            return NameScore(100, "Exact name match")
        return None


class NormalizedMatchStrategy(MatchStrategy):
    name = "normalized"

    def match(self, pair: NamePair) -> Optional[NameScore]:
        if pair.source_norm and pair.source_norm == pair.target_norm:
            return NameScore(95, "Normalized name match")
        return None


class AliasMatchStrategy(MatchStrategy):
    """Matches known alternate names of a target key (built-in plus custom aliases)."""

    name = "alias"

    def __init__(self, custom_aliases: Optional[Dict[str, List[str]]] = None, case_sensitive: bool = False):
        self.case_sensitive = case_sensitive
        self.aliases = merge_aliases(COMMON_FIELD_ALIASES, custom_aliases or {})
        self._reverse = self._build_reverse_map()

    def _fold(self, text: str) -> str:
        return text if self.case_sensitive else text.lower()

    def _build_reverse_map(self) -> Dict[str, Set[str]]:
        reverse: Dict[str, Set[str]] = {}
        for canonical, aliases in self.aliases.items():
            for alias in aliases:
                reverse.setdefault(self._fold(alias), set()).add(self._fold(canonical))
        return reverse

    def match(self, pair: NamePair) -> Optional[NameScore]:
        canonicals = self._reverse.get(pair.source_cmp)
        if canonicals and self._fold(pair.target_key) in canonicals:
            return NameScore(90, f"Alias match ({pair.target_key})")
        return None


class SnakeCasePartStrategy(MatchStrategy):
    """Matches a target key against the parts of a snake_case source name."""

    name = "snake_case_part"

    def match(self, pair: NamePair) -> Optional[NameScore]:
        if "_" not in pair.source_name:
            return None
        parts = [p.lower() for p in pair.source_name.split("_") if p]
        return _score_parts(parts, pair.target_norm, "snake_case")


class CamelCasePartStrategy(MatchStrategy):
    """Matches a target key against the words of a camelCase source name."""

    name = "camel_case_part"

    def match(self, pair: NamePair) -> Optional[NameScore]:
        parts = [p.lower() for p in _CAMEL_BOUNDARY.split(pair.source_name) if p]
        if len(parts) < 2:
            return None
        return _score_parts(parts, pair.target_norm, "camelCase")


def _score_parts(parts: List[str], target_norm: str, style: str) -> Optional[NameScore]:
    # The last word usually carries the meaning ("product_price" -> price)
    if len(parts) < 2 or not target_norm:
        return None
    if parts[-1] == target_norm:
        return NameScore(90, f"{style} suffix match")
    if target_norm in parts:
        return NameScore(85, f"{style} part match")
    return None


class PartialMatchStrategy(MatchStrategy):
    name = "partial"

    def match(self, pair: NamePair) -> Optional[NameScore]:
        source, target = pair.source_norm, pair.target_norm
        if source and target and (source in target or target in source):
            return NameScore(60, "Partial name match")
        return None


class FuzzyMatchStrategy(MatchStrategy):
    """Levenshtein similarity over normalized names."""

    name = "fuzzy"

    def __init__(self, threshold: float = FUZZY_THRESHOLD):
        self.threshold = threshold

    def match(self, pair: NamePair) -> Optional[NameScore]:
        similarity = calculate_similarity(pair.source_norm, pair.target_norm)
        if similarity > self.threshold:
            return NameScore(round_half_up(similarity * 50), f"Fuzzy match ({round_half_up(similarity * 100)}%)")
        return None


def merge_aliases(base: Dict[str, List[str]], custom: Dict[str, Iterable[str]]) -> Dict[str, List[str]]:
    """
    Merge custom aliases into a copy of base without duplicating entries

    At most MAX_CUSTOM_ALIASES custom alias names are taken; the rest are
    ignored with a warning.
    """
    merged = {canonical: list(aliases) for canonical, aliases in base.items()}
    taken = 0
    dropped = 0

    for canonical, aliases in custom.items():
        existing = merged.setdefault(canonical, [])
        for alias in aliases:
            if taken >= MAX_CUSTOM_ALIASES:
                dropped += 1
                continue
            taken += 1
            if alias not in existing:
                existing.append(alias)

    if dropped:
        logger.warning(f"Ignored {dropped} custom aliases beyond the limit of {MAX_CUSTOM_ALIASES}")

    return merged


def build_strategy_chain(
    custom_aliases: Optional[Dict[str, List[str]]] = None,
    case_sensitive: bool = False,
    enable_fuzzy_matching: bool = True,
    enable_part_matching: bool = False,
) -> List[MatchStrategy]:
    """Build the ordered strategy chain for one configuration."""
    chain: List[MatchStrategy] = [
        ExactMatchStrategy(),
        NormalizedMatchStrategy(),
        AliasMatchStrategy(custom_aliases, case_sensitive),
    ]
    if enable_part_matching:
        chain.extend([SnakeCasePartStrategy(), CamelCasePartStrategy()])
    chain.append(PartialMatchStrategy())
    if enable_fuzzy_matching:
        chain.append(FuzzyMatchStrategy())
    return chain


def score_name(chain: List[MatchStrategy], pair: NamePair) -> NameScore:
    """Return the first strategy hit, or a zero score."""
    for strategy in chain:
        result = strategy.match(pair)
        if result is not None:
            return result
    return NameScore(0, "")
