"""
Groups of mutually confusable languages for a target language.
"""
import logging
from collections import OrderedDict
from dataclasses import dataclass
from typing import Dict, Iterator, List, Mapping, NamedTuple, Optional, Sequence, Tuple

logger = logging.getLogger(__name__)


class VariantKey(NamedTuple):
    """A composite similarity-table key split into its parts."""
    macro_language: str
    variant_id: Optional[str]
    raw: str

    @classmethod
    def parse(cls, key: str) -> 'VariantKey':
        macro, sep, variant = key.partition('_')
        return cls(macro, variant if sep else None, key)


@dataclass(frozen=True)
class SimilarityGroup:
    """An ordered, duplicate-free, non-empty set of confusable language codes."""
    codes: Tuple[str, ...]

    def __post_init__(self):
        if not self.codes:
            raise ValueError("A similarity group cannot be empty")
        if len(set(self.codes)) != len(self.codes):
            raise ValueError(f"Duplicate codes in similarity group: {self.codes}")

    @classmethod
    def from_entry(cls, key: str, confusables: Sequence[str]) -> 'SimilarityGroup':
        """Listed codes first, then the key itself; repeats are dropped."""
        ordered = OrderedDict.fromkeys(list(confusables) + [key])
        return cls(tuple(ordered))

    def __contains__(self, code: object) -> bool:
        return code in self.codes

    def __iter__(self) -> Iterator[str]:
        return iter(self.codes)

    def __len__(self) -> int:
        return len(self.codes)


class SimilarityGroupIndex:
    """Similarity table parsed once into (macro-language, variant) keys, grouped by macro-language."""

    def __init__(self, mapping: Mapping[str, Sequence[str]]):
        self._by_macro: Dict[str, List[Tuple[VariantKey, Tuple[str, ...]]]] = {}
        for key, confusables in mapping.items():
            variant_key = VariantKey.parse(key)
            self._by_macro.setdefault(variant_key.macro_language, []).append(
                (variant_key, tuple(confusables))
            )

    def build_groups(self, target_lang: str) -> List[SimilarityGroup]:
        """Build one group per table entry whose macro-language is target_lang."""
        groups = [
            SimilarityGroup.from_entry(variant_key.raw, confusables)
            for variant_key, confusables in self._by_macro.get(target_lang, [])
        ]
        if groups:
            logger.info(f"Built {len(groups)} similarity group(s) for '{target_lang}'")
        else:
            logger.warning(f"No similar languages configured for '{target_lang}'; refinement disabled")
        return groups


def group_codes(groups: Sequence[SimilarityGroup]) -> List[str]:
    """All distinct codes across groups, in first-seen order."""
    return list(OrderedDict.fromkeys(code for group in groups for code in group))
