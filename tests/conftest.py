"""Shared fakes for the classifier and spellcheckers."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Dict, Iterable, Optional

import pytest

from langrefine.config import Mode
from langrefine.dictionaries import DictionaryRegistry
from langrefine.language_detector import RefinedLanguageDetector
from langrefine.similarity import SimilarityGroupIndex, group_codes


class FakeClassifier:
    """Returns a fixed label and records what it was asked."""

    def __init__(self, label: str) -> None:
        self.label = label
        self.calls: list[str] = []

    def predict(self, text: str) -> str:
        self.calls.append(text)
        return self.label


class FakeChecker:
    """Accepts a fixed vocabulary; raises for words listed as faulty."""

    def __init__(self, words: Iterable[str], faulty: Iterable[str] = ()) -> None:
        self.words = set(words)
        self.faulty = set(faulty)

    def is_correct(self, word: str) -> bool:
        if word in self.faulty:
            raise RuntimeError(f"checker crashed on {word}")
        return word in self.words


def make_registry(dict_dir: Path, vocabularies: Dict[str, FakeChecker]) -> DictionaryRegistry:
    """Preloaded registry over empty .dic/.aff files whose loader hands out the fakes."""
    for code in vocabularies:
        (dict_dir / f"{code}.dic").touch()
        (dict_dir / f"{code}.aff").touch()
    registry = DictionaryRegistry(
        str(dict_dir),
        {code: code for code in vocabularies},
        loader=lambda stem: vocabularies[os.path.basename(stem)],
    )
    registry.preload(vocabularies)
    return registry


def make_detector(
    dict_dir: Path,
    label: str,
    vocabularies: Dict[str, FakeChecker],
    similar_langs: Dict[str, list],
    lang: str,
    mode: Mode = Mode.AGGRESSIVE,
    classifier: Optional[FakeClassifier] = None,
) -> RefinedLanguageDetector:
    groups = SimilarityGroupIndex(similar_langs).build_groups(lang)
    registry = make_registry(dict_dir, {code: vocabularies[code] for code in group_codes(groups)})
    return RefinedLanguageDetector(classifier or FakeClassifier(label), groups, registry, lang, mode)


@pytest.fixture
def norwegian_langs() -> Dict[str, list]:
    return {"nb": ["nn", "da"], "hr": ["sr", "bs"]}


@pytest.fixture
def norwegian_checkers() -> Dict[str, FakeChecker]:
    return {
        "nb": FakeChecker({"dette", "er", "en", "fin", "ikke"}),
        "nn": FakeChecker({"er", "en", "fin", "dag", "ikkje"}),
        "da": FakeChecker({"det", "er"}),
    }
