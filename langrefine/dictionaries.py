"""
Hunspell spellcheckers, loaded once per language code and shared by reference.
"""
import logging
import os
import threading
from concurrent.futures import ThreadPoolExecutor
from typing import Callable, Dict, Iterable, Mapping, Optional

from spylls.hunspell import Dictionary

from .exceptions import DictionaryLoadError, MissingDictionary, SpellcheckFault

logger = logging.getLogger(__name__)


class HunspellChecker:
    """Spellchecker bound to one Hunspell .dic/.aff pair."""

    def __init__(self, dictionary: Dictionary, name: str = ''):
        self.dictionary = dictionary
        self.name = name

    @classmethod
    def from_files(cls, path_without_ext: str) -> 'HunspellChecker':
        return cls(Dictionary.from_files(path_without_ext), os.path.basename(path_without_ext))

    def is_correct(self, word: str) -> bool:
        try:
            return bool(self.dictionary.lookup(word))
        except Exception as e:
            raise SpellcheckFault(word) from e

    def __repr__(self):
        return f"HunspellChecker({self.name!r})"


class DictionaryRegistry:
    """
    Lazily resolves and caches one spellchecker per language code.

    Language codes are translated to dictionary file names through the
    hunspell code table; the files are looked up as
    ``<dict_path>/<name>.dic`` and ``<dict_path>/<name>.aff``.
    Each code is memoized under its own lock, so concurrent resolution of
    the same code builds the checker only once.
    """

    def __init__(self,
                 dict_path: str,
                 hunspell_codes: Mapping[str, str],
                 loader: Callable[[str], object] = HunspellChecker.from_files):
        self.dict_path = dict_path
        self.hunspell_codes = dict(hunspell_codes)
        self.loader = loader

        self._checkers: Dict[str, object] = {}
        self._locks: Dict[str, threading.Lock] = {}
        self._locks_guard = threading.Lock()

    def _lock_for(self, code: str) -> threading.Lock:
        with self._locks_guard:
            return self._locks.setdefault(code, threading.Lock())

    def dictionary_stem(self, code: str) -> str:
        """Path of the dictionary pair for code, without extension."""
        name = self.hunspell_codes.get(code)
        if name is None:
            raise MissingDictionary(
                code, self.dict_path,
                message=f"No hunspell dictionary name configured for '{code}'",
            )
        return os.path.join(self.dict_path, name)

    def resolve(self, code: str):
        """Return the cached checker for code, building it on first use."""
        checker = self._checkers.get(code)
        if checker is not None:
            return checker

        with self._lock_for(code):
            checker = self._checkers.get(code)
            if checker is not None:
                return checker

            stem = self.dictionary_stem(code)
            if not (os.path.exists(stem + '.dic') and os.path.exists(stem + '.aff')):
                raise MissingDictionary(code, self.dict_path)

            try:
                checker = self.loader(stem)
            except Exception as e:
                raise DictionaryLoadError(code, stem) from e

            self._checkers[code] = checker
            logger.info(f"Loaded dictionary for '{code}' from {stem}")
            return checker

    def preload(self, codes: Iterable[str], max_workers: Optional[int] = None) -> Dict[str, object]:
        """Resolve every code, in parallel across distinct codes; the first failure is re-raised."""
        distinct = list(dict.fromkeys(codes))
        if not distinct:
            return {}
        with ThreadPoolExecutor(max_workers=max_workers or min(8, len(distinct))) as pool:
            futures = {code: pool.submit(self.resolve, code) for code in distinct}
            return {code: future.result() for code, future in futures.items()}

    def get(self, code: str):
        """Already-loaded checker for code, or None."""
        return self._checkers.get(code)

    def __contains__(self, code: object) -> bool:
        return code in self._checkers

    def __len__(self) -> int:
        return len(self._checkers)

    @property
    def loaded_codes(self):
        return list(self._checkers)
