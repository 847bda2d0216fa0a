"""
Error types raised while building and running the language refiner.
"""
from typing import Optional


class LangRefineError(Exception):
    """Base class for every startup failure of the refiner."""


class ConfigurationError(LangRefineError):
    """Invalid mode, malformed configuration or mapping file."""


class MissingDictionary(LangRefineError):
    """The .dic/.aff pair for a language code does not exist."""

    def __init__(self, code: str, path: Optional[str] = None, message: Optional[str] = None):
        self.code = code
        self.path = path
        if message is None:
            message = (f"No valid dictionary for '{code}' in {path}. "
                       f"Both {code}.dic and {code}.aff are required.")
        super().__init__(message)


class DictionaryLoadError(LangRefineError):
    """The dictionary files exist but could not be turned into a spellchecker."""

    def __init__(self, code: str, path: Optional[str] = None):
        self.code = code
        self.path = path
        super().__init__(f"Failed building spellchecker for '{code}' from {path}")


class SpellcheckFault(Exception):
    """A single spellcheck call failed; scoring counts the word as incorrect."""

    def __init__(self, word: str):
        self.word = word
        super().__init__(f"Spellcheck failed for {word!r}")
