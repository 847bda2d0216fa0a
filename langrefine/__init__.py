"""
Spellcheck-refined language identification

Resolves confusions between closely related languages (Bokmål/Nynorsk,
Croatian/Serbian/Bosnian, ...) in the output of a statistical language
classifier using Hunspell dictionaries.
"""

__version__ = "1.0.0"

from .config import Mode, RefinerConfig, load_config
from .exceptions import (
    ConfigurationError,
    DictionaryLoadError,
    LangRefineError,
    MissingDictionary,
    SpellcheckFault,
)
from .language_detector import Refinement, RefinedLanguageDetector

__all__ = [
    "ConfigurationError",
    "DictionaryLoadError",
    "LangRefineError",
    "MissingDictionary",
    "Mode",
    "Refinement",
    "RefinedLanguageDetector",
    "RefinerConfig",
    "SpellcheckFault",
    "load_config",
]
