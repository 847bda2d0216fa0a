"""
Configuration loading and validation for the language refiner.
"""
import logging
import os
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Dict, List, Optional

from .exceptions import ConfigurationError
from .utils import load_json

logger = logging.getLogger(__name__)


RESOURCES_DIR = os.path.join(os.path.dirname(__file__), 'resources')
DEFAULT_SIMILAR_LANGS_PATH = os.path.join(RESOURCES_DIR, 'similar_langs.json')
DEFAULT_HUNSPELL_CODES_PATH = os.path.join(RESOURCES_DIR, 'hunspell_codes.json')

DEFAULT_MODEL_PATH = os.path.join('models', 'lid.176.bin')
DEFAULT_DICT_PATH = 'dictionaries'

CLASSIFIERS = ('fasttext', 'langdetect')

# Keys used by older configuration files
KEY_ALIASES = {
    'modelPath': 'model_path',
    'dictPath': 'dict_path',
    'similarLangsPath': 'similar_langs_path',
    'hunspellCodesPath': 'hunspell_codes_path',
}

PATH_KEYS = ('model_path', 'dict_path', 'similar_langs_path', 'hunspell_codes_path')


class Mode(str, Enum):
    """Tie-break and acceptance policy."""
    AGGRESSIVE = "aggr"
    CONSERVATIVE = "cons"

    @classmethod
    def parse(cls, value: Any) -> 'Mode':
        if isinstance(value, cls):
            return value
        for mode in cls:
            if mode.value == value:
                return mode
        raise ConfigurationError(
            f"Unknown mode {value!r}. Use 'aggr' for aggressive or 'cons' for conservative"
        )


@dataclass(frozen=True)
class RefinerConfig:
    lang: str
    mode: Mode = Mode.AGGRESSIVE
    model_path: str = DEFAULT_MODEL_PATH
    dict_path: str = DEFAULT_DICT_PATH
    similar_langs_path: str = DEFAULT_SIMILAR_LANGS_PATH
    hunspell_codes_path: str = DEFAULT_HUNSPELL_CODES_PATH
    classifier: str = 'fasttext'
    similar_langs: Dict[str, List[str]] = field(default_factory=dict, compare=False, repr=False)
    hunspell_codes: Dict[str, str] = field(default_factory=dict, compare=False, repr=False)

    def with_overrides(self, **overrides) -> 'RefinerConfig':
        """Return a copy with every non-None override applied and re-validated."""
        values = {key: value for key, value in overrides.items() if value is not None}
        if not values:
            return self
        if 'mode' in values:
            values['mode'] = Mode.parse(values['mode'])
        updated = replace(self, **values)
        if 'similar_langs_path' in values or 'hunspell_codes_path' in values:
            updated = _attach_tables(updated)
        _validate(updated)
        return updated


def validate_similar_langs(data: Any, source: str = '<similar languages>') -> Dict[str, List[str]]:
    """Check the similarity table is a mapping of string keys to lists of strings."""
    if not isinstance(data, dict):
        raise ConfigurationError(f"{source}: expected an object mapping keys to language lists")
    for key, values in data.items():
        if not isinstance(key, str) or not key:
            raise ConfigurationError(f"{source}: invalid key {key!r}")
        if not isinstance(values, list) or not all(isinstance(v, str) and v for v in values):
            raise ConfigurationError(f"{source}: entry {key!r} must be a list of language codes")
    return {key: list(values) for key, values in data.items()}


def validate_hunspell_codes(data: Any, source: str = '<hunspell codes>') -> Dict[str, str]:
    """Check the translation table maps language codes to dictionary names."""
    if not isinstance(data, dict):
        raise ConfigurationError(f"{source}: expected an object mapping language codes to dictionary names")
    for key, value in data.items():
        if not isinstance(key, str) or not isinstance(value, str) or not value:
            raise ConfigurationError(f"{source}: invalid entry {key!r}: {value!r}")
    return dict(data)


def _attach_tables(config: RefinerConfig) -> RefinerConfig:
    similar_langs = validate_similar_langs(
        load_json(config.similar_langs_path), config.similar_langs_path
    )
    hunspell_codes = validate_hunspell_codes(
        load_json(config.hunspell_codes_path), config.hunspell_codes_path
    )
    return replace(config, similar_langs=similar_langs, hunspell_codes=hunspell_codes)


def _validate(config: RefinerConfig):
    if not isinstance(config.lang, str) or not config.lang.strip():
        raise ConfigurationError("Configuration needs a non-empty 'lang'")
    if config.classifier not in CLASSIFIERS:
        raise ConfigurationError(
            f"Unknown classifier {config.classifier!r}. Use one of: {', '.join(CLASSIFIERS)}"
        )


def build_config(lang: str, mode: Any = Mode.AGGRESSIVE, **kwargs) -> RefinerConfig:
    """Build a validated configuration from keyword values, loading both tables."""
    config = RefinerConfig(lang=lang, mode=Mode.parse(mode), **kwargs)
    _validate(config)
    return _attach_tables(config)


def load_config(config_path: str) -> RefinerConfig:
    """
    Load the refiner configuration from a JSON file.

    Relative paths are resolved against the directory holding the file.
    """
    raw = load_json(config_path)
    if not isinstance(raw, dict):
        raise ConfigurationError(f"{config_path}: expected a JSON object")

    values: Dict[str, Any] = {}
    for key, value in raw.items():
        values[KEY_ALIASES.get(key, key)] = value

    known = set(PATH_KEYS) | {'lang', 'mode', 'classifier'}
    unknown = sorted(set(values) - known)
    if unknown:
        raise ConfigurationError(f"{config_path}: unknown keys {', '.join(unknown)}")
    if 'lang' not in values:
        raise ConfigurationError(f"{config_path}: missing 'lang'")
    if 'mode' not in values:
        raise ConfigurationError(f"{config_path}: missing 'mode'")

    base_dir = os.path.dirname(os.path.abspath(config_path))
    for key in PATH_KEYS:
        if key not in values:
            continue
        if not isinstance(values[key], str) or not values[key]:
            raise ConfigurationError(f"{config_path}: '{key}' must be a path")
        if not os.path.isabs(values[key]):
            values[key] = os.path.join(base_dir, values[key])

    config = build_config(**values)
    logger.info(f"Loaded configuration from {config_path} (lang={config.lang}, mode={config.mode.value})")
    return config


def resolve_config(config_path: Optional[str] = None, **overrides) -> RefinerConfig:
    """Load a configuration file, or build one from overrides alone, then apply overrides."""
    if config_path:
        return load_config(config_path).with_overrides(**overrides)

    lang = overrides.pop('lang', None)
    if not lang:
        raise ConfigurationError("A target language is required (--lang or 'lang' in --config)")
    values = {key: value for key, value in overrides.items() if value is not None}
    return build_config(lang, **values)
