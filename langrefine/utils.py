"""
Utility functions for the language refinement pipeline.
"""
import json
from typing import Any, Dict, List

from .exceptions import ConfigurationError


# Prefix fastText puts in front of every label
LABEL_PREFIX = '__label__'

# Sentinel returned when the language cannot be confirmed
UNKNOWN_LANGUAGE = 'unk'


def load_json(filepath: str) -> Any:
    """Load a JSON resource, turning I/O and syntax problems into ConfigurationError."""
    try:
        with open(filepath, 'r', encoding='utf-8') as f:
            return json.load(f)
    except FileNotFoundError:
        raise ConfigurationError(f"File not found: {filepath}")
    except json.JSONDecodeError as e:
        raise ConfigurationError(f"Malformed JSON in {filepath}: {e}")
    except OSError as e:
        raise ConfigurationError(f"Cannot read {filepath}: {e}")


def save_results(results: List[Dict], filepath: str):
    """Save results to JSON file."""
    with open(filepath, 'w', encoding='utf-8') as f:
        json.dump(results, f, indent=2, ensure_ascii=False)


def strip_label_prefix(label: str) -> str:
    """Remove the classifier label prefix (usually __label__xx) if present."""
    if label.startswith(LABEL_PREFIX):
        return label[len(LABEL_PREFIX):]
    return label
