"""
Sentence-level language classifiers consumed by the refiner.
"""
import logging
import os
import urllib.request
from typing import Optional

import fasttext
from langdetect import DetectorFactory, detect

from .exceptions import ConfigurationError

logger = logging.getLogger(__name__)


FASTTEXT_MODEL_URL = "https://dl.fbaipublicfiles.com/fasttext/supervised-models/lid.176.bin"


class FastTextClassifier:
    """Top-1 fastText language identification."""

    def __init__(self, model_path: str):
        if not model_path or not os.path.exists(model_path):
            raise ConfigurationError(
                f"FastText model not found: {model_path}. Run with --download_model to fetch lid.176.bin"
            )
        try:
            self.model = fasttext.load_model(model_path)
        except ValueError as e:
            raise ConfigurationError(f"Failed to load FastText model from {model_path}: {e}")
        self.model_path = model_path
        logger.info(f"Loaded FastText model from {model_path}")

    def predict(self, text: str) -> str:
        """Best label for text, still carrying the __label__ prefix."""
        labels, _ = self.model.predict(text, k=1)
        return labels[0]


class LangdetectClassifier:
    """Top-1 langdetect identification, seeded so repeated calls agree."""

    def __init__(self, seed: int = 0):
        DetectorFactory.seed = seed

    def predict(self, text: str) -> str:
        return detect(text)


def load_classifier(name: str, model_path: Optional[str] = None):
    """Build the classifier named in the configuration."""
    if name == 'fasttext':
        return FastTextClassifier(model_path)
    if name == 'langdetect':
        logger.info("Using langdetect classifier")
        return LangdetectClassifier()
    raise ConfigurationError(f"Unknown classifier {name!r}")


def download_fasttext_model(model_dir: str) -> Optional[str]:
    """Download FastText language identification model if not present."""
    model_path = os.path.join(model_dir, 'lid.176.bin')

    if not os.path.exists(model_path):
        logger.info("Downloading FastText language identification model...")
        os.makedirs(model_dir, exist_ok=True)

        try:
            urllib.request.urlretrieve(FASTTEXT_MODEL_URL, model_path)
            logger.info(f"Downloaded FastText model to {model_path}")
        except OSError as e:
            logger.warning(f"Failed to download FastText model: {e}")

    return model_path if os.path.exists(model_path) else None
