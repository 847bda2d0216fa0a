"""
Language detection refined by spellchecking closely related languages.
"""
import logging
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from .config import Mode, RefinerConfig
from .dictionaries import DictionaryRegistry, HunspellChecker
from .exceptions import MissingDictionary
from .models import load_classifier
from .similarity import SimilarityGroup, SimilarityGroupIndex, group_codes
from .tokenization import SpellcheckTokenFilter
from .utils import UNKNOWN_LANGUAGE, strip_label_prefix

logger = logging.getLogger(__name__)


# Highest error rate for which a language stays a candidate
ERROR_RATE_THRESHOLD = 0.5


def normalize_prediction(prediction: str, target_lang: str) -> str:
    """Map classifier labels without a variant onto a variant that triggers refinement."""
    if prediction == 'no' and target_lang != 'no':
        prediction = 'nb'
    if prediction == 'sh':
        prediction = 'sr'
    if prediction == 'he' and target_lang == 'iw':
        prediction = 'iw'
    return prediction


def is_correct_or_false(checker, token: str) -> bool:
    """A failing spellcheck call counts as a misspelled token."""
    try:
        return bool(checker.is_correct(token))
    except Exception as e:
        logger.debug(f"Spellcheck fault on {token!r} with {checker!r}: {e}")
        return False


def error_rate(checker, tokens: Sequence[str]) -> float:
    """Share of tokens the checker rejects; 1.0 when none is accepted."""
    correct = sum(1 for token in tokens if is_correct_or_false(checker, token))
    if correct == 0:
        return 1.0
    return 1.0 - correct / len(tokens)


def score_candidates(group: Iterable[str],
                     tokens: Sequence[str],
                     registry: DictionaryRegistry,
                     threshold: float = ERROR_RATE_THRESHOLD) -> Dict[str, float]:
    """Error rate per candidate, keeping only candidates at or below the threshold."""
    scores = {}
    for code in group:
        rate = error_rate(registry.resolve(code), tokens)
        logger.debug(f"Error rate for '{code}': {rate:.3f}")
        if rate <= threshold:
            scores[code] = rate
    return scores


def choose_language(scores: Dict[str, float],
                    prediction: str,
                    target_lang: str,
                    mode: Mode) -> str:
    """Pick the final label from the admitted candidates according to mode."""
    if not scores:
        return prediction if mode == Mode.AGGRESSIVE else UNKNOWN_LANGUAGE

    best = min(scores.values())
    best_keys = [code for code, rate in scores.items() if rate == best]
    if len(best_keys) == 1:
        return best_keys[0]

    if mode == Mode.AGGRESSIVE:
        if target_lang in best_keys:
            return target_lang
        if prediction in best_keys:
            return prediction
        return best_keys[0]

    if target_lang in best_keys and best == 0.0:
        return target_lang
    return UNKNOWN_LANGUAGE


@dataclass(frozen=True)
class Refinement:
    """Trace of one classification."""
    sentence: str
    raw_prediction: str
    prediction: str
    language: str
    candidates: Tuple[str, ...] = ()
    tokens: Tuple[str, ...] = ()
    scores: Dict[str, float] = field(default_factory=dict)

    @property
    def refined(self) -> bool:
        return bool(self.candidates)


class RefinedLanguageDetector:
    """
    Sentence-level language detection with spellcheck-based disambiguation.

    The classifier's best guess is trusted unless it falls into a group of
    languages configured as confusable with the target language. In that
    case each group member is scored by the error rate of its dictionary
    on the sentence and the mode decides how ties and rejections resolve.
    """

    def __init__(self,
                 classifier,
                 groups: Sequence[SimilarityGroup],
                 registry: DictionaryRegistry,
                 lang: str,
                 mode: Mode = Mode.AGGRESSIVE,
                 token_filter: Optional[SpellcheckTokenFilter] = None):
        self.classifier = classifier
        self.groups = tuple(groups)
        self.registry = registry
        self.lang = lang
        self.mode = Mode.parse(mode)
        self.token_filter = token_filter or SpellcheckTokenFilter()

        # Every group dictionary is loaded before the first query.
        for code in group_codes(self.groups):
            if code not in registry:
                raise MissingDictionary(
                    code, registry.dict_path,
                    message=f"Dictionary for '{code}' is not loaded; preload the registry first",
                )

    @classmethod
    def from_config(cls, config: RefinerConfig, classifier=None, loader=None) -> 'RefinedLanguageDetector':
        """
        Build groups, load every dictionary they need and the classifier.

        Raises MissingDictionary or DictionaryLoadError if any dictionary of
        the target language's groups is unavailable.
        """
        groups = SimilarityGroupIndex(config.similar_langs).build_groups(config.lang)

        registry = DictionaryRegistry(config.dict_path, config.hunspell_codes,
                                      loader=loader or HunspellChecker.from_files)
        registry.preload(group_codes(groups))
        logger.info(f"Loaded {len(registry)} dictionaries for '{config.lang}'")

        if classifier is None:
            classifier = load_classifier(config.classifier, config.model_path)

        return cls(classifier, groups, registry, config.lang, config.mode)

    def predict_raw(self, sentence: str) -> Tuple[str, str]:
        """Classifier label for the sentence and the cleaned text it was given."""
        clean_text = sentence.replace('\n', ' ').strip()
        label = self.classifier.predict(clean_text.lower())
        return strip_label_prefix(label), clean_text

    def find_group(self, prediction: str) -> SimilarityGroup:
        for group in self.groups:
            if prediction in group:
                return group
        raise AssertionError(
            f"'{prediction}' has a dictionary but belongs to no similarity group of '{self.lang}'"
        )

    def refine(self, sentence: str) -> Refinement:
        raw_prediction, clean_text = self.predict_raw(sentence)
        prediction = normalize_prediction(raw_prediction, self.lang)
        logger.debug(f"Prediction: {raw_prediction} -> {prediction}")

        if not self.groups or prediction not in self.registry:
            return Refinement(sentence, raw_prediction, prediction, prediction)

        group = self.find_group(prediction)
        tokens = self.token_filter.filter(clean_text, self.lang)
        scores = score_candidates(group, tokens, self.registry)
        language = choose_language(scores, prediction, self.lang, self.mode)

        return Refinement(
            sentence=sentence,
            raw_prediction=raw_prediction,
            prediction=prediction,
            language=language,
            candidates=group.codes,
            tokens=tuple(tokens),
            scores=scores,
        )

    def classify(self, sentence: str) -> str:
        """Language code of sentence, or 'unk' when it cannot be confirmed."""
        return self.refine(sentence).language

    def classify_many(self, sentences: Iterable[str]) -> List[str]:
        return [self.classify(sentence) for sentence in sentences]
