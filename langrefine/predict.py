#!/usr/bin/env python3
"""
Command line interface for spellcheck-refined language identification.
Prints the language code (or 'unk') of a sentence, or processes a batch file.
"""
import argparse
import json
import logging
import os
import sys
from typing import Dict, List, Optional

from .config import resolve_config
from .exceptions import LangRefineError
from .language_detector import Refinement, RefinedLanguageDetector
from .models import download_fasttext_model
from .utils import UNKNOWN_LANGUAGE, save_results

logger = logging.getLogger(__name__)


def format_refinement(refinement: Refinement) -> str:
    """Format a refinement trace for display."""
    output = []
    output.append(f"Input Text: {refinement.sentence}")
    output.append(f"Classifier: {refinement.raw_prediction} -> {refinement.prediction}")

    if refinement.refined:
        output.append(f"Candidates: {', '.join(refinement.candidates)}")
        output.append(f"Tokens: {' '.join(refinement.tokens)}")
        for code in refinement.candidates:
            if code in refinement.scores:
                output.append(f"  {code:8} error rate {refinement.scores[code]:.3f}")
            else:
                output.append(f"  {code:8} rejected")
    else:
        output.append("Not a confusable language, classifier output kept")

    output.append(f"Language: {refinement.language}")
    return "\n".join(output)


def _sentence_of(item) -> str:
    if isinstance(item, dict):
        return str(item.get('text', item))
    return item if isinstance(item, str) else str(item)


def read_sentences(input_file: str) -> List[str]:
    """Sentences from a JSON list or a plain text file with one sentence per line."""
    if input_file.endswith('.json'):
        with open(input_file, 'r', encoding='utf-8') as f:
            data = json.load(f)

        if not isinstance(data, list):
            data = [data]
        return [_sentence_of(item) for item in data]

    with open(input_file, 'r', encoding='utf-8') as f:
        return [line.strip() for line in f if line.strip()]


def batch_mode(detector: RefinedLanguageDetector,
               input_file: str,
               output_file: Optional[str] = None,
               verbose: bool = False) -> List[Dict]:
    """Classify every sentence of a file, optionally saving the results as JSON."""
    logger.info(f"Processing batch file: {input_file}")
    sentences = read_sentences(input_file)
    logger.info(f"Loaded {len(sentences)} sentences for processing")

    results = []
    for i, sentence in enumerate(sentences):
        try:
            refinement = detector.refine(sentence)
        except Exception as e:
            logger.error(f"Failed to process sentence {i}: {e}")
            results.append({
                'id': i,
                'input_text': sentence,
                'error': str(e),
            })
            continue

        result = {
            'id': i,
            'input_text': sentence,
            'language': refinement.language,
        }
        if verbose:
            result['prediction'] = refinement.prediction
            result['scores'] = refinement.scores
        results.append(result)

    if output_file:
        save_results(results, output_file)
        logger.info(f"Results saved to {output_file}")
    else:
        for result in results:
            print(result.get('language', UNKNOWN_LANGUAGE))

    return results


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description='Identify the language of a sentence, disambiguating similar languages by spellchecking'
    )

    parser.add_argument('sentence', nargs='?',
                       help='Sentence to identify')

    # Configuration arguments
    parser.add_argument('--config', type=str,
                       help='JSON configuration file')
    parser.add_argument('--lang', type=str,
                       help='Target language (overrides the configuration)')
    parser.add_argument('--mode', type=str, choices=['aggr', 'cons'],
                       help="'aggr' for aggressive or 'cons' for conservative")
    parser.add_argument('--model_path', type=str,
                       help='FastText language identification model')
    parser.add_argument('--dict_path', type=str,
                       help='Directory containing the hunspell .dic/.aff files')
    parser.add_argument('--classifier', type=str, choices=['fasttext', 'langdetect'],
                       help='Sentence classifier backend')
    parser.add_argument('--download_model', action='store_true',
                       help='Download lid.176.bin next to --model_path if missing')

    # Input/output arguments
    parser.add_argument('--input_file', type=str,
                       help='File containing sentences to identify (JSON or plain text)')
    parser.add_argument('--output_file', type=str,
                       help='Output file for batch results')
    parser.add_argument('--verbose', action='store_true',
                       help='Verbose output')
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.sentence and not args.input_file:
        parser.error('a sentence or --input_file is required')

    logging.basicConfig(level=logging.INFO if args.verbose else logging.WARNING)

    try:
        config = resolve_config(
            args.config,
            lang=args.lang,
            mode=args.mode,
            model_path=args.model_path,
            dict_path=args.dict_path,
            classifier=args.classifier,
        )
        if args.download_model and config.classifier == 'fasttext':
            download_fasttext_model(os.path.dirname(config.model_path) or '.')
        detector = RefinedLanguageDetector.from_config(config)
    except LangRefineError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if args.input_file:
        batch_mode(detector, args.input_file, args.output_file, args.verbose)
    elif args.verbose:
        print(format_refinement(detector.refine(args.sentence)))
    else:
        print(detector.classify(args.sentence))

    return 0


if __name__ == '__main__':
    sys.exit(main())
