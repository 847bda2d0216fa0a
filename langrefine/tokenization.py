"""
Tokenization of sentences into words suitable for spellchecking.
"""
from typing import List

import regex


# Languages that capitalize common nouns, so capitalization says nothing about proper nouns
CASE_INSENSITIVE_LANGUAGES = {'de'}


class SpellcheckTokenFilter:
    """Turns a raw sentence into the tokens a dictionary should judge."""

    def __init__(self):
        # Runs of punctuation or symbols anchored at either end of a token
        self.edge_punctuation = regex.compile(r'^[\p{P}\p{S}]+|[\p{P}\p{S}]+$')

    def strip_punctuation(self, token: str) -> str:
        return self.edge_punctuation.sub('', token.strip()).strip()

    @staticmethod
    def has_alphabetic(token: str) -> bool:
        return any(char.isalpha() for char in token)

    def filter(self, sentence: str, target_lang: str) -> List[str]:
        """
        Split on single spaces, strip edge punctuation, drop tokens without letters.

        Except for languages that capitalize nouns, tokens other than the first
        one are kept only when they start lowercase (likely proper nouns are
        dropped), and kept tokens are lowercased.
        """
        tokens = []
        keep_case = target_lang in CASE_INSENSITIVE_LANGUAGES

        for position, raw_token in enumerate(sentence.split(' ')):
            token = self.strip_punctuation(raw_token)
            if not self.has_alphabetic(token):
                continue
            if keep_case:
                tokens.append(token)
            elif position == 0 or token[0].islower():
                tokens.append(token.lower())

        return tokens
