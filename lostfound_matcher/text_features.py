"""
Feature extraction from free-text item descriptions.

Produces a FeatureSet with:
    tokens / stems      lowercase word tokens and their suffix-stripped stems
    nouns / adjectives  shallow part-of-speech guesses
    entities            capitalized name runs and known place words
    colors, brands,     dictionary attributes found by substring presence
    materials,
    conditions,
    key_phrases
    sentiment_score     summed per-word polarity

Everything here is dictionary lookup and suffix rules, no trained models.
"""

import logging
import re
from typing import Iterable, List, Optional

from . import lexicon
from .models import FeatureSet

logger = logging.getLogger(__name__)

_TOKEN_RE = re.compile(r"[a-z0-9_]+")
_WORD_RE = re.compile(r"[A-Za-z][A-Za-z'\-]*")
_VOWELS = set("aeiou")


def tokenize(text: Optional[str]) -> List[str]:
    """Split text into lowercase alphanumeric tokens."""
    if not text:
        return []
    return _TOKEN_RE.findall(text.lower())


def _has_vowel(word: str) -> bool:
    return any(ch in _VOWELS for ch in word)


def _ends_double_consonant(word: str) -> bool:
    return (len(word) >= 2 and word[-1] == word[-2]
            and word[-1] not in _VOWELS)


def stem(word: str) -> str:
    """
    Light suffix-stripping stemmer modelled on the first Porter steps.

    Handles plurals, -ed/-ing verb forms, terminal y and a handful of
    derivational suffixes. Short words are returned unchanged.
    """
    if len(word) <= 3 or not word.isalpha():
        return word

    # Plurals
    if word.endswith("sses"):
        word = word[:-2]
    elif word.endswith("ies"):
        word = word[:-2]
    elif word.endswith("s") and not word.endswith("ss") and not word.endswith("us"):
        word = word[:-1]

    # -eed / -ed / -ing
    if word.endswith("eed"):
        if len(word) > 4:
            word = word[:-1]
    else:
        for suffix in ("ing", "ed"):
            if word.endswith(suffix) and _has_vowel(word[:-len(suffix)]):
                word = word[:-len(suffix)]
                if word.endswith(("at", "bl", "iz")):
                    word += "e"
                elif _ends_double_consonant(word) and word[-1] not in "lsz":
                    word = word[:-1]
                break

    # Terminal y
    if word.endswith("y") and len(word) > 2 and _has_vowel(word[:-1]):
        word = word[:-1] + "i"

    for suffix, replacement in (("ational", "ate"), ("tional", "tion"),
                                ("ization", "ize"), ("fulness", "ful"),
                                ("ousness", "ous"), ("iveness", "ive"),
                                ("ness", ""), ("ment", "")):
        if word.endswith(suffix) and len(word) - len(suffix) >= 3:
            word = word[:-len(suffix)] + replacement
            break

    return word


def find_terms(text: str, vocabulary: Iterable[str]) -> List[str]:
    """Return the vocabulary entries present as substrings of text, in vocabulary order."""
    lowered = text.lower()
    return [term for term in vocabulary if term in lowered]


def sentiment_score(tokens: Iterable[str]) -> float:
    return float(sum(lexicon.SENTIMENT.get(token, 0) for token in tokens))


def _is_adjective(token: str) -> bool:
    if token in lexicon.COLORS or token in lexicon.MATERIALS or token in lexicon.CONDITIONS:
        return True
    return len(token) > 4 and token.endswith(lexicon.ADJECTIVE_SUFFIXES)


def _is_verb_form(token: str) -> bool:
    return len(token) > 4 and token.endswith(("ing", "ed"))


def tag_parts_of_speech(tokens: List[str]):
    """Shallow POS guess. Returns (nouns, adjectives), duplicates removed."""
    nouns, adjectives = [], []
    for token in tokens:
        if token in lexicon.STOP_WORDS or not token.isalpha():
            continue
        if _is_adjective(token):
            if token not in adjectives:
                adjectives.append(token)
        elif not _is_verb_form(token):
            if token not in nouns:
                nouns.append(token)
    return nouns, adjectives


def extract_entities(text: str) -> List[str]:
    """
    Find name-like entities in the original (cased) text.

    A capitalized word run counts as an entity unless it starts a
    sentence. Known place words count even in lowercase.
    """
    entities: List[str] = []
    run: List[str] = []
    prev_end = 0
    sentence_start = True

    def flush():
        if run:
            words = [w for w in run if w.lower() not in lexicon.STOP_WORDS]
            if words:
                name = " ".join(words).lower()
                if name not in entities:
                    entities.append(name)
            run.clear()

    for m in _WORD_RE.finditer(text):
        gap = text[prev_end:m.start()]
        if any(ch in ".!?" for ch in gap):
            flush()
            sentence_start = True
        elif gap.strip():
            flush()

        word = m.group(0)
        if word[0].isupper() and not sentence_start:
            run.append(word)
        else:
            flush()
            if word.lower() in lexicon.PLACE_WORDS and word.lower() not in entities:
                entities.append(word.lower())

        sentence_start = False
        prev_end = m.end()

    flush()
    return entities


def extract_features(text: Optional[str]) -> FeatureSet:
    """Build a FeatureSet for a description. Empty input yields an empty FeatureSet."""
    if not text or not text.strip():
        return FeatureSet.empty()

    tokens = tokenize(text)
    nouns, adjectives = tag_parts_of_speech(tokens)

    features = FeatureSet(
        tokens=tokens,
        stems=[stem(t) for t in tokens],
        nouns=nouns,
        adjectives=adjectives,
        entities=extract_entities(text),
        colors=find_terms(text, lexicon.COLORS),
        brands=find_terms(text, lexicon.BRANDS),
        materials=find_terms(text, lexicon.MATERIALS),
        conditions=find_terms(text, lexicon.CONDITIONS),
        key_phrases=find_terms(text, lexicon.KEY_PHRASES),
        sentiment_score=sentiment_score(tokens),
    )
    logger.debug(
        f"Extracted {features.word_count} tokens, {len(features.colors)} colors, "
        f"{len(features.brands)} brands, {len(features.entities)} entities"
    )
    return features
