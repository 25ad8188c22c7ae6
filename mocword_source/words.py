"""Identifier-case tokenizer.

Splits the text before the cursor into the sub-words of an identifier and
decides where the word being completed begins:

    extract_words("camelCaseInput")    -> ("camel Case Input", 9)
    extract_words("UPPER_CASE_INPUT")  -> ("UPPER CASE INPUT", 11)
    extract_words("_unfinished_input_") -> ("unfinished input ", 18)

The sentence is what gets sent to mocword; the offset splits the input into
letters kept verbatim in front of every candidate and the word mocword
predicts.
"""

from __future__ import annotations

import re

_UPPER_CASE_RE = re.compile(r"[A-Z][A-Z]+")
# Also matches PascalCase and single capitals.
_CAMEL_CASE_RE = re.compile(r"(?:[A-Z]?[a-z]+|[A-Z][a-z]*)")
# Also matches kebab-case and any other lowercase run.
_SNAKE_CASE_RE = re.compile(r"[a-z][a-z]*")

_WORD_PATTERNS = (_UPPER_CASE_RE, _CAMEL_CASE_RE, _SNAKE_CASE_RE)

_TRAILING_NON_LETTERS_RE = re.compile(r"[^a-zA-Z]+$")


def split_words(text: str) -> list[str]:
    """Sub-words of text under the first naming convention that matches.

    Conventions are tried in priority order: SCREAMING_CASE runs, then
    camelCase/PascalCase runs, then lowercase runs. Returns [] if none match.
    """
    for pattern in _WORD_PATTERNS:
        matches = pattern.findall(text)
        if matches:
            return matches
    return []


def extract_words(complete_str: str) -> tuple[str, int]:
    """Return (sentence, offset) for the identifier being typed.

    offset indexes complete_str: complete_str[:offset] is kept verbatim,
    the rest was expanded into sentence. Input with no letters comes back
    unchanged with offset 0.
    """
    words = split_words(complete_str)
    if not words:
        return complete_str, 0

    sentence = " ".join(words)

    # Cursor sits after a separator: the last word is already finished.
    if _TRAILING_NON_LETTERS_RE.search(complete_str):
        return sentence + " ", len(complete_str)

    offset = complete_str.rfind(words[-1])
    return sentence, offset
