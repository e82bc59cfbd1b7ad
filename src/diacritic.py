#!/usr/bin/env python3
"""
diacritic.py - Dead-key composition of accented Latin letters
デッドキーによるアクセント付きラテン文字の合成

A dead key produces nothing by itself; it changes the next letter typed.
デッドキーはそれ自体は何も出力せず、次に入力される文字を変化させる。

    "¨" then "a"           → "ä"
    "¨" then Shift+"a"     → "Ä"
    "˜" then "n"           → "ñ"

Only the five marks below start a dead-key sequence. The dispatcher decides
when a key is a dead key; this module only answers "what does mark + letter
become?".
以下の5つの記号のみがデッドキーシーケンスを開始する。
"""

import logging

logger = logging.getLogger(__name__)

UMLAUT = '¨'
ACUTE = '´'
GRAVE = '`'
CIRCUMFLEX = 'ˆ'
TILDE = '˜'

DEAD_KEY_MARKS = frozenset([UMLAUT, ACUTE, GRAVE, CIRCUMFLEX, TILDE])

# mark -> lowercase base -> (lowercase result, uppercase result)
COMBINATIONS = {
    UMLAUT: {
        'a': ('ä', 'Ä'),
        'e': ('ë', 'Ë'),
        'i': ('ï', 'Ï'),
        'o': ('ö', 'Ö'),
        'u': ('ü', 'Ü'),
        'y': ('ÿ', 'Ÿ'),
    },
    ACUTE: {
        'a': ('á', 'Á'),
        'e': ('é', 'É'),
        'i': ('í', 'Í'),
        'o': ('ó', 'Ó'),
        'u': ('ú', 'Ú'),
        'y': ('ý', 'Ý'),
    },
    GRAVE: {
        'a': ('à', 'À'),
        'e': ('è', 'È'),
        'i': ('ì', 'Ì'),
        'o': ('ò', 'Ò'),
        'u': ('ù', 'Ù'),
    },
    CIRCUMFLEX: {
        'a': ('â', 'Â'),
        'e': ('ê', 'Ê'),
        'i': ('î', 'Î'),
        'o': ('ô', 'Ô'),
        'u': ('û', 'Û'),
    },
    TILDE: {
        'a': ('ã', 'Ã'),
        'n': ('ñ', 'Ñ'),
        'o': ('õ', 'Õ'),
    },
}


def is_dead_key(char):
    return char in DEAD_KEY_MARKS


def attach(mark, base, shift=False):
    """
    Compose `mark` with `base`.
    `mark` と `base` を合成

    Args:
        mark: one of DEAD_KEY_MARKS
        base: the letter typed after the dead key (any case)
              デッドキーの後に入力された文字（大文字小文字を問わない）
        shift: True to get the uppercase result
               大文字の結果を得るには True

    Returns:
        The composed character, or None if this mark has no form for `base`.
        合成された文字。その組み合わせがなければ None。
    """
    pair = COMBINATIONS.get(mark, {}).get(base.lower())
    if pair is None:
        return None
    lower, upper = pair
    return upper if shift else lower


def compose(mark, base, shift=False):
    """Like attach(), but an unknown pair comes back as the mark followed by the letter."""
    composed = attach(mark, base, shift)
    if composed is None:
        logger.debug(f'No composition for "{mark}" + "{base}"; emitting both')
        return mark + base
    return composed
