#!/usr/bin/env python3
"""
kana_keymap.py - JIS kana layout emulation
JISかな配列のエミュレーション

================================================================================
OVERVIEW / 概要
================================================================================

With kana input (かな入力) every physical key produces one kana directly,
without any romaji step. This module maps the label printed on a US/JIS key
(lowercase) to the kana the JIS kana layout puts on that key.

かな入力では、各物理キーがローマ字を経由せずに直接かなを1文字生成する。
このモジュールはキーの刻印（小文字）から、JISかな配列がそのキーに
割り当てるかなへ変換する。

    ┌───┬───┬───┬───┬───┬───┬───┬───┬───┬───┐
    │ 1 │ 2 │ 3 │ 4 │ 5 │ 6 │ 7 │ 8 │ 9 │ 0 │
    │ ぬ│ ふ│ あ│ う│ え│ お│ や│ ゆ│ よ│ わ│
    ├───┼───┼───┼───┼───┼───┼───┼───┼───┼───┤
    │ q │ w │ e │ r │ t │ y │ u │ i │ o │ p │
    │ た│ て│ い│ す│ か│ ん│ な│ に│ ら│ せ│
    ├───┼───┼───┼───┼───┼───┼───┼───┼───┼───┘
    │ a │ s │ d │ f │ g │ h │ j │ k │ l │
    │ ち│ と│ し│ は│ き│ く│ ま│ の│ り│
    ├───┼───┼───┼───┼───┼───┼───┼───┴───┘
    │ z │ x │ c │ v │ b │ n │ m │
    │ つ│ さ│ そ│ ひ│ こ│ み│ も│
    └───┴───┴───┴───┴───┴───┴───┘

With Shift, a subset of keys gives small kana or punctuation; keys without a
shifted form fall back to the unshifted kana.
Shift を押すと一部のキーは小書きかなや句読点になる。Shift 時の割り当てが
ないキーは通常のかなにフォールバックする。

================================================================================
"""

KANA_INPUT_MAP = {
    # Number row
    '1': 'ぬ',
    '2': 'ふ',
    '3': 'あ',
    '4': 'う',
    '5': 'え',
    '6': 'お',
    '7': 'や',
    '8': 'ゆ',
    '9': 'よ',
    '0': 'わ',

    # Top row
    'q': 'た',
    'w': 'て',
    'e': 'い',
    'r': 'す',
    't': 'か',
    'y': 'ん',
    'u': 'な',
    'i': 'に',
    'o': 'ら',
    'p': 'せ',

    # Home row
    'a': 'ち',
    's': 'と',
    'd': 'し',
    'f': 'は',
    'g': 'き',
    'h': 'く',
    'j': 'ま',
    'k': 'の',
    'l': 'り',

    # Bottom row
    'z': 'つ',
    'x': 'さ',
    'c': 'そ',
    'v': 'ひ',
    'b': 'こ',
    'n': 'み',
    'm': 'も',

    # Symbols
    '-': 'ほ',
    '=': 'へ',
    '[': '゛',
    ']': '゜',
    ';': 'れ',
    "'": 'け',
    ',': 'ね',
    '.': 'る',
    '/': 'め',
    '`': 'ろ',
    '\\': 'ー',  # the Yen key on JIS keyboards
}

KANA_INPUT_SHIFT_MAP = {
    '3': 'ぁ',
    '4': 'ぅ',
    '5': 'ぇ',
    '6': 'ぉ',
    '7': 'ゃ',
    '8': 'ゅ',
    '9': 'ょ',
    '0': 'を',

    'e': 'ぃ',
    'z': 'っ',
    'v': 'ゐ',

    '-': 'ー',
    '=': 'ゑ',
    ']': '「',
    "'": 'ヶ',
    ',': '、',
    '.': '。',
    '/': '・',
}


def to_kana(key, shift_pressed=False):
    """
    Kana for a physical key label, or None if the key carries no kana.
    物理キーの刻印に対応するかな。かながなければ None。

    The label is lowercased first, so "Q" and "q" are the same key.
    """
    normalized_key = key.lower()
    if shift_pressed:
        kana = KANA_INPUT_SHIFT_MAP.get(normalized_key)
        if kana is not None:
            return kana
    return KANA_INPUT_MAP.get(normalized_key)


def convert_to_kana(text):
    """
    Map every character of `text` through to_kana() without Shift.

    This is a bulk helper for tools and tests; the live key handler has to
    track Shift per keystroke and call to_kana() directly.
    """
    return ''.join(to_kana(c) or c for c in text)
