#!/usr/bin/env python3
"""
romaji_table.py - Customizable romaji-to-kana mapping table
カスタマイズ可能なローマ字→かなマッピングテーブル

================================================================================
OVERVIEW / 概要
================================================================================

A RomajiTable is a flat dictionary of "what the user types" to "what should
appear", plus an on/off switch. The converter (romaji_converter.py) asks it
two questions per keystroke:

RomajiTable は「ユーザーが打つもの」から「表示されるもの」へのフラットな
辞書と、有効/無効スイッチから成る。変換器 (romaji_converter.py) は
キーストロークごとに2つの質問をする:

    1. convert(buffer)     - Is the buffer a complete key?
                             バッファは完全なキーか？
    2. has_prefix(buffer)  - Could the buffer still grow into a key?
                             バッファはまだキーに成長しうるか？

When the table is disabled, both questions answer "no" and the converter
falls back to pass-through.
テーブルが無効な場合、どちらの質問も「いいえ」を返し、変換器は
素通しモードになる。

================================================================================
TABLE TEXT FORMAT / テーブルのテキスト形式
================================================================================

Tables are exchanged with the editor and stored on disk as TSV lines:
テーブルはエディタとの間で TSV 行としてやり取りされ、ディスクに保存される:

    ka<TAB>か
    jh;<TAB>じゃん

Lines that do not split into exactly two fields are ignored.
ちょうど2フィールドに分割できない行は無視される。

================================================================================
"""

import logging

logger = logging.getLogger(__name__)

ROMAJI_ALLOWED_CHARS = frozenset(
    'abcdefghijklmnopqrstuvwxyz'
    'ABCDEFGHIJKLMNOPQRSTUVWXYZ'
    '0123456789'
    ';-'
)

HIRAGANA_FIRST = 0x3040
HIRAGANA_LAST = 0x309F


class RomajiTableValidationError(ValueError):
    """Base class for table validation failures.

    The message is meant to be shown to the user as-is.
    """

    message = 'ローマ字テーブルが不正です / The romaji table is invalid'

    def __init__(self, key=None):
        self.key = key
        super().__init__(self.message)


class EmptyRomajiError(RomajiTableValidationError):
    message = 'ローマ字が空です / Romaji is empty'


class EmptyKanaError(RomajiTableValidationError):
    message = 'ひらがなが空です / Kana is empty'


class InvalidRomajiCharactersError(RomajiTableValidationError):
    message = 'ローマ字に無効な文字が含まれています / Romaji contains invalid characters'


class InvalidKanaCharactersError(RomajiTableValidationError):
    message = 'ひらがなに無効な文字が含まれています / Kana contains invalid characters'


def is_valid_romaji(key):
    return all(c in ROMAJI_ALLOWED_CHARS for c in key)


def is_hiragana(value):
    return all(HIRAGANA_FIRST <= ord(c) <= HIRAGANA_LAST for c in value)


def parse_tsv(text):
    """Split table text into (key, value) pairs.

    Args:
        text: TSV content, one "key<TAB>value" mapping per line

    Returns:
        List of (key, value) tuples in file order. Malformed lines
        (zero or more than one TAB) are skipped.
    """
    pairs = []
    for line in text.split('\n'):
        fields = line.rstrip('\r').split('\t')
        if len(fields) != 2:
            if line.strip():
                logger.debug(f'Skipping malformed table line: {line!r}')
            continue
        pairs.append((fields[0], fields[1]))
    return pairs


class RomajiTable:
    """
    Mapping table used by RomajiConverter.
    RomajiConverter が使うマッピングテーブル

    ─────────────────────────────────────────────────────────────────────────────
    ATTRIBUTES / 属性
    ─────────────────────────────────────────────────────────────────────────────
    • mappings: dict of romaji key -> kana value
                ローマ字キー -> かな値 の辞書
    • enabled:  when False, every lookup reports "no match"
                False の場合、全てのルックアップが「一致なし」を返す

    Keys are matched exactly; case must be normalized by whoever builds the
    table (the presets use lowercase keys).
    キーは完全一致で照合される。大文字小文字の正規化はテーブル作成側の責任
    （プリセットは小文字キーを使う）。
    """

    def __init__(self, mappings=None, enabled=False):
        self.mappings = dict(mappings) if mappings else {}
        self.enabled = enabled

    def __eq__(self, other):
        if not isinstance(other, RomajiTable):
            return NotImplemented
        return self.enabled == other.enabled and self.mappings == other.mappings

    def __repr__(self):
        return f'RomajiTable({self.mapping_count} mappings, enabled={self.enabled})'

    # ─── Presets ──────────────────────────────────────────────────────────

    @classmethod
    def default_table(cls):
        """Empty and disabled: the converter passes every character through."""
        return cls({}, enabled=False)

    @classmethod
    def dvorak_jp_table(cls):
        return cls(DVORAK_JP_MAPPINGS, enabled=True)

    @classmethod
    def from_preset(cls, name):
        """
        Build a table from a preset name ('default' or 'dvorak_jp').

        Raises:
            KeyError: when the preset name is unknown
        """
        try:
            factory = PRESETS[name]
        except KeyError:
            raise KeyError(f'Unknown romaji table preset: {name}') from None
        return factory()

    # ─── Lookup ───────────────────────────────────────────────────────────

    def convert(self, text):
        """Return the kana for an exact key match, or None."""
        if not self.enabled:
            return None
        return self.mappings.get(text)

    def has_prefix(self, prefix):
        """True if some key starts with `prefix` (an exact key counts too)."""
        if not self.enabled:
            return False
        return any(key.startswith(prefix) for key in self.mappings)

    def can_start_conversion(self, text):
        """
        True if some key and `text` are prefixes of one another in either
        direction. The converter itself only needs has_prefix(); this is
        for callers that want to know whether `text` overlaps any key at all.
        """
        if not self.enabled:
            return False
        return any(key.startswith(text) or text.startswith(key)
                   for key in self.mappings)

    # ─── Mutation ─────────────────────────────────────────────────────────

    def add_mapping(self, key, value):
        self.mappings[key] = value

    def remove_mapping(self, key):
        self.mappings.pop(key, None)

    def clear_mappings(self):
        self.mappings.clear()

    @property
    def mapping_count(self):
        return len(self.mappings)

    # ─── Validation ───────────────────────────────────────────────────────

    def validate(self):
        """
        Check every mapping and raise on the first invalid one.
        全マッピングを検査し、最初に見つかった不正なものでエラーを送出

        The scan stops at the first violation; it does not collect all of
        them. When several mappings are broken at once, which error comes
        out depends on iteration order.
        最初の違反で走査を止める。全ての違反は収集しない。

        Raises:
            EmptyRomajiError, EmptyKanaError,
            InvalidRomajiCharactersError, InvalidKanaCharactersError
        """
        for key, value in self.mappings.items():
            if not key:
                raise EmptyRomajiError(key)
            if not value:
                raise EmptyKanaError(key)
            if not is_valid_romaji(key):
                raise InvalidRomajiCharactersError(key)
            if not is_hiragana(value):
                raise InvalidKanaCharactersError(key)

    # ─── Serialization ────────────────────────────────────────────────────

    def export_tsv(self):
        return '\n'.join(f'{key}\t{value}' for key, value in self.mappings.items())

    @classmethod
    def from_tsv(cls, text, enabled=True):
        table = cls(enabled=enabled)
        for key, value in parse_tsv(text):
            if key in table.mappings:
                logger.warning(f'Duplicate romaji "{key}" in table text; '
                               f'"{table.mappings[key]}" is replaced by "{value}"')
            table.mappings[key] = value
        return table

    def to_dict(self):
        return {'enabled': self.enabled, 'mappings': dict(self.mappings)}

    @classmethod
    def from_dict(cls, data):
        """Inverse of to_dict(). Non-string entries are dropped."""
        mappings = data.get('mappings') or {}
        if not isinstance(mappings, dict):
            logger.warning(f'Ignoring mappings of type {type(mappings).__name__} (expected dict)')
            mappings = {}
        clean = {}
        for key, value in mappings.items():
            if isinstance(key, str) and isinstance(value, str):
                clean[key] = value
            else:
                logger.warning(f'Ignoring non-string mapping: {key!r} -> {value!r}')
        return cls(clean, enabled=bool(data.get('enabled', False)))


# DvorakJP layout: consonant on the left hand, vowel on the right.
DVORAK_JP_MAPPINGS = {
    'ci': 'か',
    'ce': 'け',
    'jh;': 'じゃん',
    'cu': 'く',
    'co': 'こ',
    'ca': 'が',
    'qi': 'し',
    'qe': 'せ',
    'qu': 'す',
    'qo': 'そ',
    'qa': 'ざ',
    'ji': 'ち',
    'je': 'て',
    'ju': 'つ',
    'jo': 'と',
    'ja': 'だ',
    'xi': 'に',
    'xe': 'ね',
    'xu': 'ぬ',
    'xo': 'の',
    'xa': 'な',
    'bi': 'ひ',
    'be': 'へ',
    'bu': 'ふ',
    'bo': 'ほ',
    'ba': 'ば',
    'mi': 'み',
    'me': 'め',
    'mu': 'む',
    'mo': 'も',
    'ma': 'ま',
    'wi': 'り',
    'we': 'れ',
    'wu': 'る',
    'wo': 'ろ',
    'wa': 'ら',
    'vi': 'ゆ',
    've': 'よ',
    'vu': 'や',
    'vo': 'ゆ',
    'va': 'ゆ',
}

PRESETS = {
    'default': RomajiTable.default_table,
    'dvorak_jp': RomajiTable.dvorak_jp_table,
}
