#!/usr/bin/env python3
"""
romaji_converter.py - Incremental romaji-to-kana conversion engine
インクリメンタルなローマ字→かな変換エンジン

================================================================================
OVERVIEW / 概要
================================================================================

The converter receives one character per keystroke and decides whether to
emit text now, keep waiting for more keys, or split the pending buffer and
replay the tail.

変換器はキーストロークごとに1文字を受け取り、今テキストを出力するか、
さらにキーを待つか、保留バッファを分割して残りを再処理するかを決める。

================================================================================
STATE MACHINE / 状態マシン
================================================================================

After appending the new character to the buffer, the first rule that
applies wins:
新しい文字をバッファに追加した後、最初に当てはまる規則が採用される:

    1. Table disabled        → Converted(buffer), buffer cleared
       テーブル無効           → そのまま出力、バッファをクリア
    2. Exact key match       → Converted(kana), buffer cleared
       完全一致              → かなを出力、バッファをクリア
    3. Buffer prefixes a key → Buffering, buffer kept
       キーの接頭辞          → 保留、バッファ維持
    4. Dead end:
       行き止まり:
         one grapheme        → Converted(buffer), buffer cleared
         more than one       → PartialConversion(first, rest), buffer = rest
                               the caller feeds `rest` back in, one grapheme
                               at a time / 呼び出し側が rest を1文字ずつ再投入

Example with {"ka": "か"}:
例 {"ka": "か"} の場合:

    "k" → Buffering                   buffer="k"
    "i" → PartialConversion("k","i")  buffer="i"
    "i" (replayed) → Converted("i")   buffer=""

================================================================================
GRAPHEME CLUSTERS / 書記素クラスタ
================================================================================

The buffer is counted and split by user-perceived characters (\\X in the
`regex` module), never by code points, so "か" + U+3099 stays one unit.
バッファは利用者が知覚する文字単位（regex モジュールの \\X）で数え、
分割する。コードポイント単位では分割しない。

================================================================================
"""

import logging
from collections import deque
from dataclasses import dataclass

import regex

from romaji_table import RomajiTable

logger = logging.getLogger(__name__)

GRAPHEME_PATTERN = regex.compile(r'\X')


def split_graphemes(text):
    return GRAPHEME_PATTERN.findall(text)


@dataclass(frozen=True)
class Converted:
    """Text ready to be committed to the composition."""
    text: str


@dataclass(frozen=True)
class Buffering:
    """Nothing to emit yet; the buffer may still become a key."""


@dataclass(frozen=True)
class PartialConversion:
    """The first grapheme was given up; `remaining` must be replayed."""
    emitted: str
    remaining: str


class RomajiConverter:
    """
    Stateful converter driving a RomajiTable one character at a time.
    RomajiTable を1文字ずつ駆動する状態付き変換器

    The buffer belongs to this instance alone. Calls are expected to arrive
    sequentially, one per keystroke.
    バッファはこのインスタンス専用。呼び出しはキーストロークごとに
    順番に届くことを前提とする。
    """

    def __init__(self, custom_table=None):
        self._custom_table = custom_table if custom_table is not None else RomajiTable.default_table()
        self._buffer = ''
        # Graphemes handed back by PartialConversion and not yet re-driven
        self._replay = deque()

    @property
    def custom_table(self):
        return self._custom_table

    @property
    def current_buffer(self):
        return self._buffer + ''.join(self._replay)

    @property
    def is_empty(self):
        return not self._buffer and not self._replay

    def input(self, character):
        """
        Process one keystroke.
        1キーストロークを処理

        After a PartialConversion the returned `remaining` text stays in the
        buffer until the caller feeds it back. Feeding the next expected
        grapheme moves it into the lookup instead of appending a second copy.
        PartialConversion の後、返された remaining はバッファに残り、
        呼び出し側が再投入するまで保持される。

        Args:
            character: a single grapheme cluster
                       単一の書記素クラスタ

        Returns:
            Converted, Buffering or PartialConversion
        """
        if self._replay:
            if self._replay[0] == character:
                self._replay.popleft()
            else:
                # Not a replay: the held tail is treated as typed before this key
                self._buffer += ''.join(self._replay)
                self._replay.clear()
        self._buffer += character
        table = self._custom_table

        if not table.enabled:
            return Converted(self._take_buffer())

        converted = table.convert(self._buffer)
        if converted is not None:
            logger.debug(f'Converted "{self._buffer}" -> "{converted}"')
            self._buffer = ''
            return Converted(converted)

        if table.has_prefix(self._buffer):
            return Buffering()

        graphemes = split_graphemes(self._buffer)
        if len(graphemes) <= 1:
            return Converted(self._take_buffer())

        first, rest = graphemes[0], graphemes[1:]
        self._buffer = ''
        self._replay.extendleft(reversed(rest))
        remaining = ''.join(rest)
        logger.debug(f'No key for "{first}{remaining}"; emitting "{first}", replaying "{remaining}"')
        return PartialConversion(first, remaining)

    def flush(self):
        """Return and clear whatever is buffered; None when empty."""
        if self.is_empty:
            return None
        result = self.current_buffer
        self.clear_buffer()
        return result

    def delete_last_character(self):
        """Backspace: drop the last buffered grapheme and return it."""
        if self._replay:
            return self._replay.pop()
        if not self._buffer:
            return None
        graphemes = split_graphemes(self._buffer)
        self._buffer = ''.join(graphemes[:-1])
        return graphemes[-1]

    def clear_buffer(self):
        self._buffer = ''
        self._replay.clear()

    def process_string(self, text):
        """
        Run a whole string through input() and return the final text.
        文字列全体を input() に通し、最終的なテキストを返す

        Replayed tails from PartialConversion go back to the front of the
        queue, ahead of the characters not read yet. The loop is iterative,
        so no table can make it recurse.
        PartialConversion の残りはキューの先頭（未読文字より前）に戻される。
        ループは反復的なので、どんなテーブルでも再帰は起きない。
        """
        pending = deque(split_graphemes(text))
        output = []

        while pending:
            result = self.input(pending.popleft())
            if isinstance(result, Converted):
                output.append(result.text)
            elif isinstance(result, PartialConversion):
                output.append(result.emitted)
                pending.extendleft(reversed(split_graphemes(result.remaining)))

        flushed = self.flush()
        if flushed is not None:
            output.append(flushed)
        return ''.join(output)

    def _take_buffer(self):
        result = self._buffer
        self._buffer = ''
        return result


@dataclass(frozen=True)
class CustomTableUpdated:
    """Emitted by RomajiConverterManager after a table swap."""
    table: RomajiTable


class RomajiConverterManager:
    """
    Owns the active RomajiConverter and swaps it when the table changes.
    有効な RomajiConverter を保持し、テーブル変更時に差し替える

    update_custom_table() returns a CustomTableUpdated event to the caller.
    If an `on_table_updated` observer was given, it receives the same event.
    update_custom_table() は CustomTableUpdated イベントを呼び出し側に返す。
    """

    def __init__(self, initial_table, on_table_updated=None):
        self._converter = RomajiConverter(initial_table)
        self._on_table_updated = on_table_updated

    def update_custom_table(self, table):
        # Any buffered keystrokes go away with the old converter
        self._converter = RomajiConverter(table)
        event = CustomTableUpdated(table)
        logger.info(f'Custom romaji table replaced: {table!r}')
        if self._on_table_updated is not None:
            self._on_table_updated(event)
        return event

    def process_input(self, character):
        return self._converter.input(character)

    def flush(self):
        return self._converter.flush()

    def clear_buffer(self):
        self._converter.clear_buffer()

    def delete_last_character(self):
        return self._converter.delete_last_character()

    @property
    def current_buffer(self):
        return self._converter.current_buffer

    @property
    def is_empty(self):
        return self._converter.is_empty

    @property
    def is_custom_table_enabled(self):
        return self._converter.custom_table.enabled

    @property
    def custom_table(self):
        return self._converter.custom_table
