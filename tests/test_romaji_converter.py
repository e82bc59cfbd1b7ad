#!/usr/bin/env python3
# tests/test_romaji_converter.py - Unit tests for romaji_converter.py

import pytest
import os
import sys
from unittest.mock import MagicMock

# Add src directory to path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from romaji_converter import (
    RomajiConverter,
    RomajiConverterManager,
    Converted,
    Buffering,
    PartialConversion,
    CustomTableUpdated,
    split_graphemes,
)
from romaji_table import RomajiTable


def make_table(mappings, enabled=True):
    return RomajiTable(mappings, enabled=enabled)


@pytest.fixture
def ka_converter():
    return RomajiConverter(make_table({"ka": "か"}))


@pytest.fixture
def gyou_table():
    return make_table({"ka": "か", "ki": "き", "ku": "く", "ke": "け", "ko": "こ"})


class TestConversionResult:
    """Test suite for the result values"""

    def test_equality(self):
        assert Converted("あ") == Converted("あ")
        assert Converted("あ") != Converted("い")
        assert Converted("あ") != Buffering()
        assert Buffering() == Buffering()
        assert PartialConversion("あ", "い") == PartialConversion("あ", "い")
        assert PartialConversion("あ", "い") != PartialConversion("あ", "う")

    def test_results_are_immutable(self):
        result = Converted("あ")
        with pytest.raises(Exception):
            result.text = "い"


class TestInput:
    """Test suite for input() state transitions"""

    def test_buffering_then_exact_match(self, ka_converter):
        assert ka_converter.input("k") == Buffering()
        assert ka_converter.current_buffer == "k"
        assert ka_converter.input("a") == Converted("か")
        assert ka_converter.is_empty

    def test_long_key(self):
        converter = RomajiConverter(make_table({"jh;": "じゃん"}))
        assert converter.input("j") == Buffering()
        assert converter.input("h") == Buffering()
        assert converter.input(";") == Converted("じゃん")
        assert converter.is_empty

    def test_partial_conversion_and_replay(self, ka_converter):
        assert ka_converter.input("k") == Buffering()
        assert ka_converter.input("i") == PartialConversion("k", "i")
        assert ka_converter.current_buffer == "i"
        assert ka_converter.input("i") == Converted("i")
        assert ka_converter.is_empty

    def test_single_unmatched_character_passes_through(self, ka_converter):
        assert ka_converter.input("x") == Converted("x")
        assert ka_converter.is_empty

    def test_exact_match_wins_over_longer_key(self):
        converter = RomajiConverter(make_table({"a": "あ", "aa": "ああ"}))
        assert converter.input("a") == Converted("あ")
        assert converter.input("b") == Converted("b")

    def test_disabled_table_passes_through(self):
        converter = RomajiConverter(make_table({"ci": "か"}, enabled=False))
        for char in "cixyz":
            assert converter.input(char) == Converted(char)
            assert converter.is_empty

    def test_default_table_passes_through(self):
        converter = RomajiConverter()
        assert converter.custom_table == RomajiTable.default_table()
        assert converter.input("a") == Converted("a")

    def test_no_case_folding(self, ka_converter):
        assert ka_converter.input("K") == Converted("K")

    def test_replay_of_longer_tail(self):
        converter = RomajiConverter(make_table({"abc": "X"}))
        assert converter.input("a") == Buffering()
        assert converter.input("b") == Buffering()
        assert converter.input("a") == PartialConversion("a", "ba")
        assert converter.current_buffer == "ba"
        assert converter.input("b") == Converted("b")
        assert converter.current_buffer == "a"
        assert converter.input("a") == Buffering()
        assert converter.input("b") == Buffering()
        assert converter.input("c") == Converted("X")
        assert converter.is_empty

    def test_new_key_instead_of_replay_appends_after_tail(self, ka_converter):
        ka_converter.input("k")
        assert ka_converter.input("k") == PartialConversion("k", "k")
        # "a" is typed instead of replaying "k": the held "k" comes first
        assert ka_converter.input("a") == Converted("か")
        assert ka_converter.is_empty


class TestBufferOperations:
    """Test suite for flush / delete_last_character / clear_buffer"""

    def test_flush_empty_returns_none(self, ka_converter):
        assert ka_converter.flush() is None
        assert ka_converter.flush() is None

    def test_flush_after_buffering(self):
        converter = RomajiConverter(make_table({"ci": "か"}))
        converter.input("c")
        assert converter.flush() == "c"
        assert converter.is_empty
        assert converter.flush() is None

    def test_flush_includes_unreplayed_tail(self, ka_converter):
        ka_converter.input("k")
        ka_converter.input("i")
        assert ka_converter.flush() == "i"
        assert ka_converter.is_empty

    def test_delete_last_character(self):
        converter = RomajiConverter(make_table({"kya": "きゃ"}))
        converter.input("k")
        converter.input("y")
        assert converter.delete_last_character() == "y"
        assert converter.current_buffer == "k"
        assert converter.delete_last_character() == "k"
        assert converter.delete_last_character() is None
        assert converter.is_empty

    def test_delete_from_unreplayed_tail(self, ka_converter):
        ka_converter.input("k")
        ka_converter.input("i")
        assert ka_converter.delete_last_character() == "i"
        assert ka_converter.is_empty

    def test_clear_buffer(self, ka_converter):
        ka_converter.input("k")
        ka_converter.clear_buffer()
        assert ka_converter.is_empty
        assert ka_converter.current_buffer == ""

    def test_clear_buffer_when_empty(self, ka_converter):
        ka_converter.clear_buffer()
        assert ka_converter.is_empty


class TestGraphemes:
    """Test suite for grapheme-aware buffering"""

    def test_split_graphemes_keeps_combining_marks(self):
        assert split_graphemes("\u304b\u3099a") == ["\u304b\u3099", "a"]

    def test_partial_conversion_does_not_split_cluster(self):
        converter = RomajiConverter(make_table({"e\u0301x": "え"}))
        assert converter.input("e\u0301") == Buffering()
        assert converter.input("y") == PartialConversion("e\u0301", "y")

    def test_delete_last_removes_whole_cluster(self):
        converter = RomajiConverter(make_table({"ae\u0301x": "あ"}))
        converter.input("a")
        converter.input("e\u0301")
        assert converter.delete_last_character() == "e\u0301"
        assert converter.current_buffer == "a"

    def test_single_cluster_passes_through(self):
        converter = RomajiConverter(make_table({"ka": "か"}))
        assert converter.input("e\u0301") == Converted("e\u0301")

    def test_combining_mark_joins_buffered_character(self):
        converter = RomajiConverter(make_table({"\u304b\u3099x": "\u304c"}))
        assert converter.input("\u304b") == Buffering()
        assert converter.input("\u3099") == Buffering()
        assert converter.delete_last_character() == "\u304b\u3099"
        assert converter.is_empty


class TestProcessString:
    """Test suite for process_string()"""

    def test_sequence(self, gyou_table):
        assert RomajiConverter(gyou_table).process_string("kakikukeko") == "かきくけこ"

    def test_dvorak_jp(self):
        assert RomajiConverter(RomajiTable.dvorak_jp_table()).process_string("cice") == "かけ"

    def test_partial_conversions_are_replayed(self, ka_converter):
        assert ka_converter.process_string("kika") == "kiか"
        assert ka_converter.is_empty

    def test_replayed_tail_comes_before_unread_input(self):
        converter = RomajiConverter(make_table({"abc": "X", "ba": "Y"}))
        # "a" is given up, then the replayed "ba" matches
        assert converter.process_string("aba") == "aY"

    def test_trailing_buffer_is_flushed(self, ka_converter):
        assert ka_converter.process_string("kak") == "かk"
        assert ka_converter.is_empty

    def test_disabled(self):
        converter = RomajiConverter(make_table({"ka": "か"}, enabled=False))
        assert converter.process_string("kaki") == "kaki"

    def test_empty_input(self, ka_converter):
        assert ka_converter.process_string("") == ""

    def test_round_trip_without_mutual_prefixes(self):
        mappings = {"ci": "か", "qe": "せ", "jh;": "じゃん", "xo": "の", "ba": "ば"}
        converter = RomajiConverter(make_table(mappings))
        keys = list(mappings)
        assert converter.process_string("".join(keys)) == "".join(mappings[k] for k in keys)

    def test_long_unmatched_run_does_not_recurse(self):
        converter = RomajiConverter(make_table({"a" * 50 + "b": "X"}))
        text = "a" * 50 + "c"
        assert converter.process_string(text * 20) == text * 20


class TestRomajiConverterManager:
    """Test suite for RomajiConverterManager"""

    def test_forwarding(self):
        manager = RomajiConverterManager(make_table({"ka": "か"}))
        assert manager.is_custom_table_enabled
        assert manager.is_empty
        assert manager.process_input("k") == Buffering()
        assert manager.current_buffer == "k"
        assert manager.delete_last_character() == "k"
        manager.process_input("k")
        assert manager.flush() == "k"
        manager.process_input("k")
        manager.clear_buffer()
        assert manager.is_empty

    def test_disabled_table(self):
        manager = RomajiConverterManager(RomajiTable.default_table())
        assert not manager.is_custom_table_enabled
        assert manager.process_input("a") == Converted("a")
        assert manager.is_empty

    def test_update_returns_event_and_notifies_observer(self):
        observer = MagicMock()
        manager = RomajiConverterManager(RomajiTable.dvorak_jp_table(), on_table_updated=observer)
        new_table = make_table({"test": "てすと"})

        event = manager.update_custom_table(new_table)

        assert event == CustomTableUpdated(new_table)
        observer.assert_called_once_with(event)
        assert manager.custom_table is new_table
        assert manager.process_input("t") == Buffering()

    def test_update_without_observer(self):
        manager = RomajiConverterManager(RomajiTable.default_table())
        event = manager.update_custom_table(RomajiTable.dvorak_jp_table())
        assert event.table.enabled
        assert manager.is_custom_table_enabled

    def test_update_discards_buffer(self):
        manager = RomajiConverterManager(make_table({"ka": "か"}))
        manager.process_input("k")
        manager.update_custom_table(make_table({"ka": "か"}))
        assert manager.is_empty
        assert manager.flush() is None
