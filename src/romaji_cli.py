#!/usr/bin/env python3
"""
romaji_cli.py - Command-line interface for the transliteration core
変換コアのコマンドラインインターフェース

================================================================================
USAGE / 使用方法
================================================================================

    # Convert a keystroke string with the configured table
    # 設定されたテーブルでキー入力文字列を変換
    python romaji_cli.py convert "cice"

    # Convert with a preset or a TSV table file
    # プリセットまたはTSVテーブルファイルで変換
    python romaji_cli.py convert "cice" --preset dvorak_jp
    python romaji_cli.py convert "kaki" --table my_table.tsv

    # Emulate the JIS kana layout
    # JISかな配列をエミュレート
    python romaji_cli.py kana "qwe"

    # Compose a dead key with a letter
    # デッドキーと文字を合成
    python romaji_cli.py compose "¨" a --shift

    # Validate / export tables
    # テーブルの検証 / エクスポート
    python romaji_cli.py validate my_table.tsv
    python romaji_cli.py export --preset dvorak_jp

================================================================================
"""

import argparse
import logging
import os
import sys

# Add src directory to path if needed
src_dir = os.path.dirname(os.path.abspath(__file__))
if src_dir not in sys.path:
    sys.path.insert(0, src_dir)

import custom_table_store
import diacritic
import kana_keymap
import util
from romaji_converter import RomajiConverter
from romaji_table import PRESETS, RomajiTable, RomajiTableValidationError

logger = logging.getLogger(__name__)


def _read_table_file(path, enabled=True):
    with open(path, encoding='utf-8') as f:
        return RomajiTable.from_tsv(f.read(), enabled=enabled)


def _resolve_table(args):
    if args.table:
        table = _read_table_file(args.table)
    elif args.preset:
        table = RomajiTable.from_preset(args.preset)
    else:
        config, _ = util.get_config_data()
        if not args.verbose:
            level_name = config.get('log_level', 'WARNING')
            logging.getLogger().setLevel(util.NAME_TO_LOGGING_LEVEL.get(level_name, logging.WARNING))
        table = custom_table_store.get_configured_table(config)
    if args.disabled:
        table.enabled = False
    return table


def cmd_convert(args):
    """
    Run the text through RomajiConverter.process_string().
    テキストを RomajiConverter.process_string() に通す。
    """
    if args.table and not os.path.exists(args.table):
        print(f"ERROR: Table file not found: {args.table}", file=sys.stderr)
        return 1
    try:
        table = _resolve_table(args)
    except (OSError, UnicodeDecodeError) as e:
        print(f"ERROR: Cannot load table: {e}", file=sys.stderr)
        return 1
    logger.debug(f'Using {table!r}')
    print(RomajiConverter(table).process_string(args.text))
    return 0


def cmd_kana(args):
    print(kana_keymap.convert_to_kana(args.text))
    return 0


def cmd_compose(args):
    if not diacritic.is_dead_key(args.mark):
        print(f"ERROR: Not a dead key: {args.mark}", file=sys.stderr)
        return 1
    print(diacritic.compose(args.mark, args.letter, args.shift))
    return 0


def cmd_validate(args):
    """
    Validate a TSV table file. Exit status 1 on the first invalid mapping.
    TSVテーブルファイルを検証。最初の不正なマッピングで終了ステータス1。
    """
    if not os.path.exists(args.table):
        print(f"ERROR: Table file not found: {args.table}", file=sys.stderr)
        return 1
    try:
        table = _read_table_file(args.table)
    except (OSError, UnicodeDecodeError) as e:
        print(f"ERROR: Cannot read table file: {args.table} - {e}", file=sys.stderr)
        return 1
    try:
        table.validate()
    except RomajiTableValidationError as e:
        print(f"ERROR: {e} (romaji: {e.key!r})", file=sys.stderr)
        return 1
    print(f"OK: {table.mapping_count} mappings")
    return 0


def cmd_export(args):
    print(RomajiTable.from_preset(args.preset).export_tsv())
    return 0


def main(argv=None):
    """Main entry point for CLI."""
    parser = argparse.ArgumentParser(
        description="Romaji-to-kana transliteration tools",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    parser.add_argument('-v', '--verbose', action='store_true',
                        help='Enable verbose output')

    subparsers = parser.add_subparsers(dest='command', help='Available commands')

    convert_parser = subparsers.add_parser('convert', help='Convert typed text with a romaji table')
    convert_parser.add_argument('text', help='Keystrokes to convert')
    convert_parser.add_argument('-p', '--preset', choices=sorted(PRESETS),
                                help='Use a preset table')
    convert_parser.add_argument('-t', '--table', help='Path to a TSV table file')
    convert_parser.add_argument('--disabled', action='store_true',
                                help='Disable the table (pass-through)')

    kana_parser = subparsers.add_parser('kana', help='Map keys through the JIS kana layout')
    kana_parser.add_argument('text', help='Key labels to map')

    compose_parser = subparsers.add_parser('compose', help='Compose a dead key with a letter')
    compose_parser.add_argument('mark', help='Dead key mark (one of ¨ ´ ` ˆ ˜)')
    compose_parser.add_argument('letter', help='Base letter')
    compose_parser.add_argument('-s', '--shift', action='store_true',
                                help='Produce the uppercase form')

    validate_parser = subparsers.add_parser('validate', help='Validate a TSV table file')
    validate_parser.add_argument('table', help='Path to a TSV table file')

    export_parser = subparsers.add_parser('export', help='Print a preset as TSV')
    export_parser.add_argument('-p', '--preset', choices=sorted(PRESETS), default='dvorak_jp',
                               help='Preset to export (default: dvorak_jp)')

    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    util.setup_logging('DEBUG' if args.verbose else 'WARNING')

    if args.command == 'convert':
        return cmd_convert(args)
    elif args.command == 'kana':
        return cmd_kana(args)
    elif args.command == 'compose':
        return cmd_compose(args)
    elif args.command == 'validate':
        return cmd_validate(args)
    elif args.command == 'export':
        return cmd_export(args)
    else:
        parser.print_help()
        return 1


if __name__ == "__main__":
    sys.exit(main())
