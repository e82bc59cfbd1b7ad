#!/usr/bin/env python3
"""
custom_table_store.py - Persistence of the user's custom romaji table
ユーザーのカスタムローマ字テーブルの保存と読み込み

The table lives under the user config directory:
テーブルはユーザー設定ディレクトリの下に置かれる:

    ~/.config/ibus-romaji/custom_input_table/
        custom_input_table.tsv    - editor format, one "romaji<TAB>kana" per line
                                    エディタ形式、1行に "ローマ字<TAB>かな"
        custom_input_table.json   - {"enabled": bool, "mappings": {...}}

Missing files are a normal state (the user never saved a table) and give None.
Unreadable files are logged and also give None, so the engine can fall back
to a preset. Write errors propagate to the caller.
ファイルが無いのは正常な状態で None を返す。読めないファイルはログに
記録して None を返す。書き込みエラーは呼び出し側に伝播する。
"""

import logging
import os
import tempfile

import orjson

import util
from romaji_table import RomajiTable

logger = logging.getLogger(__name__)

DIRECTORY_NAME = 'custom_input_table'
TSV_FILE_NAME = 'custom_input_table.tsv'
JSON_FILE_NAME = 'custom_input_table.json'


def get_store_dir():
    return os.path.join(util.get_user_config_dir(), DIRECTORY_NAME)


def get_table_path(file_name=TSV_FILE_NAME):
    return os.path.join(get_store_dir(), file_name)


def exists(file_name=TSV_FILE_NAME):
    return os.path.isfile(get_table_path(file_name))


def _write_atomic(path, data):
    directory = os.path.dirname(path)
    os.makedirs(directory, exist_ok=True)
    fd, tmp_path = tempfile.mkstemp(dir=directory, prefix='.tmp-')
    try:
        with os.fdopen(fd, 'wb') as f:
            f.write(data)
        os.replace(tmp_path, path)
    except BaseException:
        if os.path.exists(tmp_path):
            os.unlink(tmp_path)
        raise


def save(exported, file_name=TSV_FILE_NAME):
    """
    Write exported TSV table text.

    Returns:
        str: path of the written file

    Raises:
        OSError: when the directory or file cannot be written
    """
    path = get_table_path(file_name)
    _write_atomic(path, exported.encode('utf-8'))
    logger.info(f'Custom input table saved to {path}')
    return path


def load(file_name=TSV_FILE_NAME):
    """Return the stored TSV text, or None if there is none (or it is unreadable)."""
    path = get_table_path(file_name)
    if not os.path.isfile(path):
        logger.debug(f'Custom input table not found: {path}')
        return None
    try:
        with open(path, encoding='utf-8') as f:
            return f.read()
    except (OSError, UnicodeDecodeError) as e:
        logger.error(f'Failed to read custom input table: {path} - {e}')
        return None


def load_table(enabled=True, file_name=TSV_FILE_NAME):
    text = load(file_name)
    if text is None:
        return None
    table = RomajiTable.from_tsv(text, enabled=enabled)
    logger.info(f'Loaded custom input table ({table.mapping_count} mappings)')
    return table


def save_table(table):
    """Write `table` as a JSON document and return the path."""
    path = get_table_path(JSON_FILE_NAME)
    _write_atomic(path, orjson.dumps(table.to_dict(), option=orjson.OPT_INDENT_2))
    logger.info(f'Custom input table saved to {path}')
    return path


def load_table_json():
    path = get_table_path(JSON_FILE_NAME)
    if not os.path.isfile(path):
        return None
    try:
        with open(path, 'rb') as f:
            data = orjson.loads(f.read())
    except orjson.JSONDecodeError as e:
        logger.error(f'Failed to parse custom input table JSON: {path} - {e}')
        return None
    except OSError as e:
        logger.error(f'Failed to read custom input table JSON: {path} - {e}')
        return None

    if not isinstance(data, dict):
        logger.warning(f'Invalid custom input table format (expected dict): {path}')
        return None
    if not isinstance(data.get('mappings', {}), dict):
        logger.warning(f'Invalid custom input table format ("mappings" must be a dict): {path}')
        return None
    return RomajiTable.from_dict(data)


def get_configured_table(config):
    """
    Resolve the table the engine should start with.
    エンジンが起動時に使うテーブルを決定

        custom_input_table.enabled is false  → default (disabled) table
        stored TSV file exists               → that table, enabled
        otherwise                            → the configured preset
    """
    table_config = (config or {}).get('custom_input_table', {})
    if not isinstance(table_config, dict):
        logger.warning('Invalid "custom_input_table" in config (expected dict); using the default table')
        return RomajiTable.default_table()
    if not table_config.get('enabled', False):
        return RomajiTable.default_table()

    stored = load_table(enabled=True, file_name=table_config.get('file', TSV_FILE_NAME))
    if stored is not None:
        return stored

    preset = table_config.get('preset', 'default')
    try:
        return RomajiTable.from_preset(preset)
    except KeyError:
        logger.warning(f'Unknown preset "{preset}" in config; using the default table')
        return RomajiTable.default_table()
