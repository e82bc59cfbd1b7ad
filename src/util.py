import codecs
import json
import logging
import os
from gi.repository import GLib

logger = logging.getLogger(__name__)

NAME_TO_LOGGING_LEVEL = {
    'DEBUG': logging.DEBUG,
    'INFO': logging.INFO,
    'WARNING': logging.WARNING,
    'ERROR': logging.ERROR,
    'CRITICAL': logging.CRITICAL,
}


def get_package_name():
    '''
    returns 'ibus-romaji'
    '''
    return 'ibus-romaji'


def get_version():
    return '0.1.0'


def get_datadir():
    '''
    Return the path to the data directory under user-independent (central)
    location (= not under the HOME). IBUS_ROMAJI_DATADIR overrides it;
    otherwise it is data/ next to src/.
    '''
    datadir = os.environ.get('IBUS_ROMAJI_DATADIR')
    if datadir:
        return datadir
    return os.path.abspath(os.path.join(os.path.dirname(__file__), '..', 'data'))


def get_default_config_path():
    '''
    Return the path to the default config file in the system installation.
    This is the config.json that gets copied to user's home on first run.
    '''
    return os.path.join(get_datadir(), 'config.json')


def get_user_config_dir():
    '''
    Return the path to the config directory under $HOME.
    Typically, it would be $HOME/.config/ibus-romaji
    '''
    return os.path.join(GLib.get_user_config_dir(), get_package_name())


def get_homedir():
    '''
    Return the path to the $HOME directory.
    '''
    return GLib.get_home_dir()


def setup_logging(level_name='WARNING', logfile=None):
    '''
    Configure the root logger. Unknown level names fall back to WARNING.
    When logfile is None, records go to stderr.
    '''
    level = NAME_TO_LOGGING_LEVEL.get(str(level_name).upper(), logging.WARNING)
    logging.basicConfig(filename=logfile, level=level,
                        format='%(asctime)s %(levelname)-8s %(message)s',
                        datefmt='%Y-%m-%d %H:%M:%S')
    return level


def _append_warning(warnings, warning_msg):
    logger.warning(warning_msg)
    return warnings + ("\n" if warnings else "") + warning_msg


def get_config_data():
    '''
    This function is to load the config JSON file from the HOME/.config/ibus-romaji
    When the file is not present (e.g., after initial installation), it will copy
    the default config.json from the central location.

    Returns:
        tuple: (config_data, warnings_string) where warnings_string is empty if no warnings
    '''
    configfile_path = os.path.join(get_user_config_dir(), 'config.json')
    default_config_path = get_default_config_path()
    default_config = get_default_config_data()
    warnings = ""

    if default_config is None:
        default_config = {}

    if not os.path.exists(configfile_path):
        warnings = _append_warning(warnings, f'config.json is not found under {get_user_config_dir()} . Copying the default config.json from {default_config_path} ..')
        os.makedirs(get_user_config_dir(), exist_ok=True)
        with open(configfile_path, 'w', encoding='utf-8') as f:
            json.dump(default_config, f, ensure_ascii=False, indent=2)
        return default_config, warnings

    try:
        with codecs.open(configfile_path, encoding='utf-8') as f:
            config_data = json.load(f)
    except json.decoder.JSONDecodeError as e:
        logger.error(f'Error loading the config.json under {get_user_config_dir()}')
        logger.error(e)
        logger.error(f'Using (but not copying) the default config.json from {default_config_path} ..')
        return default_config, warnings

    for k in default_config:
        if k not in config_data:
            warnings = _append_warning(warnings, f'The key "{k}" was not found in the config.json under {get_user_config_dir()} . Copying the default key-value')
            config_data[k] = default_config[k]
        if type(config_data[k]) != type(default_config[k]):
            warnings = _append_warning(warnings, f'Type mismatch found for the key "{k}" between config.json under {get_user_config_dir()} and default config.json. Replacing the value of this key with the value in default config.json')
            config_data[k] = default_config[k]

    # Deep validation for the nested "custom_input_table" section
    table_config = config_data.get('custom_input_table')
    default_table_config = default_config.get('custom_input_table', {})
    if isinstance(table_config, dict):
        for k, default_value in default_table_config.items():
            if k not in table_config:
                warnings = _append_warning(warnings, f'The "custom_input_table.{k}" key is missing. Adding the default value.')
                table_config[k] = default_value
            elif type(table_config[k]) != type(default_value):
                warnings = _append_warning(warnings, f'The "custom_input_table.{k}" key has invalid type (expected {type(default_value).__name__}). Resetting to default.')
                table_config[k] = default_value

    return config_data, warnings


def save_config_data(config_data):
    '''
    Save config data to the user config directory.

    Args:
        config_data: Dictionary containing configuration data to save

    Returns:
        bool: True if save was successful, False otherwise
    '''
    configfile_path = os.path.join(get_user_config_dir(), 'config.json')

    try:
        # Ensure the config directory exists
        os.makedirs(get_user_config_dir(), exist_ok=True)

        # Write the config file with proper formatting
        with open(configfile_path, 'w', encoding='utf-8') as f:
            json.dump(config_data, f, ensure_ascii=False, indent=2)

        logger.info(f'Configuration saved successfully to {configfile_path}')
        return True
    except OSError as e:
        logger.error(f'Error saving config.json to {configfile_path}')
        logger.error(e)
        return False


def get_default_config_data():
    default_config_path = get_default_config_path()
    if not os.path.exists(default_config_path):
        logger.error(f'config.json is not found under {get_datadir()}. Please check that installation was done without problem!')
        return None
    with codecs.open(default_config_path, encoding='utf-8') as f:
        return json.load(f)
