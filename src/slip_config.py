import configparser
import os
import sys
import logging

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = 'https://suba.rdcw.co.th'


def get_app_root():
    """
    Determines the root directory for the application's data files.
    - In a PyInstaller bundle, this is the directory containing the executable.
    - In a development environment, this is the project root.
    """
    if hasattr(sys, '_MEIPASS'):
        return os.path.dirname(sys.executable)
    return os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))


APP_ROOT = get_app_root()
CONFIG_FILE = os.environ.get('SLIPVERIFY_CONFIG') or os.path.join(APP_ROOT, 'slipverify_config.ini')


class SlipConfig:
    def __init__(self, config_path=CONFIG_FILE):
        self.config = configparser.ConfigParser(delimiters=('='))
        self.config_path = config_path
        self.create_default_config()
        self.load_config()

    def create_default_config(self):
        """Populates the in-memory defaults. Nothing is written until save_config() is called."""
        self.config['SLIPVERIFY'] = {
            'client_id': '',
            'client_secret': '',
            'base_url': DEFAULT_BASE_URL,
            'timeout_seconds': '30',
            'debug': 'False'
        }
        self.config['VALIDATION'] = {
            # The account and bank code that a slip must be paid into
            'expected_account': '',
            'expected_bank': '',
            'max_slip_age_hours': '24',
            'min_matching_digits': '3'
        }

    def load_config(self):
        """Loads the configuration from the .ini file on top of the defaults, if the file exists."""
        if not os.path.exists(self.config_path):
            logger.debug("Config file %s not found, using defaults.", self.config_path)
            return
        try:
            self.config.read(self.config_path, encoding='utf-8')
        except configparser.Error as e:
            logger.error(f"Failed to read config file {self.config_path}: {e}", exc_info=True)
            raise

    def save_config(self):
        """Saves the configuration to the file in plaintext format."""
        with open(self.config_path, 'w', encoding='utf-8') as configfile:
            self.config.write(configfile)
        logger.info("Configuration saved to %s", self.config_path)

    def update_config(self, section, option, value):
        """Updates a value in the config and saves the file."""
        if not self.config.has_section(section):
            self.config.add_section(section)
        self.config.set(section, option, str(value))
        self.save_config()

    def get(self, section: str, key: str, fallback=None):
        """Gets a value from the config file."""
        if self.config.has_option(section, key):
            return self.config.get(section, key)
        return fallback

    def getint(self, section, key, fallback=None):
        """Gets an integer value from the config."""
        value_str = self.get(section, key, fallback=None)
        if value_str is not None:
            try:
                return int(value_str)
            except (ValueError, TypeError):
                return fallback
        return fallback

    def getfloat(self, section, key, fallback=None):
        """Gets a float value from the config."""
        value_str = self.get(section, key, fallback=None)
        if value_str is not None:
            try:
                return float(value_str)
            except (ValueError, TypeError):
                return fallback
        return fallback


# Create a single instance to be used throughout the application
slip_config = SlipConfig(CONFIG_FILE)
