import os
import json
from pathlib import Path
from dotenv import load_dotenv
from .logging_config import setup_app_logging
import logging

# Load environment variables from .env file
load_dotenv()

# Get the config directory path (where this file is located)
CONFIG_DIR = Path(__file__).parent

PROJECT_ROOT = CONFIG_DIR.parent

# Load configuration from config.json (BLOCKFLOW_CONFIG may point to an alternative file)
config_path = Path(os.getenv('BLOCKFLOW_CONFIG', CONFIG_DIR / 'config.json'))
with open(config_path, 'r', encoding='utf-8') as f:
    CONFIG = json.load(f)

CONFIG['project_root'] = str(PROJECT_ROOT)

def validate_config():
    """Validate that all required configuration sections are present.

    The hook pipeline needs the workflow settings (block area, extensions, commit
    threshold), the external command strings and the list of persistent knowledge
    documents. Server and logging settings are optional and fall back to defaults.
    """
    required_sections = ['workflow', 'commands', 'knowledge']
    for section in required_sections:
        if section not in CONFIG:
            raise ValueError(f"Missing configuration section: {section}")

    required_workflow_keys = ['blocks_dir', 'source_extensions', 'stylesheet_extensions', 'commit_threshold']
    for key in required_workflow_keys:
        if key not in CONFIG['workflow']:
            raise ValueError(f"Missing workflow setting: {key}")

    if not isinstance(CONFIG['knowledge'].get('documents', []), list):
        raise ValueError("knowledge.documents must be a list of file names")

# Validate configuration on module import
validate_config()

# --- Helper function to get config value from CONFIG or environment variable ---
def get_config_value(json_keys: list, env_var_name: str, default_value: any = None):
    """
    Retrieves a configuration value.
    Priority:
    1. Environment variable (if env_var_name is provided and variable is set).
    2. Value from CONFIG dictionary (using json_keys).
    3. default_value.
    """
    # Try environment variable first
    if env_var_name:
        env_value = os.getenv(env_var_name)
        if env_value is not None:
            # Attempt to match type of default_value if it's int or bool
            if isinstance(default_value, bool):
                if env_value.lower() == 'true': return True
                if env_value.lower() == 'false': return False
            elif isinstance(default_value, int):
                try:
                    return int(env_value)
                except ValueError:
                    pass # Fall through to JSON or default if not a valid int
            return env_value

    current_level = CONFIG
    try:
        for key in json_keys:
            current_level = current_level[key]
        if isinstance(current_level, (str, int, bool, float, list, dict)):
            return current_level
    except (KeyError, TypeError):
        pass # Key not found, fall through to default

    return default_value

# --- Workflow and command settings (environment variables take precedence) ---
CONFIG['workflow']['commit_threshold'] = get_config_value(
    ['workflow', 'commit_threshold'], 'BLOCKFLOW_COMMIT_THRESHOLD', 3
)
CONFIG['commands']['timeout_seconds'] = get_config_value(
    ['commands', 'timeout_seconds'], 'BLOCKFLOW_COMMAND_TIMEOUT', 300
)

# --- Logging Configuration ---
CONFIG['logging'] = {
    'level': get_config_value(['logging', 'level'], 'LOG_LEVEL', 'INFO'),
    'file_path': get_config_value(['logging', 'file_path'], 'LOG_FILE_PATH', 'logs/blockflow.log'),
    'max_bytes': get_config_value(['logging', 'max_bytes'], 'LOG_MAX_BYTES', 5*1024*1024), # 5MB
    'backup_count': get_config_value(['logging', 'backup_count'], 'LOG_BACKUP_COUNT', 3),
    'format': get_config_value(
        ['logging', 'format'],
        'LOG_FORMAT',
        '%(asctime)s - %(name)s - %(levelname)s - %(module)s:%(lineno)d - %(message)s'
    ),
    'date_format': get_config_value(
        ['logging', 'date_format'],
        'LOG_DATE_FORMAT',
        '%Y-%m-%d %H:%M:%S'
    )
}

# --- Setup Application Logging ---
setup_app_logging(config=CONFIG.get('logging'))

config_init_logger = logging.getLogger(__name__)
config_init_logger.info("[config_init] Logging initialized from config/__init__.py using setup_app_logging.")
