import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)

CONFIG_FILE_NAME = "repodocs.json"

DEFAULT_CONFIG: Dict[str, Any] = {
    'registry_file': 'sources.json',
    'github_api': 'https://api.github.com',
    'request_timeout': 15,
    'log_dir': 'logs',
    'default_ref': 'main',
}

# Keys holding filesystem paths, resolved against the config file's directory
PATH_KEYS = ('registry_file', 'log_dir')

def load_config(config_file: Optional[Path] = None) -> Dict[str, Any]:
    """Load configuration, falling back to defaults for anything missing or unreadable."""
    config_file = Path(config_file) if config_file else Path.cwd() / CONFIG_FILE_NAME
    config = dict(DEFAULT_CONFIG)
    if config_file.exists():
        try:
            with open(config_file, 'r', encoding='utf-8') as f:
                loaded = json.load(f)
            if isinstance(loaded, dict):
                config.update(loaded)
            else:
                logger.error(f"Ignoring config {config_file}: expected a JSON object")
        except Exception as e:
            logger.error(f"Failed to load config: {e}")

    base_dir = config_file.parent
    for key in PATH_KEYS:
        value = config.get(key)
        if value and not Path(value).is_absolute():
            config[key] = str(base_dir / value)
    return config

def save_config(config: Dict[str, Any], config_file: Path) -> None:
    try:
        with open(config_file, 'w', encoding='utf-8') as f:
            json.dump(config, f, indent=2)
        logger.info("Configuration saved successfully")
    except Exception as e:
        logger.error(f"Failed to save config: {e}")
