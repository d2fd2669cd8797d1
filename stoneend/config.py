import os

import yaml
from dotenv import load_dotenv

from stoneend.errors import ContentError
from stoneend.loader import load_yaml

CONFIG_PATH = "config.yaml"

DEFAULT_CONFIG = """
# STONE END CONFIGURATION
# -----------------------
# Paths are relative to the directory the game is started from.
# STONEEND_LEVEL_PATH, STONEEND_ITEMS_PATH and STONEEND_SAVE_PATH
# (in the environment or a .env file) take precedence over these.

level_path: data/levels/stone-end-market.yaml
items_path: data/items.yaml
save_path: data/save-state.yaml
intro_path: data/intro.txt
help_path: data/help.txt
debug_mode: false
"""

ENV_OVERRIDES = {
    "level_path": "STONEEND_LEVEL_PATH",
    "items_path": "STONEEND_ITEMS_PATH",
    "save_path": "STONEEND_SAVE_PATH",
}


def load_config(config_path=CONFIG_PATH):
    """
    Loads config.yaml or creates default if missing.
    """
    load_dotenv()

    if not os.path.exists(config_path):
        with open(config_path, "w") as f:
            f.write(DEFAULT_CONFIG.strip() + "\n")

    stored = load_yaml(config_path) or {}
    if not isinstance(stored, dict):
        raise ContentError(f"{config_path}: the configuration should be a mapping.")

    config = yaml.safe_load(DEFAULT_CONFIG)
    config.update(stored)

    for key, variable in ENV_OVERRIDES.items():
        if os.getenv(variable):
            config[key] = os.getenv(variable)
    return config
