import tomllib
import shutil
from pathlib import Path
from typing import Any, Dict, Optional
from dotenv import load_dotenv
import os

from utils.errors import ConfigError

CONFIG_DIR = Path.home() / ".multidrill"
CONFIG_PATH = CONFIG_DIR / "config.toml"
PROJECT_CONFIG_EXAMPLE = Path(__file__).parent / "config.toml"

DEFAULT_GAME = {
    "question_count": 0,  # 0 = one pass over the active deck
    "default_focus": "weak",
}

FOCUS_VALUES = ("weak", "strong", "slow")

DEFAULT_SCORING = {
    "base_points": 10,
    "speed_bonus": 5,
    "time_weight": 0.3,
}

def load_config() -> Dict[str, Any]:
    """Load config from ~/.multidrill/config.toml, copy example if missing, load .env overrides."""
    load_dotenv()
    if not CONFIG_PATH.exists():
        CONFIG_DIR.mkdir(parents=True, exist_ok=True)
        shutil.copy(PROJECT_CONFIG_EXAMPLE, CONFIG_PATH)
    with open(CONFIG_PATH, "rb") as f:
        config = tomllib.load(f)

    game_cfg = config.get("game", {})
    config["game"] = {
        "question_count": int(os.getenv(
            "MULTIDRILL_QUESTION_COUNT",
            game_cfg.get("question_count", DEFAULT_GAME["question_count"])
        )),
        "default_focus": os.getenv(
            "MULTIDRILL_DEFAULT_FOCUS",
            game_cfg.get("default_focus", DEFAULT_GAME["default_focus"])
        ).lower(),
    }
    if config["game"]["question_count"] < 0:
        raise ConfigError(
            f"game.question_count must be 0 or more, got {config['game']['question_count']}"
        )
    if config["game"]["default_focus"] not in FOCUS_VALUES:
        raise ConfigError(
            f"game.default_focus must be one of {', '.join(FOCUS_VALUES)}"
        )
    scoring_cfg = config.get("scoring", {})
    config["scoring"] = {
        "base_points": int(os.getenv(
            "MULTIDRILL_BASE_POINTS",
            scoring_cfg.get("base_points", DEFAULT_SCORING["base_points"])
        )),
        "speed_bonus": int(os.getenv(
            "MULTIDRILL_SPEED_BONUS",
            scoring_cfg.get("speed_bonus", DEFAULT_SCORING["speed_bonus"])
        )),
        "time_weight": float(os.getenv(
            "MULTIDRILL_TIME_WEIGHT",
            scoring_cfg.get("time_weight", DEFAULT_SCORING["time_weight"])
        )),
    }
    return config

def get_config_value(section: str, key: str, default: Optional[Any] = None) -> Any:
    """Get nested config value, e.g., get_config_value('game', 'question_count')."""
    config = load_config()
    value = config.get(section, {}).get(key, default)
    return value
