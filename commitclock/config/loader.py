"""
Configuration loading for commit-clock.

Handles loading configuration from ~/.commitclock/config.json with sensible
defaults. Theme tables and chart dimensions live here and are passed into
the renderer explicitly.
"""

import copy
import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional

logger = logging.getLogger("commitclock.config")

# Default configuration with all themes and chart dimensions
DEFAULT_CONFIG: Dict[str, Any] = {
    "github": {
        "api_url": "https://api.github.com",
        "graphql_url": "https://api.github.com/graphql",
        "token_env": "GITHUB_TOKEN",
        "user_agent": "commit-clock",
        "timeout_seconds": 10.0,
    },

    # How much history each data source considers
    "activity": {
        "events_window_days": 90,
        "search_days": 21,
        "rolling_days": 30,
    },

    # background / text / muted (rings, axes) / accent (markers)
    "themes": {
        "light": {"background": "#ffffff", "text": "#222222", "muted": "#d0d7de", "accent": "#111111"},
        "dark": {"background": "#111111", "text": "#eeeeee", "muted": "#30363d", "accent": "#00ffaa"},
        "green": {"background": "#ffffff", "text": "#1f2328", "muted": "#d1fae5", "accent": "#10b981"},
        "blue": {"background": "#ffffff", "text": "#1f2328", "muted": "#dbeafe", "accent": "#0077ff"},
        "purple": {"background": "#ffffff", "text": "#1f2328", "muted": "#f3e8ff", "accent": "#a855f7"},
        "orange": {"background": "#ffffff", "text": "#1f2328", "muted": "#ffedd5", "accent": "#f97316"},
        # accent unused: markers follow the green-to-red gradient
        "colorful": {"background": "#0d1117", "text": "#c9d1d9", "muted": "#30363d", "accent": "#2ea043"},
    },

    "chart": {
        "font_family": "-apple-system, BlinkMacSystemFont, 'Segoe UI', Helvetica, Arial, sans-serif",
        "font_size": 10,
        "label_every_hours": 3,
        "grid": {
            "cell_size": 14,
            "cell_gap": 2,
            "offset_x": 40,
            "offset_y": 24,
            "padding": 10,
            "caption_height": 28,
        },
        "radial": {
            "size": 420,
            "caption_height": 24,
            "base_radius": 60,
            "ring_spacing": 17,
            "label_offset": 14,
            "min_marker": 2.0,
            "max_marker": 7.0,
        },
        "circular_bars": {
            "size": 420,
            "caption_height": 24,
            "inner_radius": 70,
            "max_bar_length": 110,
            "bar_width": 6,
            "label_offset": 14,
            "label_every_days": 5,
        },
        "error": {
            "width": 480,
            "height": 60,
            "font_size": 16,
            "color": "#d1242f",
        },
    },

    # Cache-Control lifetime for successful renders
    "cache": {
        "max_age_seconds": 1800,
    },

    "server": {
        "host": "0.0.0.0",
        "port": 8080,
    },
}


def get_config_path() -> Path:
    """Get path to config file."""
    return Path.home() / ".commitclock" / "config.json"


def get_github_token(config: Dict[str, Any]) -> Optional[str]:
    """Read the GitHub token from the environment variable named in config."""
    token = os.environ.get(config["github"]["token_env"], "").strip()
    return token or None


def get_theme_colors(config: Dict[str, Any], theme: str) -> Dict[str, str]:
    """Get the color table for a theme, falling back to light."""
    themes = config["themes"]
    return themes.get(theme) or themes["light"]


def load_config() -> Dict[str, Any]:
    """
    Load configuration from file, merging with defaults.

    Returns a complete configuration with all default values filled in.
    User config overrides defaults where specified.
    """
    config = copy.deepcopy(DEFAULT_CONFIG)
    config_path = get_config_path()

    if config_path.exists():
        try:
            with open(config_path, 'r', encoding='utf-8') as f:
                user_config = json.load(f)

            # Deep merge theme tables, new themes are added whole
            if isinstance(user_config.get('themes'), dict):
                for theme, colors in user_config['themes'].items():
                    if theme in config['themes']:
                        config['themes'][theme].update(colors)
                    else:
                        config['themes'][theme] = colors

            # Chart sections merge one level deeper
            if isinstance(user_config.get('chart'), dict):
                for key, value in user_config['chart'].items():
                    if isinstance(value, dict) and isinstance(config['chart'].get(key), dict):
                        config['chart'][key].update(value)
                    else:
                        config['chart'][key] = value

            # Shallow merge other sections
            for key in ['github', 'activity', 'cache', 'server']:
                if key in user_config and isinstance(user_config[key], dict):
                    config[key].update(user_config[key])

        except json.JSONDecodeError as e:
            logger.warning("Could not parse config file %s: %s", config_path, e)
        except OSError as e:
            logger.warning("Error loading config %s: %s", config_path, e)

    return config


def save_config(config: Dict[str, Any]) -> None:
    """Save configuration to file."""
    config_path = get_config_path()
    config_path.parent.mkdir(parents=True, exist_ok=True)

    with open(config_path, 'w', encoding='utf-8') as f:
        json.dump(config, f, indent=2)
