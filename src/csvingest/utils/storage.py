"""Config storage as a JSON file in the user's home directory."""

import json
import logging

from pydantic import ValidationError

from csvingest.models.config import CONFIG_DIR, CONFIG_FILE, IngestConfig

logger = logging.getLogger(__name__)


def load_config() -> IngestConfig:
    """Load config from disk, falling back to defaults when missing or invalid."""
    if not CONFIG_FILE.exists():
        return IngestConfig()

    try:
        raw = json.loads(CONFIG_FILE.read_text(encoding="utf-8"))
    except (json.JSONDecodeError, OSError) as e:
        logger.warning("Failed to read config file: %s", e)
        return IngestConfig()

    try:
        return IngestConfig.model_validate(raw)
    except ValidationError as e:
        logger.warning("Invalid config file %s, using defaults: %s", CONFIG_FILE, e)
        return IngestConfig()


def save_config(config: IngestConfig) -> None:
    """Save config to disk."""
    CONFIG_DIR.mkdir(parents=True, exist_ok=True)
    CONFIG_FILE.write_text(json.dumps(config.model_dump(), indent=2, ensure_ascii=False), encoding="utf-8")
    logger.info("Config saved to %s", CONFIG_FILE)
