from __future__ import annotations

import logging
import os
from dataclasses import dataclass

from dotenv import load_dotenv


load_dotenv()

RULES_PATH_DEFAULT = "rules.json"
_LOG_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG")


@dataclass(frozen=True)
class EngineSettings:
    rules_path: str
    log_level: str

    def configure_logging(self) -> None:
        logging.basicConfig(
            level=self.log_level,
            format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        )


def get_engine_settings() -> EngineSettings:
    """
    Load rules engine settings from environment variables (and `.env`).

    Reads:
      RULES_ENGINE_RULES_PATH (default: rules.json)
      RULES_ENGINE_LOG_LEVEL (default: INFO)
    """
    rules_path = os.getenv("RULES_ENGINE_RULES_PATH", "").strip() or RULES_PATH_DEFAULT
    log_level = os.getenv("RULES_ENGINE_LOG_LEVEL", "INFO").strip().upper() or "INFO"
    if log_level not in _LOG_LEVELS:
        raise ValueError(f"RULES_ENGINE_LOG_LEVEL must be one of {', '.join(_LOG_LEVELS)}.")
    return EngineSettings(rules_path=rules_path, log_level=log_level)
