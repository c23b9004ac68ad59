"""
Settings for the reflectkit command line.

Values come from the environment, after loading the nearest .env file:

    REFLECTKIT_LOG_LEVEL   logging level name (default WARNING)
    REFLECTKIT_OUTPUT      default output format, 'table' or 'json' (default table)
"""

import logging
import os
from typing import Literal

from dotenv import load_dotenv, find_dotenv
from pydantic import BaseModel, Field, field_validator


class Settings(BaseModel):
    """Runtime settings."""
    log_level: str = Field(default="WARNING", description="Root logging level")
    output: Literal["table", "json"] = Field(default="table", description="Default output format")

    @field_validator('log_level', mode='before')
    @classmethod
    def normalize_log_level(cls, v):
        """Accept any case and reject names the logging module does not know."""
        level = str(v).upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"Unknown log level: {v}")
        return level


def load_settings() -> Settings:
    """Load .env from the working directory upwards, then read the environment."""
    load_dotenv(find_dotenv(usecwd=True))
    return Settings(
        log_level=os.getenv("REFLECTKIT_LOG_LEVEL", "WARNING"),
        output=os.getenv("REFLECTKIT_OUTPUT", "table"),
    )
