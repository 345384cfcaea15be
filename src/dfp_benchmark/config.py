"""Configuration helpers and Settings container.

This module provides a small `Settings` dataclass and `get_settings` which
reads the MongoDB location and the sector-membership file from the
environment (a `.env` file at the project root is loaded first).
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
import os

from dotenv import load_dotenv

# Explicitly load .env from project root
PROJECT_ROOT = Path(__file__).resolve().parents[2]
load_dotenv(PROJECT_ROOT / ".env")

_TRUTHY = {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class Settings:
    """Container for configuration read from the environment.

    Attributes:
        mongo_uri: MongoDB connection URI.
        mongo_db: Target MongoDB database name.
        mongo_collection: Collection holding the DFP account records.
        mongo_tls: Whether to connect with TLS using the certifi CA bundle.
        sectors_file: YAML file listing the companies of each sector segment.
    """
    mongo_uri: str
    mongo_db: str
    mongo_collection: str
    mongo_tls: bool
    sectors_file: Path


def get_settings() -> Settings:
    """Read environment variables and return a frozen `Settings` object.

    Raises:
        RuntimeError: if `MONGO_URI` is set but blank.
    """
    mongo_uri = os.getenv("MONGO_URI", "mongodb://localhost:27017").strip()
    mongo_db = os.getenv("MONGO_DB", "rapina")
    mongo_collection = os.getenv("MONGO_COLLECTION", "dfp")
    mongo_tls = os.getenv("MONGO_TLS", "false").strip().lower() in _TRUTHY
    sectors_file = Path(os.getenv("SECTORS_FILE", "sectors.yml"))

    if not mongo_uri:
        raise RuntimeError(
            "MONGO_URI is blank. Set it in .env "
            "(example: 'mongodb://localhost:27017')."
        )

    return Settings(
        mongo_uri=mongo_uri,
        mongo_db=mongo_db,
        mongo_collection=mongo_collection,
        mongo_tls=mongo_tls,
        sectors_file=sectors_file,
    )
