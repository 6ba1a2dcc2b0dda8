"""Application Settings and Configuration.

This module provides application-wide settings loaded from environment
variables with defaults suitable for local use.

Variables:
    PHARMA_APP_NAME: Display name
    PHARMA_LOG_LEVEL: Root log level
    PHARMA_LOG_JSON: Emit JSON structured logs
    PHARMA_STRICT_VALUES: Abort the build on malformed dates and numbers
    PHARMA_DATE_FORMAT: Certificate date format
    PHARMA_SCHEMA_PATH: Default XSD used for preflight validation
    PHARMA_MAX_DOCUMENT_SIZE: Largest document the loader accepts, in bytes
"""

import os
from pathlib import Path

# Application metadata
APP_NAME = "Pharmacopoeia"
APP_VERSION = "1.0.0"

# Default certificate date format (four-digit year, two-digit month and day)
DEFAULT_DATE_FORMAT = "%Y-%m-%d"

# Default max document size (10MB)
DEFAULT_MAX_DOCUMENT_SIZE = 10 * 1024 * 1024

# Schema shipped with the package
BUNDLED_SCHEMA_PATH = Path(__file__).resolve().parent.parent / "schemas" / "medicins.xsd"


class Settings:
    """Application settings loaded from the environment.

    Values are read once, when the instance is created; create a new instance
    to pick up changed variables.
    """

    def __init__(self):
        """Initialize settings from environment."""
        self.app_name = os.getenv("PHARMA_APP_NAME", APP_NAME)
        self.app_version = APP_VERSION

        # Logging
        self.log_level = os.getenv("PHARMA_LOG_LEVEL", "INFO")
        self.log_json = os.getenv("PHARMA_LOG_JSON", "false").lower() == "true"

        # Build policy
        self.strict_values = os.getenv("PHARMA_STRICT_VALUES", "false").lower() == "true"
        self.date_format = os.getenv("PHARMA_DATE_FORMAT", DEFAULT_DATE_FORMAT)

        # Documents
        self.schema_path = Path(os.getenv("PHARMA_SCHEMA_PATH", str(BUNDLED_SCHEMA_PATH)))
        self.max_document_size = int(os.getenv("PHARMA_MAX_DOCUMENT_SIZE", str(DEFAULT_MAX_DOCUMENT_SIZE)))


# Global settings instance
settings = Settings()
