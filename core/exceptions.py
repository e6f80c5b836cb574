# core/exceptions.py
from typing import Any, Dict, Optional


class ScraperException(Exception):
    """Base class for failures that abort a whole scrape run."""

    code = "SCRAPER_ERROR"

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def to_dict(self) -> Dict[str, Any]:
        return {
            "error": {
                "code": self.code,
                "message": self.message,
                "details": self.details,
            }
        }


class RendererError(ScraperException):
    """The page renderer could not produce any DOM snapshot."""

    code = "RENDERER_ERROR"


class ConfigurationError(ScraperException):
    """The targets file is missing or does not validate."""

    code = "CONFIGURATION_ERROR"
