"""
Configuration validation for the notes backend.
Validates LLM access, Firebase settings and numeric settings on startup.
"""
import requests
from typing import Any, Dict, List

from core import config


class ConfigValidator:
    """Validates system configuration before serving requests."""

    def __init__(self):
        self.errors: List[str] = []
        self.warnings: List[str] = []

    def validate_all(self, check_connectivity: bool = True) -> Dict[str, Any]:
        """
        Run all validation checks.

        Returns:
            {
                "valid": bool,
                "errors": List[str],
                "warnings": List[str]
            }
        """
        self.errors = []
        self.warnings = []

        self._validate_llm_settings()
        if check_connectivity and config.LLM_API_KEY:
            self._validate_llm_connection()
        self._validate_firebase()
        self._validate_security()
        self._validate_config_values()

        return {
            "valid": len(self.errors) == 0,
            "errors": self.errors,
            "warnings": self.warnings,
        }

    def _validate_llm_settings(self):
        if not config.LLM_API_KEY:
            self.warnings.append(
                "LLM_API_KEY (or NVIDIA_API_KEY) is not set. AI endpoints will fail upstream."
            )
        if not config.LLM_BASE_URL.startswith(("http://", "https://")):
            self.errors.append(f"LLM_BASE_URL must be an http(s) URL, got: {config.LLM_BASE_URL}")

    def _validate_llm_connection(self):
        """Check that the completion service is reachable."""
        url = f"{config.LLM_BASE_URL.rstrip('/')}/models"
        try:
            response = requests.get(
                url,
                headers={"Authorization": f"Bearer {config.LLM_API_KEY}"},
                timeout=5,
            )
            response.raise_for_status()
        except requests.exceptions.ConnectionError:
            self.warnings.append(f"Cannot connect to the LLM service at {config.LLM_BASE_URL}.")
        except requests.exceptions.Timeout:
            self.warnings.append(f"LLM service connection timeout at {config.LLM_BASE_URL}.")
        except requests.exceptions.HTTPError as e:
            self.warnings.append(f"LLM service answered {e.response.status_code} for {url}. Check LLM_API_KEY.")

    def _validate_firebase(self):
        firebase_vars = {
            "FIREBASE_PROJECT_ID": config.FIREBASE_PROJECT_ID,
            "FIREBASE_CLIENT_EMAIL": config.FIREBASE_CLIENT_EMAIL,
            "FIREBASE_PRIVATE_KEY": config.FIREBASE_PRIVATE_KEY,
        }
        missing = [name for name, value in firebase_vars.items() if not value]
        if missing:
            self.warnings.append(
                f"Firebase not configured (missing {', '.join(missing)}). "
                "Notes and workspaces endpoints will answer 503."
            )

    def _validate_security(self):
        if config.APP_ENV == "production" and not config.ALLOWED_ORIGINS:
            self.warnings.append("ALLOWED_ORIGINS is empty in production; cross-origin requests will be rejected.")
        if not config.ADMIN_API_KEY:
            self.warnings.append("ADMIN_API_KEY is not set; monitoring stats are disabled.")

    def _validate_config_values(self):
        """Validate configuration value ranges."""
        if config.MAX_CONTENT_LENGTH <= 0:
            self.errors.append(f"MAX_CONTENT_LENGTH ({config.MAX_CONTENT_LENGTH}) must be > 0")

        if config.MIN_CONTENT_LENGTH > config.MIN_REGION_LENGTH:
            self.errors.append(
                f"MIN_CONTENT_LENGTH ({config.MIN_CONTENT_LENGTH}) must be <= "
                f"MIN_REGION_LENGTH ({config.MIN_REGION_LENGTH})"
            )

        if config.CRAWL_TIMEOUT_SECONDS <= 0:
            self.errors.append(f"CRAWL_TIMEOUT_SECONDS ({config.CRAWL_TIMEOUT_SECONDS}) must be > 0")

        if config.MAX_REQUEST_BODY_BYTES <= 0:
            self.errors.append(f"MAX_REQUEST_BODY_BYTES ({config.MAX_REQUEST_BODY_BYTES}) must be > 0")

        for name in ("CHAT_TEMPERATURE", "NOTE_TEMPERATURE", "SUMMARY_TEMPERATURE"):
            value = getattr(config, name)
            if not (0.0 <= value <= 2.0):
                self.warnings.append(f"{name} ({value}) outside normal range [0.0, 2.0]")

        for name in ("CHAT_TOP_P", "NOTE_TOP_P", "SUMMARY_TOP_P"):
            value = getattr(config, name)
            if not (0.0 < value <= 1.0):
                self.errors.append(f"{name} ({value}) must be in (0.0, 1.0]")


# Global validator instance
config_validator = ConfigValidator()
