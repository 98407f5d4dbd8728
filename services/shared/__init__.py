"""
Shared utilities for the expense form services.

This package contains code shared by the form core and the Streamlit shell:
- form_settings: Environment-driven configuration
- observability: Telemetry, logging, and privacy utilities
"""

from .form_settings import (
    DEFAULT_DRAFT_KEY,
    SUPPORTED_SUBMISSION_PROVIDERS,
    FormSettings,
    FormSettingsError,
    HttpSubmissionConfig,
    get_database_url,
    load_form_settings,
)

__all__ = [
    "DEFAULT_DRAFT_KEY",
    "SUPPORTED_SUBMISSION_PROVIDERS",
    "FormSettings",
    "FormSettingsError",
    "HttpSubmissionConfig",
    "get_database_url",
    "load_form_settings",
]
