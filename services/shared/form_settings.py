from __future__ import annotations

"""
Environment-driven settings for the expense form.

The controller itself takes explicit collaborators; this module is the one
place that reads the environment and turns it into those collaborators'
constructor arguments. Blank or unset variables fall back to defaults, and
malformed values fail fast with `FormSettingsError`.
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

SUPPORTED_SUBMISSION_PROVIDERS = frozenset({"simulated", "http"})
DEFAULT_DRAFT_KEY = "accounting-app:draft"
DEFAULT_DB_FILENAME = "expense_form.db"
DEFAULT_DB_PATH = Path(__file__).resolve().parents[2] / "data" / DEFAULT_DB_FILENAME

DB_URL_ENV_VAR = "EXPENSE_FORM_DB_URL"
DRAFT_KEY_ENV_VAR = "EXPENSE_FORM_DRAFT_KEY"
PROVIDER_ENV_VAR = "EXPENSE_FORM_SUBMISSION_PROVIDER"
LATENCY_ENV_VAR = "EXPENSE_FORM_SUBMIT_LATENCY_SECONDS"
TOAST_ENV_VAR = "EXPENSE_FORM_TOAST_SECONDS"
SUBMIT_URL_ENV_VAR = "EXPENSE_FORM_SUBMIT_URL"
SUBMIT_TIMEOUT_ENV_VAR = "EXPENSE_FORM_SUBMIT_TIMEOUT_SECONDS"
SUBMIT_ATTEMPTS_ENV_VAR = "EXPENSE_FORM_SUBMIT_MAX_ATTEMPTS"


class FormSettingsError(RuntimeError):
    """Raised when form configuration cannot be constructed."""


@dataclass(frozen=True, slots=True)
class HttpSubmissionConfig:
    url: str
    timeout_seconds: float
    max_attempts: int


@dataclass(frozen=True, slots=True)
class FormSettings:
    database_url: str
    draft_key: str
    submission_provider: str
    submit_latency_seconds: float
    toast_seconds: float
    http: Optional[HttpSubmissionConfig] = None


def load_form_settings(
    *,
    default_provider: str = "simulated",
    default_latency: float = 0.8,
    default_toast_seconds: float = 2.2,
    default_timeout: float = 10.0,
    default_max_attempts: int = 3,
) -> FormSettings:
    """
    Construct FormSettings from the current environment.

    Args:
        default_provider: Submission provider used when EXPENSE_FORM_SUBMISSION_PROVIDER is unset.
        default_latency: Simulated submission latency in seconds.
        default_toast_seconds: Lifetime of a notification before it auto-dismisses.
        default_timeout: Outbound timeout for the HTTP provider.
        default_max_attempts: Retry budget for the HTTP provider.
    """

    provider_name = _normalize_provider(os.getenv(PROVIDER_ENV_VAR), default_provider)
    latency = _parse_float(os.getenv(LATENCY_ENV_VAR), default_latency, LATENCY_ENV_VAR)
    toast_seconds = _parse_float(os.getenv(TOAST_ENV_VAR), default_toast_seconds, TOAST_ENV_VAR)

    if latency < 0:
        raise FormSettingsError(f"{LATENCY_ENV_VAR} must not be negative (received '{latency}')")
    if toast_seconds <= 0:
        raise FormSettingsError(f"{TOAST_ENV_VAR} must be positive (received '{toast_seconds}')")

    http_config: Optional[HttpSubmissionConfig] = None
    if provider_name == "http":
        http_config = _build_http_config(default_timeout, default_max_attempts)

    return FormSettings(
        database_url=get_database_url(),
        draft_key=(os.getenv(DRAFT_KEY_ENV_VAR) or "").strip() or DEFAULT_DRAFT_KEY,
        submission_provider=provider_name,
        submit_latency_seconds=latency,
        toast_seconds=toast_seconds,
        http=http_config,
    )


def get_database_url() -> str:
    """Return the configured database URL (defaults to a SQLite file)."""
    env_url = (os.getenv(DB_URL_ENV_VAR) or "").strip()
    if env_url:
        return env_url
    return f"sqlite:///{DEFAULT_DB_PATH}"


def _normalize_provider(raw_value: Optional[str], default: str) -> str:
    candidate = (raw_value or "").strip().lower()
    if not candidate:
        candidate = default

    if candidate not in SUPPORTED_SUBMISSION_PROVIDERS:
        raise FormSettingsError(f"Unsupported submission provider '{candidate}'")
    return candidate


def _parse_float(raw_value: Optional[str], default: float, env_key: str) -> float:
    if raw_value is None or raw_value.strip() == "":
        return default

    try:
        return float(raw_value)
    except ValueError as exc:
        raise FormSettingsError(f"{env_key} must be numeric (received '{raw_value}')") from exc


def _parse_int(raw_value: Optional[str], default: int, env_key: str) -> int:
    if raw_value is None or raw_value.strip() == "":
        return default

    try:
        return int(raw_value)
    except ValueError as exc:
        raise FormSettingsError(f"{env_key} must be an integer (received '{raw_value}')") from exc


def _build_http_config(default_timeout: float, default_max_attempts: int) -> HttpSubmissionConfig:
    url = (os.getenv(SUBMIT_URL_ENV_VAR) or "").strip()
    if not url:
        raise FormSettingsError(f"{PROVIDER_ENV_VAR}=http requires {SUBMIT_URL_ENV_VAR}")
    if not url.startswith(("http://", "https://")):
        raise FormSettingsError(f"{SUBMIT_URL_ENV_VAR} must be an http:// or https:// URL (received '{url}')")

    return HttpSubmissionConfig(
        url=url,
        timeout_seconds=_parse_float(os.getenv(SUBMIT_TIMEOUT_ENV_VAR), default_timeout, SUBMIT_TIMEOUT_ENV_VAR),
        max_attempts=max(1, _parse_int(os.getenv(SUBMIT_ATTEMPTS_ENV_VAR), default_max_attempts, SUBMIT_ATTEMPTS_ENV_VAR)),
    )
