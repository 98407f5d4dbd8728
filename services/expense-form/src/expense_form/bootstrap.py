"""Wire a ready-to-use controller from environment settings."""

from __future__ import annotations

import logging
from typing import Optional

from shared.form_settings import FormSettings, load_form_settings

from .draft_store import DraftStore
from .form_controller import ExpenseFormController
from .notifications import NotificationChannel
from .persistence.database import build_session_factory
from .submission_provider import build_submission_provider

logger = logging.getLogger(__name__)


def build_form_controller(settings: Optional[FormSettings] = None) -> ExpenseFormController:
    """
    Build and initialize an ExpenseFormController.

    Args:
        settings: Explicit settings; loaded from the environment when omitted.
    Returns:
        A controller whose record has already been restored from the draft slot.
    """
    settings = settings or load_form_settings()
    draft_store = DraftStore(build_session_factory(settings.database_url), key=settings.draft_key)
    controller = ExpenseFormController(
        draft_store=draft_store,
        submission_provider=build_submission_provider(settings.submission_provider, settings=settings),
        notifications=NotificationChannel(dismiss_after=settings.toast_seconds),
    )
    controller.initialize()
    logger.info(
        {
            "event": "form_controller_ready",
            "provider": settings.submission_provider,
            "draft_key": settings.draft_key,
        }
    )
    return controller
