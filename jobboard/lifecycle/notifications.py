# ========================================
# jobboard/lifecycle/notifications.py
# ========================================
"""Notification hooks fired after a transition has been persisted.

Delivery (email, in-app, ...) lives outside the core. Hooks are scheduled as
fire-and-forget tasks; any exception they raise is logged and dropped so a
broken mailer can never undo or fail a transition.
"""

import asyncio
import inspect
import logging
from typing import Optional, Set

logger = logging.getLogger(__name__)


class NotificationHook:
    """No-op base; override the events you care about."""

    async def on_job_approved(self, job) -> None:
        pass

    async def on_job_rejected(self, job, notes: str) -> None:
        pass

    async def on_application_status_changed(self, application, old_status: str, new_status: str) -> None:
        pass


class LoggingNotificationHook(NotificationHook):
    async def on_job_approved(self, job) -> None:
        logger.info("Job approved: %s (%s)", job.id, job.title)

    async def on_job_rejected(self, job, notes: str) -> None:
        logger.info("Job rejected: %s (%s) notes=%r", job.id, job.title, notes)

    async def on_application_status_changed(self, application, old_status: str, new_status: str) -> None:
        logger.info("Application %s moved %s -> %s", application.id, old_status, new_status)


class NotificationDispatcher:
    def __init__(self, hook: Optional[NotificationHook] = None, enabled: bool = True):
        self.hook = hook or NotificationHook()
        self.enabled = enabled
        self._pending: Set[asyncio.Task] = set()

    def job_approved(self, job) -> None:
        self._fire("on_job_approved", job)

    def job_rejected(self, job, notes: str) -> None:
        self._fire("on_job_rejected", job, notes)

    def application_status_changed(self, application, old_status: str, new_status: str) -> None:
        if old_status == new_status:
            return
        self._fire("on_application_status_changed", application, old_status, new_status)

    async def drain(self) -> None:
        """Wait for hooks still in flight (shutdown and tests)."""
        if self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)

    def _fire(self, event: str, *args) -> None:
        if not self.enabled:
            return
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            logger.warning("No running event loop, dropping %s notification", event)
            return
        task = loop.create_task(self._deliver(event, *args))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    async def _deliver(self, event: str, *args) -> None:
        try:
            result = getattr(self.hook, event)(*args)
            if inspect.isawaitable(result):
                await result
        except Exception:
            logger.exception("Notification hook %s failed", event)
