"""Tests for fire-and-forget notification dispatch."""

import logging
from unittest.mock import AsyncMock, Mock

import pytest

from jobboard.lifecycle.notifications import LoggingNotificationHook, NotificationDispatcher, NotificationHook


@pytest.fixture
def hook():
    mock_hook = Mock(spec=NotificationHook)
    mock_hook.on_job_approved = AsyncMock()
    mock_hook.on_job_rejected = AsyncMock()
    mock_hook.on_application_status_changed = AsyncMock()
    return mock_hook


@pytest.mark.asyncio
async def test_job_events_reach_hook(hook, make_job):
    dispatcher = NotificationDispatcher(hook)
    job = make_job(status="active")

    dispatcher.job_approved(job)
    dispatcher.job_rejected(job, "Too vague")
    await dispatcher.drain()

    hook.on_job_approved.assert_awaited_once_with(job)
    hook.on_job_rejected.assert_awaited_once_with(job, "Too vague")


@pytest.mark.asyncio
async def test_status_change_skips_noop(hook, make_application):
    dispatcher = NotificationDispatcher(hook)
    app = make_application(status="reviewed")

    dispatcher.application_status_changed(app, "reviewed", "reviewed")
    dispatcher.application_status_changed(app, "submitted", "reviewed")
    await dispatcher.drain()

    hook.on_application_status_changed.assert_awaited_once_with(app, "submitted", "reviewed")


@pytest.mark.asyncio
async def test_failing_hook_is_logged_not_raised(hook, make_job, caplog):
    hook.on_job_approved.side_effect = RuntimeError("smtp down")
    dispatcher = NotificationDispatcher(hook)

    with caplog.at_level(logging.ERROR, logger="jobboard.lifecycle.notifications"):
        dispatcher.job_approved(make_job(status="active"))
        await dispatcher.drain()

    assert "on_job_approved" in caplog.text


@pytest.mark.asyncio
async def test_sync_hook_is_supported(make_job):
    hook = Mock()
    dispatcher = NotificationDispatcher(hook)
    job = make_job(status="active")

    dispatcher.job_approved(job)
    await dispatcher.drain()

    hook.on_job_approved.assert_called_once_with(job)


@pytest.mark.asyncio
async def test_disabled_dispatcher_does_nothing(hook, make_job):
    dispatcher = NotificationDispatcher(hook, enabled=False)
    dispatcher.job_approved(make_job(status="active"))
    await dispatcher.drain()

    hook.on_job_approved.assert_not_awaited()


def test_without_running_loop_event_is_dropped(hook, make_job, caplog):
    dispatcher = NotificationDispatcher(hook)
    with caplog.at_level(logging.WARNING, logger="jobboard.lifecycle.notifications"):
        dispatcher.job_approved(make_job(status="active"))

    hook.on_job_approved.assert_not_called()
    assert "dropping" in caplog.text


@pytest.mark.asyncio
async def test_logging_hook(make_job, make_application, caplog):
    dispatcher = NotificationDispatcher(LoggingNotificationHook())
    with caplog.at_level(logging.INFO, logger="jobboard.lifecycle.notifications"):
        dispatcher.job_approved(make_job(status="active", title="Platform Engineer"))
        dispatcher.application_status_changed(make_application(), "submitted", "reviewed")
        await dispatcher.drain()

    assert "Platform Engineer" in caplog.text
    assert "submitted -> reviewed" in caplog.text
