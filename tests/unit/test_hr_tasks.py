import pytest

from hrms.core.celery_app import celery_app
from hrms.workers.celery_tasks.hr_tasks import auto_checkout_attendance, run_async_task

def test_run_async_task_returns_result():
    async def answer():
        return 42

    assert run_async_task(answer()) == 42

def test_run_async_task_propagates_errors():
    async def boom():
        raise RuntimeError("broken")

    with pytest.raises(RuntimeError):
        run_async_task(boom())

def test_auto_checkout_is_scheduled_nightly():
    entry = celery_app.conf.beat_schedule["auto-checkout-attendance"]
    assert entry["task"] == auto_checkout_attendance.name
    assert entry["schedule"].hour == {20}
    assert entry["schedule"].minute == {0}
