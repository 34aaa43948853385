from __future__ import annotations

import asyncio
import inspect
import logging
import math
import random
import time
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Awaitable, Callable

from filedrop.core.config import settings
from filedrop.core.errors import UploadFailedError
from filedrop.models.upload import FileInfo, UploadResult

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[int], Awaitable[None] | None]


@dataclass(frozen=True)
class FaultPolicy:
    """
    Timing and fault injection for simulated uploads.

    tick_interval: seconds between progress ticks
    max_step: each tick adds uniform [0, max_step) percent
    failure_probability: chance the one-shot check fails the upload
    failure_window: (min, max) seconds before the one-shot check fires
    """

    tick_interval: float = 0.2
    max_step: float = 15.0
    failure_probability: float = 0.05
    failure_window: tuple[float, float] = (1.0, 4.0)


def default_fault_policy() -> FaultPolicy:
    return FaultPolicy(
        tick_interval=settings.UPLOAD_TICK_SECONDS,
        max_step=settings.UPLOAD_MAX_STEP,
        failure_probability=settings.UPLOAD_FAILURE_PROBABILITY,
        failure_window=(
            settings.UPLOAD_FAILURE_WINDOW_MIN_SECONDS,
            settings.UPLOAD_FAILURE_WINDOW_MAX_SECONDS,
        ),
    )


class UploadSimulator:
    """
    Fakes an upload: no bytes leave the process.

    Two timers per call:
    - a repeating ticker that advances progress until it reaches 100
    - a one-shot fault check that may abort the upload while progress < 100
    """

    def __init__(
        self,
        policy: FaultPolicy,
        rng: random.Random | None = None,
        files_base_url: str | None = None,
    ):
        self.policy = policy
        self.rng = rng or random.Random()
        self.files_base_url = (files_base_url or settings.FILES_BASE_URL).rstrip("/")

    def _build_result(self, file: FileInfo) -> UploadResult:
        return UploadResult(
            id=str(int(time.time() * 1000)),
            name=file.name,
            size=file.size,
            type=file.type,
            status="completed",
            progress=100,
            uploaded_at=datetime.now(timezone.utc).isoformat(),
            url=f"{self.files_base_url}/{file.name}",
            error=None,
        )

    async def simulate(
        self,
        file: FileInfo,
        on_progress: ProgressCallback | None = None,
    ) -> UploadResult:
        loop = asyncio.get_running_loop()
        done: asyncio.Future[UploadResult] = loop.create_future()
        progress = 0.0

        async def tick() -> None:
            nonlocal progress
            while True:
                await asyncio.sleep(self.policy.tick_interval)
                progress += self.rng.random() * self.policy.max_step

                if progress >= 100:
                    progress = 100.0
                    if not done.done():
                        done.set_result(self._build_result(file))
                    return

                if on_progress is not None:
                    ret = on_progress(math.floor(progress + 0.5))
                    if inspect.isawaitable(ret):
                        await ret

        def ticker_finished(task: asyncio.Task) -> None:
            if task.cancelled() or done.done():
                return
            exc = task.exception()
            if exc is not None:
                done.set_exception(exc)

        def fault_check() -> None:
            # no-op once the upload has completed
            if self.rng.random() < self.policy.failure_probability and progress < 100:
                if done.done():
                    return
                ticker.cancel()
                logger.warning("simulated upload failed name=%s progress=%.1f", file.name, progress)
                done.set_exception(UploadFailedError("Upload failed due to network error"))

        ticker = asyncio.create_task(tick())
        ticker.add_done_callback(ticker_finished)
        fault_handle = loop.call_later(self.rng.uniform(*self.policy.failure_window), fault_check)

        try:
            return await done
        except asyncio.CancelledError:
            ticker.cancel()
            fault_handle.cancel()
            raise


def default_upload_simulator() -> UploadSimulator:
    return UploadSimulator(default_fault_policy())


async def simulate_upload(
    file: FileInfo,
    on_progress: ProgressCallback | None = None,
    policy: FaultPolicy | None = None,
) -> UploadResult:
    simulator = UploadSimulator(policy or default_fault_policy())
    return await simulator.simulate(file, on_progress)
