"""Ordered frame sampling with bounded seek and inference calls."""

from __future__ import annotations

import threading
from collections.abc import Callable, Generator, Iterator
from concurrent.futures import ThreadPoolExecutor
from concurrent.futures import TimeoutError as FutureTimeoutError
from typing import TypeVar

from hurdle_analyzer.core.config import SamplingSettings
from hurdle_analyzer.core.exceptions import PoseEstimationError, VideoStreamError
from hurdle_analyzer.core.logging import get_logger
from hurdle_analyzer.core.types import Frame, PoseModel, SampledFrame, SamplingStats, VideoSource

logger = get_logger(__name__)

T = TypeVar("T")


class FrameSampler:
    """Walks a video at a fixed stride and pairs each frame with its poses.

    Positions are ``0, stride, 2 * stride, ...`` below
    ``min(duration * fps, max_frames)``. Every seek finishes (or times out)
    before inference on that frame starts, and inference finishes (or times
    out) before the next seek. A failed or timed-out step drops the frame;
    the run continues with the next position.

    The sequence is lazy and can be iterated only once. Iteration moves the
    source's playback cursor.
    """

    def __init__(
        self,
        source: VideoSource,
        model: PoseModel,
        settings: SamplingSettings | None = None,
        cancel_event: threading.Event | None = None,
    ) -> None:
        """Initialize sampler.

        Args:
            source: Seekable video
            model: Pose inference capability
            settings: Sampling parameters (uses defaults if None)
            cancel_event: When set, sampling stops before the next frame
        """
        self.source = source
        self.model = model
        self.settings = settings or SamplingSettings()
        self.cancel_event = cancel_event
        self.stats = SamplingStats()
        self._started = False

        reported = source.fps
        self.fps = reported if reported and reported > 0 else self.settings.default_fps

    def positions(self) -> list[int]:
        """Frame indices scheduled for sampling."""
        limit = min(int(self.source.duration * self.fps), self.settings.max_frames)
        return list(range(0, max(limit, 0), self.settings.frame_stride))

    def __iter__(self) -> Iterator[SampledFrame]:
        if self._started:
            raise VideoStreamError("Frame sampler cannot be restarted")
        self._started = True
        return self._sample()

    def _sample(self) -> Generator[SampledFrame, None, None]:
        positions = self.positions()
        self.stats.planned = len(positions)
        logger.info("Sampling %d frames at %.1f fps", len(positions), self.fps)

        # One worker keeps seek and inference strictly ordered
        executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="frame-sampler")
        try:
            for index in positions:
                if self.cancel_event is not None and self.cancel_event.is_set():
                    logger.warning(
                        "Sampling cancelled after %d of %d frames",
                        self.stats.read,
                        self.stats.planned,
                    )
                    break

                sampled = self._sample_one(executor, index)
                if sampled is not None:
                    yield sampled
        finally:
            executor.shutdown(wait=False, cancel_futures=True)

        logger.info(
            "Sampled %d/%d frames, %d with a pose",
            self.stats.read,
            self.stats.planned,
            self.stats.with_pose,
        )

    def _sample_one(self, executor: ThreadPoolExecutor, index: int) -> SampledFrame | None:
        timestamp = index / self.fps

        try:
            image = _bounded(executor, self.settings.seek_timeout_s, self.source.read_at, timestamp)
        except (TimeoutError, VideoStreamError) as e:
            logger.warning("Skipping frame %d: seek failed (%s)", index, e)
            return None

        if image is None:
            logger.warning("Skipping frame %d: no frame at %.3f s", index, timestamp)
            return None

        self.stats.read += 1
        frame = Frame(index=index, timestamp=timestamp, image=image)

        try:
            poses = _bounded(executor, self.settings.inference_timeout_s, self.model.estimate, frame)
        except (TimeoutError, PoseEstimationError) as e:
            logger.warning("Skipping frame %d: inference failed (%s)", index, e)
            return None

        if poses:
            self.stats.with_pose += 1
        logger.debug("Frame %d: %d pose(s)", index, len(poses))

        return SampledFrame(frame=frame, poses=list(poses))


def _bounded(
    executor: ThreadPoolExecutor,
    timeout: float | None,
    fn: Callable[..., T],
    *args: object,
) -> T:
    """Run ``fn`` on the worker, waiting at most ``timeout`` seconds.

    Raises:
        TimeoutError: If the call did not finish in time
    """
    future = executor.submit(fn, *args)
    try:
        return future.result(timeout=timeout)
    except FutureTimeoutError as e:
        future.cancel()
        raise TimeoutError(f"{getattr(fn, '__name__', 'call')} exceeded {timeout} s") from e
