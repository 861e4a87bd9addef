"""Sequential media processing pipeline."""

import asyncio
import logging
import time
from collections.abc import Awaitable, Callable, Sequence
from dataclasses import dataclass

from focus_sessions.domain.errors import ProcessingError
from focus_sessions.domain.sessions import MediaStatus

COMPRESS_STAGE = "compress"
EXTRACT_AUDIO_STAGE = "extractAudio"

_COMPRESS_COMMAND = (
    "ffmpeg -i input_{session_id}.mp4 -c:v h264 -crf 23 -preset medium "
    "compressed_{session_id}.mp4"
)
_EXTRACT_AUDIO_COMMAND = (
    "ffmpeg -i compressed_{session_id}.mp4 -vn -acodec mp3 -ar 44100 -ac 2 "
    "audio_{session_id}.mp3"
)

_logger = logging.getLogger(__name__)

StageWorker = Callable[[str], Awaitable[None]]


@dataclass(frozen=True)
class PipelineStage:
    """A named unit of work that sets one media flag when it succeeds."""

    name: str
    flag: str
    worker: StageWorker

    async def run(self, session_id: str, media: MediaStatus) -> MediaStatus:
        """Run the worker and return the advanced status snapshot."""
        await self.worker(session_id)
        return media.mark_done(self.flag)


@dataclass
class SimulatedTranscoder:
    """Stand-in for an ffmpeg invocation that only logs and waits."""

    label: str
    command: str
    delay_seconds: float = 1.0

    async def __call__(self, session_id: str) -> None:
        _logger.info(
            "[FFMPEG SIMULATION] Starting %s for session %s", self.label, session_id
        )
        _logger.info(
            "[FFMPEG] Command would be: %s",
            self.command.format(session_id=session_id),
        )
        started = time.monotonic()
        await asyncio.sleep(self.delay_seconds)
        elapsed_ms = round((time.monotonic() - started) * 1000)
        _logger.info(
            "[FFMPEG SIMULATION] %s completed for session %s (%sms)",
            self.label.capitalize(),
            session_id,
            elapsed_ms,
        )


def default_stages(delay_seconds: float = 1.0) -> list[PipelineStage]:
    """Build the compress then extractAudio stages with simulated workers."""
    return [
        PipelineStage(
            name=COMPRESS_STAGE,
            flag="compressed",
            worker=SimulatedTranscoder(
                label="video compression",
                command=_COMPRESS_COMMAND,
                delay_seconds=delay_seconds,
            ),
        ),
        PipelineStage(
            name=EXTRACT_AUDIO_STAGE,
            flag="audio_extracted",
            worker=SimulatedTranscoder(
                label="audio extraction",
                command=_EXTRACT_AUDIO_COMMAND,
                delay_seconds=delay_seconds,
            ),
        ),
    ]


@dataclass
class ProcessingPipeline:
    """Runs stages one after another, stopping at the first failure."""

    stages: Sequence[PipelineStage]

    def __post_init__(self) -> None:
        flags = [stage.flag for stage in self.stages]
        if len(flags) != len(set(flags)):
            raise ValueError("Each pipeline stage must own a distinct media flag")

    @property
    def stage_names(self) -> list[str]:
        return [stage.name for stage in self.stages]

    async def run(
        self, session_id: str, media: MediaStatus | None = None
    ) -> MediaStatus:
        """Fold the stages over a status snapshot.

        A failing stage raises ProcessingError carrying the snapshot reached
        before it; flags set by earlier stages are kept.
        """
        status = media if media is not None else MediaStatus()
        for stage in self.stages:
            try:
                status = await stage.run(session_id, status)
            except Exception as exc:
                raise ProcessingError(stage.name, exc, status) from exc
        return status
