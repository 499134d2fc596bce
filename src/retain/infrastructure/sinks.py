"""Bundled sink adapters."""

import logging

from retain.domain.events import SoundCue
from retain.domain.ports import SoundSink

logger = logging.getLogger(__name__)


class NullSoundSink(SoundSink):
    """Drops every cue. Audio playback is left to the embedding host."""

    def play(self, cue: SoundCue) -> None:
        logger.debug(f"Sound cue {cue.value} ignored")
