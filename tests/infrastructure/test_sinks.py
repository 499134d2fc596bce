import logging

from retain.domain.events import SoundCue
from retain.infrastructure.sinks import NullSoundSink


def test_null_sound_sink_drops_cues(caplog):
    with caplog.at_level(logging.DEBUG, logger="retain"):
        NullSoundSink().play(SoundCue.SUCCESS)

    assert "success" in caplog.text
