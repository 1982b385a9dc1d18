"""Speaker output adapter."""

from __future__ import annotations

import logging
import threading
from pathlib import Path
from typing import Any

from errors import PLAYBACK_FAILED

try:
    import numpy as np
except Exception:  # pragma: no cover
    np = None  # type: ignore

try:
    import soundfile as sf
except Exception:  # pragma: no cover
    sf = None  # type: ignore

try:
    import sounddevice as sd
except Exception:  # pragma: no cover
    sd = None  # type: ignore

logger = logging.getLogger("ads.player")


class AudioClip:
    def __init__(self, samples: Any, sample_rate: int) -> None:
        self.samples = samples
        self.sample_rate = sample_rate

    @property
    def channels(self) -> int:
        return int(self.samples.shape[1])


def load_clip(path: str | Path) -> AudioClip:
    """Decode any libsndfile format (WAV, FLAC, OGG, MP3) to float32 ``(frames, channels)``."""
    if sf is None or np is None:
        raise RuntimeError("soundfile/numpy is not installed")
    audio, sample_rate = sf.read(str(path), dtype="float32", always_2d=True)
    samples = np.asarray(audio, dtype=np.float32)
    if samples.size == 0:
        raise ValueError(f"{path}: no audio frames")
    return AudioClip(samples=samples, sample_rate=int(sample_rate))


class _ClipFeeder:
    """Output-stream callback that plays ``samples`` once, then stops the stream."""

    def __init__(self, samples: Any) -> None:
        self._samples = samples
        self._position = 0
        self.finished = threading.Event()

    def __call__(self, outdata: Any, frames: int, time_info: Any, status: Any) -> None:
        chunk = self._samples[self._position:self._position + frames]
        self._position += len(chunk)
        outdata[:len(chunk)] = chunk
        if len(chunk) < frames:
            outdata[len(chunk):] = 0
            raise sd.CallbackStop

    def on_finished(self) -> None:
        self.finished.set()


class SoundDevicePlayer:
    """Fire-and-forget playback through the default output device.

    Every play gets its own output stream, so overlapping plays mix instead
    of cutting each other off. Failures are logged and never raised.
    """

    def __init__(self) -> None:
        self._cache: dict[str, AudioClip] = {}
        self._streams: list[tuple[Any, _ClipFeeder]] = []
        self._lock = threading.Lock()

    def play(self, resource: Any, volume_percent: int) -> None:
        try:
            if sd is None:
                raise RuntimeError("sounddevice is not installed")
            clip = self._load(resource)
            gain = max(0, min(100, int(volume_percent))) / 100.0
            feeder = _ClipFeeder(clip.samples * gain)
            stream = sd.OutputStream(
                samplerate=clip.sample_rate,
                channels=clip.channels,
                dtype="float32",
                callback=feeder,
                finished_callback=feeder.on_finished,
            )
            stream.start()
            with self._lock:
                self._reap_finished()
                self._streams.append((stream, feeder))
        except Exception as exc:
            logger.warning("%s: %s (%s)", PLAYBACK_FAILED, resource, exc)

    def stop(self) -> None:
        with self._lock:
            streams, self._streams = self._streams, []
        for stream, _feeder in streams:
            try:
                stream.abort()
                stream.close()
            except Exception as exc:
                logger.warning("Stopping playback failed: %s", exc)

    @property
    def active_streams(self) -> int:
        with self._lock:
            self._reap_finished()
            return len(self._streams)

    def _reap_finished(self) -> None:
        # Streams cannot be closed from their own finished callback.
        keep = []
        for stream, feeder in self._streams:
            if feeder.finished.is_set():
                try:
                    stream.close()
                except Exception as exc:
                    logger.debug("Closing finished stream failed: %s", exc)
            else:
                keep.append((stream, feeder))
        self._streams = keep

    def _load(self, resource: Any) -> AudioClip:
        key = str(resource)
        with self._lock:
            clip = self._cache.get(key)
            if clip is None:
                clip = load_clip(key)
                self._cache[key] = clip
            return clip
