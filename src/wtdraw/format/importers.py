"""Import third-party WAV wavetables.

Serum, Vital and similar synths store wavetables as plain WAV files with
fixed-length cycles laid end to end. Any bit depth or channel count that
libsndfile understands can be imported; only the first channel is kept.
"""

import logging
from pathlib import Path

import numpy as np
import soundfile as sf

from wtdraw.dsp.process import normalize as normalize_frame
from wtdraw.types import FRAME_SIZE, MAX_FRAMES, SampleBuffer

logger = logging.getLogger(__name__)


def import_wav_frames(
    path: Path | str,
    normalize: bool = False,
) -> list[SampleBuffer]:
    """Split a WAV file into ``FRAME_SIZE`` frames.

    Args:
        path: Path to the WAV file.
        normalize: Whether to peak-normalize each imported frame.

    Returns:
        Between 1 and ``MAX_FRAMES`` frames. A trailing partial cycle is
        dropped, as are frames beyond ``MAX_FRAMES``.

    Raises:
        ValueError: If the file holds less than one full frame.
        FileNotFoundError: If the file doesn't exist.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(str(path))

    data, _sample_rate = sf.read(path, dtype="float32", always_2d=True)
    data = data[:, 0]

    num_frames = min(len(data) // FRAME_SIZE, MAX_FRAMES)
    if num_frames == 0:
        raise ValueError(
            f"WAV has {len(data)} samples, at least {FRAME_SIZE} are required for one frame"
        )

    used = num_frames * FRAME_SIZE
    if used < len(data):
        logger.debug("Dropping %d trailing samples from %s", len(data) - used, path.name)

    table = data[:used].reshape(num_frames, FRAME_SIZE)
    frames = [np.array(frame, dtype=np.float32) for frame in table]
    if normalize:
        frames = [normalize_frame(frame) for frame in frames]
    return frames
