from wtdraw.types import FRAME_SIZE, SAMPLE_RATE

# C2, a bass note that makes the character of a frame easy to hear
PREVIEW_NOTE_HZ = 65.41


def base_frequency(sample_rate: float = SAMPLE_RATE, frame_size: int = FRAME_SIZE) -> float:
    """Pitch heard when one frame is looped at ``sample_rate`` (about 21.53 Hz by default)."""
    if frame_size <= 0:
        raise ValueError(f"Frame size must be positive, got {frame_size}")
    return sample_rate / frame_size


def playback_rate(
    target_hz: float = PREVIEW_NOTE_HZ,
    sample_rate: float = SAMPLE_RATE,
    frame_size: int = FRAME_SIZE,
) -> float:
    """Speed factor a looping frame player needs to sound at ``target_hz``."""
    if target_hz <= 0:
        raise ValueError(f"Target frequency must be positive, got {target_hz}")
    return target_hz / base_frequency(sample_rate, frame_size)
