from wtdraw.types import HARMONIC_COUNT, MAX_FRAMES


def validate_harmonics_string(type_: object, harmonics: str | None) -> None:
    if not harmonics:
        return

    parts = harmonics.split(",")
    if len(parts) > HARMONIC_COUNT:
        raise ValueError(f"At most {HARMONIC_COUNT} harmonic amplitudes are supported")

    for part in parts:
        amplitude = float(part)
        if not 0.0 <= amplitude <= 1.0:
            raise ValueError("Harmonic amplitudes must be between 0.0 and 1.0")


def validate_stroke_string(type_: object, stroke: str | None) -> None:
    if not stroke:
        return

    for point in stroke.split(","):
        parts = point.strip().split(":")
        if len(parts) != 2:
            raise ValueError(f"Invalid stroke point format: {point}")


def validate_frame_count(type_: object, frames: int) -> None:
    """Validate that a frame count fits in a wavetable."""
    if not 1 <= frames <= MAX_FRAMES:
        raise ValueError(f"Frame count must be between 1 and {MAX_FRAMES}")
