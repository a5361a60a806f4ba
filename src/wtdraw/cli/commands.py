from enum import Enum
from pathlib import Path
from typing import Annotated

import numpy as np
from cyclopts import App, Parameter
from rich.console import Console
from rich.table import Table

from wtdraw.cli.validators import (
    validate_frame_count,
    validate_harmonics_string,
    validate_stroke_string,
)
from wtdraw.dsp.brush import BrushStroke
from wtdraw.dsp.morph import morph_table
from wtdraw.dsp.pitch import base_frequency
from wtdraw.dsp.waves import DEFAULT_FORMULA, WaveGenerator, default_harmonics
from wtdraw.format import (
    RiffError,
    import_wav_frames,
    load_wavetable_wav,
    save_wavetable_wav,
)
from wtdraw.format.image import load_image_luminance
from wtdraw.store import WavetableStore
from wtdraw.types import BRUSH_RADIUS, FRAME_SIZE, PointerSample, SampleBuffer
from wtdraw.utils import assert_exhaustiveness

app = App(name="wtdraw", help="A utility for drawing, generating and exporting wavetables")
console = Console()


class Source(str, Enum):
    sine = "sine"
    saw = "saw"
    formula = "formula"
    harmonics = "harmonics"
    image = "image"


def print_error(message: str) -> None:
    """Print an error message in red."""
    console.print(message, style="bold red")


def print_success(message: str) -> None:
    """Print a success message in green."""
    console.print(message, style="bold green")


def print_warning(message: str) -> None:
    """Print a warning message in yellow."""
    console.print(message, style="bold yellow")


def parse_harmonics_string(harmonics: str) -> list[float]:
    """Parse 'a1,a2,...' into an amplitude list, fundamental first."""
    return [float(part) for part in harmonics.split(",")]


def parse_stroke_string(stroke: str) -> list[PointerSample]:
    """Parse 'index:amp,index:amp,...' into pointer samples."""
    samples = []
    for point in stroke.split(","):
        parts = point.strip().split(":")
        if len(parts) != 2:
            raise ValueError(f"Invalid stroke point format: {point}")
        samples.append(PointerSample(index=int(parts[0]), amplitude=float(parts[1])))
    return samples


def render_source(
    source: Source,
    formula: str,
    harmonics: str | None,
    image: Path | None,
) -> SampleBuffer:
    generator = WaveGenerator()

    match source:
        case Source.sine:
            return generator.sine()
        case Source.saw:
            return generator.sawtooth()
        case Source.formula:
            result = generator.evaluate_formula(formula)
            if not result.ok:
                print_warning(f"Formula rejected ({result.error}), using a sine frame instead")
            elif result.failed_samples:
                print_warning(f"{result.failed_samples} samples could not be evaluated, set to 0")
            return result.buffer
        case Source.harmonics:
            amps = parse_harmonics_string(harmonics) if harmonics else default_harmonics()
            return generator.harmonics(amps)
        case Source.image:
            if image is None:
                raise ValueError("--image is required for the image source")
            return generator.luminance(load_image_luminance(image))
        case _:
            assert_exhaustiveness(source)


def print_table_summary(frames: list[SampleBuffer] | tuple[SampleBuffer, ...]) -> None:
    table = Table(title=f"{len(frames)} frame(s) of {FRAME_SIZE} samples")
    table.add_column("Frame", justify="right")
    table.add_column("Peak", justify="right")
    table.add_column("RMS", justify="right")
    table.add_column("DC", justify="right")

    for i, frame in enumerate(frames):
        table.add_row(
            str(i),
            f"{np.max(np.abs(frame)):.3f}",
            f"{np.sqrt(np.mean(np.square(frame, dtype=np.float64))):.3f}",
            f"{np.mean(frame):+.3f}",
        )

    console.print(table)


@app.command
def generate(
    source: Source = Source.sine,
    output: Path = Path("wavetable.wav"),
    formula: str = DEFAULT_FORMULA,
    harmonics: Annotated[str | None, Parameter(validator=validate_harmonics_string)] = None,
    image: Path | None = None,
    frames: Annotated[int, Parameter(validator=validate_frame_count)] = 1,
    morph_to: Annotated[str | None, Parameter(validator=validate_harmonics_string)] = None,
) -> int:
    """
    Generate a wavetable and export it as a 32-bit float WAV file.

    Parameters
    ----------
    source: Source
        How the first frame is generated
    output: Path
        The output destination for the .wav file
    formula: str
        Formula over x (0..2pi), t (0..1), i (index) and n (frame size)
    harmonics: str | None
        Harmonic amplitudes in the format 'a1,a2,...' (fundamental first, 0.0-1.0)
    image: Path | None
        Image whose luminance becomes the frame (image source only)
    frames: int
        Number of frames in the table. Extra frames copy the first frame.
    morph_to: str | None
        Harmonic amplitudes for the last frame; the table is then morphed
        from the first frame to this one
    """
    console.print(f"Generating {frames} frame(s) from [cyan bold]{source.value}[/]...")

    try:
        first = render_source(source, formula, harmonics, image)
    except (ValueError, OSError) as e:
        print_error(f"Error: {e}")
        return 1

    store = WavetableStore([first])
    for _ in range(frames - 1):
        store.duplicate_frame()

    if morph_to is not None:
        if frames < 3:
            print_warning("Morphing needs at least 3 frames, --morph-to ignored")
        else:
            store.set_current(len(store) - 1)
            store.replace_current(WaveGenerator().harmonics(parse_harmonics_string(morph_to)))
            store.morph()

    save_wavetable_wav(output, store.frames)
    print_success(f"Exported {len(store)} frame(s) to {output}")
    return 0


@app.command
def stroke(
    file: Path,
    points: Annotated[str, Parameter(validator=validate_stroke_string)],
    frame: int = 0,
    radius: int = BRUSH_RADIUS,
    output: Path | None = None,
) -> int:
    """
    Paint a brush stroke onto one frame of a wavetable file.

    Parameters
    ----------
    file: Path
        The wavetable .wav file to edit
    points: str
        Pointer path in the format 'index:amp,index:amp,...'
    frame: int
        Index of the frame to paint on (clamped to the table)
    radius: int
        Brush half-width in samples
    output: Path | None
        Where to write the result (default: overwrite the input)
    """
    try:
        wavetable = load_wavetable_wav(file)
    except RiffError as e:
        print_error(f"Error: {e}")
        return 1

    store = WavetableStore(wavetable.frames)
    store.set_current(frame)

    try:
        path = parse_stroke_string(points)
        brush = BrushStroke(store.current_frame, radius=radius)
        brush.start(path[0])
        for sample in path[1:]:
            brush.move(sample)
        brush.end()
    except ValueError as e:
        print_error(f"Error: {e}")
        return 1

    store.replace_current(brush.buffer)

    destination = output if output is not None else file
    save_wavetable_wav(destination, store.frames, sample_rate=wavetable.sample_rate)
    print_success(
        f"Painted {len(path)} point(s) over {len(brush.touched)} samples "
        f"of frame {store.current_index} to {destination}"
    )
    return 0


@app.command
def morph(file: Path, output: Path | None = None) -> int:
    """
    Rewrite the interior frames of a wavetable as a blend of its first and last frames.

    Parameters
    ----------
    file: Path
        The wavetable .wav file to morph
    output: Path | None
        Where to write the result (default: overwrite the input)
    """
    try:
        wavetable = load_wavetable_wav(file)
    except RiffError as e:
        print_error(f"Error: {e}")
        return 1

    if wavetable.num_frames < 3:
        print_error(f"Error: morphing needs at least 3 frames, {file} has {wavetable.num_frames}")
        return 1

    destination = output if output is not None else file
    save_wavetable_wav(
        destination, morph_table(wavetable.frames), sample_rate=wavetable.sample_rate
    )
    print_success(f"Morphed {wavetable.num_frames} frames to {destination}")
    return 0


@app.command(name="import")
def import_wav(file: Path, output: Path, normalize: bool = False) -> int:
    """
    Import a third-party WAV wavetable (Serum, Vital, ...) as 2048-sample frames.

    Parameters
    ----------
    file: Path
        The source .wav file
    output: Path
        Destination for the converted wavetable
    normalize: bool
        Peak-normalize every imported frame
    """
    try:
        frames = import_wav_frames(file, normalize=normalize)
    except (ValueError, FileNotFoundError, RuntimeError) as e:
        print_error(f"Error: {e}")
        return 1

    save_wavetable_wav(output, frames)
    print_success(f"Imported {len(frames)} frame(s) from {file} to {output}")
    return 0


@app.command
def info(file: Path) -> int:
    """
    Display information about a wavetable file.

    Parameters
    ----------
    file: Path
        The path to the wavetable .wav file
    """
    try:
        wavetable = load_wavetable_wav(file)
    except RiffError as e:
        print_error(f"Error: {e}")
        return 1

    console.print(f"Wavetable: {file}")
    console.print(f"  Sample rate: {wavetable.sample_rate} Hz")
    console.print(f"  Frames: {wavetable.num_frames}")
    console.print(f"  Frame length: {FRAME_SIZE}")
    console.print(f"  Loop pitch: {base_frequency(wavetable.sample_rate):.2f} Hz")
    print_table_summary(wavetable.frames)
    return 0
