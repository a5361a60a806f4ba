"""wtdraw - Wavetable drawing and editing engine.

This package turns user intent into wavetable frames and manages them:
freehand brush strokes, additive synthesis, sandboxed formulas and image
luminance all produce 2048-sample frames, which are held in an ordered
store, morphed into each other and exported as 32-bit float WAV files.

Example Usage
-------------
>>> from wtdraw import WavetableStore, generate_from_harmonics, save_wavetable_wav
>>>
>>> store = WavetableStore()
>>> store.add_frame(generate_from_harmonics([1.0, 0.5, 0.25]))
>>> store.add_frame(generate_from_harmonics([0.0] * 7 + [1.0]))
>>> store.set_current(1)
>>> store.add_frame()
>>> store.morph()
>>> save_wavetable_wav("my_wavetable.wav", store.frames)
"""

from wtdraw.dsp.brush import BrushStroke, apply_brush, pointer_to_sample
from wtdraw.dsp.formula import FormulaError
from wtdraw.dsp.morph import interpolate_frames, morph_table
from wtdraw.dsp.process import normalize as normalize_buffer
from wtdraw.dsp.waves import (
    FormulaResult,
    WaveGenerator,
    generate_from_formula,
    generate_from_harmonics,
    generate_from_luminance,
    generate_saw,
    generate_sine,
)
from wtdraw.format import (
    RiffError,
    WavetableFile,
    export_wavetable_to_wav,
    load_wavetable_wav,
    save_wavetable_wav,
)
from wtdraw.store import WavetableStore
from wtdraw.types import (
    FRAME_SIZE,
    MAX_FRAMES,
    GeneratorMode,
    PointerSample,
    SampleBuffer,
)

__all__ = [
    # Types
    "FRAME_SIZE",
    "MAX_FRAMES",
    "GeneratorMode",
    "PointerSample",
    "SampleBuffer",
    # Generators
    "WaveGenerator",
    "FormulaResult",
    "FormulaError",
    "generate_sine",
    "generate_saw",
    "generate_from_formula",
    "generate_from_harmonics",
    "generate_from_luminance",
    "normalize_buffer",
    # Editing
    "BrushStroke",
    "apply_brush",
    "pointer_to_sample",
    "interpolate_frames",
    "morph_table",
    "WavetableStore",
    # Format
    "export_wavetable_to_wav",
    "save_wavetable_wav",
    "load_wavetable_wav",
    "WavetableFile",
    "RiffError",
]
