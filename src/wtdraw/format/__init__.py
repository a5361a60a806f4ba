"""Wavetable file format module.

This module reads and writes wavetables as plain single-channel WAV files.

Format Overview
---------------
    +----------------------------------------+
    | RIFF Header ("WAVE")          12 bytes |
    +----------------------------------------+
    | fmt  chunk                    24 bytes |
    |   - IEEE float (format 3)              |
    |   - 1 channel, 44100 Hz, 32 bits       |
    +----------------------------------------+
    | data chunk                             |
    |   - 32-bit float, little-endian        |
    |   - frame 0, frame 1, ... frame N-1    |
    |   - 2048 samples per frame             |
    +----------------------------------------+

Example Usage
-------------
>>> from wtdraw.format import save_wavetable_wav, load_wavetable_wav
>>> save_wavetable_wav("my_wavetable.wav", store.frames)
>>> wavetable = load_wavetable_wav("my_wavetable.wav")
>>> print(wavetable.num_frames)
"""

from wtdraw.format.importers import import_wav_frames
from wtdraw.format.reader import WavetableFile, decode_wavetable_wav, load_wavetable_wav
from wtdraw.format.riff import RiffError
from wtdraw.format.writer import export_wavetable_to_wav, save_wavetable_wav

__all__ = [
    # Writer
    "export_wavetable_to_wav",
    "save_wavetable_wav",
    # Reader
    "load_wavetable_wav",
    "decode_wavetable_wav",
    "WavetableFile",
    "RiffError",
    # Importers
    "import_wav_frames",
]
