"""Rendu (étirement asinh -> PNG 8 bits).

FR: Normalise les échantillons float32 en intensités 0..255 avec
    asinh(v) / asinh(max) * 255, puis écrit un PNG en niveaux de gris.
EN: Normalizes float32 samples into 0..255 intensities with
    asinh(v) / asinh(max) * 255, then writes a grayscale PNG.

Règles:
- max initialisé à 0.0 (entrée toute négative -> 0.0), NaN ignorés
- troncature vers zéro puis réduction modulo 256, sans bornage (clamp)
- résultat non fini (NaN/inf, dont max == 0.0) -> config.NONFINITE_SENTINEL
"""

from __future__ import annotations

from pathlib import Path
from typing import Tuple

import numpy as np
from PIL import Image

from . import config
from .fits_utils import axis_extents
from .logging_utils import info, warn
from .model import FitsDocument


def peak(samples: np.ndarray) -> float:
    return float(np.fmax.reduce(samples.astype(np.float64), initial=0.0))


def _stretch(values: np.ndarray, high: float) -> Tuple[np.ndarray, int]:
    with np.errstate(divide="ignore", invalid="ignore", over="ignore"):
        scaled = np.arcsinh(values) / np.arcsinh(high) * 255.0
    finite = np.isfinite(scaled)
    out = np.full(scaled.shape, config.NONFINITE_SENTINEL, dtype=np.uint8)
    # u8 narrowing: truncate, then wrap
    out[finite] = (np.trunc(scaled[finite]).astype(np.int64) & 0xFF).astype(np.uint8)
    return out, int(scaled.size - np.count_nonzero(finite))


def stretch(samples: np.ndarray, high: float | None = None) -> np.ndarray:
    values = np.asarray(samples, dtype=np.float64)
    if high is None:
        high = peak(values)
    out, _ = _stretch(values, high)
    return out


def render(document: FitsDocument) -> Tuple[bytes, int, int]:
    samples = np.asarray(document.samples(), dtype=np.float64)
    high = peak(samples)
    pixels, sentinels = _stretch(samples, high)
    width, height = axis_extents(document.header)
    if samples.size:
        info(f"Rendu: {samples.size} échantillon(s), max={high:g}, {sentinels} sentinelle(s)")
    if high == 0.0 and samples.size:
        warn(f"Maximum nul: toutes les intensités valent {config.NONFINITE_SENTINEL}")
    return pixels.tobytes(), width, height


def write_png(pixels: bytes, width: int, height: int, out_png: Path) -> bool:
    try:
        im = Image.frombytes("L", (width, height), pixels)
        out_png.parent.mkdir(parents=True, exist_ok=True)
        im.save(out_png, format="PNG")
        info(f"PNG écrit: {out_png} ({width}x{height})")
        return True
    except Exception as e:
        warn(f"PNG impossible: {out_png} ({e})")
        return False
