"""Couche disque (scan + lecture).

FR: Lecture brute d'un fichier et découverte des fichiers FITS d'un dossier.
EN: Raw file reads and FITS file discovery in a directory tree.
"""

import os
from pathlib import Path

from . import config
from .logging_utils import info

SKIP_DIRS = ("site", ".git", "__pycache__", ".venv", "venv", "cache", ".cache")


def read_fits_bytes(path: Path) -> bytes:
    # OSError propagates: a failed read is fatal
    data = Path(path).read_bytes()
    info(f"Lecture: {len(data)} octets depuis {path}")
    return data


def is_fits_file(path: Path) -> bool:
    return path.suffix.lower() in config.FITS_SUFFIXES


def find_fits_files(root_dir: Path, out_dirname: str = config.DEFAULT_OUT_DIRNAME):
    results = []
    skip = set(SKIP_DIRS) | {out_dirname}
    for dirpath, dirnames, filenames in os.walk(root_dir):
        dirnames[:] = sorted(x for x in dirnames if x not in skip)

        d = Path(dirpath)
        for fn in filenames:
            p = d / fn
            if is_fits_file(p):
                results.append(p)

    return sorted(results)
