"""Configuration centralisée.

FR: Constantes du format (blocs, enregistrements, marqueurs) et réglages
    surchargeables par variables d'environnement.
EN: Format constants (blocks, records, markers) and settings that can be
    overridden through environment variables.
"""

import os

VERSION = "0.3.0"

# Format
BLOCK_SIZE = 2880
RECORD_SIZE = 80
END_MARKER = " END "
XTENSION_MARKER = "XTENSION"

# Big-endian float32: seule profondeur supportée / only supported sample type
SAMPLE_DTYPE = ">f4"
SAMPLE_SIZE = 4

# Byte written for NaN/inf stretch results (e.g. every pixel when high == 0.0)
NONFINITE_SENTINEL = 0

# Réglages (env)
DEFAULT_INPUT_PATH = os.environ.get("FITSBLOCK_DEFAULT_INPUT", "data/HRSz0yd020fm_c2f.fits")
DEFAULT_OUT_DIRNAME = os.environ.get("FITSBLOCK_OUT_DIR", "render")
DEBUG = os.environ.get("FITSBLOCK_DEBUG", "0").strip().lower() in ("1", "true", "yes", "on")

FITS_SUFFIXES = (".fits", ".fit", ".fts")
