#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""Rendu d'un fichier FITS (ou d'un dossier de fichiers FITS) en PNG.

Usage:
    python render_fits.py [fichier.fits | dossier] [--out-dir DIR] [--json] [--debug]

Sans argument, lit config.DEFAULT_INPUT_PATH (FITSBLOCK_DEFAULT_INPUT).
"""

import argparse
import sys
from pathlib import Path

from fitsblock import config
from fitsblock.errors import FitsBlockError
from fitsblock.export import document_to_dict, save_json
from fitsblock.fits_utils import summarize_header
from fitsblock.fs_scan import find_fits_files, read_fits_bytes
from fitsblock.logging_utils import error, info, progress, set_debug, warn
from fitsblock.render import render, write_png
from fitsblock.scanner import scan


def output_stem(fits_path: Path, root: Path | None = None) -> Path:
    # batch: keep the sub-folder so same-named files do not overwrite each other
    rel = fits_path.relative_to(root) if root is not None else Path(fits_path.name)
    return rel.parent / rel.stem


def process_file(fits_path: Path, out_dir: Path, write_json: bool = False, stem: Path | None = None) -> bool:
    if stem is None:
        stem = Path(fits_path.stem)
    buffer = read_fits_bytes(fits_path)
    document = scan(buffer)

    meta = summarize_header(document.header)
    info(
        f"{fits_path.name}: {meta['object']} | {meta['telescope']} | "
        f"NAXIS={meta['naxis']} {meta['width']}x{meta['height']} | "
        f"{len(document.extensions)} extension(s)"
    )
    if document.data is None:
        warn(f"Aucune unité de données 2D dans {fits_path.name}")

    pixels, width, height = render(document)
    ok = write_png(pixels, width, height, out_dir / stem.parent / f"{stem.name}.png")

    if write_json:
        save_json(out_dir / stem.parent / f"{stem.name}.json", document_to_dict(document))
    return ok


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Render a FITS-like block file as a grayscale PNG.")
    parser.add_argument("input", nargs="?", default=config.DEFAULT_INPUT_PATH, help="FITS file or directory")
    parser.add_argument("--out-dir", type=Path, default=None, help=f"Output directory (default: ./{config.DEFAULT_OUT_DIRNAME})")
    parser.add_argument("--json", action="store_true", help="Also write a JSON sidecar with header and extensions")
    parser.add_argument("--debug", action="store_true", help="Print per-block scanner trace")
    parser.add_argument("--version", action="version", version=config.VERSION)
    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    if args.debug:
        set_debug(True)

    src = Path(args.input)
    out_dir = args.out_dir if args.out_dir is not None else Path.cwd() / config.DEFAULT_OUT_DIRNAME
    info(f"fitsblock {config.VERSION}")

    root = None
    if src.is_dir():
        root = src
        files = find_fits_files(src, out_dir.name)
        if not files:
            info(f"Aucun fichier FITS trouvé dans {src}")
            return 0
        targets = files
    else:
        targets = [src]

    written = 0
    total = len(targets)
    try:
        for i, fits_path in enumerate(targets, start=1):
            if total > 1:
                progress("Rendu", i, total, fits_path.name)
            if process_file(fits_path, out_dir, write_json=args.json, stem=output_stem(fits_path, root)):
                written += 1
    except FitsBlockError as e:
        error(f"{fits_path}: {e}")
        return 1
    except OSError as e:
        error(f"Lecture impossible: {fits_path} ({e})")
        return 1

    info(f"✅ {written}/{total} PNG écrit(s) dans: {out_dir}")
    return 0


def cli() -> None:
    sys.exit(main())


if __name__ == "__main__":
    cli()
