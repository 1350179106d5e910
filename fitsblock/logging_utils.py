"""Journalisation / progression (bilingue).

FR: Centraliser les messages [INFO]/[WARN]/[DBG]/[ERROR] de la console.
EN: Centralize [INFO]/[WARN]/[DBG]/[ERROR] console messages and progress helpers.

Les lignes [DBG] (trace bloc par bloc du scanner) ne sortent que si le mode
debug est actif (FITSBLOCK_DEBUG=1 ou --debug).
"""

import sys

from . import config

_debug = config.DEBUG


def set_debug(enabled: bool) -> None:
    global _debug
    _debug = bool(enabled)


def info(msg: str) -> None:
    print(f"[INFO] {msg}")

def warn(msg: str) -> None:
    print(f"[WARN] {msg}")

def error(msg: str) -> None:
    print(f"[ERROR] {msg}", file=sys.stderr)

def dbg(msg: str) -> None:
    if _debug:
        print(f"[DBG] {msg}")

def progress(prefix: str, i: int, total: int, label: str = "") -> None:
    if total <= 0:
        return
    pct = (i / total) * 100.0
    if label:
        print(f"{prefix}: {i}/{total} ({pct:5.1f}%) — {label}")
    else:
        print(f"{prefix}: {i}/{total} ({pct:5.1f}%)")
