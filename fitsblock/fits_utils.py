"""Couche FITS (lecture + extraction).

FR: Analyse des enregistrements d'en-tête (80 octets), résolution des
    dimensions (NAXIS*), découpe de l'unité de données et copie du texte des
    extensions. Aucune dépendance à astropy: on lit les blocs nous-mêmes.
EN: Header record parsing (80-byte cards), dimension lookup (NAXIS*), data
    unit slicing and extension text copies, straight from the raw blocks.

Responsabilités:
- parse_record / parse_header: jamais d'erreur sur le contenu
- rank: None si NAXIS absent ou illisible
- axis_extents: 0 si absent, MalformedHeaderValueError si illisible
- extract_data: DataSizeMismatchError si les octets manquent
"""

from __future__ import annotations

from typing import Dict, Optional, Tuple

from . import config
from .errors import DataSizeMismatchError, MalformedHeaderValueError, TruncatedInputError
from .logging_utils import dbg
from .model import DataUnit, ExtensionUnit, HeaderMap, Span


def decode_text(chunk) -> str:
    return bytes(chunk).decode("utf-8", errors="replace")


def block_span(buffer: bytes, start_block: int, end_block: int) -> Span:
    """Byte span of blocks ``start_block..end_block`` (inclusive).

    A short final block is clipped to the end of the buffer.
    """
    start = start_block * config.BLOCK_SIZE
    stop = min((end_block + 1) * config.BLOCK_SIZE, len(buffer))
    if start_block < 0 or start > stop or end_block * config.BLOCK_SIZE >= len(buffer):
        raise TruncatedInputError(
            f"block range {start_block}..{end_block} "
            f"[{start}, {(end_block + 1) * config.BLOCK_SIZE}) exceeds buffer of {len(buffer)} bytes",
            start=start,
            stop=(end_block + 1) * config.BLOCK_SIZE,
            available=len(buffer),
        )
    return Span(start, stop - start)


# ------------------------------------------------------------
# Header
# ------------------------------------------------------------
def parse_record(record: str) -> Optional[Tuple[str, str]]:
    if "=" not in record:
        return None
    key, rest = record.split("=", 1)
    if "/" in rest:
        rest = rest.split("/", 1)[0]
    return key.strip(), rest.strip()


def parse_header(buffer: bytes, start_block: int, end_block: int) -> HeaderMap:
    span = block_span(buffer, start_block, end_block)
    view = span.view(buffer)
    header: HeaderMap = {}
    for pos in range(0, span.length, config.RECORD_SIZE):
        pair = parse_record(decode_text(view[pos:pos + config.RECORD_SIZE]))
        if pair is None:
            continue
        key, value = pair
        header[key] = value
    dbg(f"En-tête {span}: {len(header)} clé(s)")
    return header


# ------------------------------------------------------------
# Dimensions
# ------------------------------------------------------------
def _parse_unsigned(value: str) -> Optional[int]:
    s = value.strip()
    if s.startswith("+"):
        s = s[1:]
    if not (s.isascii() and s.isdigit()):
        return None
    n = int(s)
    # u32
    if n > 0xFFFFFFFF:
        return None
    return n


def rank(header: HeaderMap) -> Optional[int]:
    value = header.get("NAXIS")
    if value is None:
        return None
    return _parse_unsigned(value)


def _extent(header: HeaderMap, key: str) -> int:
    value = header.get(key)
    if value is None:
        return 0
    n = _parse_unsigned(value)
    if n is None:
        raise MalformedHeaderValueError(key, value)
    return n


def axis_extents(header: HeaderMap) -> Tuple[int, int]:
    return _extent(header, "NAXIS1"), _extent(header, "NAXIS2")


# ------------------------------------------------------------
# Data / extensions
# ------------------------------------------------------------
def extract_data(buffer: bytes, start_block: int, width: int, height: int) -> DataUnit:
    offset = start_block * config.BLOCK_SIZE
    size = width * height * config.SAMPLE_SIZE
    available = max(0, min(len(buffer) - offset, size))
    span = Span(offset, available)
    if span.length != size:
        raise DataSizeMismatchError(offset, size, max(0, len(buffer) - offset))
    dbg(f"Données {span}: {width}x{height} float32 BE")
    return DataUnit(span, width, height)


def parse_extension(buffer: bytes, start_block: int, end_block: int) -> ExtensionUnit:
    span = block_span(buffer, start_block, end_block)
    return ExtensionUnit(span, decode_text(span.view(buffer)))


# ------------------------------------------------------------
# Résumé (métadonnées lisibles)
# ------------------------------------------------------------
def unquote(value) -> str:
    s = "" if value is None else str(value).strip()
    if len(s) >= 2 and s[0] == "'" and s[-1] == "'":
        s = s[1:-1].replace("''", "'").rstrip()
    return s


def safe_text(x, default=""):
    s = unquote(x)
    return s if s else default


def summarize_header(header: HeaderMap) -> Dict[str, object]:
    try:
        width, height = axis_extents(header)
    except MalformedHeaderValueError:
        width, height = 0, 0
    return {
        "object": safe_text(header.get("OBJECT"), "Unknown Object"),
        "date_obs": safe_text(header.get("DATE-OBS"), ""),
        "exptime": safe_text(header.get("EXPTIME"), "0"),
        "telescope": safe_text(header.get("TELESCOP"), "Unknown Telescope"),
        "instrument": safe_text(header.get("INSTRUME"), "Unknown Instrument"),
        "bitpix": safe_text(header.get("BITPIX"), ""),
        "naxis": rank(header),
        "width": width,
        "height": height,
    }
