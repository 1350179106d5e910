"""Export JSON (fichier « sidecar » à côté du PNG).

FR: Sérialise l'en-tête, le résumé, l'intervalle des données et le texte des
    extensions d'un document, pour inspection ou diff.
EN: Serializes a document's header, summary, data span and extension text,
    for inspection or diffing.
"""

from __future__ import annotations
from pathlib import Path
import json
from typing import Any

from .fits_utils import summarize_header
from .logging_utils import info, warn
from .model import FitsDocument


def document_to_dict(document: FitsDocument) -> dict:
    data: Any = None
    if document.data is not None:
        data = {
            "offset": document.data.span.start,
            "length": document.data.byte_length,
            "width": document.data.width,
            "height": document.data.height,
        }
    return {
        "size": len(document.buffer),
        "summary": summarize_header(document.header),
        "header": dict(document.header),
        "data": data,
        "extensions": [
            {"offset": ext.span.start, "length": ext.span.length, "text": ext.text}
            for ext in document.extensions
        ],
        "secondaryHeaders": [dict(h) for h in document.secondary_headers],
    }


def save_json(path: Path, data: dict) -> bool:
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(data, ensure_ascii=False, indent=2), encoding="utf-8")
    except Exception as e:
        warn(f"JSON impossible: {path} ({e})")
        return False
    info(f"JSON écrit: {path}")
    return True
