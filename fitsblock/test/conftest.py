from types import SimpleNamespace

import numpy as np
import pytest

BLOCK = 2880


def card(key, value=None, comment=None) -> bytes:
    if value is None:
        text = key
    else:
        text = f"{key:<8}= {value:>20}"
        if comment:
            text += f" / {comment}"
    return text.ljust(80)[:80].encode("ascii")


def pad(raw: bytes, fill: bytes = b"\0") -> bytes:
    return raw + fill * ((BLOCK - len(raw) % BLOCK) % BLOCK)


def header_block(cards, end=True) -> bytes:
    raw = b"".join(card(*c) if isinstance(c, tuple) else card(c) for c in cards)
    if end:
        raw += card("END")
    return pad(raw, b" ")


def image_header(width, height, extra=()) -> bytes:
    return header_block(
        [
            ("SIMPLE", "T"),
            ("BITPIX", "-32"),
            ("NAXIS", "2"),
            ("NAXIS1", str(width)),
            ("NAXIS2", str(height)),
            *extra,
        ]
    )


def extension_header(name="META") -> bytes:
    return header_block(
        [
            ("XTENSION", "'IMAGE   '", "Image extension"),
            ("BITPIX", "8"),
            ("NAXIS", "0"),
            ("EXTNAME", f"'{name}'"),
        ]
    )


def float_data(values, padded=True) -> bytes:
    raw = np.asarray(values, dtype=">f4").tobytes()
    return pad(raw) if padded else raw


@pytest.fixture
def fb():
    return SimpleNamespace(
        BLOCK=BLOCK,
        card=card,
        pad=pad,
        header_block=header_block,
        image_header=image_header,
        extension_header=extension_header,
        float_data=float_data,
    )
