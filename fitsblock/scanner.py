"""Scanner de blocs (machine à 3 états).

FR: Découpe le tampon en blocs de 2880 octets et passe chaque bloc à l'état
    courant (Header -> Data -> Extension -> Header ...).
EN: Splits the buffer into 2880-byte blocks and feeds each one to the current
    state (Header -> Data -> Extension -> Header ...).

Notes:
- L'état est une valeur (ScanState) retournée par step(); rien de global.
- Un " END " en état Extension est accepté même sans "XTENSION" vu avant.
- Les blocs encore couverts par l'unité de données ne sont pas testés (" END "/"XTENSION").
- Une unité entamée à la fin du tampon n'est jamais finalisée (pas d'erreur).
"""

from __future__ import annotations

from typing import Iterator, Tuple

from . import config
from .errors import TruncatedInputError
from .fits_utils import axis_extents, decode_text, extract_data, parse_extension, parse_header, rank
from .logging_utils import dbg
from .model import FitsDocument, ScanState, Section


def iter_blocks(buffer: bytes) -> Iterator[Tuple[int, memoryview]]:
    mv = memoryview(buffer)
    for current_block, pos in enumerate(range(0, len(buffer), config.BLOCK_SIZE)):
        yield current_block, mv[pos:pos + config.BLOCK_SIZE]


def blocks_for(byte_length: int) -> int:
    # at least one block, even for an empty data unit
    return max(1, -(-byte_length // config.BLOCK_SIZE))


def _header_step(document: FitsDocument, state: ScanState, current_block: int, text: str) -> ScanState:
    if config.END_MARKER not in text:
        return state
    header = parse_header(document.buffer, state.block_index, current_block)
    if document.header_units == 0:
        document.header = header
    else:
        # primary header already known: later units are kept apart
        document.secondary_headers.append(header)
    document.header_units += 1
    dbg(f"Fin d'en-tête au bloc {current_block}")
    return state.goto(Section.DATA, current_block + 1)


def _data_step(document: FitsDocument, state: ScanState, current_block: int) -> ScanState:
    primary = document.header_units == 1
    header = document.header if primary else document.secondary_headers[-1]
    byte_length = 0
    if rank(header) == 2:
        width, height = axis_extents(header)
        if primary and document.data is None:
            document.data = extract_data(document.buffer, state.block_index, width, height)
            byte_length = document.data.byte_length
        else:
            byte_length = width * height * config.SAMPLE_SIZE
            dbg(f"Données d'unité secondaire ignorées ({byte_length} octets)")
    return state.goto(Section.EXTENSION, current_block + blocks_for(byte_length))


def _extension_step(document: FitsDocument, state: ScanState, current_block: int, text: str) -> ScanState:
    if current_block < state.block_index:
        # still inside the data unit
        return state
    if config.XTENSION_MARKER in text:
        dbg(f"[Début d'extension observé] bloc {current_block}")
    if config.END_MARKER not in text:
        return state
    document.extensions.append(parse_extension(document.buffer, state.block_index, current_block))
    dbg(f"Fin d'extension au bloc {current_block}")
    return state.goto(Section.HEADER, current_block + 1)


def step(document: FitsDocument, state: ScanState, current_block: int, chunk) -> ScanState:
    dbg(f"Bloc {current_block} ({state.section.value}, unité au bloc {state.block_index})")
    if state.section is Section.HEADER:
        return _header_step(document, state, current_block, decode_text(chunk))
    if state.section is Section.DATA:
        return _data_step(document, state, current_block)
    return _extension_step(document, state, current_block, decode_text(chunk))


def scan(buffer: bytes) -> FitsDocument:
    buffer = bytes(buffer)
    if len(buffer) < config.BLOCK_SIZE:
        raise TruncatedInputError(
            f"input of {len(buffer)} bytes is shorter than one {config.BLOCK_SIZE}-byte block",
            start=0,
            stop=config.BLOCK_SIZE,
            available=len(buffer),
        )

    document = FitsDocument(buffer)
    state = ScanState()
    for current_block, chunk in iter_blocks(buffer):
        state = step(document, state, current_block, chunk)

    total_blocks = blocks_for(len(buffer))
    if state.section is not Section.HEADER or state.block_index < total_blocks:
        dbg(f"Fin du tampon en état {state.section.value} (unité au bloc {state.block_index} non finalisée)")
    return document.finalize()
