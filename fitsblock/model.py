"""Modèle de données (document, unités, état du scanner).

FR: Le tampon complet du fichier est l'unique propriétaire des octets; les
    unités ne gardent que des intervalles (début, longueur) dans ce tampon.
EN: The whole-file buffer owns the bytes; units only keep (start, length)
    spans into it. Extension text is the one explicit copy.
"""

from __future__ import annotations

import enum
from types import MappingProxyType
from dataclasses import dataclass, field
from typing import Dict, List, Optional

import numpy as np

from . import config

HeaderMap = Dict[str, str]


@dataclass(frozen=True)
class Span:
    start: int
    length: int

    @property
    def stop(self) -> int:
        return self.start + self.length

    def view(self, buffer: bytes) -> memoryview:
        return memoryview(buffer)[self.start:self.stop]

    def __str__(self) -> str:
        return f"[{self.start}, {self.stop})"


@dataclass(frozen=True)
class DataUnit:
    span: Span
    width: int
    height: int

    @property
    def byte_length(self) -> int:
        return self.span.length

    @property
    def sample_count(self) -> int:
        return self.span.length // config.SAMPLE_SIZE

    def samples(self, buffer: bytes) -> np.ndarray:
        """Big-endian float32 samples, read in place (no copy)."""
        if self.sample_count == 0:
            return np.zeros(0, dtype=config.SAMPLE_DTYPE)
        return np.frombuffer(buffer, dtype=config.SAMPLE_DTYPE, count=self.sample_count, offset=self.span.start)


@dataclass(frozen=True)
class ExtensionUnit:
    span: Span
    text: str


class Section(enum.Enum):
    HEADER = "header"
    DATA = "data"
    EXTENSION = "extension"


@dataclass(frozen=True)
class ScanState:
    section: Section = Section.HEADER
    block_index: int = 0

    def goto(self, section: Section, block_index: int) -> "ScanState":
        return ScanState(section, block_index)


@dataclass
class FitsDocument:
    buffer: bytes
    header: HeaderMap = field(default_factory=dict)
    data: Optional[DataUnit] = None
    extensions: List[ExtensionUnit] = field(default_factory=list)
    # headers of units after the primary one (their data is not extracted)
    secondary_headers: List[HeaderMap] = field(default_factory=list)
    header_units: int = 0
    _final: bool = field(default=False, init=False, repr=False, compare=False)

    def __setattr__(self, name, value):
        if getattr(self, "_final", False):
            raise AttributeError(f"FitsDocument is finalized; cannot set {name!r}")
        super().__setattr__(name, value)

    def finalize(self) -> "FitsDocument":
        self.header = MappingProxyType(dict(self.header))
        self.extensions = tuple(self.extensions)
        self.secondary_headers = tuple(MappingProxyType(dict(h)) for h in self.secondary_headers)
        self._final = True
        return self

    @property
    def finalized(self) -> bool:
        return self._final

    def data_bytes(self) -> bytes:
        if self.data is None:
            return b""
        return bytes(self.data.span.view(self.buffer))

    def samples(self) -> np.ndarray:
        if self.data is None:
            return np.zeros(0, dtype=config.SAMPLE_DTYPE)
        return self.data.samples(self.buffer)
