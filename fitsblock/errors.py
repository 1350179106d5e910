"""Erreurs fatales du lecteur de blocs.

FR: Toute erreur ici interrompt le traitement; le CLI l'affiche et sort en 1.
EN: Every error here aborts the run; the CLI prints it and exits with status 1.
"""


class FitsBlockError(RuntimeError):
    """Base class for fatal scanning/decoding errors."""


class TruncatedInputError(FitsBlockError):
    """The buffer is shorter than a computed byte range requires."""

    def __init__(self, message: str, start: int | None = None, stop: int | None = None, available: int | None = None):
        super().__init__(message)
        self.start = start
        self.stop = stop
        self.available = available


class MalformedHeaderValueError(FitsBlockError):
    """A numeric header card is present but its value does not parse."""

    def __init__(self, key: str, value: str):
        super().__init__(f"header card {key} has a non-numeric value: {value!r}")
        self.key = key
        self.value = value


class DataSizeMismatchError(FitsBlockError):
    """The declared pixel byte length is not fully available in the buffer."""

    def __init__(self, offset: int, expected: int, available: int):
        super().__init__(
            f"data unit at byte {offset} needs {expected} bytes "
            f"[{offset}, {offset + expected}) but only {available} are available"
        )
        self.offset = offset
        self.expected = expected
        self.available = available
