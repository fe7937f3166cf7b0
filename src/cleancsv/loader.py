"""
File loading with a single-flight guard and a decode timeout.

Decoding is the only step that may take long. FileLoader runs it on a worker
thread and waits at most `timeout` seconds. Only one decode may be in flight
per loader: a request made while another is pending is dropped (``None`` is
returned), not queued.
"""

from __future__ import annotations

import logging
import threading
from concurrent.futures import ThreadPoolExecutor
from concurrent.futures import TimeoutError as FutureTimeoutError
from pathlib import Path
from typing import Callable, Optional, Sequence, Union

from .config import ACCEPTED_EXTENSIONS, DECODE_TIMEOUT_SECONDS, MAX_FILE_SIZE_BYTES
from .exceptions import DecodeTimeoutError, FileValidationError
from .io import ParseResult, parse_csv, validate_file

logger = logging.getLogger(__name__)

Decoder = Callable[[Union[bytes, str]], ParseResult]


class FileLoader:
    """
    Validate, read and decode input files.

    Args:
        decoder:
            Callable turning raw content into a ParseResult
            (default: :func:`cleancsv.io.parse_csv`).
        timeout:
            Seconds to wait for one decode before giving up.
        max_size / extensions:
            File acceptance policy, see :func:`cleancsv.io.validate_file`.

    A decode that times out cannot be stopped. Its worker thread is left to
    finish in the background with the result discarded, and the guard is
    released, so a new decode may overlap it. The worker is a
    ``concurrent.futures`` thread, which the interpreter joins at exit: a
    decoder that never returns delays shutdown.
    """

    def __init__(
        self,
        decoder: Decoder = parse_csv,
        *,
        timeout: float = DECODE_TIMEOUT_SECONDS,
        max_size: int = MAX_FILE_SIZE_BYTES,
        extensions: Sequence[str] = ACCEPTED_EXTENSIONS,
    ) -> None:
        if timeout <= 0:
            raise ValueError("timeout must be positive")
        self.decoder = decoder
        self.timeout = timeout
        self.max_size = max_size
        self.extensions = tuple(extensions)
        self._guard = threading.Lock()

    @property
    def busy(self) -> bool:
        return self._guard.locked()

    def validate(self, path: Union[str, Path]) -> Path:
        file_path = Path(path)
        if not file_path.is_file():
            raise FileValidationError(f"File not found: {file_path}")
        validate_file(
            file_path.name,
            file_path.stat().st_size,
            max_size=self.max_size,
            extensions=self.extensions,
        )
        return file_path

    def load(self, path: Union[str, Path]) -> Optional[ParseResult]:
        """
        Validate and decode the file at `path`.

        Returns:
            The ParseResult, or None if another decode is still running.

        Raises:
            FileValidationError: the file is missing, too large or of the
                wrong type.
            ParseError: the decoder failed.
            DecodeTimeoutError: the decoder did not finish in time.
        """
        file_path = self.validate(path)
        return self.decode(file_path.read_bytes(), name=file_path.name)

    def decode(self, content: Union[bytes, str], *, name: str = "<memory>") -> Optional[ParseResult]:
        if not self._guard.acquire(blocking=False):
            logger.warning("Decode of %s dropped: another file is still loading", name)
            return None

        executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="cleancsv-decode")
        try:
            future = executor.submit(self.decoder, content)
            try:
                result = future.result(timeout=self.timeout)
            except FutureTimeoutError:
                future.cancel()
                logger.warning("Decode of %s timed out after %ss", name, self.timeout)
                raise DecodeTimeoutError(
                    f"Failed to parse CSV: {name} took longer than {self.timeout:g} seconds"
                ) from None
        finally:
            # A timed-out worker is abandoned, not joined.
            executor.shutdown(wait=False)
            self._guard.release()

        logger.debug("Decoded %s: %d rows, %d columns", name, len(result.rows), len(result.columns))
        return result
