"""Single-pass file-like wrapper over a streamed HTTP response body."""

from typing import Iterator, Optional

import httpx


class ResponseStream:
    """
    Lazily consumed byte stream backed by an open httpx response.

    The stream is finite and cannot be restarted; reading again requires a
    new call. Closing it closes the connection, which is the only way to
    cancel a download.
    """

    def __init__(self, response: httpx.Response):
        """
        Initialize the stream.

        Args:
            response: Response sent with stream=True, status already checked
        """
        self._response = response
        self._pieces = response.iter_bytes()
        self._buffer = b''
        self._exhausted = False

    @property
    def headers(self) -> httpx.Headers:
        return self._response.headers

    @property
    def closed(self) -> bool:
        return self._response.is_closed

    def _next_piece(self) -> Optional[bytes]:
        if self._exhausted:
            return None
        try:
            return next(self._pieces)
        except StopIteration:
            self._exhausted = True
            self.close()
            return None

    def read(self, size: int = -1) -> bytes:
        """
        Read up to size bytes (everything left when size is negative).

        Returns:
            Bytes read; b'' once the body is exhausted
        """
        if size is None or size < 0:
            chunks = [self._buffer]
            self._buffer = b''
            while True:
                piece = self._next_piece()
                if piece is None:
                    break
                chunks.append(piece)
            return b''.join(chunks)

        while len(self._buffer) < size:
            piece = self._next_piece()
            if piece is None:
                break
            self._buffer += piece

        data, self._buffer = self._buffer[:size], self._buffer[size:]
        return data

    def __iter__(self) -> Iterator[bytes]:
        if self._buffer:
            data, self._buffer = self._buffer, b''
            yield data
        while True:
            piece = self._next_piece()
            if piece is None:
                return
            yield piece

    def close(self) -> None:
        """Close the underlying response."""
        self._response.close()

    def __enter__(self) -> 'ResponseStream':
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()
