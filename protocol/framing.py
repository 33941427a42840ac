"""Stream framing for the line-oriented APRS-IS protocol."""

from typing import List
import codecs

from protocol.constants import MESSAGE_DELIMITER, TEXT_ENCODING


class StreamFramer:
    """
    Accumulates raw inbound bytes and splits them into complete lines.

    TCP delivers the stream in chunks of arbitrary size, so a chunk can hold
    several lines, a single line, or only part of one. The framer keeps the
    unterminated tail in a buffer until the delimiter that ends it arrives.

    The buffer is not capped: a peer that never sends <CR><LF> makes it grow
    without bound. The right limit depends on the deployment, so callers that
    need one should enforce it on top of ``buffer``.
    """

    def __init__(self):
        """Initialize an empty framer."""
        self._buffer: str = ''
        self._decoder = codecs.getincrementaldecoder(TEXT_ENCODING)(errors='replace')

    @property
    def buffer(self) -> str:
        """Pending text not yet terminated by a delimiter."""
        return self._buffer

    def reset(self) -> None:
        """Discard any pending fragment. Must be called for every new connection."""
        self._buffer = ''
        self._decoder.reset()

    def feed(self, chunk: bytes) -> List[str]:
        """
        Append a chunk to the buffer and extract every complete line.

        Args:
            chunk: Raw bytes as delivered by the transport

        Returns:
            Complete lines in arrival order, delimiter stripped
        """
        if not chunk:
            return []

        # Multi-byte characters split across chunks stay in the decoder
        self._buffer += self._decoder.decode(chunk)
        msgs = self._buffer.split(MESSAGE_DELIMITER)

        if not self._buffer.endswith(MESSAGE_DELIMITER):
            # Last segment is an incomplete line
            self._buffer = msgs[-1]
            return msgs[:-1]

        self._buffer = ''
        return [msg for msg in msgs if msg.strip() != '']
