"""Line encoding for outbound APRS-IS messages."""

from protocol.constants import CONTROL_PREFIX, MESSAGE_DELIMITER, TEXT_ENCODING


def encode_line(line: str) -> bytes:
    """
    Terminate a line with the wire delimiter and encode it for transmission.
    
    The line must NOT already carry the <CR><LF> separator.
    """
    return f'{line}{MESSAGE_DELIMITER}'.encode(TEXT_ENCODING)


def encoded_length(line: str) -> int:
    """Size in bytes of the line once delimited and encoded."""
    return len(encode_line(line))


def is_control_line(line: str) -> bool:
    """True for '#'-prefixed server commands and client directives."""
    return line.startswith(CONTROL_PREFIX)
