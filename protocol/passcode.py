"""APRS-IS passcode calculation."""

import re

# Initial hash value of the APRS-IS passcode algorithm
PASSCODE_SEED = 0x73E2

_SSID_PATTERN = re.compile(r'-[^-]+$')


def aprs_passcode(callsign: str) -> int:
    """
    Calculate the APRS-IS passcode for a callsign.

    The SSID is ignored and the callsign is upper-cased first, so
    ``n0call-9`` and ``N0CALL`` share a passcode.

    It is the client programmer's responsibility to make sure
    non-amateurs are not handed passcodes that validate them on the APRS-IS.

    Args:
        callsign: Station callsign, with or without SSID

    Returns:
        Passcode in the range 0-32767
    """
    call = _SSID_PATTERN.sub('', callsign).upper()

    hash_ = PASSCODE_SEED
    for i, char in enumerate(call):
        # Even positions go to the high byte, odd positions to the low byte
        shift = 8 if i % 2 == 0 else 0
        hash_ ^= ord(char) << shift

    return hash_ & 0x7FFF
