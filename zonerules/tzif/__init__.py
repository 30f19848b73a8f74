"""Decoding of TZif (rfc8536) data into zone rules.

Locating TZif files on the system is left to the caller, which supplies
the raw bytes of a file.
"""

from .tzif import read_tzif
from .zone_rules import read_zone_rules, zone_rules_from_tzif

__all__ = [
    "read_tzif",
    "read_zone_rules",
    "zone_rules_from_tzif",
]
