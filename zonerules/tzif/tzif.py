"""Library for decoding TZif files.

The TZif format (rfc8536) is the binary format produced by the zic compiler
for the IANA time zone database. A file holds a version 1 data block with
32-bit transition times and, for version 2 and later, a second data block
with 64-bit transition times followed by a footer holding a POSIX TZ string
that describes transitions after the last one in the data block.

The caller supplies the bytes of the file. Only the version 2+ data block
is used when present, since the version 1 block can't represent times
outside the 32-bit range.
"""

import enum
import io
import logging
import struct
from collections import namedtuple
from collections.abc import Callable
from dataclasses import dataclass
from functools import cache
from typing import Sequence

from ..compat import rules_compat
from ..exceptions import TzifError
from .model import LeapSecond, LocalTimeType, TzifData, TzifTransition
from .tz_rule import Rule, parse_tz_rule

__all__ = ["read_tzif"]

_LOGGER = logging.getLogger(__name__)

# Records specifying the local time type
_LOCAL_TIME_TYPE_STRUCT_FORMAT = "".join(
    [
        ">",  # Use standard size of packed value bytes
        "l",  # utoff (4 bytes): Number of seconds to add to UTC to determine local time
        "?",  # dst (1 byte): Indicates the time is DST (1) or standard (0)
        "B",  # idx (1 byte): Offset index into the time zone designiation octets (0-charcnt-1)
    ]
)
_LOCAL_TIME_RECORD_SIZE = 6


class _TZifVersion(enum.Enum):
    """Defines information related to _TZifVersions."""

    V1 = (b"\x00", 4, "l")  # 32-bit in v1
    V2 = (b"2", 8, "q")  # 64-bit in v2+
    V3 = (b"3", 8, "q")

    def __init__(self, version: bytes, time_size: int, time_format: str):
        self._version = version
        self._time_size = time_size
        self._time_format = time_format

    @property
    def version(self) -> bytes:
        """Return the version byte string."""
        return self._version

    @property
    def time_size(self) -> int:
        """Return the TIME_SIZE used in the data block parsing."""
        return self._time_size

    @property
    def time_format(self) -> str:
        """Return the struct unpack format string for TIME_SIZE objects."""
        return self._time_format


@dataclass
class _Header:
    """TZif _Header information."""

    SIZE = 44  # Total size of the header to read
    STRUCT_FORMAT = "".join(
        [
            ">",  # Use standard size of packed value bytes
            "4s",  # magic (4 bytes)
            "c",  # version (1 byte)
            "15x",  # unused
            "6l",  # isutccnt, isstdcnt, leapcnt, timecnt, typecnt, charcnt
        ]
    )
    MAGIC = "TZif".encode()

    version: bytes
    """The version of the files format."""

    isutccnt: int
    """The number of UTC/local indicators in the data block."""

    isstdcnt: int
    """The number of standard/wall indicators in the data block."""

    leapcnt: int
    """The number of leap second records in the data block."""

    timecnt: int
    """The number of time transitions in the data block."""

    typecnt: int
    """The number of local time type records in the data block."""

    charcnt: int
    """The number of characters for time zone designations in the data block."""

    @classmethod
    def from_bytes(cls, header_bytes: bytes) -> "_Header":
        """Parse the header bytes into a file."""
        if len(header_bytes) != _Header.SIZE:
            raise TzifError("zoneinfo file header was truncated")
        (
            magic,
            version,
            isutccnt,
            isstdcnt,
            leapcnt,
            timecnt,
            typecnt,
            charcnt,
        ) = struct.unpack(_Header.STRUCT_FORMAT, header_bytes)
        if magic != _Header.MAGIC:
            raise TzifError("zoneinfo file did not contain magic header")
        if isutccnt not in (0, typecnt):
            raise TzifError(
                f"UTC/local indicators in datablock mismatched ({isutccnt}, {typecnt})"
            )
        if isstdcnt not in (0, typecnt):
            raise TzifError(
                f"standard/wall indicators in datablock mismatched ({isstdcnt}, {typecnt})"
            )
        return _Header(version, isutccnt, isstdcnt, leapcnt, timecnt, typecnt, charcnt)

    def verify_counts(self) -> None:
        """Verify the data block has local time types to reference."""
        if self.typecnt == 0:
            raise TzifError("Local time records in block is zero")
        if self.charcnt == 0:
            raise TzifError("Total number of octets is zero")


_TransitionBlock = namedtuple(
    "_TransitionBlock", ["transition_time", "time_type", "isstdcnt", "isutccnt"]
)


def _new_transition(
    transition: _TransitionBlock,
    local_time_types: list[LocalTimeType],
) -> TzifTransition:
    """Create a transition from the raw block values and its local time type."""
    if transition.time_type >= len(local_time_types):
        raise TzifError(
            f"transition_type out of bounds {transition.time_type} >= {len(local_time_types)}"
        )
    if transition.isutccnt and not transition.isstdcnt:
        raise TzifError("isutccnt was True but isstdcnt was False")
    time_type = local_time_types[transition.time_type]
    return TzifTransition(
        transition.transition_time,
        time_type.utoff,
        time_type.dst,
        transition.isstdcnt,
        transition.isutccnt,
        time_type.designation,
    )


def _read_datablock(
    header: _Header, version: _TZifVersion, buf: io.BytesIO
) -> tuple[list[TzifTransition], list[LocalTimeType], list[LeapSecond]]:
    """Read records from the buffer."""
    # A series of transition times in sorted order
    transition_times = struct.unpack(
        f">{header.timecnt}{version.time_format}",
        buf.read(header.timecnt * version.time_size),
    )

    # A series of integers specifying the type of local time of the corresponding
    # transition time. These are zero-based indices into the array of local
    # time type records. (from 0 to typecnt-1)
    transition_types: Sequence[int] = []
    if header.timecnt > 0:
        transition_types = struct.unpack(
            f">{header.timecnt}B", buf.read(header.timecnt)
        )

    raw_time_types = [
        struct.unpack(_LOCAL_TIME_TYPE_STRUCT_FORMAT, buf.read(_LOCAL_TIME_RECORD_SIZE))
        for _ in range(header.typecnt)
    ]

    # An array of NUL-terminated time zone designation strings
    tz_designations = buf.read(header.charcnt)

    @cache
    def get_tz_designations(idx: int) -> str:
        """Find the null terminated string starting at the specified index."""
        end = tz_designations.find(b"\x00", idx)
        return tz_designations[idx:end].decode("UTF-8")

    local_time_types = [
        LocalTimeType(utoff, dst, get_tz_designations(idx))
        for (utoff, dst, idx) in raw_time_types
    ]

    leap_seconds: list[LeapSecond] = [
        LeapSecond._make(
            struct.unpack(
                f">{version.time_format}l",
                buf.read(version.time_size + 4),  # occur + corr
            )
        )
        for _ in range(header.leapcnt)
    ]

    # Standard/wall indicators determine if the transition times are standard time (1)
    # or wall clock time (0).
    isstdcnt_types = _read_indicators(buf, header.isstdcnt)

    # UTC/local indicators determine if the transition times are UTC (1) or local time (0).
    isutccnt_types = _read_indicators(buf, header.isutccnt)

    # Indicators are stored per local time type, so apply them to each transition
    transitions = [
        _new_transition(
            _TransitionBlock(
                transition_time,
                time_type,
                _indicator(isstdcnt_types, time_type),
                _indicator(isutccnt_types, time_type),
            ),
            local_time_types,
        )
        for transition_time, time_type in zip(transition_times, transition_types)
    ]

    return (transitions, local_time_types, leap_seconds)


def _read_indicators(buf: io.BytesIO, count: int) -> list[bool]:
    if count == 0:
        return []
    return list(struct.unpack(f">{count}?", buf.read(count)))


def _indicator(values: list[bool], index: int) -> bool:
    return values[index] if index < len(values) else False


def _parse_footer(footer: bytes) -> tuple[str | None, Rule | None]:
    """Parse the newline enclosed TZ string that follows the v2+ data block."""
    parts = footer.decode("UTF-8").split("\n")
    if len(parts) != 3:
        raise TzifError("Failed to read TZ footer")
    if not (tz_str := parts[1]):
        return (None, None)
    try:
        return (tz_str, parse_tz_rule(tz_str))
    except ValueError as err:
        if not rules_compat.is_lenient_tzif_enabled():
            raise TzifError(f"Unsupported TZ footer: {tz_str}") from err
        _LOGGER.warning("Ignoring unsupported TZ footer %s: %s", tz_str, err)
        return (tz_str, None)


def read_tzif(content: bytes) -> TzifData:
    """Read the TZif file and parse and return the timezone records."""
    buf = io.BytesIO(content)
    try:
        # V1 header and block
        header = _Header.from_bytes(buf.read(_Header.SIZE))
        if header.version == _TZifVersion.V1.version:
            header.verify_counts()
        (transitions, local_time_types, leap_seconds) = _read_datablock(
            header, _TZifVersion.V1, buf
        )
        if header.version == _TZifVersion.V1.version:
            _LOGGER.debug("Read v1 TZif data with %d transitions", len(transitions))
            return TzifData(transitions, local_time_types, leap_seconds)

        # V2+ header and block
        header = _Header.from_bytes(buf.read(_Header.SIZE))
        header.verify_counts()
        (transitions, local_time_types, leap_seconds) = _read_datablock(
            header, _TZifVersion.V2, buf
        )
    except struct.error as err:
        raise TzifError(f"TZif data block was truncated: {err}") from err

    # V2+ footer
    (footer, rule) = _parse_footer(buf.read())
    _LOGGER.debug(
        "Read TZif data with %d transitions and footer %s", len(transitions), footer
    )
    return TzifData(transitions, local_time_types, leap_seconds, footer=footer, rule=rule)
