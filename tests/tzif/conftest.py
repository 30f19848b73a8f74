"""Fixtures for encoding TZif files."""

from collections.abc import Callable
import struct

import pytest

NEW_YORK_FOOTER = b"\nEST5EDT,M3.2.0,M11.1.0\n"


def encode_header(
    version: bytes, isutcnt: int, isstdcnt: int, timecnt: int, typecnt: int, charcnt: int
) -> bytes:
    """Encode a TZif header without leap seconds."""
    return struct.pack(
        ">4sc15x6l", b"TZif", version, isutcnt, isstdcnt, 0, timecnt, typecnt, charcnt
    )


def encode_tzif(
    transitions: list[tuple[int, int]],
    types: list[tuple[int, bool, int]],
    designations: bytes,
    footer: bytes = NEW_YORK_FOOTER,
    isstd: list[bool] | None = None,
    isut: list[bool] | None = None,
) -> bytes:
    """Encode a version 2 TZif file with an empty version 1 block.

    Transitions are (epoch second, local time type index) pairs and types
    are (utoff, dst, designation index) records.
    """
    isstd = isstd or []
    isut = isut or []
    v1_block = struct.pack(">l?B", 0, False, 0) + b"UTC\x00"
    v2_block = b"".join(
        [
            struct.pack(f">{len(transitions)}q", *(time for time, _ in transitions)),
            bytes(time_type for _, time_type in transitions),
            b"".join(struct.pack(">l?B", *time_type) for time_type in types),
            designations,
            bytes(isstd),
            bytes(isut),
        ]
    )
    return b"".join(
        [
            encode_header(b"2", 0, 0, 0, 1, 4),
            v1_block,
            encode_header(
                b"2",
                len(isut),
                len(isstd),
                len(transitions),
                len(types),
                len(designations),
            ),
            v2_block,
            footer,
        ]
    )


@pytest.fixture(name="build_tzif")
def mock_build_tzif() -> Callable[..., bytes]:
    """Fixture that encodes the bytes of a TZif file."""
    return encode_tzif


@pytest.fixture(name="build_header")
def mock_build_header() -> Callable[..., bytes]:
    """Fixture that encodes the bytes of a TZif header."""
    return encode_header
