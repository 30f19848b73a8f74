"""Exceptions for zonerules library."""


class ZoneRulesError(Exception):
    """Base exception for all zonerules errors."""


class InvalidRulesError(ZoneRulesError, ValueError):
    """Exception raised when constructing zone rules from malformed data.

    Zone rule data is immutable once constructed, so any inconsistency in
    the transition arrays or recurring rules is reported immediately when
    the rules are built and never from a later query. Malformed data is a
    bug in whatever produced it and there is no way to recover.
    """


class UnknownZoneError(ZoneRulesError):
    """Exception raised when a zone id has no registered rules."""


class TzifError(ZoneRulesError, ValueError):
    """Exception raised when decoding TZif data into zone rules.

    This covers both malformed binary data and footer rules that can't be
    represented as recurring transition rules.
    """
