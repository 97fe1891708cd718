"""Enums for profile domain."""

from enum import Enum


class Disposition(str, Enum):
    """Stored decision carried by a consent record.

    Only positive and negative consent are ever stored. Removing a
    decision is expressed with a revoke command, never as a state.
    """

    GRANT = "GRANT"
    DENY = "DENY"


class ConsentGrant(str, Enum):
    """Grant names accepted on the wire.

    REVOKE only exists at the map boundary, where it is turned into a
    revoke command.
    """

    GRANT = "GRANT"
    DENY = "DENY"
    REVOKE = "REVOKE"
