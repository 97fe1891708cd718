"""Customer profiles and their consent ledgers.

A Profile owns a ConsentLedger holding at most one ConsentRecord per
consent type. Grant and deny commands store a record, revoke commands
remove it, and readers evaluate validity against a point in time.
"""

from consentry.profile.commands import (
    ConsentCommand,
    DenyConsent,
    GrantConsent,
    RevokeConsent,
    as_command,
    command_from_map,
)
from consentry.profile.consent import ConsentRecord, utc_now
from consentry.profile.dates import DateFormat, IsoDateFormat
from consentry.profile.enums import ConsentGrant, Disposition
from consentry.profile.models import SYSTEM_SCOPE, ConsentLedger, Profile

__all__ = [
    # Enums
    "ConsentGrant",
    "Disposition",
    # Models
    "ConsentRecord",
    "ConsentLedger",
    "Profile",
    "SYSTEM_SCOPE",
    # Commands
    "ConsentCommand",
    "GrantConsent",
    "DenyConsent",
    "RevokeConsent",
    "as_command",
    "command_from_map",
    # Dates
    "DateFormat",
    "IsoDateFormat",
    "utc_now",
]
