"""Consentry: consent lifecycle and profile-identity records.

Tracks, per customer profile, a ledger of time-bounded privacy consents
and the merge marker left behind by progressive identification.
"""

__version__ = "0.1.0"
