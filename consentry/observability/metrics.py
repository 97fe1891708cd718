"""Prometheus metrics for Consentry.

Counts consent commands by outcome and rejected consent maps.
"""

from prometheus_client import Counter

# Consent ledger metrics
CONSENT_COMMANDS = Counter(
    "consentry_consent_commands_total",
    "Total number of consent commands applied to profiles",
    labelnames=["action", "outcome"],
)

# Ingestion metrics
FORMAT_ERRORS = Counter(
    "consentry_format_errors_total",
    "Total number of consent maps rejected as malformed",
    labelnames=["field"],
)
