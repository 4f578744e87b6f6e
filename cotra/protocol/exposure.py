"""
Exposure Tracing Module for COTRA

Authority-side processing of a positive test:
1. The reporter hands over its identities and its contact log
2. The reporter's hashed identities are marked infected
3. The contact log is decoded; every revealed identity is hashed and
   marked tainted with the last contact time

Devices then poll with their hashed identities to learn their status.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Dict, Iterable, Mapping, Optional, Set

from cotra.crypto.encryption import SecretKey
from cotra.protocol.contact_log import ContactLog
from cotra.protocol.identity import HashedIdentity, Identity


class ExposureStatus(str, Enum):
    INFECTED = "infected"
    TAINTED = "tainted"
    CLEAR = "clear"


@dataclass
class ExposureReport:
    """Result of processing one positive report."""
    infected: Set[HashedIdentity] = field(default_factory=set)
    tainted: Dict[HashedIdentity, datetime] = field(default_factory=dict)

    @property
    def exposure_found(self) -> bool:
        return bool(self.tainted)


def trace_exposures(
    secret_key: SecretKey,
    identities: Iterable[Identity],
    contact_log: ContactLog
) -> Optional[ExposureReport]:
    """
    Turn a positive report into infected and tainted hashed identities.

    Args:
        secret_key: The authority's secret key
        identities: All identities of the infected device
        contact_log: The infected device's contact log

    Returns:
        ExposureReport, or None if the contact log could not be decoded.
        A report with no tainted entries means "no exposure found", which
        is not the same thing as None.
    """
    contacts = contact_log.decode(secret_key)
    if contacts is None:
        return None

    report = ExposureReport(infected={identity.hashed_id for identity in identities})
    for unique_id, last_seen in contacts:
        report.tainted[unique_id.hash()] = last_seen
    return report


def resolve_status(
    hashed_ids: Iterable[HashedIdentity],
    infected: Set[HashedIdentity],
    tainted: Mapping[HashedIdentity, datetime]
) -> ExposureStatus:
    """Infected wins over tainted for any of the device's hashed ids."""
    hashed_ids = list(hashed_ids)
    if any(hashed_id in infected for hashed_id in hashed_ids):
        return ExposureStatus.INFECTED
    if any(hashed_id in tainted for hashed_id in hashed_ids):
        return ExposureStatus.TAINTED
    return ExposureStatus.CLEAR
