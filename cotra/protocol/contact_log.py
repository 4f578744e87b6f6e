"""
Contact Log Module for COTRA

A device records every share identity it receives from a nearby device,
together with the time it was last seen. The log is opaque to the device:
only the authority's secret key can turn it into unique identities.

The log is not internally synchronized. Concurrent add() calls on the
same log need an external lock.

Usage:
    log = ContactLog()
    log.add(share_id)                    # on every received broadcast
    contacts = log.decode(secret_key)    # authority side
    if contacts is None:
        # wrong key or foreign/corrupt envelope
        ...
"""

from datetime import datetime, timezone
from typing import Any, Dict, Iterator, List, Optional, Tuple

from cotra.crypto.encryption import SecretKey
from cotra.errors import ContactLogParseError
from cotra.protocol.identity import ShareIdentity, UniqueIdentity


def _as_utc(ts: datetime) -> datetime:
    if ts.tzinfo is None:
        return ts.replace(tzinfo=timezone.utc)
    return ts.astimezone(timezone.utc)


def parse_timestamp(text: str) -> datetime:
    """Parse an ISO 8601 timestamp (a trailing Z is accepted) as UTC."""
    return _as_utc(datetime.fromisoformat(text.replace('Z', '+00:00')))


class ContactLog:
    """Represents contacts observed recently."""

    def __init__(self):
        self._seen: Dict[ShareIdentity, datetime] = {}

    def add(self, share_id: ShareIdentity, seen_at: Optional[datetime] = None):
        """
        Register a contact.

        Adding an envelope that is already present overwrites its
        timestamp (last seen), it does not create a second entry.

        Args:
            share_id: Share identity received from another device
            seen_at: Observation time, defaults to now (UTC)
        """
        if seen_at is None:
            seen_at = datetime.now(timezone.utc)
        self._seen[share_id] = _as_utc(seen_at)

    def merge(self, share_id: ShareIdentity, seen_at: datetime):
        """
        Record an observation from stored or submitted data.

        Unlike add(), an older timestamp never replaces a newer one, so
        duplicate entries keep the latest contact time.
        """
        seen_at = _as_utc(seen_at)
        previous = self._seen.get(share_id)
        if previous is None or previous < seen_at:
            self._seen[share_id] = seen_at

    def last_seen(self, share_id: ShareIdentity) -> Optional[datetime]:
        return self._seen.get(share_id)

    def decode(self, secret_key: SecretKey) -> Optional[List[Tuple[UniqueIdentity, datetime]]]:
        """
        Decode the contacts with the secret key of the authority.

        If any single envelope fails to reveal, the whole decode fails and
        returns None: a failure most likely means the wrong key was used,
        and partial results would give wrong exposure conclusions.

        Envelopes are probabilistic, so the same person seen twice shows up
        under two different envelopes. Results are therefore deduplicated
        by unique identity, keeping the latest timestamp.

        Args:
            secret_key: The authority's secret key

        Returns:
            List of (unique_id, last_seen) sorted by last_seen, or None
        """
        latest: Dict[UniqueIdentity, datetime] = {}
        for share_id, timestamp in self._seen.items():
            unique_id = share_id.reveal(secret_key)
            if unique_id is None:
                return None
            previous = latest.get(unique_id)
            if previous is None or previous <= timestamp:
                latest[unique_id] = timestamp

        return sorted(latest.items(), key=lambda item: (item[1], str(item[0])))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "seen": [
                {"share_id": str(share_id), "seen_at": timestamp.isoformat()}
                for share_id, timestamp in self._seen.items()
            ]
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'ContactLog':
        """
        Rebuild a log from to_dict() output.

        Raises:
            ContactLogParseError: on a malformed entry
        """
        log = cls()
        try:
            entries = data.get('seen', [])
            for entry in entries:
                share_id = ShareIdentity.from_string(entry['share_id'])
                log.merge(share_id, parse_timestamp(entry['seen_at']))
        except (AttributeError, KeyError, TypeError, ValueError):
            raise ContactLogParseError() from None
        return log

    def __len__(self) -> int:
        return len(self._seen)

    def __iter__(self) -> Iterator[Tuple[ShareIdentity, datetime]]:
        return iter(list(self._seen.items()))

    def __contains__(self, share_id) -> bool:
        return share_id in self._seen
