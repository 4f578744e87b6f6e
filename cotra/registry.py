"""
JSON-backed state for the tracer.

AuthorityDb is the authority's file: its keypair plus the hashed identities
known to be infected or tainted. Device is a single phone's file: its
identities and contact log.
"""

import json
import sys
from datetime import datetime
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Set, TypeVar, Union

from cotra.errors import AuthorityParseError, IdentityParseError, ParseError
from cotra.protocol.authority import Authority
from cotra.protocol.contact_log import ContactLog, parse_timestamp
from cotra.protocol.exposure import (
    ExposureReport,
    ExposureStatus,
    resolve_status,
    trace_exposures,
)
from cotra.protocol.identity import HashedIdentity, Identity

T = TypeVar('T')


class Device:
    """Identities and contacts of one device."""

    def __init__(self, identities: Optional[List[Identity]] = None,
                 contacts: Optional[ContactLog] = None):
        self.identities = identities if identities is not None else []
        self.contacts = contacts if contacts is not None else ContactLog()

    def rotate(self) -> Identity:
        """Start using a new identity."""
        identity = Identity.unique()
        self.identities.append(identity)
        return identity

    def current_identity(self) -> Identity:
        """The most recent identity, creating one if there is none."""
        if not self.identities:
            return self.rotate()
        return self.identities[-1]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "identities": [identity.to_dict() for identity in self.identities],
            "contacts": self.contacts.to_dict()
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Device':
        try:
            identities = [Identity.from_dict(item) for item in data.get('identities', [])]
        except (AttributeError, TypeError):
            raise IdentityParseError("cannot parse identities") from None
        contacts = ContactLog.from_dict(data.get('contacts', {}))
        return cls(identities, contacts)


class AuthorityDb:
    """The authority plus its infected/tainted bookkeeping."""

    def __init__(self, authority: Optional[Authority] = None,
                 infected: Optional[Set[HashedIdentity]] = None,
                 tainted: Optional[Dict[HashedIdentity, datetime]] = None):
        self.authority = authority if authority is not None else Authority.unique()
        self.infected = infected if infected is not None else set()
        self.tainted = tainted if tainted is not None else {}

    def import_infected(self, device: Device) -> Optional[ExposureReport]:
        """
        Process a device that tested positive.

        Returns:
            The exposure report, or None if the contact log could not be
            decoded. Nothing is recorded in that case.
        """
        report = trace_exposures(self.authority.secret_key, device.identities, device.contacts)
        if report is None:
            return None

        self.infected.update(report.infected)
        for hashed_id, last_seen in report.tainted.items():
            previous = self.tainted.get(hashed_id)
            if previous is None or previous < last_seen:
                self.tainted[hashed_id] = last_seen
        return report

    def check_status(self, device: Device) -> ExposureStatus:
        return resolve_status(
            (identity.hashed_id for identity in device.identities),
            self.infected,
            self.tainted
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "authority": self.authority.to_dict(),
            "infected": sorted(str(hashed_id) for hashed_id in self.infected),
            "tainted": {
                str(hashed_id): last_seen.isoformat()
                for hashed_id, last_seen in sorted(self.tainted.items(), key=lambda item: str(item[0]))
            }
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'AuthorityDb':
        if 'authority' not in data:
            raise AuthorityParseError()
        authority = Authority.from_dict(data['authority'])
        try:
            infected = {HashedIdentity.from_string(text) for text in data.get('infected', [])}
        except (AttributeError, TypeError):
            raise AuthorityParseError("cannot parse infected identities") from None
        try:
            tainted = {
                HashedIdentity.from_string(text): parse_timestamp(seen_at)
                for text, seen_at in data.get('tainted', {}).items()
            }
        except (AttributeError, TypeError, ValueError):
            raise AuthorityParseError("cannot parse tainted identities") from None
        return cls(authority, infected, tainted)


def load_json(path: Union[str, Path], factory: Callable[[], T],
              from_dict: Callable[[Dict[str, Any]], T]) -> T:
    """
    Load state from a JSON file.

    A missing file gives factory(). Malformed content raises ParseError.
    """
    path = Path(path)
    if not path.exists():
        return factory()
    with open(path, 'r') as f:
        try:
            data = json.load(f)
        except json.JSONDecodeError as e:
            raise ParseError(f"{path}: invalid JSON ({e})") from None
    if not isinstance(data, dict):
        raise ParseError(f"{path}: expected a JSON object")
    return from_dict(data)


def save_json(path: Union[str, Path], obj) -> None:
    """Save obj.to_dict() as pretty JSON with a trailing newline."""
    path = Path(path)
    with open(path, 'w') as f:
        json.dump(obj.to_dict(), f, indent=2)
        f.write('\n')
    print(f"Written to {path}", file=sys.stderr)
