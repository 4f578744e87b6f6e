"""
COTRA Report Routes
Positive test submissions: identities plus contact log
"""
from fastapi import APIRouter, HTTPException
from pydantic import BaseModel, Field
from typing import List

from cotra.errors import ParseError
from cotra.protocol.contact_log import ContactLog, parse_timestamp
from cotra.protocol.exposure import trace_exposures
from cotra.protocol.identity import Identity, ShareIdentity, UniqueIdentity
from cotra_server.database import get_authority, write_db, utc_now

router = APIRouter()

# Every identity and contact costs one slow PBKDF2 derivation
MAX_IDENTITIES = 100
MAX_CONTACTS = 2000


class ContactEntry(BaseModel):
    share_id: str  # Base64 envelope
    seen_at: str  # ISO format


class InfectionReport(BaseModel):
    identities: List[str] = Field(..., max_length=MAX_IDENTITIES)  # unique ids of the infected device
    contacts: List[ContactEntry] = Field(default_factory=list, max_length=MAX_CONTACTS)


def build_contact_log(entries: List[ContactEntry]) -> ContactLog:
    log = ContactLog()
    for entry in entries:
        try:
            seen_at = parse_timestamp(entry.seen_at)
        except ValueError:
            raise HTTPException(status_code=400, detail=f"Invalid time format: {entry.seen_at}")
        log.merge(ShareIdentity.from_string(entry.share_id), seen_at)
    return log


@router.post("")
def submit_report(report: InfectionReport):
    """
    Mark the reporter infected and every decoded contact tainted

    Plain def: hashing runs in the threadpool, not on the event loop.
    """
    try:
        identities = [Identity(UniqueIdentity.from_string(text)) for text in report.identities]
        contact_log = build_contact_log(report.contacts)
    except ParseError as e:
        raise HTTPException(status_code=400, detail=str(e))

    if not identities:
        raise HTTPException(status_code=400, detail="At least one identity is required")

    authority = get_authority()
    exposure = trace_exposures(authority.secret_key, identities, contact_log)
    if exposure is None:
        raise HTTPException(status_code=422, detail="Could not decode contact log")

    now = utc_now()
    with write_db() as conn:
        conn.executemany(
            "INSERT OR IGNORE INTO infected (hashed_id, reported_at) VALUES (?, ?)",
            [(str(hashed_id), now) for hashed_id in exposure.infected]
        )
        conn.executemany(
            """
            INSERT INTO tainted (hashed_id, last_contact_at, reported_at)
            VALUES (?, ?, ?)
            ON CONFLICT(hashed_id) DO UPDATE SET
                last_contact_at = MAX(last_contact_at, excluded.last_contact_at),
                reported_at = excluded.reported_at
            """,
            [(str(hashed_id), last_seen.isoformat(), now)
             for hashed_id, last_seen in exposure.tainted.items()]
        )
        conn.execute(
            "INSERT INTO report_log (infected_count, tainted_count, reported_at) VALUES (?, ?, ?)",
            (len(exposure.infected), len(exposure.tainted), now)
        )

    return {
        "infected": len(exposure.infected),
        "tainted": len(exposure.tainted),
        "exposure_found": exposure.exposure_found
    }
