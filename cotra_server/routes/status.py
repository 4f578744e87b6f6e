"""
COTRA Status Routes
Anonymous polling by hashed identity
"""
from fastapi import APIRouter, HTTPException

from cotra.errors import HashedIdentityParseError
from cotra.protocol.exposure import ExposureStatus
from cotra.protocol.identity import HashedIdentity
from cotra_server.database import get_db

router = APIRouter()


@router.get("/{hashed_id}")
async def get_status(hashed_id: str):
    """Infected, tainted or clear for one hashed identity"""
    try:
        key = str(HashedIdentity.from_string(hashed_id))
    except HashedIdentityParseError as e:
        raise HTTPException(status_code=400, detail=str(e))

    with get_db() as conn:
        if conn.execute("SELECT 1 FROM infected WHERE hashed_id = ?", (key,)).fetchone():
            return {"status": ExposureStatus.INFECTED.value}

        row = conn.execute(
            "SELECT last_contact_at FROM tainted WHERE hashed_id = ?", (key,)
        ).fetchone()

    if row:
        return {"status": ExposureStatus.TAINTED.value, "last_contact_at": row['last_contact_at']}
    return {"status": ExposureStatus.CLEAR.value}
