"""
COTRA - Authority Service
FastAPI entry point for reporting positive tests and polling status
"""
from fastapi import FastAPI
from contextlib import asynccontextmanager

from cotra_server.database import init_db, get_db, IN_MEMORY
from cotra_server.routes import authority, reports, status


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown events"""
    print("[COTRA] Starting authority service...")
    init_db()
    yield
    print("[COTRA] Shutting down authority service...")


app = FastAPI(
    title="COTRA Authority API",
    description="Contact tracing authority: public key, infection reports, status polling",
    version="0.1.0",
    lifespan=lifespan
)

app.include_router(authority.router, prefix="/api/authority", tags=["Authority"])
app.include_router(reports.router, prefix="/api/reports", tags=["Reports"])
app.include_router(status.router, prefix="/api/status", tags=["Status"])


@app.get("/api/health")
async def health_check():
    """Health check endpoint, with the number of reports processed"""
    with get_db() as conn:
        reports_processed = conn.execute("SELECT COUNT(*) AS count FROM report_log").fetchone()["count"]
    return {"status": "healthy", "in_memory": IN_MEMORY, "reports_processed": reports_processed}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8090)
