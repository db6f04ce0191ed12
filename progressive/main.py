"""FastAPI application entry point."""
from fastapi import FastAPI

from progressive.logging_config import configure_logging
from progressive.routers import program_days, programs


configure_logging()

app = FastAPI(title="Progressive Overload Scheduler API")


@app.get("/health", tags=["system"])
async def health_check() -> dict[str, str]:
    """Simple health probe for liveness checks."""
    return {"status": "ok"}


# Include routers
app.include_router(programs.router)
app.include_router(program_days.router)
