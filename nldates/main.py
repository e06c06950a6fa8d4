"""
FastAPI Backend

HTTP surface for natural language date parsing and autosuggest.
"""

from pathlib import Path

from dotenv import load_dotenv

# Load .env before settings are read.
_project_root = Path(__file__).resolve().parent.parent
_env_file = _project_root / ".env"
if _env_file.exists():
    load_dotenv(dotenv_path=_env_file)
else:
    load_dotenv()

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from nldates.app.api.dates import router as dates_router
from nldates.app.core.config import get_settings
from nldates.app.observability.logging import log_event, setup_logging
from nldates.app.services.date_service import get_date_service


settings = get_settings()
setup_logging(settings.log_level)

app = FastAPI(title=settings.app_name)
app.include_router(dates_router)


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    classification = type(exc).__name__
    log_event(
        "unhandled_exception",
        level="error",
        path=request.url.path,
        error_class=classification,
        error=str(exc),
    )
    return JSONResponse(status_code=500, content={"error": f"Internal error: {classification}"})


@app.get("/health")
async def health():
    service = get_date_service()
    return {
        "status": "ok",
        "week_start": service.settings.week_start,
        "locale": service.settings.locale,
        "cache_size": service.cache.size,
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
