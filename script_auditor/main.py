import asyncio
import logging
import os

from dotenv import load_dotenv
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from .analyzer import analyze_script
from .catalog import DEFAULT_CATALOG_PATH, load_catalog
from .errors import ProviderError, ProviderNotConfigured
from .logger import setup_logging, timed

load_dotenv()
setup_logging()

logger = logging.getLogger(__name__)

app = FastAPI(title="Script Auditor")

CATALOG_PATH = os.environ.get("MODEL_CATALOG_PATH", DEFAULT_CATALOG_PATH)
catalog = load_catalog(CATALOG_PATH)

MAX_SCRIPT_LENGTH = int(os.environ.get("MAX_SCRIPT_LENGTH", "100000"))


def _error(error: str, details: str, status_code: int) -> JSONResponse:
    return JSONResponse({"error": error, "details": details}, status_code=status_code)


@app.get("/health")
def health():
    return {"status": "ok"}


@app.get("/models")
def models():
    return [m.model_dump(by_alias=True, exclude_none=True) for m in catalog]


@app.post("/analyze")
async def analyze(request: Request):
    try:
        body = await request.json()
    except ValueError as e:
        logger.info("Rejected unparsable request body: %s", e)
        return _error("Invalid request body", str(e) or "Failed to parse request body", 400)
    if not isinstance(body, dict):
        return _error("Invalid request body", "Request body must be a JSON object", 400)

    script = body.get("script")
    model = body.get("model")
    if not script or not model:
        return _error("Missing required fields", "Both script and model are required", 400)
    if not isinstance(script, str) or not script.strip():
        return _error("Invalid script content", "Script must be a non-empty string", 400)
    if len(script) > MAX_SCRIPT_LENGTH:
        return _error("Invalid script content", f"Script is too long (max {MAX_SCRIPT_LENGTH} characters)", 400)
    if not isinstance(model, str) or not model.strip():
        return _error("Invalid model identifier", "Model must be a non-empty string", 400)

    # analyze_script blocks on the provider call
    try:
        with timed("Analyze"):
            loop = asyncio.get_running_loop()
            result = await loop.run_in_executor(None, lambda: analyze_script(script.strip(), model.strip(), catalog))
    except ProviderNotConfigured as e:
        logger.error("Analysis unavailable: %s", e)
        return _error("Analysis unavailable", str(e), 503)
    except ProviderError as e:
        logger.error("Analysis failed: %s", e)
        return _error("Analysis failed", str(e), 502)

    return JSONResponse(result)
