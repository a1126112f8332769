"""
HTTP front for the Blinkit scraper.

    GET /api/get-products?pincode=400001

Each request launches its own browser; a scrape takes 20-40 s, so callers
should use a generous client timeout.  Files under ``STATIC_DIR`` (the
comparison page) are served at ``/`` when the directory exists.

Run with ``python server.py`` or ``uvicorn server:app``.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

from dotenv import load_dotenv
from fastapi import FastAPI, Query, Request
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from errors import MissingParameter, ScrapeFailed
from models import ScrapeResult
from platforms import scrape_blinkit

load_dotenv()

logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    datefmt="%H:%M:%S",
)
logger = logging.getLogger("server")

STATIC_DIR = Path(os.getenv("STATIC_DIR", "public"))

app = FastAPI(title="Blinkit Product Scraper")


@app.exception_handler(MissingParameter)
async def missing_parameter_handler(request: Request, exc: MissingParameter) -> JSONResponse:
    return JSONResponse({"error": str(exc)}, status_code=400)


@app.exception_handler(ScrapeFailed)
async def scrape_failed_handler(request: Request, exc: ScrapeFailed) -> JSONResponse:
    logger.error("Scraping failed: %s", exc)
    return JSONResponse({"error": f"Failed to scrape data. {exc}"}, status_code=500)


@app.get("/healthz")
def healthcheck() -> dict[str, str]:
    return {"status": "ok"}


@app.get("/api/get-products", response_model=ScrapeResult)
async def get_products(
    pincode: str | None = Query(None, description="Delivery pincode, e.g. 400001."),
) -> ScrapeResult:
    if not pincode or not pincode.strip():
        raise MissingParameter("Pincode is required")
    result = await scrape_blinkit(pincode)
    logger.info("Scrape successful. Sending data to client.")
    return result


# Mounted last so /api and /healthz win over same-named files.
if STATIC_DIR.exists():
    app.mount("/", StaticFiles(directory=str(STATIC_DIR), html=True), name="static")


if __name__ == "__main__":
    import uvicorn

    host = os.getenv("HOST", "0.0.0.0")
    port = int(os.getenv("PORT", "3000"))
    logger.info("Server is running at http://localhost:%d", port)
    uvicorn.run("server:app", host=host, port=port, reload=False)
