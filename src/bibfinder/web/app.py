"""FastAPI application exposing bibliography lookups."""

from __future__ import annotations

import logging
from typing import Any

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from bibfinder import __version__
from bibfinder.metadata.resolver import MetadataResolver
from bibfinder.models import LookupResult
from bibfinder.records import find_records_by_citation_key

LOGGER = logging.getLogger(__name__)

app = FastAPI(title="bibfinder", version=__version__)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)

resolver = MetadataResolver()
# Set to a RecordStore implementation to enable /records/citation-key.
app.state.record_store = None


class PathLookupPayload(BaseModel):
    path: str
    json_path: str | None = None
    bib_path: str | None = None


class CitationLookupPayload(BaseModel):
    citation_key: str
    json_path: str | None = None
    bib_path: str | None = None


class RecordsPayload(CitationLookupPayload):
    max_records_per_path: int | None = Field(default=None, ge=1, le=50)


def _respond(result: LookupResult) -> JSONResponse:
    status_code = 200 if result.success else 404
    return JSONResponse(status_code=status_code, content=result.to_dict())


@app.on_event("startup")
async def startup_event() -> None:
    logging.basicConfig(level=logging.INFO, format="[%(levelname)s] %(message)s")


@app.post("/lookup/path")
async def lookup_path(payload: PathLookupPayload) -> JSONResponse:
    finder_path = payload.path.strip()
    if not finder_path:
        raise HTTPException(status_code=400, detail="Empty path")

    result = await resolver.lookup_by_path(
        finder_path, json_path=payload.json_path, bib_path=payload.bib_path
    )
    return _respond(result)


@app.post("/lookup/citation-key")
async def lookup_citation_key(payload: CitationLookupPayload) -> JSONResponse:
    if not payload.citation_key.strip():
        raise HTTPException(status_code=400, detail="Empty citation key")

    result = await resolver.lookup_by_citation_key(
        payload.citation_key, json_path=payload.json_path, bib_path=payload.bib_path
    )
    return _respond(result)


@app.post("/records/citation-key")
async def records_for_citation_key(payload: RecordsPayload) -> JSONResponse:
    store = app.state.record_store
    if store is None:
        raise HTTPException(status_code=503, detail="No record store configured")
    if not payload.citation_key.strip():
        raise HTTPException(status_code=400, detail="Empty citation key")

    response: dict[str, Any] = await find_records_by_citation_key(
        resolver,
        payload.citation_key,
        store,
        json_path=payload.json_path,
        bib_path=payload.bib_path,
        max_per_path=payload.max_records_per_path,
    )
    return JSONResponse(status_code=200 if response["success"] else 404, content=response)


@app.delete("/cache")
async def clear_cache() -> dict[str, str]:
    resolver.clear_cache()
    LOGGER.info("Cleared bibliography metadata cache")
    return {"status": "ok"}
