"""FastAPI application."""

from collections.abc import AsyncIterator
from typing import Annotated

from fastapi import Depends, FastAPI, HTTPException, Query, Request
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from fda_insights import __version__
from fda_insights.data_sources.base_client import DataSourceError
from fda_insights.data_sources.openfda import OpenFDAClient
from fda_insights.models.model_summary import DrugDetail, DrugSummary, SearchFilters
from fda_insights.services.dashboard import get_drug_detail, search_drugs

app = FastAPI(
    title="FDA Adverse Event Insights API",
    description="Drug adverse event summaries aggregated from openFDA",
    version=__version__,
)


async def get_client() -> AsyncIterator[OpenFDAClient]:
    """Provide an openFDA client scoped to the request."""
    async with OpenFDAClient() as client:
        yield client


@app.exception_handler(DataSourceError)
async def data_source_error_handler(request: Request, exc: DataSourceError) -> JSONResponse:
    return JSONResponse(
        status_code=502,
        content={
            "detail": str(exc),
            "source": exc.source,
            "upstream_status": exc.status_code,
        },
    )


@app.get("/health")
async def health_check() -> dict[str, str]:
    """Health check endpoint."""
    return {"status": "healthy", "version": __version__}


@app.get("/drugs", response_model=list[DrugSummary])
async def list_drugs(
    client: Annotated[OpenFDAClient, Depends(get_client)],
    drug_name: str = "",
    seriousness: Annotated[list[str], Query()] = [],
) -> list[DrugSummary]:
    """Search adverse events and summarize them per drug."""
    try:
        filters = SearchFilters(drug_name=drug_name, seriousness=seriousness)
    except ValidationError as e:
        raise HTTPException(
            status_code=422,
            detail=e.errors(include_url=False, include_context=False),
        )
    return await search_drugs(client, filters)


@app.get("/drugs/{slug:path}", response_model=DrugDetail)
async def drug_detail(
    slug: str,
    client: Annotated[OpenFDAClient, Depends(get_client)],
) -> DrugDetail:
    """Analytics for one drug, addressed by its URL-encoded slug.

    The path arrives percent-decoded, so `slug` is already the drug name and
    may contain "/".
    """
    return await get_drug_detail(client, slug)
