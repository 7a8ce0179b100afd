"""
openFDA client.

Two methods:
  1. fetch_adverse_events — FAERS adverse event reports (/drug/event.json)
  2. fetch_drug_info      — Drugs@FDA application records (/drug/drugsfda.json)

A 400 or 404 from openFDA means the query matched nothing; both methods turn
those into an empty response.  Every other failure raises DataSourceError.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import Any

from fda_insights.config import get_settings
from fda_insights.constants import (
    EMPTY_RESULT_STATUS_CODES,
    OPENFDA_DEFAULT_LIMIT,
    OPENFDA_DRUGSFDA_URL,
    OPENFDA_EVENT_URL,
    OPENFDA_MAX_LIMIT,
    SERIOUSNESS_FIELDS,
)
from fda_insights.data_sources.base_client import (
    BaseClient,
    ClientConfig,
    DataSourceError,
    RequestContext,
)
from fda_insights.models.model_openfda import AdverseEventsResponse, DrugInfoResponse

logger = logging.getLogger("fda_insights.data_sources.openfda")


class OpenFDAClient(BaseClient):
    """Client for the openFDA drug event and Drugs@FDA endpoints."""

    def __init__(
        self, api_key: str | None = None, config: ClientConfig | None = None
    ) -> None:
        super().__init__(config)
        self._api_key = api_key if api_key is not None else get_settings().openfda_api_key

    @property
    def _source_name(self) -> str:
        return "openfda"

    # -- Public methods -------------------------------------------------------

    async def fetch_adverse_events(
        self,
        drug_name: str | None = None,
        seriousness: Iterable[str] | None = None,
        limit: int | None = None,
        skip: int | None = None,
        receivedate: str | None = None,
    ) -> AdverseEventsResponse:
        """Return adverse event reports matching the given filters."""
        params = self._build_event_params(drug_name, seriousness, limit, skip, receivedate)

        data = await self._get_or_empty(OPENFDA_EVENT_URL, params, "fetch_adverse_events")
        if data is None:
            return AdverseEventsResponse.empty()
        return AdverseEventsResponse.model_validate(data)

    async def fetch_drug_info(
        self,
        drug_name: str | None = None,
        route: str | None = None,
        limit: int | None = None,
        skip: int | None = None,
    ) -> DrugInfoResponse:
        """Return Drugs@FDA application records for an active ingredient and/or route."""
        params = self._build_drug_info_params(drug_name, route, limit, skip)

        data = await self._get_or_empty(OPENFDA_DRUGSFDA_URL, params, "fetch_drug_info")
        if data is None:
            return DrugInfoResponse.empty()
        return DrugInfoResponse.model_validate(data)

    # -- Private helpers ------------------------------------------------------

    async def _get_or_empty(
        self, url: str, params: dict[str, str], method: str
    ) -> dict[str, Any] | None:
        """GET url, returning None when openFDA answers 400/404."""
        context = RequestContext(source=self._source_name, method=method, params=params)
        try:
            return await self._rest_get(url, params, context=context)
        except DataSourceError as e:
            if e.status_code in EMPTY_RESULT_STATUS_CODES:
                logger.info(
                    "No matching records [%s.%s] status=%d; returning empty results",
                    self._source_name,
                    method,
                    e.status_code,
                )
                return None
            raise

    def _build_event_params(
        self,
        drug_name: str | None,
        seriousness: Iterable[str] | None,
        limit: int | None,
        skip: int | None,
        receivedate: str | None,
    ) -> dict[str, str]:
        """Build query parameters for the drug event endpoint."""
        clauses: list[str] = []
        name = (drug_name or "").strip()
        if name:
            clauses.append(f'patient.drug.medicinalproduct:"{name}"')
        for value in seriousness or ():
            field = SERIOUSNESS_FIELDS.get(value)
            if field:
                clauses.append(f"{field}:1")
        if receivedate:
            clauses.append(f"receivedate:{receivedate}")

        # Without a drug name, fall back to a page of recent events
        if not name and not limit:
            limit = OPENFDA_DEFAULT_LIMIT

        return self._finish_params(clauses, limit, skip)

    def _build_drug_info_params(
        self,
        drug_name: str | None,
        route: str | None,
        limit: int | None,
        skip: int | None,
    ) -> dict[str, str]:
        """Build query parameters for the Drugs@FDA endpoint."""
        clauses: list[str] = []
        if drug_name:
            clauses.append(f'products.active_ingredients.name:"{drug_name}"')
        if route:
            clauses.append(f'products.route:"{route}"')
        return self._finish_params(clauses, limit, skip)

    def _finish_params(
        self, clauses: list[str], limit: int | None, skip: int | None
    ) -> dict[str, str]:
        params: dict[str, str] = {}
        if clauses:
            params["search"] = " AND ".join(clauses)
        if limit:
            params["limit"] = str(min(limit, OPENFDA_MAX_LIMIT))
        if skip:
            params["skip"] = str(skip)
        if self._api_key:
            params["api_key"] = self._api_key
        return params
