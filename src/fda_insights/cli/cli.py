"""Command-line interface for FDA adverse event insights."""

import asyncio
import json
import logging
from pathlib import Path

import click

from fda_insights.config import get_settings
from fda_insights.constants import (
    CARD_MAX_ROUTES,
    MAX_APPLICATIONS_SHOWN,
    MAX_SUBMISSION_RECORDS,
    MAX_SUBMISSIONS_PER_RECORD,
    SERIOUSNESS_FIELDS,
    TOP_MANUFACTURERS,
)
from fda_insights.data_sources.base_client import DataSourceError
from fda_insights.data_sources.openfda import OpenFDAClient
from fda_insights.helpers.drug_helpers import drug_name_from_slug
from fda_insights.models.model_summary import DrugDetail, DrugSummary, SearchFilters
from fda_insights.services.dashboard import get_drug_detail, search_drugs

CHART_WIDTH = 40


@click.group()
@click.version_option(package_name="fda-insights")
def main():
    """FDA adverse event insights from the openFDA API."""
    logging.basicConfig(level=get_settings().log_level.upper())


@main.command()
@click.option("-d", "--drug", default="", help="Drug name to search for")
@click.option(
    "-s",
    "--seriousness",
    multiple=True,
    type=click.Choice(list(SERIOUSNESS_FIELDS)),
    help="Only reports with this outcome (repeatable)",
)
@click.option("-o", "--output", type=click.Path(), help="Output file path (JSON)")
def search(drug: str, seriousness: tuple[str, ...], output: str | None):
    """Summarize adverse event reports per drug."""
    filters = SearchFilters(drug_name=drug, seriousness=list(seriousness))
    summaries = _run(_search(filters))

    click.echo(f"{len(summaries)} drug{'' if len(summaries) == 1 else 's'} found")
    if not summaries:
        _echo_no_data("your search criteria")
        click.echo("Try searching for common drugs like Aspirin, Ibuprofen, or Metformin")
    for summary in summaries:
        _echo_card(summary)

    if output:
        Path(output).write_text(
            json.dumps([s.model_dump(mode="json") for s in summaries], indent=2)
        )
        click.echo(f"\nResults saved to: {output}")


@main.command()
@click.argument("name")
@click.option("-o", "--output", type=click.Path(), help="Output file path (JSON)")
def drug(name: str, output: str | None):
    """Show analytics for one drug (NAME may be a drug name or a slug)."""
    detail = _run(_detail(drug_name_from_slug(name)))

    click.echo(f"{detail.drug_name}  [Drug Analytics]")
    if not detail.has_data:
        _echo_no_data(detail.drug_name)
        click.echo("Try searching for a different drug or check the spelling")
    else:
        _echo_detail(detail)

    if output:
        Path(output).write_text(json.dumps(detail.model_dump(mode="json"), indent=2))
        click.echo(f"\nResults saved to: {output}")


# -- Async runners ------------------------------------------------------------


def _run(coro):
    try:
        return asyncio.run(coro)
    except DataSourceError as e:
        raise click.ClickException(f"Error loading data: {e}")


async def _search(filters: SearchFilters) -> list[DrugSummary]:
    async with OpenFDAClient() as client:
        return await search_drugs(client, filters)


async def _detail(drug_name: str) -> DrugDetail:
    async with OpenFDAClient() as client:
        return await get_drug_detail(client, drug_name)


# -- Rendering ----------------------------------------------------------------


def _echo_no_data(subject: str) -> None:
    click.echo("No Data Found")
    click.echo(f"No adverse event data was found for {subject}. This could mean:")
    click.echo("  - The drug name might be misspelled")
    click.echo("  - The drug might not be in the FDA database")
    click.echo("  - There might be no reported adverse events for this drug")


def _echo_card(summary: DrugSummary) -> None:
    click.echo("")
    click.echo(summary.drug_name)
    click.echo(
        f"  Total Events: {summary.total_events:,}  Serious Events: {summary.serious_events:,}"
    )
    if summary.total_events > 0:
        click.echo(f"  {summary.serious_percentage}% of events are serious")

    routes = summary.administration_routes
    if routes:
        shown = ", ".join(routes[:CARD_MAX_ROUTES])
        extra = len(routes) - CARD_MAX_ROUTES
        click.echo(f"  Routes: {shown}" + (f" (+{extra} more)" if extra > 0 else ""))

    click.echo(f"  Class: {summary.pharmacological_class}")
    click.echo(f"  Details: fda-insights drug {summary.drug_slug}")


def _echo_detail(detail: DrugDetail) -> None:
    click.echo(f"Total Events:   {detail.total_events:,}")
    click.echo(f"Serious Events: {detail.serious_events:,}")
    click.echo(f"Serious Rate:   {detail.serious_percentage}%")

    click.echo("\nManufacturer Ranking")
    if not detail.manufacturers:
        click.echo("  No manufacturer data available")
    for rank, item in enumerate(detail.manufacturers[:TOP_MANUFACTURERS], 1):
        click.echo(f"  #{rank:<3} {item.manufacturer}  {item.count:,} reports")
    if len(detail.manufacturers) > TOP_MANUFACTURERS:
        click.echo(
            f"  Showing top {TOP_MANUFACTURERS} of {len(detail.manufacturers)} manufacturers"
        )

    click.echo("\nAdverse Events Over Time")
    if not detail.time_series:
        click.echo("  No time series data available")
    peak = max((point.count for point in detail.time_series), default=0)
    for point in detail.time_series:
        bar = "#" * max(1, round(point.count / peak * CHART_WIDTH))
        click.echo(f"  {point.month}  {bar} {point.count}")

    if not detail.drug_info:
        return

    click.echo("\nDrug Information & Approvals")
    for record in detail.drug_info[:MAX_APPLICATIONS_SHOWN]:
        click.echo(f"  {record.sponsor_name}  [{record.application_number}]")
        for product in record.products:
            click.echo(f"    Brand: {product.brand_name}")
            click.echo(f"    Dosage Form: {product.dosage_form}")
            click.echo(f"    Route: {product.route}")
            click.echo(f"    Status: {product.marketing_status}")
            for ingredient in product.active_ingredients:
                click.echo(f"    Active Ingredient: {ingredient.name} ({ingredient.strength})")

    click.echo("\nRecent Submissions")
    for record in detail.drug_info[:MAX_SUBMISSION_RECORDS]:
        for submission in record.submissions[:MAX_SUBMISSIONS_PER_RECORD]:
            click.echo(
                f"  {submission.submission_type} {submission.submission_number}"
                f"  [{submission.submission_status}]  {submission.submission_status_date}"
            )
            if submission.submission_class_code_description:
                click.echo(f"    Type: {submission.submission_class_code_description}")
            if submission.review_priority:
                click.echo(f"    Priority: {submission.review_priority}")


if __name__ == "__main__":
    main()
