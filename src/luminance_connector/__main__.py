"""Main CLI entry point for luminance-connector.

This module provides a command-line interface using Typer to run the
connector's actions outside the integration platform, e.g. to test a mapping
configuration against exported CRM records. Every command reads JSON files
and writes JSON to stdout (or `--output`):

1.  `build`: CRM records + mapping config -> matter-tag payload.
2.  `filter-tags`: narrow an annotation type list by name substrings.
3.  `reconcile`: reshape a built payload according to tag types.
4.  `normalize-config`: extract the per-contract-type status mappings.
5.  `form`: render the field-mapper (or, with `--contract-types`, the
    status-update picker) JSON Forms documents.
6.  `push`: post a payload to an existing matter (the only networked command).
"""
from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, NoReturn, Optional

import typer

from .client import LuminanceClient
from .config import get_settings
from .errors import ConfigurationError, LuminanceAPIError
from .mapper import (
    build_annotations_from_hubspot_mapping,
    build_annotations_from_mapping,
    build_field_mapping_form,
    build_status_update_form,
    create_luminance_matter_tag_payload,
    filter_out_specific_tags,
    normalize_config_mappings,
)

app = typer.Typer(help="Luminance connector CLI: CRM field mapping and matter-tag payloads")

logger = logging.getLogger(__name__)


def _read_json(path: Optional[Path]) -> Any:
    if path is None:
        return None
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError:
        raise typer.BadParameter(f"file not found: {path}") from None
    except ValueError as e:
        raise typer.BadParameter(f"{path} is not valid JSON: {e}") from e


def _emit(data: Any, output: Optional[Path]) -> None:
    text = json.dumps(data, ensure_ascii=False, indent=2)
    if output is None:
        typer.echo(text)
        return
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(text + "\n", encoding="utf-8")
    logger.info("Wrote %s", output)


def _fail(message: str, code: int = 2) -> NoReturn:
    typer.echo(f"Error: {message}", err=True)
    raise typer.Exit(code=code)


@app.callback()
def main() -> None:  # pragma: no cover - simple callback
    """luminance-connector CLI.

    Use a subcommand like 'build' to run an action.
    """
    logging.basicConfig(level=get_settings().LOG_LEVEL)


@app.command(help="Build a matter-tag payload from CRM records and a mapping config.")
def build(
    mappings: Path = typer.Option(..., help="JSON file with the mapping config (list, {mymappings: [...]}, ...)"),
    primary: Path = typer.Option(..., help="JSON file with the primary record (Opportunity / HubSpot properties)"),
    secondary: Optional[Path] = typer.Option(None, help="JSON file with the secondary record (Account / associated object)"),
    source: str = typer.Option("salesforce", help="Source system: salesforce or hubspot"),
    name_prefix: Optional[str] = typer.Option(
        None, help="Matter name prefix (overrides MATTER_NAME_PREFIX); a random suffix is appended"
    ),
    currency: Optional[str] = typer.Option(None, help="Default currency (overrides DEFAULT_CURRENCY)"),
    output: Optional[Path] = typer.Option(None, help="Write the payload here instead of stdout"),
) -> None:
    builders = {
        "salesforce": build_annotations_from_mapping,
        "hubspot": build_annotations_from_hubspot_mapping,
    }
    builder = builders.get(source.lower())
    if builder is None:
        _fail(f"unknown source {source!r}; expected salesforce or hubspot")
    try:
        payload = builder(
            _read_json(mappings),
            _read_json(primary),
            _read_json(secondary),
            name_prefix=name_prefix,
            default_currency=currency,
        )
    except ConfigurationError as e:
        _fail(str(e))
    logger.debug("Built payload with %d annotation(s)", len(payload["required_matter_annotations"]))
    _emit(payload, output)


@app.command("filter-tags", help="Keep tag records whose field contains any of the filter substrings.")
def filter_tags_command(
    items: Path = typer.Option(..., help="JSON file with tag records"),
    field: Optional[str] = typer.Option(None, help="Field to test (overrides TAG_FILTER_FIELD)"),
    filter_string: Optional[str] = typer.Option(
        None, "--filter", help="Comma-separated substrings (overrides TAG_FILTER)"
    ),
    output: Optional[Path] = typer.Option(None, help="Write the result here instead of stdout"),
) -> None:
    _emit(filter_out_specific_tags(_read_json(items), field, filter_string), output)


@app.command(help="Reshape a built payload's annotation content according to tag types.")
def reconcile(
    tags: Path = typer.Option(..., help="JSON file with tag records ({id, type, name})"),
    payload: Path = typer.Option(..., help="JSON file with the built payload"),
    currency: Optional[str] = typer.Option(None, help="Default currency (overrides DEFAULT_CURRENCY)"),
    output: Optional[Path] = typer.Option(None, help="Write the payload here instead of stdout"),
) -> None:
    _emit(create_luminance_matter_tag_payload(_read_json(tags), _read_json(payload), currency), output)


@app.command("normalize-config", help="Extract the status mappings configured for one contract type.")
def normalize_config(
    payload: Path = typer.Option(..., help="JSON file with a 'mappings' object"),
    contract_type: str = typer.Option(..., help="Selected contract type, e.g. NDA"),
    output: Optional[Path] = typer.Option(None, help="Write the result here instead of stdout"),
) -> None:
    try:
        result = normalize_config_mappings(_read_json(payload), contract_type)
    except ConfigurationError as e:
        _fail(str(e))
    _emit(result, output)


@app.command(help="Render the field-mapper (or status-update picker) JSON Forms documents.")
def form(
    fields: Path = typer.Option(..., help="JSON file with CRM field metadata"),
    annotation_types: Optional[Path] = typer.Option(
        None, help="JSON file with Luminance annotation types (field mapper only)"
    ),
    contract_types: Optional[str] = typer.Option(
        None, help="Comma-separated contract types; renders the per-contract-type status-update picker"
    ),
    source: str = typer.Option("salesforce", help="Source system: salesforce or hubspot"),
    property_filter: Optional[str] = typer.Option(None, help="Only offer fields matching this substring"),
    max_options: int = typer.Option(500, help="Maximum options per dropdown"),
    output: Optional[Path] = typer.Option(None, help="Write the documents here instead of stdout"),
) -> None:
    if contract_types is None and annotation_types is None:
        _fail("--annotation-types is required unless --contract-types is given")
    try:
        if contract_types is not None:
            documents = build_status_update_form(_read_json(fields), contract_types)
        else:
            documents = build_field_mapping_form(
                _read_json(fields),
                _read_json(annotation_types),
                source_system=source.lower(),
                property_filter=property_filter,
                max_options=max_options,
            )
    except ValueError as e:
        _fail(str(e))
    _emit(documents, output)


@app.command(help="Post a matter-tag payload to an existing matter.")
def push(
    payload: Path = typer.Option(..., help="JSON file with the (reconciled) payload"),
    project_id: int = typer.Option(..., help="Division (project) id"),
    matter_id: int = typer.Option(..., help="Matter id"),
    output: Optional[Path] = typer.Option(None, help="Write the API response here instead of stdout"),
) -> None:
    settings = get_settings()
    try:
        client = LuminanceClient.from_settings(settings)
        response = client.add_matter_annotations(project_id, matter_id, _read_json(payload))
    except LuminanceAPIError as e:
        _fail(str(e), code=1)
    _emit(response, output)


if __name__ == "__main__":  # pragma: no cover
    app()
