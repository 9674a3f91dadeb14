"""
Structured output for report commands.

Reports are plain dicts; ``--format`` selects JSON (default) or YAML.
"""
import json
from typing import Any

import click
import yaml

format_option = click.option(
    "--format",
    "output_format",
    type=click.Choice(["json", "yaml"]),
    default="json",
    show_default=True,
    help="Output format",
)


def echo_structured(data: Any, output_format: str) -> None:
    """Print a report as JSON or YAML."""
    if output_format == "yaml":
        click.echo(
            yaml.safe_dump(
                data,
                default_flow_style=False,
                allow_unicode=True,
                sort_keys=False,
            ).strip()
        )
    else:
        click.echo(json.dumps(data, indent=2, ensure_ascii=False, default=str))
