"""Page categorisation command."""

import click

from sitescout.cli._common import app


@app.command("categorize", help="Detect standard pages in a list of URLs.")
@click.argument("source", type=click.File("r", encoding="utf-8"), default="-")
def categorize_cmd(source) -> None:
    """Categorise URLs read one per line from SOURCE (default: stdin).

    Prints the category mapping as JSON on stdout and a summary on stderr.

    Examples:
        sitescout categorize urls.txt
        sitescout extract example.com | sitescout categorize
    """
    import json

    from sitescout.discovery.categorizer import categorize_urls, standard_pages_summary

    urls = [line.strip() for line in source if line.strip()]
    categories = categorize_urls(urls)

    click.echo(json.dumps({category.value: matched for category, matched in categories.items()}, indent=2))
    click.echo(standard_pages_summary(categories), err=True)
