"""
Command-line interface for pdfcollate.

Merges every PDF found below a directory, ordered by file name, into one
document with a bookmark per source document.
"""

import sys

import click
from rich.console import Console
from rich.markup import escape

from .. import __version__
from ..core.config import DEFAULT_OUTPUT_NAME
from ..core.utils import configure_logging
from ..merge.exceptions import PdfMergeError
from ..tools import load_builtin_plugins
from ..tools.common.interfaces import ToolContext
from ..tools.common.pipeline import registry

console = Console(soft_wrap=True)


@click.command()
@click.version_option(version=__version__)
@click.argument("inpath", default=".", type=click.Path())
@click.argument("outpath", default=DEFAULT_OUTPUT_NAME, type=click.Path())
@click.option(
    "--anno", "-a",
    is_flag=True,
    default=False,
    help="Annotate file names to corner of first slides (reserved, no effect yet)",
)
@click.option(
    "--no-metadata",
    is_flag=True,
    default=False,
    help="Do not keep the first document's information dictionary",
)
@click.option(
    "--no-compress",
    is_flag=True,
    default=False,
    help="Leave unfiltered streams uncompressed",
)
@click.option("--verbose", "-v", is_flag=True, default=False, help="Enable debug logging")
def cli(inpath, outpath, anno, no_metadata, no_compress, verbose):
    """
    Merge the PDFs found under INPATH into OUTPATH.

    Documents are ordered by file name; each one gets a bookmark on its
    first page.

    Examples:

        pdfcollate

        pdfcollate slides/ lecture.pdf
    """
    configure_logging(debug=verbose)
    load_builtin_plugins()
    context = ToolContext(
        input_path=inpath,
        output_path=outpath,
        config={
            "annotate": anno,
            "copy_metadata": not no_metadata,
            "compress": not no_compress,
        },
    )

    console.print("[bold cyan]Path:[/bold cyan]")
    console.print(f"    {escape(inpath)}")

    documents = registry.run("discover", context)
    if not documents:
        console.print("[yellow]No PDFs found[/yellow]")
        return

    console.print("[bold cyan]Order:[/bold cyan]")
    for document in documents:
        console.print(f"    Title: {escape(document.name)}, Pages: {document.page_count}")

    try:
        report = registry.run("merge", context)
    except PdfMergeError as e:
        console.print(f"[bold red]✗ Error:[/bold red] {escape(str(e))}")
        sys.exit(1)

    console.print("[bold green]Merged:[/bold green]")
    console.print(f"    Path: {escape(outpath)}, Pages: {report.page_count}")


def main(argv=None):
    return cli.main(args=argv, prog_name="pdfcollate")


if __name__ == "__main__":  # pragma: no cover
    main()
