"""Batch command line front-end.

Examples:
    pname convert names.txt --type LOWER_CAMEL
    cat names.txt | pname convert -t UPPER_KEBAB --tsv --desc
    pname convert names.txt -d words.csv -o out.tsv --tsv
"""

import csv
import io
import sys
from pathlib import Path
from typing import List, Optional

import structlog
import typer

from engine.src.casing import CasingStyle
from engine.src.converter import ConversionResult, convert_batch_detailed
from engine.src.dictionary import DictionaryFormat, WordDictionary, load_dictionary_file
from engine.src.errors import PnameError
from shared.logging import configure_logging

logger = structlog.get_logger(__name__)

app = typer.Typer(help="Convert logical names into physical names.", add_completion=False)


@app.callback()
def main(
    log_level: str = typer.Option("WARNING", "--log-level", help="Log level for diagnostics on stderr."),
) -> None:
    configure_logging(log_level=log_level, json_logs=False, service_name="pname-cli", stream=sys.stderr)


def _read_inputs(files: List[Path]) -> str:
    if not files:
        return sys.stdin.read().removesuffix("\n")
    return "\n".join(path.read_text(encoding="utf-8").removesuffix("\n") for path in files)


def format_results(results: List[ConversionResult], tsv: bool, desc: bool) -> str:
    """Render results as plain physical names or TSV rows."""
    if not tsv:
        if desc:
            return "\n".join(f"{r.pn}\t{' '.join(r.desc)}" if r.desc else r.pn for r in results)
        return "\n".join(r.pn for r in results)

    buffer = io.StringIO()
    writer = csv.writer(buffer, dialect="excel-tab", lineterminator="\n")
    for r in results:
        row = [r.ln, r.pn]
        if desc:
            row.append(" ".join(r.desc))
        writer.writerow(row)
    return buffer.getvalue().rstrip("\n")


@app.command()
def convert(
    files: List[Path] = typer.Argument(None, exists=True, dir_okay=False, help="Input files; stdin when omitted."),
    style: CasingStyle = typer.Option(CasingStyle.UPPER_SNAKE, "--type", "-t", case_sensitive=False),
    dictionary: Optional[Path] = typer.Option(None, "--dictionary", "-d", exists=True, dir_okay=False),
    dict_format: Optional[DictionaryFormat] = typer.Option(None, "--format", "-f", case_sensitive=False),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Append results to this file."),
    desc: bool = typer.Option(False, "--desc", help="Include token mappings."),
    tsv: bool = typer.Option(False, "--tsv/--plain", help="Emit ln<TAB>pn rows instead of physical names only."),
) -> None:
    """Convert logical names, one per line."""
    try:
        words = load_dictionary_file(dictionary, dict_format) if dictionary else WordDictionary()
        results = convert_batch_detailed(_read_inputs(files or []), style, words)
        text = format_results(results, tsv=tsv, desc=desc)
        if output:
            with output.open("a", encoding="utf-8") as fh:
                fh.write(text + "\n")
        else:
            typer.echo(text)
    except (PnameError, OSError) as e:
        logger.error("convert_failed", error=str(e))
        typer.echo(f"error: {e}", err=True)
        raise typer.Exit(code=1)


if __name__ == "__main__":
    app()
