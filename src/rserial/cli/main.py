"""Command line front end: turn TSV files into R binary objects or counted TSV."""

from __future__ import annotations

import os
from typing import Any, BinaryIO, Dict, List, Optional, Tuple

import click

from rserial.config.config import EncoderConfig
from rserial.core.errors import EncoderError
from rserial.core.frame_writer import write_frame
from rserial.core.models import ColumnKind, infer_kind
from rserial.core.serial import write_tsv
from rserial.utils.logging import configure_logging, get_logger, log_context

NA_TOKENS = ("", "NA")


def _parse_cell(raw: str) -> Any:
    if raw in NA_TOKENS:
        return None
    if "_" in raw:
        return raw
    for convert in (int, float):
        try:
            return convert(raw)
        except ValueError:
            continue
    return raw


def _coerce_column(cells: List[str]) -> List[Any]:
    """Parse cells, falling back to the raw text when the column is not numeric."""
    parsed = [_parse_cell(c) for c in cells]
    if infer_kind(parsed) == ColumnKind.STRING:
        return [None if c in NA_TOKENS else c for c in cells]
    return parsed


def read_columns(handle: BinaryIO, delimiter: str = "\t") -> Dict[str, List[Any]]:
    """
    Read a delimited text file whose first line holds the column names.

    Raises:
        click.ClickException: Ragged rows or duplicate column names
    """
    lines = handle.read().decode("utf-8").splitlines()
    if not lines:
        return {}

    header = lines[0].split(delimiter)
    if len(set(header)) != len(header):
        raise click.ClickException(f"Duplicate column names in header: {header}")

    cells: Tuple[List[str], ...] = tuple([] for _ in header)
    for lineno, line in enumerate(lines[1:], start=2):
        row = line.split(delimiter)
        if len(row) != len(header):
            raise click.ClickException(
                f"Line {lineno}: expected {len(header)} fields, got {len(row)}"
            )
        for column, value in zip(cells, row):
            column.append(value)

    return {name: _coerce_column(column) for name, column in zip(header, cells)}


def count_lines(data: bytes) -> int:
    if not data:
        return 0
    return data.count(b"\n") + (0 if data.endswith(b"\n") else 1)


def _load_config(path: Optional[str]) -> EncoderConfig:
    if path:
        return EncoderConfig.from_yaml(path)
    return EncoderConfig.from_env()


@click.group()
@click.option("--log-level", default=lambda: os.getenv("LOG_LEVEL", "WARNING"), show_default="WARNING")
@click.option("--json-logs/--console-logs", default=False)
def cli(log_level: str, json_logs: bool) -> None:
    """Encode columnar data for R's unserialize()/readRDS()."""
    configure_logging(level=log_level, json_output=json_logs)


@cli.command()
@click.argument("source", type=click.File("rb"))
@click.option("-o", "--output", type=click.File("wb"), default="-", show_default=True)
@click.option("--config", "config_path", type=click.Path(exists=True, dir_okay=False))
@click.option("-d", "--delimiter", default="\t", show_default=repr("\t"))
def encode(source: BinaryIO, output: BinaryIO, config_path: Optional[str], delimiter: str) -> None:
    """Encode a header-bearing TSV file as a named R list."""
    logger = get_logger(__name__)
    config = _load_config(config_path)
    columns = read_columns(source, delimiter=delimiter)

    with log_context(command="encode", source=getattr(source, "name", "-")):
        try:
            written = write_frame(output, columns, config=config)
        except EncoderError as e:
            raise click.ClickException(str(e)) from e
        output.flush()
        logger.info(
            "frame_encoded",
            columns=len(columns),
            format_version=config.format_version,
            bytes_written=written,
        )


@cli.command()
@click.argument("source", type=click.File("rb"))
@click.option("-o", "--output", type=click.File("wb"), default="-", show_default=True)
def tsv(source: BinaryIO, output: BinaryIO) -> None:
    """Pass a text file through with its line count prepended."""
    logger = get_logger(__name__)
    data = source.read()
    nlines = count_lines(data)

    with log_context(command="tsv", source=getattr(source, "name", "-")):
        try:
            written = write_tsv(output, data, nlines)
        except EncoderError as e:
            raise click.ClickException(str(e)) from e
        output.flush()
        logger.info("tsv_written", nlines=nlines, bytes_written=written)


def main() -> None:
    """Entry point for the rserial command."""
    cli()


if __name__ == "__main__":
    main()
