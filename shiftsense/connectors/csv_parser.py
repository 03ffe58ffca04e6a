"""
Delimited-text parser for uploaded metric tables.

Turns an uploaded CSV or TSV file into a list of string-keyed row mappings.
The first row is the header. Every value stays a string (no numeric or NA
coercion), blank lines are skipped, and short rows are padded with empty
strings. Fields beyond the header width are dropped, so every row keeps the
header keys. Any parser failure is raised once as DelimitedParseError,
before a single row reaches the caller.
"""

import csv
import io
from pathlib import PurePath
from typing import Union

import pandas as pd
import structlog

logger = structlog.get_logger()

TAB_EXTENSIONS = {".tsv", ".tab"}


class DelimitedParseError(Exception):
    """Raised when an uploaded table cannot be parsed."""

    pass


def detect_delimiter(text: str, filename: str = "") -> str:
    """
    Pick the field delimiter for an upload.

    Tab for .tsv/.tab files, or when the header contains tabs but no commas;
    comma otherwise.
    """
    if PurePath(filename).suffix.lower() in TAB_EXTENSIONS:
        return "\t"
    header = text.split("\n", 1)[0]
    if "\t" in header and "," not in header:
        return "\t"
    return ","


def parse_delimited(content: Union[bytes, str], filename: str = "upload.csv") -> list[dict[str, str]]:
    """
    Parse an uploaded delimited-text table.

    Args:
        content: Raw file bytes (UTF-8, BOM tolerated) or decoded text
        filename: Original filename, used for delimiter detection and logs

    Returns:
        Rows as header-keyed dicts of strings, in file order. Blank input
        yields an empty list.

    Raises:
        DelimitedParseError: If the content cannot be decoded or parsed
    """
    if isinstance(content, bytes):
        try:
            text = content.decode("utf-8-sig")
        except UnicodeDecodeError as e:
            logger.warning("upload_decode_failed", filename=filename, error=str(e))
            raise DelimitedParseError(f"File is not valid UTF-8 text: {e}") from e
    else:
        text = content

    if not text.strip():
        logger.info("upload_parsed", filename=filename, rows=0)
        return []

    delimiter = detect_delimiter(text, filename)
    try:
        header = pd.read_csv(io.StringIO(text), sep=delimiter, dtype=str, nrows=0)
        # Columns past the header are ignored; never inferred as an index
        df = pd.read_csv(
            io.StringIO(text),
            sep=delimiter,
            dtype=str,
            keep_default_na=False,
            skip_blank_lines=True,
            index_col=False,
            usecols=list(range(len(header.columns))),
        )
    except (pd.errors.ParserError, pd.errors.EmptyDataError, csv.Error, ValueError) as e:
        logger.warning("upload_parse_failed", filename=filename, error=str(e))
        raise DelimitedParseError(str(e)) from e

    df.columns = [str(column).strip() for column in df.columns]
    df = df.fillna("")
    rows = df.to_dict(orient="records")

    logger.info(
        "upload_parsed",
        filename=filename,
        rows=len(rows),
        columns=list(df.columns),
        delimiter="tab" if delimiter == "\t" else "comma",
    )
    return rows
