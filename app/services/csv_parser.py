"""Parse CSV scan exports into header-keyed rows."""

import csv
import io

# Nessus Description and Plugin Output fields can exceed the csv default of 128 KiB.
FIELD_SIZE_LIMIT = 2**31 - 1

csv.field_size_limit(FIELD_SIZE_LIMIT)


class CsvParseError(Exception):
    """Raised when the input is not valid CSV (unbalanced quoting, ragged records)."""

    def __init__(self, message: str, line: int | None = None) -> None:
        self.message = message
        self.line = line
        super().__init__(message if line is None else f"{message} (line {line})")


def decode_csv_bytes(content: bytes) -> str:
    """
    Decode uploaded bytes as UTF-8, dropping a leading byte-order mark.

    Bytes that are not valid UTF-8 (e.g. a Latin-1 export) become U+FFFD
    instead of failing the upload.
    """
    return content.decode("utf-8-sig", errors="replace")


def parse_csv(text: str) -> list[dict[str, str]]:
    """
    Parse CSV text using the first record as the header row.

    Empty lines are skipped and row order is preserved. Every record must have
    as many fields as the header; a duplicated header name keeps the last value.
    """
    reader = csv.reader(io.StringIO(text, newline=""), strict=True)
    header: list[str] | None = None
    rows: list[dict[str, str]] = []
    try:
        for record in reader:
            if not record:
                continue
            if header is None:
                header = record
                continue
            if len(record) != len(header):
                raise CsvParseError(
                    f"Invalid record length: expected {len(header)} fields, got {len(record)}",
                    line=reader.line_num,
                )
            rows.append(dict(zip(header, record)))
    except csv.Error as e:
        raise CsvParseError(str(e), line=reader.line_num) from e
    return rows
