"""Map parsed CSV rows to the fixed vulnerability record shape."""

from collections.abc import Iterable, Mapping

from app.schemas.vulnerability import VulnerabilityRecord

# Column names of a Nessus CSV export (exact match, case and spacing sensitive).
COLUMN_IP_ADDRESS = "IP Address"
COLUMN_CVE = "CVE"
COLUMN_PLUGIN_ID = "Plugin ID"
COLUMN_SEVERITY = "Severity"
COLUMN_PLUGIN_NAME = "Plugin Name"
COLUMN_DESCRIPTION = "Description"

# Record field -> CSV column. "cve" is resolved separately (CVE, then Plugin ID).
COLUMN_MAP: dict[str, str] = {
    "ip_address": COLUMN_IP_ADDRESS,
    "severity": COLUMN_SEVERITY,
    "plugin_name": COLUMN_PLUGIN_NAME,
    "description": COLUMN_DESCRIPTION,
}


def map_row(row: Mapping[str, str]) -> VulnerabilityRecord:
    """
    Build one record from a CSV row.

    Values are copied as-is. cve takes the CVE column when it is non-empty and
    falls back to Plugin ID otherwise; absent columns leave the field None.
    """
    fields = {field: row.get(column) for field, column in COLUMN_MAP.items()}
    fields["cve"] = row.get(COLUMN_CVE) or row.get(COLUMN_PLUGIN_ID)
    return VulnerabilityRecord(**fields)


def map_rows(rows: Iterable[Mapping[str, str]]) -> list[VulnerabilityRecord]:
    """Map every row, preserving order."""
    return [map_row(row) for row in rows]
