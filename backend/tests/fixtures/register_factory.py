"""
Factory for generating property register files for import tests.

Rows follow the positional upload layout: S.No, then columns B..L.
"""

import io
from typing import Any

import openpyxl

from billtrack.core.column_config import get_template_header


def register_row(
    property_id: str,
    owner_name: str = "Ram Sharma",
    address: str = "12 Chowk",
    corporate_name: str = "Nagar Nigam",
    ward_name: str = "Ward 1",
    mohalla: str = "Chowk",
    house_no: str = "12",
    property_type: str = "Residential",
    ward_no: str = "1",
    category: str = "A",
    popular_name: str = "",
    serial: int = 1,
) -> list[str]:
    """One register row in column order A..L."""
    return [
        str(serial),
        property_id,
        ward_no,
        corporate_name,
        ward_name,
        mohalla,
        property_type,
        category,
        owner_name,
        house_no,
        address,
        popular_name,
    ]


def make_register_rows(
    num_rows: int = 10,
    prefix: str = "P",
    ward_name: str = "Ward 1",
    mohallas: list[str] | None = None,
) -> list[list[str]]:
    """Generate distinct, valid rows cycling through mohallas."""
    mohallas = mohallas or ["Chowk", "Kotwali", "Sarafa"]
    return [
        register_row(
            property_id=f"{prefix}{i:04d}",
            owner_name=f"Owner {i}",
            address=f"{i} Main Road",
            ward_name=ward_name,
            mohalla=mohallas[i % len(mohallas)],
            house_no=str(i),
            serial=i,
        )
        for i in range(1, num_rows + 1)
    ]


def make_register_csv(
    rows: list[list[str]],
    header: list[str] | None = None,
    line_ending: str = "\n",
) -> bytes:
    """
    Join rows with plain commas, exactly as a naive exporter would.

    Values are not quoted; pass pre-quoted strings to test quoting.
    """
    lines = [",".join(header or get_template_header())]
    lines.extend(",".join(r) for r in rows)
    return (line_ending.join(lines) + line_ending).encode("utf-8")


def make_register_excel(
    rows: list[list[Any]],
    header: list[str] | None = None,
) -> bytes:
    """Generate an .xlsx register with the same layout."""
    wb = openpyxl.Workbook()
    ws = wb.active
    ws.title = "Properties"
    ws.append(header or get_template_header())
    for row in rows:
        ws.append(row)

    buf = io.BytesIO()
    wb.save(buf)
    buf.seek(0)
    return buf.getvalue()


# First bytes of an OLE2 compound document (legacy .xls)
LEGACY_XLS_BYTES = b"\xd0\xcf\x11\xe0\xa1\xb1\x1a\xe1" + b"\x00" * 504
