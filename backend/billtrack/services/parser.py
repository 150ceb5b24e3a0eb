"""
Row parser for property register uploads.

Turns raw upload bytes into data rows. Three inputs are understood:

  - delimited text, split naively on every comma (default)
  - delimited text with CSV quoting honoured (opt-in)
  - .xlsx workbooks, first worksheet

Blank lines never count. The first non-blank line is the header and is
discarded; data rows are numbered from 2 so messages match the line a user
sees in a spreadsheet (blank lines excluded).

Naive splitting does not understand quotes: "Sector 4, Old Town" becomes
two fields and shifts every later column. Quoted mode fixes that but is off
by default so existing registers keep importing the same way.
"""

import csv
import io
from dataclasses import dataclass, field
from typing import Any, Iterator

import openpyxl

from billtrack.core.column_config import PROPERTY_COLUMNS, get_required_fields
from billtrack.services.errors import EmptyOrInvalidFileError, UnsupportedFileError

ZIP_SIGNATURE = b"PK\x03\x04"
OLE2_SIGNATURE = b"\xd0\xcf\x11\xe0\xa1\xb1\x1a\xe1"


def detect_format(file_bytes: bytes) -> str:
    """Sniff the upload: 'xlsx', 'xls' or 'csv'. Content type is not trusted."""
    if file_bytes.startswith(ZIP_SIGNATURE):
        return "xlsx"
    if file_bytes.startswith(OLE2_SIGNATURE):
        return "xls"
    return "csv"


def _is_blank(values: list[str]) -> bool:
    return not any(v.strip() for v in values)


def _cell_to_str(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    return str(value).strip()


@dataclass
class RawRow:
    """One non-blank data row with its 1-indexed position in the file."""
    row_number: int
    values: list[str] = field(default_factory=list)


class RowSource:
    """
    Restartable view over the data rows of one upload.

    Every iteration re-parses the buffer; nothing is cached between passes.
    """

    def __init__(self, file_bytes: bytes, *, quoted: bool = False):
        self.file_bytes = file_bytes
        self.quoted = quoted
        self.file_format = detect_format(file_bytes)
        if self.file_format == "xls":
            raise UnsupportedFileError(
                "Legacy .xls workbooks are not supported; save as .xlsx or CSV"
            )

    # ─── Record streams ───────────────────────────────────────

    def _text_records(self) -> Iterator[list[str]]:
        text = self.file_bytes.decode("utf-8-sig", errors="replace")
        if self.quoted:
            try:
                for record in csv.reader(io.StringIO(text)):
                    values = [v.strip() for v in record]
                    if not _is_blank(values):
                        yield values
            except csv.Error as e:
                raise UnsupportedFileError(f"Could not parse CSV: {e}") from e
            return

        for line in text.split("\n"):
            if not line.strip():
                continue
            yield [v.strip() for v in line.split(",")]

    def _xlsx_records(self) -> Iterator[list[str]]:
        try:
            wb = openpyxl.load_workbook(
                io.BytesIO(self.file_bytes), read_only=True, data_only=True
            )
        except Exception as e:
            raise UnsupportedFileError(f"Could not read workbook: {e}") from e

        try:
            ws = wb.active
            for row_values in ws.iter_rows(values_only=True):
                values = [_cell_to_str(v) for v in row_values]
                if not _is_blank(values):
                    yield values
        finally:
            wb.close()

    def records(self) -> Iterator[list[str]]:
        """All non-blank records, header included."""
        if self.file_format == "xlsx":
            return self._xlsx_records()
        return self._text_records()

    # ─── Public API ───────────────────────────────────────────

    def validate(self) -> None:
        """Raise EmptyOrInvalidFileError unless there is a header and a data row."""
        seen = 0
        for _ in self.records():
            seen += 1
            if seen >= 2:
                return
        raise EmptyOrInvalidFileError()

    def __iter__(self) -> Iterator[RawRow]:
        records = self.records()
        next(records, None)  # header
        for offset, values in enumerate(records):
            yield RawRow(row_number=offset + 2, values=values)


def open_rows(file_bytes: bytes, *, quoted: bool = False) -> RowSource:
    """Build a validated RowSource; raises before any row is produced."""
    source = RowSource(file_bytes, quoted=quoted)
    source.validate()
    return source


# ─── Positional mapping ───────────────────────────────────────

@dataclass
class PropertyRow:
    """A data row mapped onto the fixed register columns (B..L)."""
    row_number: int
    property_id: str = ""
    corporate_ward_no: str = ""
    corporate_name: str = ""
    ward_name: str = ""
    corporate_mohalla: str = ""
    property_type: str = ""
    property_category: str = ""
    owner_name: str = ""
    house_no: str = ""
    address: str = ""
    popular_name: str = ""

    @classmethod
    def from_raw(cls, raw: RawRow) -> "PropertyRow":
        mapped = {
            col.field: raw.values[col.index] if col.index < len(raw.values) else ""
            for col in PROPERTY_COLUMNS
        }
        return cls(row_number=raw.row_number, **mapped)

    @property
    def has_required_fields(self) -> bool:
        return all(getattr(self, name) for name in get_required_fields())
