"""
Bulk upload column contract.

Property register files are positional: column A (serial number) is
ignored and columns B through L map to fixed fields. Header text is never
consulted, only position.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class ColumnDef:
    """One positional column of the property register."""
    letter: str
    index: int
    field: str
    label: str
    required: bool = False
    # Consumed only to locate or create the ward; not presence-checked.
    ward_key: bool = False
    # Read from the file but not stored anywhere.
    unused: bool = False


PROPERTY_COLUMNS: list[ColumnDef] = [
    ColumnDef("B", 1, "property_id", "Property ID", required=True),
    ColumnDef("C", 2, "corporate_ward_no", "Corporate Ward No."),
    ColumnDef("D", 3, "corporate_name", "Corporate Name", ward_key=True),
    ColumnDef("E", 4, "ward_name", "Ward Name", ward_key=True),
    ColumnDef("F", 5, "corporate_mohalla", "Corporate Mohalla"),
    ColumnDef("G", 6, "property_type", "Property Type"),
    ColumnDef("H", 7, "property_category", "Property Category", unused=True),
    ColumnDef("I", 8, "owner_name", "Owner Name", required=True),
    ColumnDef("J", 9, "house_no", "House No."),
    ColumnDef("K", 10, "address", "Address", required=True),
    ColumnDef("L", 11, "popular_name", "Popular Name", unused=True),
]


def get_required_fields() -> list[str]:
    """Fields whose absence fails a row."""
    return [c.field for c in PROPERTY_COLUMNS if c.required]


def get_template_header() -> list[str]:
    """Header row for a blank register, column A included."""
    return ["S.No"] + [c.label for c in PROPERTY_COLUMNS]
