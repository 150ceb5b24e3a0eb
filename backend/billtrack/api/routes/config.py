"""Configuration API routes — bulk upload column contract."""

from fastapi import APIRouter

from billtrack.core.column_config import PROPERTY_COLUMNS, get_template_header
from billtrack.core.config import settings

router = APIRouter()


@router.get("/columns")
async def get_column_config():
    """
    Describe the positional layout of a property register upload.

    Used by the admin UI to render a blank template and explain which
    columns must be filled.
    """
    return {
        "template_header": get_template_header(),
        "columns": [
            {
                "letter": c.letter,
                "index": c.index,
                "field": c.field,
                "label": c.label,
                "required": c.required,
                "ward_key": c.ward_key,
                "unused": c.unused,
            }
            for c in PROPERTY_COLUMNS
        ],
        "quoted_fields": settings.CSV_QUOTED_FIELDS,
        "max_upload_bytes": settings.MAX_UPLOAD_BYTES,
    }
