"""All models must be imported here so SQLAlchemy registers them."""

from billtrack.models.core import Ward, Property, Delivery  # noqa: F401
from billtrack.models.ledger import UploadRecord  # noqa: F401
