"""Enumerations stored as plain strings in the database."""

import enum


class DeliveryStatus(str, enum.Enum):
    PENDING = "Pending"
    DELIVERED = "Delivered"
    NOT_FOUND = "Not Found"


class DataSource(str, enum.Enum):
    """Who received the bill, or not_found when nobody could be located."""
    OWNER = "owner"
    FAMILY = "family"
    TENANT = "tenant"
    NOT_FOUND = "not_found"


class CorrectionStatus(str, enum.Enum):
    NONE = "None"
    PENDING = "Pending"
    APPROVED = "Approved"
    REJECTED = "Rejected"


class UploadStatus(str, enum.Enum):
    SUCCESS = "Success"
    PARTIAL = "Partial"
    FAILED = "Failed"
