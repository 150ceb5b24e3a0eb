"""Domain exceptions raised by the service layer and mapped to HTTP by routes."""


class ImportFileError(ValueError):
    """The uploaded file cannot be imported at all."""


class EmptyOrInvalidFileError(ImportFileError):
    """Fewer than two non-blank lines: no header plus data row."""

    def __init__(self, message: str = "File is empty or invalid"):
        super().__init__(message)


class UnsupportedFileError(ImportFileError):
    """The file's content is not a format the parser understands."""


class UploadRecordNotFound(LookupError):
    pass


class PropertyNotFound(LookupError):
    pass


class DeliveryNotFound(LookupError):
    pass
