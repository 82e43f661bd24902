"""
Exception taxonomy.
The message of every exception is the text shown to the user in the error banner.
"""


class CarIdentifierError(Exception):
    """Base class for every failure the page reports to the user."""


class ValidationError(CarIdentifierError):
    """Upload rejected before reading it (wrong type, too large)."""


class InvalidType(ValidationError):
    def __init__(self, message: str = "Please upload a valid image file"):
        super().__init__(message)


class TooLarge(ValidationError):
    def __init__(self, message: str = "Image size should be less than 20MB"):
        super().__init__(message)


class ReadError(CarIdentifierError):
    def __init__(self, message: str = "Failed to read the image file. Please try again."):
        super().__init__(message)


class AnalysisError(CarIdentifierError):
    """Any failure of the external analysis call (transport, API error, empty reply)."""
