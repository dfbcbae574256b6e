"""
Errors raised by the tax estimation engine.
"""


class TaxEngineError(Exception):
    """Base class for tax engine failures."""


class ValidationError(TaxEngineError):
    """
    A required request field is missing.

    Attributes:
        missing_fields: Names of the absent fields, in request order
    """

    def __init__(self, missing_fields):
        self.missing_fields = list(missing_fields)
        super().__init__("Missing required fields: filingStatus and income")


class ComputationError(TaxEngineError):
    """An unexpected failure while computing a tax estimate."""
