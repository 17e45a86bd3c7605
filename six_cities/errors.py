class SixCitiesError(Exception):
    """Base class for fatal command errors."""


class MockDataError(SixCitiesError):
    """Mock data could not be fetched or is structurally invalid."""


class OfferWriteError(SixCitiesError):
    """Generated rows could not be written to the output file."""


class OfferImportError(SixCitiesError):
    """The TSV input file could not be read."""
