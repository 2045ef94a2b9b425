"""Error taxonomy for title generation."""


class TitlerError(Exception):
    """Base title generation error."""


class ConfigurationError(TitlerError):
    """Settings are missing or invalid (e.g. no API key)."""


class EmptyDocumentError(TitlerError):
    """Document has no usable text."""


class OracleError(TitlerError):
    """Title oracle call failed."""


class OracleAuthError(OracleError):
    """Authentication failure."""


class OracleRateLimitError(OracleError):
    """Rate limit hit."""


class OracleResponseError(OracleError):
    """Oracle answered, but not with a usable title."""


class RenameError(TitlerError):
    """Host refused to rename the document."""
