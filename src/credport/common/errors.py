# src/credport/common/errors.py


class CredportError(Exception):
    """Base class for every error raised by credport."""


class FormatError(CredportError, ValueError):
    """The file content cannot be read as the declared format at all."""


class UnsupportedExtensionError(FormatError):
    """The file extension is not accepted by the selected import source."""


class UnsupportedFormatError(CredportError, ValueError):
    """The requested export format is reserved or unknown."""


class SourceNotFoundError(CredportError, LookupError):
    pass


class StoreError(CredportError):
    """A credential store refused an insert, update or delete."""


class InvalidOptionsError(CredportError, TypeError):
    pass


class InvalidTransitionError(CredportError, ValueError):
    pass
