"""
Exception hierarchy for tpchudtf.

Every error raised while invoking a table function derives from TpchUdtfError so
hosts can catch them in one place, while the concrete classes keep the standard
library bases (ValueError, RuntimeError) that callers would otherwise expect.
"""


class TpchUdtfError(Exception):
    """Base class for all tpchudtf errors."""


class InvalidArgument(TpchUdtfError, ValueError):
    """A table function was called with the wrong arity or literal types."""


class InternalError(TpchUdtfError, RuntimeError):
    """An internal consistency check failed (e.g. a batch schema mismatch)."""


class CollaboratorFailure(TpchUdtfError, RuntimeError):
    """
    An external collaborator (generator, catalog, file writer) failed.

    The original exception is always chained as ``__cause__``.
    """


class GeneratorError(CollaboratorFailure):
    """The TPC-H row generator or its batch reader failed."""


class CatalogError(CollaboratorFailure):
    """Registering or looking up a table in a catalog failed."""


class WriterError(CollaboratorFailure):
    """Writing a generated table to disk failed."""


def with_context(error: TpchUdtfError, name: str) -> TpchUdtfError:
    """
    Return a copy of ``error`` whose message is prefixed with ``name``.

    The copy keeps the concrete exception type so callers can still catch
    InvalidArgument or CollaboratorFailure.
    """
    return type(error)(f"{name}: {error}")
