from __future__ import annotations


class ConversionError(RuntimeError):
    """Raised when an assembly pass aborts because a collaborator failed."""


class ParserError(ConversionError):
    pass


class SerializationError(ConversionError):
    pass
