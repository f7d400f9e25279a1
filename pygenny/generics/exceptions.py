"""Exceptions raised by the generation pipeline.

Each exception carries an error-catalog code and the fields its message
template needs, so the CLI can route it through a Reporter unchanged.
"""
from __future__ import annotations
from typing import Optional, TYPE_CHECKING

from pygenny.internals.errors import ERR, emit, format_text

if TYPE_CHECKING:
    from pygenny.internals.report import Reporter, Span


class GennyError(Exception):
    """Base class for every error the generator reports."""
    code = ""

    def __init__(self, span: Optional['Span'] = None, **fields):
        self.span = span
        self.fields = fields
        super().__init__(format_text(self.code, **fields))

    def report(self, reporter: 'Reporter') -> None:
        emit(reporter, ERR[self.code], self.span, **self.fields)


class SourceParseError(GennyError):
    """The template failed structural parsing."""
    code = "GE1001"

    def __init__(self, detail: str, filename: str = "<input>", span: Optional['Span'] = None):
        self.detail = detail
        self.filename = filename
        super().__init__(span, filename=filename, detail=detail)


class MissingBindingError(GennyError):
    """A declared placeholder type has no entry in a binding set."""
    code = "GE1002"

    def __init__(self, placeholder: str, span: Optional['Span'] = None):
        self.placeholder = placeholder
        super().__init__(span, placeholder=placeholder)


class ImportResolutionError(GennyError):
    """The import normalizer rejected the assembled output."""
    code = "GE1003"

    def __init__(self, detail: str, filename: str = "<input>", span: Optional['Span'] = None):
        self.detail = detail
        self.filename = filename
        super().__init__(span, filename=filename, detail=detail)


class TypeSetError(GennyError):
    """A type set argument could not be parsed."""
    code = "GE1004"

    def __init__(self, text: str, detail: str):
        self.text = text
        self.detail = detail
        super().__init__(None, text=text, detail=detail)


class TemplateReadError(GennyError):
    code = "GE1005"

    def __init__(self, path: str, reason: str):
        self.path = path
        super().__init__(None, path=path, reason=reason)


class OutputWriteError(GennyError):
    code = "GE1006"

    def __init__(self, path: str, reason: str):
        self.path = path
        super().__init__(None, path=path, reason=reason)


class ConfigError(GennyError):
    code = "GE1007"

    def __init__(self, path: str, detail: str):
        self.path = path
        super().__init__(None, path=path, detail=detail)
