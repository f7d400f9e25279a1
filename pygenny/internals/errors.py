# internals/errors.py
from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional

from pygenny.internals.report import Span, Reporter


class Severity(str, Enum):
    ERROR = "error"
    WARNING = "warning"


class Category(str, Enum):
    GENERAL  = "general"
    PARSE    = "parse"
    BINDING  = "binding"
    IMPORTS  = "imports"
    IO       = "io"


@dataclass(frozen=True)
class ErrorMessage:
    code: str
    severity: Severity
    text: str
    category: Category = Category.GENERAL


REGISTRY: Dict[str, ErrorMessage] = {}

class _ErrorCatalog:
    def __init__(self, backing: Dict[str, ErrorMessage]) -> None:
        self._registry = backing

    def __getattr__(self, name: str) -> ErrorMessage:
        try:
            return self._registry[name]
        except KeyError as e:
            raise AttributeError(name) from e

    def __getitem__(self, code: str) -> ErrorMessage:
        return self._registry[code]


ERR = _ErrorCatalog(REGISTRY)

def emit(r: Reporter, em: ErrorMessage, span: Optional[Span], **kwargs) -> None:
    text = format_text(em.code, **kwargs)
    if em.severity == Severity.ERROR:
        r.error(em.code, text, span)
    else:
        r.warn(em.code, text, span)

def format_text(code: str, **kwargs) -> str:
    msg = _get(code)
    try:
        return msg.text.format(**kwargs)
    except KeyError as key_error:
        missing = key_error.args[0]
        raise KeyError(f"missing text key '{missing}' for {code} "
                       f"(needed by: {msg.text!r})") from None


#
# --- Helpers
#

def _add(msg: ErrorMessage) -> None:
    if msg.code in REGISTRY:
        raise ValueError(f"duplicate error code {REGISTRY[msg.code]} in {msg}")
    REGISTRY[msg.code] = msg

def _get(code: str) -> ErrorMessage:
    try:
        return REGISTRY[code]
    except KeyError:
        raise KeyError(f"unknown error code: {code}")


#
# --- Registry population
#

# Generation errors - GE1xxx range
_add(ErrorMessage("GE1001", Severity.ERROR,
    "cannot parse {filename}: {detail}", Category.PARSE))

# Every generic.Type / generic.Number declaration needs a binding in each type set
_add(ErrorMessage("GE1002", Severity.ERROR,
    "missing specific type for generic type '{placeholder}'", Category.BINDING))

# Usually a substitution that broke syntax
_add(ErrorMessage("GE1003", Severity.ERROR,
    "cannot resolve imports of generated {filename}: {detail}", Category.IMPORTS))

_add(ErrorMessage("GE1004", Severity.ERROR,
    "invalid type set '{text}': {detail}", Category.BINDING))

_add(ErrorMessage("GE1005", Severity.ERROR,
    "cannot read template {path}: {reason}", Category.IO))

_add(ErrorMessage("GE1006", Severity.ERROR,
    "cannot write output {path}: {reason}", Category.IO))

_add(ErrorMessage("GE1007", Severity.ERROR,
    "invalid configuration {path}: {detail}", Category.GENERAL))

# Warnings - GW1xxx range
# The binding is still applied as a plain text substitution
_add(ErrorMessage("GW1001", Severity.WARNING,
    "type '{placeholder}' is bound but the template declares no such generic type",
    Category.BINDING))
