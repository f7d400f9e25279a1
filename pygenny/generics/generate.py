"""Generation driver: validate, specialize, aggregate, post-process."""
from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import IO, Optional, Union

from pygenny.generics.aggregate import aggregate, unwanted_prefixes
from pygenny.generics.bindings import BindingSetLike, SourceUnit, SpecializationRequest
from pygenny.generics.imports import ImportNormalizer
from pygenny.generics.postprocess import postprocess
from pygenny.generics.substitute import specialize
from pygenny.generics.validate import check_coverage, declared_placeholders

logger = logging.getLogger(__name__)


def generate(
    template: Union[SourceUnit, str, bytes, IO],
    binding_sets: Union[SpecializationRequest, Iterable[BindingSetLike]],
    *,
    filename: str = "template.go",
    package: Optional[str] = None,
    imports: Iterable[str] = (),
    strip_tag: str = "",
    normalizer: Optional[ImportNormalizer] = None,
) -> str:
    """Specialize `template` once per binding set and return one Go source file.

    Args:
        template: Template text, bytes, a seekable stream or a SourceUnit.
        binding_sets: One mapping of placeholder name to concrete spec per
            specialization, in output order.
        filename: Name of the template, used in diagnostics and as context
            for the import normalizer.
        package: Rename the output package.
        imports: Extra import paths to add to the output.
        strip_tag: Also drop `// +build <tag>` / `//go:build <tag>` lines.
        normalizer: Import normalizer; BuiltinNormalizer when omitted.

    Raises:
        TemplateReadError: template bytes are not valid UTF-8.
        SourceParseError: the template is not structurally valid Go.
        MissingBindingError: a binding set misses a declared placeholder.
            Nothing is generated in that case.
        ImportResolutionError: the normalizer rejected the output.
    """
    unit = SourceUnit.read(template, filename)
    if not isinstance(binding_sets, SpecializationRequest):
        binding_sets = SpecializationRequest.of(binding_sets)

    placeholders = declared_placeholders(unit)
    logger.debug("%s declares %s", unit.filename, ", ".join(map(str, placeholders)) or "no generic types")
    for binding_set in binding_sets:
        check_coverage(placeholders, binding_set)

    outputs = [specialize(unit, binding_set).text for binding_set in binding_sets]
    merged = aggregate(outputs, unwanted_prefixes(strip_tag))
    return postprocess(merged, unit.filename, package=package, imports=imports, normalizer=normalizer)
