"""Optional finishing steps on aggregated output."""
from __future__ import annotations

from collections.abc import Iterable
from typing import Optional

from pygenny.generics.imports import BuiltinNormalizer, ImportNormalizer


def rename_package(source: str, package: str) -> str:
    """Replace the name declared by the first `package` line."""
    lines = source.splitlines()
    for i, line in enumerate(lines):
        if line.startswith("package"):
            parts = line.split(" ")
            if len(parts) > 1:
                parts[1] = package
                lines[i] = " ".join(parts)
            break
    return "".join(f"{line}\n" for line in lines)


def inject_imports(source: str, paths: Iterable[str]) -> str:
    """Insert `import "<path>"` lines right after the first `package` line."""
    paths = list(paths)
    out: list[str] = []
    done = False
    for line in source.splitlines():
        out.append(line)
        if not done and line.startswith("package"):
            out.extend(f'import "{path}"' for path in paths)
            done = True
    return "".join(f"{line}\n" for line in out)


def normalize(source: str, filename: str, normalizer: Optional[ImportNormalizer] = None) -> str:
    """Run the import normalizer; failures surface as ImportResolutionError."""
    return (normalizer or BuiltinNormalizer()).normalize(filename, source)


def postprocess(source: str, filename: str, *, package: Optional[str] = None,
                imports: Iterable[str] = (), normalizer: Optional[ImportNormalizer] = None) -> str:
    """Rename, inject, normalize, in that order. Each step is skipped when not requested."""
    if package:
        source = rename_package(source, package)
    imports = list(imports)
    if imports:
        source = inject_imports(source, imports)
    return normalize(source, filename, normalizer)
