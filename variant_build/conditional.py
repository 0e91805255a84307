"""Conditional inclusion: the unselected variant is elided from the artifact."""

import re
from pathlib import Path
from typing import List

from errors import ConfigurationError
from structures import ComponentManifest, VariantDescriptor

from .base import InclusionStrategy
from .common import iter_python_files


def _reference_patterns(manifest: ComponentManifest, descriptor: VariantDescriptor) -> List[re.Pattern]:
    """Patterns matching an import of the variant module, absolute or relative."""
    module = descriptor["module"]
    patterns = [re.compile(r"(?<![\w.])" + re.escape(module) + r"\b")]
    prefix = manifest["package"] + "."
    if module.startswith(prefix):
        relative = module[len(prefix):]
        patterns.append(re.compile(r"from\s+\.+" + re.escape(relative) + r"\b"))
        patterns.append(re.compile(r"from\s+\.+\s+import\s+[^\n]*\b" + re.escape(relative) + r"\b"))
    return patterns


class ConditionalStrategy(InclusionStrategy):
    """Only the selected variant is packaged (wheel target)."""

    name = "conditional"

    def included_variants(self, manifest: ComponentManifest,
                          selected: VariantDescriptor) -> List[VariantDescriptor]:
        return [selected]

    def verify(self, staged_package: Path, manifest: ComponentManifest,
               elided: List[VariantDescriptor]) -> None:
        """No trace of an elided variant may remain in packaged code."""
        for descriptor in elided:
            for source_path in descriptor["source_paths"]:
                if (staged_package / source_path).exists():
                    raise ConfigurationError(
                        f"Elided variant '{descriptor['id']}' still present at {source_path}"
                    )

            patterns = _reference_patterns(manifest, descriptor)
            for py_file in iter_python_files(staged_package):
                text = py_file.read_text(encoding="utf-8", errors="replace")
                if any(p.search(text) for p in patterns):
                    rel = py_file.relative_to(staged_package)
                    raise ConfigurationError(
                        f"{rel} references elided variant module '{descriptor['module']}'"
                    )
