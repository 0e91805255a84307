"""Config readers shared by the build resolver and the runtime binder.

Provides:
- read_json_config: generated build config (JSON, JSON5 fallback)
- read_properties_file: Java-style build properties (key=value)
- load_manifest: variants.yaml with validation into a ComponentManifest
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import json5
import yaml

from errors import ConfigurationError
from structures import ArchitectureFlag, ComponentManifest, FlagSettings, VariantDescriptor

logger = logging.getLogger(__name__)

MANIFEST_FILENAME = "variants.yaml"
BUILD_CONFIG_FILENAME = "_build_config.json"

DEFAULT_FLAG_ENV = "ARCHSWITCH_NEW_ARCH_ENABLED"
DEFAULT_FLAG_PROPERTY = "newArchEnabled"
DEFAULT_PROPERTIES_FILE = "build.properties"

PathLike = Union[str, Path]


# =============================================================================
# JSON / Properties
# =============================================================================

def read_json_config(path: Path) -> Optional[Dict[str, Any]]:
    """Read and parse a JSON config file.

    Uses stdlib json.loads() first (fast, strict), then falls back to
    json5.loads() for files that contain comments or trailing commas
    (hand-edited build configs).

    Returns None if file doesn't exist or can't be parsed.
    """
    if not path.exists():
        return None

    try:
        content = path.read_text(encoding="utf-8", errors="replace")
    except OSError:
        return None

    try:
        return json.loads(content)
    except json.JSONDecodeError:
        pass

    try:
        return json5.loads(content)
    except ValueError:
        return None


def read_properties_file(path: Path) -> Dict[str, str]:
    """Read a Java-style properties file.

    Lines are ``key=value`` or ``key: value``; ``#`` and ``!`` start comments.
    Missing file -> empty dict.
    """
    properties: Dict[str, str] = {}
    if not path.exists():
        return properties

    for raw_line in path.read_text(encoding="utf-8", errors="replace").splitlines():
        line = raw_line.strip()
        if not line or line[0] in "#!":
            continue
        sep = min((i for i in (line.find("="), line.find(":")) if i >= 0), default=-1)
        if sep < 0:
            properties[line] = ""
            continue
        properties[line[:sep].strip()] = line[sep + 1:].strip()
    return properties


# =============================================================================
# Manifest
# =============================================================================

def _require(data: Dict[str, Any], key: str, source: Path) -> Any:
    if key not in data or data[key] in (None, ""):
        raise ConfigurationError(f"{source}: missing required key '{key}'")
    return data[key]


def _parse_variant(variant_id: str, data: Any, source: Path) -> VariantDescriptor:
    if not isinstance(data, dict):
        raise ConfigurationError(f"{source}: variant '{variant_id}' must be a mapping")

    when = _require(data, "when", source)
    if isinstance(when, str):
        when = [when]
    valid_values = {flag.value for flag in ArchitectureFlag}
    for value in when:
        if value not in valid_values:
            raise ConfigurationError(
                f"{source}: variant '{variant_id}' has unknown build condition '{value}' "
                f"(expected one of {sorted(valid_values)})"
            )

    source_paths = _require(data, "source_paths", source)
    if isinstance(source_paths, str):
        source_paths = [source_paths]

    return {
        "id": variant_id,
        "build_condition": list(when),
        "source_paths": [str(p) for p in source_paths],
        "module": str(_require(data, "module", source)),
        "required_capability_marker": data.get("marker"),
    }


def _validate_variants(variants: List[VariantDescriptor], source: Path) -> None:
    """Exactly one variant per flag value; exactly one marker-gated variant."""
    for flag in ArchitectureFlag:
        matching = [v["id"] for v in variants if flag.value in v["build_condition"]]
        if len(matching) != 1:
            raise ConfigurationError(
                f"{source}: flag '{flag.value}' must select exactly one variant, "
                f"got {matching or 'none'}"
            )

    gated = [v for v in variants if v["required_capability_marker"]]
    if len(gated) != 1:
        raise ConfigurationError(
            f"{source}: exactly one variant must declare a capability marker, "
            f"got {[v['id'] for v in gated] or 'none'}"
        )
    if ArchitectureFlag.UNSET.value in gated[0]["build_condition"]:
        raise ConfigurationError(
            f"{source}: the marker-gated variant '{gated[0]['id']}' cannot be the default"
        )


def load_manifest(path: PathLike) -> ComponentManifest:
    """Load and validate a component's variants.yaml.

    Args:
        path: The manifest file, or the component package directory holding it

    Raises:
        ConfigurationError: missing file, bad YAML or an invalid variant table
    """
    path = Path(path)
    if path.is_dir():
        path = path / MANIFEST_FILENAME
    if not path.exists():
        raise ConfigurationError(f"Manifest not found: {path}")

    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
    except yaml.YAMLError as e:
        raise ConfigurationError(f"{path}: invalid YAML: {e}") from e

    if not isinstance(data, dict):
        raise ConfigurationError(f"{path}: manifest must be a mapping")

    raw_variants = _require(data, "variants", path)
    if not isinstance(raw_variants, dict):
        raise ConfigurationError(f"{path}: 'variants' must map variant ids to settings")
    variants = [_parse_variant(str(vid), vdata, path) for vid, vdata in raw_variants.items()]
    _validate_variants(variants, path)

    flag_data = data.get("flag") or {}
    flag: FlagSettings = {
        "env": flag_data.get("env", DEFAULT_FLAG_ENV),
        "property": flag_data.get("property", DEFAULT_FLAG_PROPERTY),
        "properties_file": flag_data.get("properties_file", DEFAULT_PROPERTIES_FILE),
    }

    component = str(_require(data, "component", path))
    manifest: ComponentManifest = {
        "component": component,
        "package": str(data.get("package", component)),
        "interface": str(_require(data, "interface", path)),
        "shared_root": str(data.get("shared_root", "shared")),
        "flag": flag,
        "variants": variants,
        "base_dir": str(path.parent.resolve()),
    }
    logger.debug("Loaded manifest for %s with variants %s",
                 component, [v["id"] for v in variants])
    return manifest


def get_variant(manifest: ComponentManifest, variant_id: str) -> VariantDescriptor:
    """Look up a descriptor by id."""
    for variant in manifest["variants"]:
        if variant["id"] == variant_id:
            return variant
    raise ConfigurationError(
        f"Component '{manifest['component']}' has no variant '{variant_id}'"
    )


def default_variant(manifest: ComponentManifest) -> VariantDescriptor:
    """The variant selected when the flag is unset (legacy)."""
    for variant in manifest["variants"]:
        if ArchitectureFlag.UNSET.value in variant["build_condition"]:
            return variant
    raise ConfigurationError(f"Component '{manifest['component']}' has no default variant")


def gated_variant(manifest: ComponentManifest) -> VariantDescriptor:
    """The variant that requires the runtime capability marker (modern)."""
    for variant in manifest["variants"]:
        if variant["required_capability_marker"]:
            return variant
    raise ConfigurationError(f"Component '{manifest['component']}' has no marker-gated variant")
