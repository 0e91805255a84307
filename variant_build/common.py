"""Flag resolution and file helpers shared across inclusion strategies."""

import json
import logging
import os
import shutil
from pathlib import Path
from typing import List, Mapping, Optional

from config_utils import read_properties_file
from errors import ConfigurationError, MissingVariantError
from structures import (
    ArchitectureFlag, BuildConfig, ComponentManifest, FlagResolution, VariantDescriptor,
)

logger = logging.getLogger(__name__)

TRUE_VALUES = {"1", "true", "yes", "on", "modern"}
FALSE_VALUES = {"0", "false", "no", "off", "legacy"}

# Never copied into an artifact
IGNORED_NAMES = ("__pycache__", "*.pyc", "*.pyo", ".DS_Store")


# =============================================================================
# Architecture Flag
# =============================================================================

def parse_flag(raw: Optional[str], source: str = "flag") -> ArchitectureFlag:
    """Map a raw flag string onto the tri-state flag.

    Examples:
        None, "" -> unset
        "1", "true", "modern" -> modern
        "0", "false", "legacy" -> legacy

    Raises:
        ConfigurationError: unrecognized value (never silently defaulted)
    """
    if raw is None:
        return ArchitectureFlag.UNSET
    value = str(raw).strip().lower()
    if not value or value == ArchitectureFlag.UNSET.value:
        return ArchitectureFlag.UNSET
    if value in TRUE_VALUES:
        return ArchitectureFlag.MODERN
    if value in FALSE_VALUES:
        return ArchitectureFlag.LEGACY
    raise ConfigurationError(
        f"Unrecognized architecture flag {raw!r} from {source}. "
        f"Use one of: {', '.join(sorted(TRUE_VALUES | FALSE_VALUES))}"
    )


def read_architecture_flag(manifest: ComponentManifest,
                           environ: Optional[Mapping[str, str]] = None,
                           override: Optional[str] = None,
                           cwd: Optional[Path] = None) -> FlagResolution:
    """Resolve the flag from override, environment and build properties.

    An explicit override wins. Otherwise env and property are combined:
    if both are set they must agree.

    Args:
        manifest: Supplies the env variable and property names
        environ: Environment mapping (defaults to os.environ)
        override: Explicit value, e.g. from the command line
        cwd: Directory a relative properties file is resolved against

    Raises:
        ConfigurationError: unrecognized or contradictory values
    """
    environ = os.environ if environ is None else environ
    settings = manifest["flag"]

    env_value = environ.get(settings["env"])
    properties_path = Path(settings["properties_file"])
    if not properties_path.is_absolute():
        properties_path = (cwd or Path.cwd()) / properties_path
    property_value = read_properties_file(properties_path).get(settings["property"])

    resolution: FlagResolution = {
        "flag": ArchitectureFlag.UNSET.value,
        "env_value": env_value,
        "property_value": property_value,
        "override": override,
    }

    if override is not None:
        resolution["flag"] = parse_flag(override, "override").value
        return resolution

    env_flag = parse_flag(env_value, f"${settings['env']}")
    prop_flag = parse_flag(property_value, f"{properties_path.name}:{settings['property']}")

    if (env_flag is not ArchitectureFlag.UNSET and prop_flag is not ArchitectureFlag.UNSET
            and env_flag is not prop_flag):
        raise ConfigurationError(
            f"Contradictory architecture flag: ${settings['env']}={env_value!r} "
            f"but {settings['property']}={property_value!r} in {properties_path}"
        )

    flag = env_flag if env_flag is not ArchitectureFlag.UNSET else prop_flag
    resolution["flag"] = flag.value
    logger.debug("Architecture flag %s (env=%r, property=%r)", flag.value, env_value, property_value)
    return resolution


# =============================================================================
# Variant Selection
# =============================================================================

def condition_holds(descriptor: VariantDescriptor, flag: ArchitectureFlag) -> bool:
    """Build condition predicate over the tri-state flag."""
    return flag.value in descriptor["build_condition"]


def select_variant(manifest: ComponentManifest, flag: ArchitectureFlag) -> VariantDescriptor:
    """Return the single descriptor whose build condition holds."""
    matching = [v for v in manifest["variants"] if condition_holds(v, flag)]
    if len(matching) != 1:
        raise ConfigurationError(
            f"Flag '{flag.value}' selects {len(matching)} variants of "
            f"'{manifest['component']}', expected exactly one"
        )
    return matching[0]


def missing_source_paths(manifest: ComponentManifest, descriptor: VariantDescriptor) -> List[str]:
    """Source paths of a descriptor that don't exist under the package dir."""
    base = Path(manifest["base_dir"])
    return [p for p in descriptor["source_paths"] if not (base / p).exists()]


def check_source_paths(manifest: ComponentManifest,
                       descriptors: List[VariantDescriptor]) -> None:
    """Fail the build if any requested variant is missing sources."""
    for descriptor in descriptors:
        missing = missing_source_paths(manifest, descriptor)
        if missing:
            raise MissingVariantError(descriptor["id"], missing)


# =============================================================================
# Artifact Files
# =============================================================================

def copy_source(src: Path, dst: Path) -> None:
    """Copy a source file or directory, skipping bytecode caches."""
    if src.is_dir():
        shutil.copytree(src, dst, ignore=shutil.ignore_patterns(*IGNORED_NAMES))
    else:
        dst.parent.mkdir(parents=True, exist_ok=True)
        shutil.copy2(src, dst)


def write_build_config(path: Path, config: BuildConfig) -> None:
    """Write the generated build config next to the packaged sources."""
    path.write_text(json.dumps(config, indent=2) + "\n", encoding="utf-8")


def iter_python_files(root: Path) -> List[Path]:
    """All .py files under root, sorted for deterministic checks."""
    return sorted(p for p in root.rglob("*.py") if p.is_file())
