"""Build Variant Resolver: stages an artifact containing the selected variant."""

import logging
import shutil
import tempfile
from pathlib import Path
from typing import List, Mapping, Optional, Union

from config_utils import BUILD_CONFIG_FILENAME
from errors import ConfigurationError
from structures import ArchitectureFlag, BuildConfig, BuildReport, ComponentManifest

from .base import InclusionStrategy
from .common import (
    check_source_paths, copy_source, read_architecture_flag, select_variant, write_build_config,
)

logger = logging.getLogger(__name__)


class BuildVariantResolver:
    """Resolve the architecture flag once and build one artifact from it."""

    def __init__(self, manifest: ComponentManifest, strategy: InclusionStrategy) -> None:
        self.manifest = manifest
        self.strategy = strategy

    def resolve_flag(self, environ: Optional[Mapping[str, str]] = None,
                     override: Optional[str] = None,
                     cwd: Optional[Path] = None) -> ArchitectureFlag:
        resolution = read_architecture_flag(self.manifest, environ=environ,
                                            override=override, cwd=cwd)
        return ArchitectureFlag(resolution["flag"])

    def build(self, output_dir: Union[str, Path],
              flag: Optional[ArchitectureFlag] = None) -> BuildReport:
        """
        Stage the component package into output_dir.

        The artifact is assembled in a temporary directory and moved into
        place only after the strategy has verified it; a failed build
        leaves the output directory untouched.

        Args:
            output_dir: Directory receiving ``<package>/``
            flag: Resolved flag; read from env/properties when None

        Raises:
            ConfigurationError: bad flag, layout or artifact
            MissingVariantError: a requested variant's sources are absent
        """
        manifest = self.manifest
        if flag is None:
            flag = self.resolve_flag()

        selected = select_variant(manifest, flag)
        self.strategy.validate_layout(manifest)
        included = self.strategy.included_variants(manifest, selected)
        elided = [v for v in manifest["variants"] if v not in included]
        check_source_paths(manifest, included)

        base = Path(manifest["base_dir"])
        shared_root = base / manifest["shared_root"]
        if not shared_root.is_dir():
            raise ConfigurationError(f"Shared source root not found: {shared_root}")

        logger.info("Building %s: flag=%s selected=%s strategy=%s target=%s",
                    manifest["component"], flag.value, selected["id"],
                    self.strategy.name, self.strategy.target)

        included_paths: List[str] = [manifest["shared_root"]]
        for variant in included:
            included_paths.extend(variant["source_paths"])
        elided_paths = [p for v in elided for p in v["source_paths"]]

        source_roots = {manifest["shared_root"]: True}
        source_roots.update({p: p in included_paths
                             for v in manifest["variants"] for p in v["source_paths"]})

        config: BuildConfig = {
            "component": manifest["component"],
            "flag": flag.value,
            "selected_variant": selected["id"],
            "compiled_variants": [v["id"] for v in included],
            "is_new_architecture_enabled": flag.effective() is ArchitectureFlag.MODERN,
            "strategy": self.strategy.name,
            "target": self.strategy.target,
            "source_roots": source_roots,
        }

        output_dir = Path(output_dir)
        package_out = output_dir / manifest["package"]
        _check_not_overlapping(base, package_out)
        output_dir.mkdir(parents=True, exist_ok=True)

        staging = Path(tempfile.mkdtemp(prefix=".archswitch-", dir=output_dir))
        try:
            staged_package = staging / manifest["package"]
            staged_package.mkdir()

            # Package skeleton: top-level files only, never a stale build config
            for entry in sorted(base.iterdir()):
                if entry.is_file() and entry.name != BUILD_CONFIG_FILENAME \
                        and not entry.name.endswith((".pyc", ".pyo")):
                    shutil.copy2(entry, staged_package / entry.name)

            for rel_path in included_paths:
                copy_source(base / rel_path, staged_package / rel_path)

            write_build_config(staged_package / BUILD_CONFIG_FILENAME, config)
            self.strategy.verify(staged_package, manifest, elided)

            _replace_artifact(staged_package, package_out, staging / ".previous")
        finally:
            shutil.rmtree(staging, ignore_errors=True)

        logger.info("Built %s -> %s (elided: %s)", manifest["component"], package_out,
                    ", ".join(elided_paths) or "none")

        return {
            "output_dir": str(package_out),
            "config": config,
            "included_paths": included_paths,
            "elided_paths": elided_paths,
        }


def _check_not_overlapping(source_dir: Path, package_out: Path) -> None:
    """Refuse an output location that is, contains, or lies inside the sources."""
    source = source_dir.resolve()
    target = package_out.resolve()
    if target == source or source in target.parents or target in source.parents:
        raise ConfigurationError(
            f"Output package {package_out} overlaps the component sources at {source_dir}"
        )


def _replace_artifact(staged_package: Path, package_out: Path, previous: Path) -> None:
    """Move the staged package into place, keeping the old artifact until it lands."""
    if package_out.exists():
        package_out.rename(previous)
    try:
        shutil.move(str(staged_package), str(package_out))
    except OSError:
        if previous.exists():
            if package_out.exists():
                shutil.rmtree(package_out, ignore_errors=True)
            previous.rename(package_out)
        raise
