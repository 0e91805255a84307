"""
Façade Binder.

Binds one component to exactly one variant implementation, once per
process, and serves that binding to every caller.
"""

import importlib
import importlib.util
import logging
import threading
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Union

from config_utils import (
    BUILD_CONFIG_FILENAME, default_variant, gated_variant, load_manifest, read_json_config,
)
from errors import ConfigurationError, InconsistentBindingError, VariantConformanceError
from structures import (
    BuildConfig, CapabilityProbeResult, ComponentManifest, FacadeBinding, VariantContext,
    VariantDescriptor,
)

from .probe import CapabilityProbe, get_probe

__all__ = ["FacadeBinder"]

logger = logging.getLogger(__name__)

Importer = Callable[[str], Any]


def _module_available(module_name: str) -> bool:
    try:
        return importlib.util.find_spec(module_name) is not None
    except ModuleNotFoundError:
        return False


def _is_missing(error: ModuleNotFoundError, module_name: str) -> bool:
    """True when the import failed on the module itself or one of its parents."""
    return bool(error.name) and (module_name == error.name
                                 or module_name.startswith(error.name + "."))


def _load_interface(spec: str) -> type:
    module_name, _, attr = spec.partition(":")
    return getattr(importlib.import_module(module_name), attr)


class FacadeBinder:
    """Lazily resolves a component to its live variant.

    Args:
        manifest: Component manifest
        probe: Capability probe; defaults to the process-wide probe for the
            modern variant's marker
        build_config: Generated config of the artifact. When None the
            compiled variants are those whose module can be found.
        importer: Module importer for variant modules
    """

    def __init__(self, manifest: ComponentManifest,
                 probe: Optional[CapabilityProbe] = None,
                 build_config: Optional[BuildConfig] = None,
                 importer: Optional[Importer] = None) -> None:
        self.manifest = manifest
        self.build_config = build_config
        self._probe = probe
        self._import = importer or importlib.import_module
        self._lock = threading.Lock()
        self._binding: Optional[FacadeBinding] = None
        self._failure: Optional[Exception] = None

    @classmethod
    def for_package_dir(cls, package_dir: Union[str, Path],
                        probe: Optional[CapabilityProbe] = None,
                        importer: Optional[Importer] = None) -> "FacadeBinder":
        """Binder for a component package holding variants.yaml.

        Raises:
            ConfigurationError: bad manifest, or a build config that isn't an
                object with a list of compiled variants
        """
        package_dir = Path(package_dir)
        manifest = load_manifest(package_dir)
        config_path = package_dir / BUILD_CONFIG_FILENAME
        build_config = read_json_config(config_path)
        if build_config is not None and (
                not isinstance(build_config, dict)
                or not isinstance(build_config.get("compiled_variants", []), list)):
            raise ConfigurationError(
                f"Malformed build config {config_path}: expected an object with "
                "a compiled_variants list"
            )
        return cls(manifest, probe=probe, build_config=build_config, importer=importer)

    @property
    def probe(self) -> CapabilityProbe:
        if self._probe is None:
            marker = gated_variant(self.manifest)["required_capability_marker"]
            self._probe = get_probe(marker)
        return self._probe

    def compiled_variants(self) -> List[str]:
        """Variant ids built into this artifact."""
        if self.build_config is not None:
            return list(self.build_config.get("compiled_variants", []))
        return [v["id"] for v in self.manifest["variants"] if _module_available(v["module"])]

    def select(self, result: CapabilityProbeResult) -> VariantDescriptor:
        """Map a probe result onto a variant descriptor."""
        if result.detected:
            return gated_variant(self.manifest)
        return default_variant(self.manifest)

    def preview(self) -> Dict[str, Any]:
        """What resolve() would bind, without importing or constructing anything."""
        result = self.probe.probe()
        descriptor = self.select(result)
        compiled = self.compiled_variants()
        return {
            "component": self.manifest["component"],
            "detected": result.detected,
            "selected_variant": descriptor["id"],
            "compiled_variants": compiled,
            "consistent": descriptor["id"] in compiled,
            "bound_variant": self._binding.active_variant_id if self._binding else None,
        }

    def resolve(self) -> FacadeBinding:
        """
        Return the component's binding, creating it on first call.

        Concurrent first callers block until one of them has bound the
        variant; the variant is constructed exactly once. A failed
        resolution is re-raised on every later call.

        Raises:
            InconsistentBindingError: selected variant not built into the artifact
            VariantConformanceError: variant handle outside the capability set
        """
        binding = self._binding
        if binding is not None:
            return binding
        with self._lock:
            if self._binding is None:
                if self._failure is not None:
                    raise self._failure
                try:
                    self._binding = self._bind()
                except Exception as e:
                    self._failure = e
                    raise
            return self._binding

    def _bind(self) -> FacadeBinding:
        component = self.manifest["component"]
        result = self.probe.probe()
        descriptor = self.select(result)
        variant_id = descriptor["id"]

        compiled = self.compiled_variants()
        if variant_id not in compiled:
            raise InconsistentBindingError(component, variant_id, compiled)

        try:
            module = self._import(descriptor["module"])
        except ModuleNotFoundError as e:
            if not _is_missing(e, descriptor["module"]):
                raise
            raise InconsistentBindingError(
                component, variant_id, [v for v in compiled if v != variant_id]
            ) from e

        factory = getattr(module, "create_component", None)
        if factory is None:
            raise VariantConformanceError(variant_id, self.manifest["interface"],
                                          f"module {descriptor['module']} without create_component()")

        handle = factory(VariantContext(component, variant_id, result.marker_value))
        interface = _load_interface(self.manifest["interface"])
        if not isinstance(handle, interface):
            raise VariantConformanceError(variant_id, self.manifest["interface"],
                                          type(handle).__name__)

        logger.info("Bound %s to %s variant", component, variant_id)
        return FacadeBinding(active_variant_id=variant_id, handle=handle)
