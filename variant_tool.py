#!/usr/bin/env python3
"""
archswitch command line.

Builds single-variant artifacts for dual-implementation components and
reports how a component would bind in the current process.
"""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

from config_utils import BUILD_CONFIG_FILENAME, load_manifest, read_json_config
from errors import VariantError
from structures import ArchitectureFlag
from variant_build import TARGETS, BuildVariantResolver, create_strategy, read_architecture_flag
from variant_runtime import FacadeBinder, GlobalMarkerProbe, MODERN_RUNTIME_MARKER


# =============================================================================
# Commands
# =============================================================================

def cmd_build(args: argparse.Namespace) -> Dict[str, Any]:
    manifest = load_manifest(args.package_dir)
    resolution = read_architecture_flag(manifest, override=args.flag)
    resolver = BuildVariantResolver(manifest, create_strategy(args.target))
    report = resolver.build(args.out, flag=ArchitectureFlag(resolution["flag"]))
    return dict(report)


def cmd_flag(args: argparse.Namespace) -> Dict[str, Any]:
    manifest = load_manifest(args.package_dir)
    resolution = read_architecture_flag(manifest, override=args.flag)
    flag = ArchitectureFlag(resolution["flag"])
    result: Dict[str, Any] = dict(resolution)
    result["effective"] = flag.effective().value
    result["env"] = manifest["flag"]["env"]
    result["property"] = manifest["flag"]["property"]
    return result


def cmd_probe(args: argparse.Namespace) -> Dict[str, Any]:
    result = GlobalMarkerProbe(args.marker).probe()
    return {
        "marker": args.marker,
        "detected": result.detected,
        "marker_type": type(result.marker_value).__name__ if result.detected else None,
    }


def cmd_inspect(args: argparse.Namespace) -> Dict[str, Any]:
    package_dir = Path(args.package_dir)
    binder = FacadeBinder.for_package_dir(package_dir)
    manifest = binder.manifest
    return {
        "component": manifest["component"],
        "variants": [
            {
                "id": v["id"],
                "build_condition": v["build_condition"],
                "module": v["module"],
                "marker": v["required_capability_marker"],
            }
            for v in manifest["variants"]
        ],
        "build_config": read_json_config(package_dir / BUILD_CONFIG_FILENAME),
        "binding": binder.preview(),
    }


# =============================================================================
# Text Output
# =============================================================================

def format_text(command: str, result: Dict[str, Any]) -> str:
    lines: List[str] = []
    if command == "build":
        config = result["config"]
        lines.append(f"Built {config['component']} -> {result['output_dir']}")
        lines.append(f"  Flag:      {config['flag']}")
        lines.append(f"  Selected:  {config['selected_variant']}")
        lines.append(f"  Compiled:  {', '.join(config['compiled_variants'])}")
        lines.append(f"  Strategy:  {config['strategy']} ({config['target']})")
        lines.append(f"  Elided:    {', '.join(result['elided_paths']) or 'none'}")
    elif command == "flag":
        lines.append(f"Flag: {result['flag']} (effective: {result['effective']})")
        lines.append(f"  ${result['env']} = {result['env_value']!r}")
        lines.append(f"  {result['property']} = {result['property_value']!r}")
        if result["override"] is not None:
            lines.append(f"  override = {result['override']!r}")
    elif command == "probe":
        state = "detected" if result["detected"] else "not detected"
        lines.append(f"Marker {result['marker']}: {state}")
    elif command == "inspect":
        binding = result["binding"]
        lines.append(f"Component: {result['component']}")
        for variant in result["variants"]:
            marker = f", marker {variant['marker']}" if variant["marker"] else ""
            lines.append(f"  [{variant['id']}] when {'/'.join(variant['build_condition'])}"
                         f" -> {variant['module']}{marker}")
        lines.append(f"Compiled:  {', '.join(binding['compiled_variants']) or 'none'}")
        lines.append(f"Runtime:   {binding['selected_variant']}"
                     f" (marker {'detected' if binding['detected'] else 'absent'})")
        status = "OK" if binding["consistent"] else "INCONSISTENT: rebuild with a matching flag"
        lines.append(f"Binding:   {status}")
    return "\n".join(lines)


# =============================================================================
# Entry Point
# =============================================================================

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="archswitch",
        description="Select and verify legacy/modern component variants",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Wheel-style artifact with only the selected variant
  archswitch build progress_view --out dist/

  # Force the modern variant regardless of env/properties
  archswitch build progress_view --out dist/ --flag 1

  # Ship every root and let the runtime pick
  archswitch build progress_view --out dist/ --target sdist

  # Would this process bind consistently?
  archswitch inspect dist/progress_view --json
        """
    )
    parser.add_argument("--json", action="store_true", help="Output as JSON instead of text")
    parser.add_argument("--output", "-o", dest="report", help="Write the report to a file")
    parser.add_argument("--verbose", "-v", action="store_true", help="Log build and binding steps")

    sub = parser.add_subparsers(dest="command", required=True)

    build = sub.add_parser("build", help="Stage an artifact for the resolved variant")
    build.add_argument("package_dir", help="Component package directory (holds variants.yaml)")
    build.add_argument("--out", "-d", required=True, help="Output directory")
    build.add_argument("--target", "-t", default="wheel", choices=sorted(TARGETS),
                       help="Artifact target (default: wheel)")
    build.add_argument("--flag", help="Architecture flag override (1/0, modern/legacy)")

    flag = sub.add_parser("flag", help="Show the resolved architecture flag")
    flag.add_argument("package_dir")
    flag.add_argument("--flag", help="Architecture flag override")

    probe = sub.add_parser("probe", help="Probe the runtime capability marker")
    probe.add_argument("--marker", default=MODERN_RUNTIME_MARKER, help="Marker name")

    inspect = sub.add_parser("inspect", help="Show how a component would bind")
    inspect.add_argument("package_dir")

    return parser


COMMANDS = {
    "build": cmd_build,
    "flag": cmd_flag,
    "probe": cmd_probe,
    "inspect": cmd_inspect,
}


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        result = COMMANDS[args.command](args)
    except VariantError as e:
        print(f"error: {e.detail}", file=sys.stderr)
        return 1

    output = json.dumps(result, indent=2, default=str) if args.json else format_text(args.command, result)

    if args.report:
        with open(args.report, "w") as f:
            f.write(output)
        print(f"Report saved to: {args.report}")
    else:
        print(output)
    return 0


if __name__ == "__main__":
    sys.exit(main())
