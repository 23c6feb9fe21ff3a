"""
CLI for componentgen - Kubernetes manifest generator for components.

Commands:
    generate    Generate K8s manifests for components
    gitops      Write a GitOps base directory per component
    list        List components from the component file
    validate    Validate the component file schema
"""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional

import yaml

from .generators import (
    MANIFEST_FILENAMES,
    generate_all_manifests,
    generate_kustomization,
    manifest_filename,
)
from .schema import (
    VALIDATION_FAILED,
    find_component_yaml,
    load_components,
)
from .types import Component

DEFAULT_FILE = "component.yaml"

logger = logging.getLogger(__name__)


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog="componentgen",
        description="Generate Kubernetes manifests for components",
    )
    parser.add_argument(
        "-f", "--file",
        default=DEFAULT_FILE,
        help=f"Path to component file (default: {DEFAULT_FILE})",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable verbose output",
    )

    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # generate command
    gen_parser = subparsers.add_parser(
        "generate",
        help="Generate K8s manifests for components",
    )
    gen_parser.add_argument(
        "component",
        nargs="?",
        help="Component name (default: all components in the file)",
    )
    gen_parser.add_argument(
        "-n", "--namespace",
        help="Namespace to generate manifests into",
    )
    gen_parser.add_argument(
        "-o", "--output",
        help="Output directory (default: stdout)",
    )
    gen_parser.add_argument(
        "--format",
        choices=["yaml", "json"],
        default="yaml",
        help="Output format (default: yaml)",
    )

    # gitops command
    gitops_parser = subparsers.add_parser(
        "gitops",
        help="Write components/<name>/base directories",
    )
    gitops_parser.add_argument(
        "component",
        nargs="?",
        help="Component name (default: all components in the file)",
    )
    gitops_parser.add_argument(
        "-n", "--namespace",
        help="Namespace to generate manifests into",
    )
    gitops_parser.add_argument(
        "-o", "--output",
        help="GitOps repository directory (required)",
        required=True,
    )

    # list command
    list_parser = subparsers.add_parser(
        "list",
        help="List components from the component file",
    )
    list_parser.add_argument(
        "--json",
        action="store_true",
        help="Output as JSON",
    )

    # validate command
    subparsers.add_parser(
        "validate",
        help="Validate the component file schema",
    )

    return parser


def resolve_file(path: str) -> str:
    """Fall back to searching parent directories for the default file."""
    if path == DEFAULT_FILE and not Path(path).exists():
        found = find_component_yaml(DEFAULT_FILE)
        if found:
            logger.debug(f"Using component file {found}")
            return str(found)
    return path


def render_manifests(manifests: list, output_format: str) -> str:
    """Render manifests as JSON or multi-document YAML."""
    if output_format == "json":
        return json.dumps(manifests, indent=2)

    docs = []
    for m in manifests:
        docs.append(yaml.dump(m, default_flow_style=False, sort_keys=False))
    return "---\n" + "---\n".join(docs)


def output_manifests(
    manifests: list,
    output_format: str,
    output_path: Optional[str] = None,
    component_name: Optional[str] = None,
) -> None:
    """Output manifests to file or stdout."""
    content = render_manifests(manifests, output_format)

    if output_path:
        out_dir = Path(output_path)
        out_dir.mkdir(parents=True, exist_ok=True)

        if component_name:
            filename = f"{component_name}.{output_format}"
        else:
            filename = f"manifests.{output_format}"

        out_file = out_dir / filename
        out_file.write_text(content)
        print(f"Written: {out_file}", file=sys.stderr)
    else:
        print(content)


def write_gitops_base(
    manifests: list,
    repo_path: str,
    component_name: str,
) -> Path:
    """Write one file per manifest plus a kustomization.yaml.

    Manifest files left over from an earlier run that are no longer
    generated are removed.
    """
    base_dir = Path(repo_path) / "components" / component_name / "base"
    base_dir.mkdir(parents=True, exist_ok=True)

    filenames = {manifest_filename(m) for m in manifests}
    for stale in set(MANIFEST_FILENAMES.values()) - filenames:
        stale_file = base_dir / stale
        if stale_file.exists():
            stale_file.unlink()
            logger.debug(f"Removed stale manifest {stale_file}")

    for m in manifests:
        out_file = base_dir / manifest_filename(m)
        out_file.write_text(yaml.dump(m, default_flow_style=False, sort_keys=False))

    kustomization = generate_kustomization(manifests)
    (base_dir / "kustomization.yaml").write_text(
        yaml.dump(kustomization, default_flow_style=False, sort_keys=False)
    )
    return base_dir


def _load(args: argparse.Namespace) -> Optional[List[Component]]:
    """Load components, reporting failures on stderr."""
    path = resolve_file(args.file)
    try:
        return load_components(path)
    except FileNotFoundError:
        print(f"Error: component file not found at {path}", file=sys.stderr)
        return None
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return None


def _select(
    components: List[Component],
    name: Optional[str],
) -> Optional[List[Component]]:
    """Narrow components down to the requested one, if any."""
    if not name:
        return components

    selected = [c for c in components if c.name == name]
    if not selected:
        print(f"Error: Component '{name}' not found", file=sys.stderr)
        print(
            f"Available components: {', '.join(c.name for c in components)}",
            file=sys.stderr,
        )
        return None
    return selected


def _check_unique(components: List[Component]) -> bool:
    """Report components sharing a name, whose output would collide."""
    seen = set()
    duplicates = []
    for component in components:
        if component.name in seen and component.name not in duplicates:
            duplicates.append(component.name)
        seen.add(component.name)

    if duplicates:
        print(
            f"Error: Duplicate component names: {', '.join(duplicates)}",
            file=sys.stderr,
        )
        return False
    return True


def cmd_generate(args: argparse.Namespace) -> int:
    """Handle generate command."""
    components = _load(args)
    if components is None:
        return 1

    selected = _select(components, args.component)
    if selected is None:
        return 1

    if not selected:
        print("No components found", file=sys.stderr)
        return 0

    if args.output:
        if not _check_unique(selected):
            return 1
        for component in selected:
            manifests = generate_all_manifests(component.to_spec(args.namespace))
            output_manifests(
                manifests,
                args.format,
                args.output,
                component_name=component.name,
            )
    else:
        manifests = []
        for component in selected:
            manifests.extend(generate_all_manifests(component.to_spec(args.namespace)))
        output_manifests(manifests, args.format)

    logger.info(f"Generated manifests for {len(selected)} component(s)")
    return 0


def cmd_gitops(args: argparse.Namespace) -> int:
    """Handle gitops command."""
    components = _load(args)
    if components is None:
        return 1

    selected = _select(components, args.component)
    if selected is None or not _check_unique(selected):
        return 1

    total_manifests = 0
    for component in selected:
        manifests = generate_all_manifests(component.to_spec(args.namespace))
        base_dir = write_gitops_base(manifests, args.output, component.name)
        print(f"Written: {base_dir}", file=sys.stderr)
        total_manifests += len(manifests)

    print(
        f"Generated {total_manifests} manifests for {len(selected)} components",
        file=sys.stderr,
    )
    return 0


def cmd_list(args: argparse.Namespace) -> int:
    """Handle list command."""
    components = _load(args)
    if components is None:
        return 1

    if args.json:
        component_data = []
        for component in components:
            spec = component.spec
            component_data.append({
                "name": spec.name,
                "namespace": spec.namespace,
                "application": spec.application,
                "source": spec.source.type.value if spec.source else None,
                "target_port": spec.target_port or None,
                "replicas": spec.replicas,
            })
        print(json.dumps(component_data, indent=2))
        return 0

    if not components:
        print("No components found")
        return 0

    # Table header
    print(f"{'NAME':<25} {'NAMESPACE':<20} {'APPLICATION':<20} {'SOURCE':<8} {'PORT':<6}")
    print("-" * 83)

    for component in components:
        spec = component.spec
        print(
            f"{spec.name:<25} "
            f"{spec.namespace or '-':<20} "
            f"{spec.application or '-':<20} "
            f"{spec.source.type.value if spec.source else '-':<8} "
            f"{spec.target_port or '-':<6}"
        )

    return 0


def cmd_validate(args: argparse.Namespace) -> int:
    """Handle validate command."""
    path = resolve_file(args.file)
    if not Path(path).exists():
        print(f"Error: component file not found at {path}", file=sys.stderr)
        return 1

    try:
        components = load_components(path)
    except ValueError as e:
        lines = str(e).splitlines()
        # Drop the "<path> validation failed:" header, keep any other message whole
        if len(lines) > 1 and lines[0].endswith(VALIDATION_FAILED):
            lines = lines[1:]
        print("Validation errors:", file=sys.stderr)
        for line in lines:
            print(f"  - {line}", file=sys.stderr)
        return 1

    print(f"✓ {path} is valid")
    print(f"  Found {len(components)} components")
    for component in components:
        print(f"    - {component.name}")

    return 0


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    parser = create_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    if not args.command:
        parser.print_help()
        return 0

    commands = {
        "generate": cmd_generate,
        "gitops": cmd_gitops,
        "list": cmd_list,
        "validate": cmd_validate,
    }

    handler = commands.get(args.command)
    if handler:
        return handler(args)

    parser.print_help()
    return 1


if __name__ == "__main__":
    sys.exit(main())
