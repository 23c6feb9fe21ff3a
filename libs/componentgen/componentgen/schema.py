"""
Schema loading and validation for Component resources.
"""

import json
from pathlib import Path
from typing import Any, Dict, List, Optional

import jsonschema
import yaml

from .types import COMPONENT_LIST_KIND, Component

VALIDATION_FAILED = "validation failed:"


def get_schema_path() -> Path:
    """Get path to the bundled JSON schema file."""
    return Path(__file__).parent / "schemas" / "component-schema.json"


def load_schema() -> Dict[str, Any]:
    """Load the JSON schema for Component resources."""
    with open(get_schema_path()) as f:
        return json.load(f)


def validate_component(data: Any) -> List[str]:
    """
    Validate a Component resource against the JSON schema.

    Returns list of validation errors (empty if valid).
    """
    validator = jsonschema.Draft7Validator(load_schema())
    errors = []
    for error in validator.iter_errors(data):
        path = ".".join(str(p) for p in error.absolute_path)
        errors.append(f"{path}: {error.message}" if path else error.message)
    return errors


def _iter_resources(documents: List[Any]) -> List[Dict[str, Any]]:
    """Flatten YAML documents into Component resources, expanding lists."""
    resources = []
    for doc in documents:
        if doc is None:
            continue
        if isinstance(doc, dict) and doc.get("kind") == COMPONENT_LIST_KIND:
            resources.extend(doc.get("items") or [])
        else:
            resources.append(doc)
    return resources


def load_components(
    path: str = "component.yaml",
    validate: bool = True,
) -> List[Component]:
    """
    Load and parse Component resources from a YAML file.

    The file may hold several documents, each either a Component or a
    ComponentList.

    Args:
        path: Path to the YAML file
        validate: Whether to validate against schema

    Returns:
        Parsed Component objects in file order

    Raises:
        FileNotFoundError: If the file is not found
        ValueError: If validation or parsing fails
    """
    component_path = Path(path)
    if not component_path.exists():
        raise FileNotFoundError(f"Component file not found at {path}")

    with open(component_path) as f:
        try:
            documents = list(yaml.safe_load_all(f))
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid YAML in {path}: {e}") from e

    resources = _iter_resources(documents)

    if validate:
        errors = []
        for index, resource in enumerate(resources):
            for error in validate_component(resource):
                errors.append(f"[{index}] {error}")
        if errors:
            raise ValueError(
                f"{path} {VALIDATION_FAILED}\n" + "\n".join(errors)
            )

    return [Component.from_dict(r) for r in resources]


def get_component(
    name: str,
    path: str = "component.yaml",
) -> Optional[Component]:
    """
    Get a component by its metadata name.

    Args:
        name: Name of the component
        path: Path to the YAML file

    Returns:
        Component or None if not found
    """
    for component in load_components(path):
        if component.name == name:
            return component
    return None


def find_component_yaml(filename: str = "component.yaml") -> Optional[Path]:
    """
    Find a component file by searching up from current directory.

    Returns:
        Path to the file or None if not found
    """
    current = Path.cwd()
    for parent in [current] + list(current.parents):
        candidate = parent / filename
        if candidate.exists():
            return candidate
    return None
