"""
Component manifest generator

Derives Deployment, Service, and Route manifests from Component resources.
"""

__version__ = "0.1.0"

from .types import (
    SourceType,
    GitSource,
    ImageSource,
    ComponentSource,
    EnvVar,
    ResourceRequirements,
    Build,
    ComponentSpec,
    Component,
)

from .schema import (
    load_components,
    validate_component,
    get_component,
)

from .generators import (
    component_labels,
    generate_deployment,
    generate_service,
    generate_route,
    generate_kustomization,
    generate_all_manifests,
)

__all__ = [
    # Types
    "SourceType",
    "GitSource",
    "ImageSource",
    "ComponentSource",
    "EnvVar",
    "ResourceRequirements",
    "Build",
    "ComponentSpec",
    "Component",
    # Schema
    "load_components",
    "validate_component",
    "get_component",
    # Generators
    "component_labels",
    "generate_deployment",
    "generate_service",
    "generate_route",
    "generate_kustomization",
    "generate_all_manifests",
]
