"""
Type definitions for Component configuration.

These dataclasses represent the Component custom resource
(appstudio.redhat.com/v1alpha1) that manifests are derived from.
"""

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Dict, List, Optional


COMPONENT_API_VERSION = "appstudio.redhat.com/v1alpha1"
COMPONENT_KIND = "Component"
COMPONENT_LIST_KIND = "ComponentList"


class SourceType(str, Enum):
    """Where a component is created from."""
    GIT = "Git"
    IMAGE = "Image"


class ProbeType(str, Enum):
    """Health check probe type."""
    HTTP = "http"
    TCP = "tcp"


@dataclass(frozen=True)
class GitSource:
    """Git repository a component is imported from."""
    url: str
    secret: str = ""  # Access token secret for private repositories
    devfile_url: str = ""

    @classmethod
    def from_dict(cls, data: Dict) -> "GitSource":
        if not data.get("url"):
            raise ValueError("Git source requires 'url'")
        return cls(
            url=data["url"],
            secret=data.get("secret", ""),
            devfile_url=data.get("devfileUrl", ""),
        )


@dataclass(frozen=True)
class ImageSource:
    """Prebuilt container image a component is imported from."""
    container_image: str

    @classmethod
    def from_dict(cls, data: Dict) -> "ImageSource":
        if not data.get("containerImage"):
            raise ValueError("Image source requires 'containerImage'")
        return cls(container_image=data["containerImage"])


@dataclass(frozen=True)
class ComponentSource:
    """Component source. Exactly one of git or image is set."""
    git: Optional[GitSource] = None
    image: Optional[ImageSource] = None

    def __post_init__(self):
        if (self.git is None) == (self.image is None):
            raise ValueError(
                "Component source must set exactly one of 'git' or 'image'"
            )

    @property
    def type(self) -> SourceType:
        return SourceType.GIT if self.git is not None else SourceType.IMAGE

    @classmethod
    def from_dict(cls, data: Optional[Dict]) -> Optional["ComponentSource"]:
        if not data:
            return None
        return cls(
            git=GitSource.from_dict(data["git"]) if data.get("git") else None,
            image=ImageSource.from_dict(data["image"]) if data.get("image") else None,
        )


@dataclass(frozen=True)
class EnvVar:
    """Environment variable passed to the component container.

    ``value_from`` holds a ``valueFrom`` source (secret, configmap or
    field reference) kept exactly as declared.
    """
    name: str
    value: str = ""
    value_from: Optional[Dict[str, Any]] = None

    @classmethod
    def from_dict(cls, data: Dict) -> "EnvVar":
        if not data.get("name"):
            raise ValueError(f"Invalid environment variable: {data}")
        value = data.get("value", "")
        return cls(
            name=data["name"],
            value="" if value is None else str(value),
            value_from=data.get("valueFrom") or None,
        )


@dataclass(frozen=True)
class ResourceRequirements:
    """Compute resource requests and limits, kept exactly as declared."""
    limits: Dict[str, Any] = field(default_factory=dict)
    requests: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Optional[Dict]) -> "ResourceRequirements":
        if not data:
            return cls()
        return cls(
            limits=dict(data.get("limits") or {}),
            requests=dict(data.get("requests") or {}),
        )

    def is_empty(self) -> bool:
        return not self.limits and not self.requests


@dataclass(frozen=True)
class Build:
    """Artifacts produced by the component build."""
    container_image: str = ""

    @classmethod
    def from_dict(cls, data: Optional[Dict]) -> "Build":
        if not data:
            return cls()
        return cls(container_image=data.get("containerImage", "") or "")


@dataclass(frozen=True)
class ComponentSpec:
    """Everything the manifest generators read about a component.

    ``replicas`` of ``None`` or ``0`` both mean "unset" and produce a
    single replica; a component cannot currently ask for zero replicas.
    ``target_port`` of ``0`` means the component is not exposed.
    """
    name: str
    namespace: Optional[str] = None
    component_name: str = ""
    application: str = ""
    source: Optional[ComponentSource] = None
    context: str = ""  # Relative path inside the git repo
    resources: ResourceRequirements = field(default_factory=ResourceRequirements)
    replicas: Optional[int] = None
    target_port: int = 0
    route: str = ""  # Route hostname, empty lets the platform pick one
    env: List[EnvVar] = field(default_factory=list)
    build: Build = field(default_factory=Build)

    @property
    def container_image(self) -> str:
        return self.build.container_image

    @property
    def exposes_port(self) -> bool:
        return bool(self.target_port)


@dataclass(frozen=True)
class Component:
    """A Component custom resource."""
    spec: ComponentSpec
    api_version: str = COMPONENT_API_VERSION
    kind: str = COMPONENT_KIND

    @property
    def name(self) -> str:
        return self.spec.name

    @property
    def namespace(self) -> Optional[str]:
        return self.spec.namespace

    @classmethod
    def from_dict(cls, data: Dict) -> "Component":
        """Create Component from a parsed custom resource."""
        if not isinstance(data, dict):
            raise ValueError(f"Invalid component resource: {data!r}")

        kind = data.get("kind", COMPONENT_KIND)
        if kind != COMPONENT_KIND:
            raise ValueError(f"Expected kind {COMPONENT_KIND}, got {kind}")

        metadata = data.get("metadata") or {}
        if not metadata.get("name"):
            raise ValueError("Component resource requires 'metadata.name'")

        spec = data.get("spec") or {}
        return cls(
            spec=ComponentSpec(
                name=metadata["name"],
                namespace=metadata.get("namespace"),
                component_name=spec.get("componentName", ""),
                application=spec.get("application", ""),
                source=ComponentSource.from_dict(spec.get("source")),
                context=spec.get("context", ""),
                resources=ResourceRequirements.from_dict(spec.get("resources")),
                replicas=spec.get("replicas"),
                target_port=spec.get("targetPort") or 0,
                route=spec.get("route") or "",
                env=[EnvVar.from_dict(e) for e in spec.get("env") or []],
                build=Build.from_dict(spec.get("build")),
            ),
            api_version=data.get("apiVersion", COMPONENT_API_VERSION),
            kind=kind,
        )

    def to_spec(self, namespace: Optional[str] = None) -> ComponentSpec:
        """Get the generator input, optionally overriding the namespace."""
        if namespace:
            return replace(self.spec, namespace=namespace)
        return self.spec
