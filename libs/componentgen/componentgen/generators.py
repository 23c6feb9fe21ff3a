"""
Kubernetes manifest generators for components.

Generates Deployment, Service, and Route from a ComponentSpec, plus the
Kustomization that ties them together in a GitOps base directory.
"""

import copy
import logging
from typing import Any, Dict, List, Optional

from .types import ComponentSpec, ProbeType

logger = logging.getLogger(__name__)

CONTAINER_NAME = "container-image"
IMAGE_PULL_POLICY = "Always"
PROBE_INITIAL_DELAY = 10
PROBE_PERIOD = 10
ROUTE_API_VERSION = "v1"
ROUTE_WEIGHT = 100

# File name each manifest kind is written to inside a GitOps base directory
MANIFEST_FILENAMES = {
    "Deployment": "deployment.yaml",
    "Service": "service.yaml",
    "Route": "route.yaml",
}


def component_labels(name: str) -> Dict[str, str]:
    """Labels linking a component's Deployment pods, Service and Route."""
    return {"component": name}


def _build_metadata(
    spec: ComponentSpec,
    labels: Optional[Dict[str, str]] = None,
) -> Dict[str, Any]:
    """Build object metadata shared by all component manifests."""
    metadata: Dict[str, Any] = {"name": spec.name}
    if spec.namespace:
        metadata["namespace"] = spec.namespace
    if labels:
        metadata["labels"] = labels
    return metadata


def _build_probe(probe_type: ProbeType, port: int) -> Dict[str, Any]:
    """Build Kubernetes probe spec."""
    result: Dict[str, Any] = {
        "initialDelaySeconds": PROBE_INITIAL_DELAY,
        "periodSeconds": PROBE_PERIOD,
    }

    if probe_type == ProbeType.HTTP:
        result["httpGet"] = {
            "path": "/",
            "port": port,
        }
    elif probe_type == ProbeType.TCP:
        result["tcpSocket"] = {
            "port": port,
        }

    return result


def _build_env_vars(spec: ComponentSpec) -> List[Dict[str, Any]]:
    """Build environment variables list, keeping declaration order."""
    env_vars = []
    for e in spec.env:
        if e.value_from:
            env_vars.append({"name": e.name, "valueFrom": copy.deepcopy(e.value_from)})
        else:
            env_vars.append({"name": e.name, "value": e.value})
    return env_vars


def _build_resources(spec: ComponentSpec) -> Dict[str, Any]:
    """Copy resource requests and limits into a container resources block."""
    resources: Dict[str, Any] = {}
    if spec.resources.limits:
        resources["limits"] = dict(spec.resources.limits)
    if spec.resources.requests:
        resources["requests"] = dict(spec.resources.requests)
    return resources


def generate_deployment(spec: ComponentSpec) -> Dict[str, Any]:
    """
    Generate Kubernetes Deployment manifest.

    Args:
        spec: Component spec

    Returns:
        Deployment manifest dict
    """
    # An unset replica count (None or 0) runs a single replica
    replicas = spec.replicas if spec.replicas and spec.replicas > 0 else 1

    container: Dict[str, Any] = {
        "name": CONTAINER_NAME,
        "imagePullPolicy": IMAGE_PULL_POLICY,
    }

    # Left out until the build has produced an image
    if spec.container_image:
        container["image"] = spec.container_image

    if spec.exposes_port:
        container["ports"] = [{"containerPort": spec.target_port}]
        container["readinessProbe"] = _build_probe(ProbeType.TCP, spec.target_port)
        container["livenessProbe"] = _build_probe(ProbeType.HTTP, spec.target_port)

    env_vars = _build_env_vars(spec)
    if env_vars:
        container["env"] = env_vars

    resources = _build_resources(spec)
    if resources:
        container["resources"] = resources

    deployment = {
        "apiVersion": "apps/v1",
        "kind": "Deployment",
        "metadata": _build_metadata(spec),
        "spec": {
            "replicas": replicas,
            "selector": {
                "matchLabels": component_labels(spec.name),
            },
            "template": {
                "metadata": {
                    "labels": component_labels(spec.name),
                },
                "spec": {
                    "containers": [container],
                },
            },
        },
    }

    logger.debug(f"Generated Deployment {spec.name} with {replicas} replica(s)")
    return deployment


def generate_service(spec: ComponentSpec) -> Optional[Dict[str, Any]]:
    """
    Generate Kubernetes Service manifest.

    Args:
        spec: Component spec

    Returns:
        Service manifest dict or None if the component exposes no port
    """
    if not spec.exposes_port:
        return None

    return {
        "apiVersion": "v1",
        "kind": "Service",
        "metadata": _build_metadata(spec),
        "spec": {
            "selector": component_labels(spec.name),
            "ports": [
                {
                    "port": spec.target_port,
                    "targetPort": spec.target_port,
                }
            ],
        },
    }


def generate_route(spec: ComponentSpec) -> Optional[Dict[str, Any]]:
    """
    Generate OpenShift Route manifest.

    The host is only set when the component asks for one; otherwise the
    router assigns its default hostname.

    Args:
        spec: Component spec

    Returns:
        Route manifest dict or None if the component exposes no port
    """
    if not spec.exposes_port:
        return None

    route_spec: Dict[str, Any] = {}
    if spec.route:
        route_spec["host"] = spec.route

    route_spec["port"] = {
        "targetPort": spec.target_port,
    }
    route_spec["tls"] = {
        "insecureEdgeTerminationPolicy": "Redirect",
        "termination": "edge",
    }
    route_spec["to"] = {
        "kind": "Service",
        "name": spec.name,
        "weight": ROUTE_WEIGHT,
    }

    return {
        "apiVersion": ROUTE_API_VERSION,
        "kind": "Route",
        "metadata": _build_metadata(spec, labels=component_labels(spec.name)),
        "spec": route_spec,
    }


def generate_kustomization(manifests: List[Dict[str, Any]]) -> Dict[str, Any]:
    """
    Generate Kustomization listing the given manifests as resources.

    Args:
        manifests: Manifests written alongside the kustomization

    Returns:
        Kustomization manifest dict
    """
    return {
        "apiVersion": "kustomize.config.k8s.io/v1beta1",
        "kind": "Kustomization",
        "resources": [manifest_filename(m) for m in manifests],
    }


def manifest_filename(manifest: Dict[str, Any]) -> str:
    """Get the file name a manifest is written to in a GitOps base."""
    kind = manifest["kind"]
    return MANIFEST_FILENAMES.get(kind, f"{kind.lower()}.yaml")


def generate_all_manifests(spec: ComponentSpec) -> List[Dict[str, Any]]:
    """
    Generate all Kubernetes manifests for a component.

    Args:
        spec: Component spec

    Returns:
        List of all manifest dicts
    """
    manifests = [generate_deployment(spec)]

    # Service and Route are produced together or not at all
    service = generate_service(spec)
    route = generate_route(spec)
    if service and route:
        manifests.append(service)
        manifests.append(route)

    logger.debug(f"Generated {len(manifests)} manifests for component {spec.name}")
    return manifests
