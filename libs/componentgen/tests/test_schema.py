"""Tests for componentgen schema loading and validation."""

import os

import pytest
import yaml

from componentgen.schema import (
    find_component_yaml,
    get_component,
    load_components,
    validate_component,
)
from componentgen.generators import generate_deployment
from componentgen.types import Component, SourceType


@pytest.fixture
def sample_components():
    """Create sample Component resources."""
    return [
        {
            "apiVersion": "appstudio.redhat.com/v1alpha1",
            "kind": "Component",
            "metadata": {"name": "frontend", "namespace": "apps"},
            "spec": {
                "application": "shop",
                "source": {"git": {"url": "https://github.com/example/frontend"}},
                "targetPort": 8080,
                "route": "shop.example.com",
            },
        },
        {
            "apiVersion": "appstudio.redhat.com/v1alpha1",
            "kind": "Component",
            "metadata": {"name": "worker", "namespace": "apps"},
            "spec": {
                "application": "shop",
                "source": {"image": {"containerImage": "quay.io/example/worker:1.0"}},
                "replicas": 2,
            },
        },
    ]


@pytest.fixture
def component_file(sample_components, tmp_path):
    """Create temporary multi-document component file."""
    file_path = tmp_path / "component.yaml"
    with open(file_path, "w") as f:
        yaml.dump_all(sample_components, f)
    return str(file_path)


class TestValidateComponent:
    def test_validate_valid_component(self, sample_components):
        assert validate_component(sample_components[0]) == []

    def test_validate_missing_name(self):
        errors = validate_component({"kind": "Component", "metadata": {}})
        assert any("name" in e for e in errors)

    def test_validate_both_sources(self):
        errors = validate_component({
            "kind": "Component",
            "metadata": {"name": "c"},
            "spec": {
                "source": {
                    "git": {"url": "https://github.com/example/repo"},
                    "image": {"containerImage": "quay.io/a/b"},
                },
            },
        })
        assert errors
        assert any(e.startswith("spec.source") for e in errors)

    def test_validate_env_value_from(self):
        errors = validate_component({
            "metadata": {"name": "c"},
            "spec": {
                "env": [{"name": "TOKEN", "valueFrom": {"secretKeyRef": {"name": "s", "key": "k"}}}],
            },
        })
        assert errors == []

    def test_validate_env_unknown_key(self):
        errors = validate_component({
            "metadata": {"name": "c"},
            "spec": {"env": [{"name": "TOKEN", "valueFom": {}}]},
        })
        assert any(e.startswith("spec.env.0") for e in errors)

    def test_validate_wrong_port_type(self):
        errors = validate_component({
            "metadata": {"name": "c"},
            "spec": {"targetPort": "5000"},
        })
        assert any(e.startswith("spec.targetPort") for e in errors)


class TestLoadComponents:
    def test_load_multi_document(self, component_file):
        components = load_components(component_file)

        assert [c.name for c in components] == ["frontend", "worker"]
        assert all(isinstance(c, Component) for c in components)
        assert components[0].spec.source.type == SourceType.GIT
        assert components[1].spec.source.type == SourceType.IMAGE

    def test_load_component_list(self, sample_components, tmp_path):
        file_path = tmp_path / "list.yaml"
        with open(file_path, "w") as f:
            yaml.dump({"kind": "ComponentList", "items": sample_components}, f)

        components = load_components(str(file_path))
        assert [c.name for c in components] == ["frontend", "worker"]

    def test_empty_documents_skipped(self, sample_components, tmp_path):
        file_path = tmp_path / "component.yaml"
        file_path.write_text("---\n" + yaml.dump(sample_components[1]) + "---\n")

        components = load_components(str(file_path))
        assert [c.name for c in components] == ["worker"]

    def test_load_env_value_from(self, tmp_path):
        file_path = tmp_path / "component.yaml"
        file_path.write_text(yaml.dump({
            "kind": "Component",
            "metadata": {"name": "api"},
            "spec": {
                "env": [{
                    "name": "TOKEN",
                    "valueFrom": {"secretKeyRef": {"name": "api-secrets", "key": "token"}},
                }],
            },
        }))

        component = load_components(str(file_path))[0]
        container = generate_deployment(component.to_spec())["spec"]["template"]["spec"]["containers"][0]
        assert container["env"] == [{
            "name": "TOKEN",
            "valueFrom": {"secretKeyRef": {"name": "api-secrets", "key": "token"}},
        }]

    def test_load_nonexistent_file(self):
        with pytest.raises(FileNotFoundError):
            load_components("/nonexistent/component.yaml")

    def test_load_invalid_component(self, tmp_path):
        file_path = tmp_path / "component.yaml"
        file_path.write_text(yaml.dump({"kind": "Component", "spec": {}}))

        with pytest.raises(ValueError, match="validation failed"):
            load_components(str(file_path))

    def test_load_invalid_yaml(self, tmp_path):
        file_path = tmp_path / "component.yaml"
        file_path.write_text("metadata: [unclosed\n")

        with pytest.raises(ValueError):
            load_components(str(file_path))


class TestGetComponent:
    def test_get_existing_component(self, component_file):
        component = get_component("worker", component_file)

        assert component is not None
        assert component.spec.replicas == 2

    def test_get_nonexistent_component(self, component_file):
        assert get_component("missing", component_file) is None


class TestFindComponentYaml:
    def test_find_in_parent(self, component_file, tmp_path, monkeypatch):
        nested = tmp_path / "a" / "b"
        nested.mkdir(parents=True)
        monkeypatch.chdir(nested)

        found = find_component_yaml()
        assert found is not None
        assert os.path.samefile(found, component_file)
