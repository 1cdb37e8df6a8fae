"""
Tests for repostage.integrations.build_graph
==============================================

What's Being Tested:
    - Manifest entries become linked Project models
    - Parents inside the manifest are shared objects; others are
      descriptor-less boundary ancestors
    - Relative paths resolve against the manifest directory
    - Invalid manifests (bad parents, cycles, duplicates, bad YAML)
"""

from pathlib import Path

import pytest
import yaml

from repostage.core.exceptions import ConfigurationError
from repostage.integrations.build_graph import build_graph, load_build_manifest


def _manifest() -> dict:
    return {
        "projects": [
            {
                "group_id": "com.acme",
                "artifact_id": "parent",
                "version": "1.0",
                "packaging": "pom",
                "file": "pom.xml",
                "parent": "com.acme:super:3",
            },
            {
                "group_id": "com.acme",
                "artifact_id": "app",
                "version": "1.0",
                "file": "app/pom.xml",
                "artifact_file": "app/target/app-1.0.jar",
                "parent": "com.acme:parent:1.0",
                "attached": [
                    {"type": "java-source", "classifier": "sources", "file": "app/target/app-1.0-sources.jar"}
                ],
                "dependencies": [
                    {
                        "group_id": "junit",
                        "artifact_id": "junit",
                        "version": "4.13",
                        "scope": "test",
                        "file": "/repo/junit/junit/4.13/junit-4.13.jar",
                    }
                ],
            },
        ]
    }


class TestBuildGraph:

    def test_projects_in_manifest_order(self, tmp_path: Path) -> None:
        graph = build_graph(_manifest(), tmp_path)
        assert [project.id for project in graph.projects] == ["com.acme:parent:1.0", "com.acme:app:1.0"]
        assert len(graph) == 2

    def test_parent_in_manifest_is_shared(self, tmp_path: Path) -> None:
        graph = build_graph(_manifest(), tmp_path)
        app = graph.find("com.acme:app")
        assert app.parent is graph.find("com.acme:parent")

    def test_parent_outside_manifest_has_no_descriptor(self, tmp_path: Path) -> None:
        graph = build_graph(_manifest(), tmp_path)
        boundary = graph.find("com.acme:parent").parent
        assert boundary.id == "com.acme:super:3"
        assert boundary.packaging == "pom"
        assert boundary.file is None

    def test_relative_and_absolute_paths(self, tmp_path: Path) -> None:
        app = build_graph(_manifest(), tmp_path).find("com.acme:app")
        assert app.file == tmp_path / "app" / "pom.xml"
        assert app.artifact.file == tmp_path / "app/target/app-1.0.jar"
        assert app.artifacts[0].file == Path("/repo/junit/junit/4.13/junit-4.13.jar")
        assert app.artifacts[0].scope == "test"

    def test_home_relative_paths(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("HOME", str(tmp_path / "home"))
        data = {"projects": [{"group_id": "g", "artifact_id": "a", "version": "1", "file": "~/a/pom.xml"}]}
        assert build_graph(data, tmp_path).find("g:a").file == tmp_path / "home" / "a" / "pom.xml"

    def test_attached_inherit_coordinates(self, tmp_path: Path) -> None:
        sources = build_graph(_manifest(), tmp_path).find("com.acme:app").attached_artifacts[0]
        assert sources.id == "com.acme:app:java-source:sources:1.0"
        assert sources.file_extension == "jar"

    def test_handler_implies_classifier_and_extension(self, tmp_path: Path) -> None:
        data = {
            "projects": [
                {
                    "group_id": "g",
                    "artifact_id": "plugin",
                    "version": "1",
                    "packaging": "maven-plugin",
                    "attached": [{"type": "javadoc"}],
                }
            ]
        }
        plugin = build_graph(data, tmp_path).find("g:plugin")
        assert plugin.artifact.file_extension == "jar"
        assert plugin.attached_artifacts[0].classifier == "javadoc"

    def test_unknown_project(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigurationError) as exc_info:
            build_graph(_manifest(), tmp_path).find("com.acme:ghost")
        assert exc_info.value.error_code == "MANIFEST_UNKNOWN_PROJECT"


class TestInvalidManifests:

    def test_missing_required_field(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigurationError) as exc_info:
            build_graph({"projects": [{"group_id": "g", "artifact_id": "a"}]}, tmp_path)
        assert exc_info.value.error_code == "MANIFEST_INVALID"

    def test_bad_parent_reference(self, tmp_path: Path) -> None:
        data = {"projects": [{"group_id": "g", "artifact_id": "a", "version": "1", "parent": "g:p"}]}
        with pytest.raises(ConfigurationError) as exc_info:
            build_graph(data, tmp_path)
        assert exc_info.value.error_code == "MANIFEST_INVALID_PARENT"

    def test_parent_cycle(self, tmp_path: Path) -> None:
        data = {
            "projects": [
                {"group_id": "g", "artifact_id": "a", "version": "1", "parent": "g:b:1"},
                {"group_id": "g", "artifact_id": "b", "version": "1", "parent": "g:a:1"},
            ]
        }
        with pytest.raises(ConfigurationError) as exc_info:
            build_graph(data, tmp_path)
        assert exc_info.value.error_code == "MANIFEST_PARENT_CYCLE"

    def test_duplicate_projects(self, tmp_path: Path) -> None:
        data = {
            "projects": [
                {"group_id": "g", "artifact_id": "a", "version": "1"},
                {"group_id": "g", "artifact_id": "a", "version": "2"},
            ]
        }
        with pytest.raises(ConfigurationError) as exc_info:
            build_graph(data, tmp_path)
        assert exc_info.value.details["duplicates"] == ["g:a"]

    def test_dependency_without_coordinates(self, tmp_path: Path) -> None:
        data = {
            "projects": [
                {"group_id": "g", "artifact_id": "a", "version": "1", "dependencies": [{"artifact_id": "x"}]}
            ]
        }
        with pytest.raises(ConfigurationError) as exc_info:
            build_graph(data, tmp_path)
        assert exc_info.value.error_code == "MANIFEST_INVALID"


class TestLoadBuildManifest:

    def test_relative_to_manifest_directory(self, tmp_path: Path) -> None:
        manifest = tmp_path / "ci" / "build.yaml"
        manifest.parent.mkdir()
        manifest.write_text(yaml.dump(_manifest()))

        app = load_build_manifest(manifest).find("com.acme:app")

        assert app.file == tmp_path / "ci" / "app" / "pom.xml"

    def test_missing_manifest(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError):
            load_build_manifest(tmp_path / "absent.yaml")

    def test_invalid_yaml(self, tmp_path: Path) -> None:
        manifest = tmp_path / "build.yaml"
        manifest.write_text("projects: [unclosed\n")
        with pytest.raises(ConfigurationError) as exc_info:
            load_build_manifest(manifest)
        assert exc_info.value.error_code == "MANIFEST_INVALID"

    def test_not_a_mapping(self, tmp_path: Path) -> None:
        manifest = tmp_path / "build.yaml"
        manifest.write_text("- just\n- a list\n")
        with pytest.raises(ConfigurationError):
            load_build_manifest(manifest)
