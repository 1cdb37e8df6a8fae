"""
Tests for repostage.infrastructure.pom
========================================

What's Being Tested:
    - Namespaced and bare POMs
    - groupId/version inheritance from <parent>
    - Only direct children are read
    - Malformed and incomplete descriptors
"""

import pytest

from repostage.core.exceptions import DescriptorError
from repostage.infrastructure.pom import load_pom, parse_pom


NAMESPACED = """<?xml version="1.0" encoding="UTF-8"?>
<project xmlns="http://maven.apache.org/POM/4.0.0">
  <modelVersion>4.0.0</modelVersion>
  <parent>
    <groupId>com.acme</groupId>
    <artifactId>parent</artifactId>
    <version>1.0</version>
    <relativePath>../parent/pom.xml</relativePath>
  </parent>
  <artifactId>app</artifactId>
  <packaging>war</packaging>
  <dependencies>
    <dependency>
      <groupId>junit</groupId>
      <artifactId>junit</artifactId>
      <version>4.13</version>
    </dependency>
  </dependencies>
</project>
"""


class TestParsePom:

    def test_inherits_group_and_version_from_parent(self) -> None:
        model = parse_pom(NAMESPACED)
        assert model.id == "com.acme:app:1.0"
        assert model.packaging == "war"

    def test_parent_reference(self) -> None:
        parent = parse_pom(NAMESPACED).parent
        assert parent is not None
        assert parent.id == "com.acme:parent:1.0"
        assert parent.relative_path == "../parent/pom.xml"

    def test_bare_pom_without_parent(self) -> None:
        model = parse_pom(
            "<project><groupId>org.other</groupId><artifactId>base</artifactId>"
            "<version>2.0</version></project>"
        )
        assert model.id == "org.other:base:2.0"
        assert model.packaging == "jar"
        assert model.parent is None

    def test_own_coordinates_override_parent(self) -> None:
        model = parse_pom(
            "<project><parent><groupId>a</groupId><artifactId>p</artifactId><version>1</version></parent>"
            "<groupId>b</groupId><artifactId>c</artifactId><version>2</version></project>"
        )
        assert model.id == "b:c:2"
        assert model.parent.relative_path == "../pom.xml"

    def test_malformed_xml(self) -> None:
        with pytest.raises(DescriptorError) as exc_info:
            parse_pom("<project><groupId>", source="broken.pom")
        assert exc_info.value.error_code == "MALFORMED_DESCRIPTOR"
        assert exc_info.value.path == "broken.pom"

    def test_wrong_root_element(self) -> None:
        with pytest.raises(DescriptorError):
            parse_pom("<metadata><groupId>a</groupId></metadata>")

    def test_missing_artifact_id(self) -> None:
        with pytest.raises(DescriptorError) as exc_info:
            parse_pom("<project><groupId>a</groupId><version>1</version></project>")
        assert exc_info.value.details["artifact_id"] == ""

    def test_incomplete_parent(self) -> None:
        with pytest.raises(DescriptorError) as exc_info:
            parse_pom(
                "<project><parent><groupId>a</groupId><artifactId>p</artifactId></parent>"
                "<artifactId>c</artifactId></project>"
            )
        assert exc_info.value.details["missing"] == ["version"]


class TestLoadPom:

    def test_reads_file(self, tmp_path) -> None:
        pom = tmp_path / "pom.xml"
        pom.write_text(NAMESPACED)
        assert load_pom(pom).artifact_id == "app"

    def test_declared_latin1_encoding(self, tmp_path) -> None:
        """Older POMs declare ISO-8859-1; the declaration decides the decoding."""
        pom = tmp_path / "base-2.0.pom"
        pom.write_bytes(
            '<?xml version="1.0" encoding="ISO-8859-1"?>\n'
            "<project><groupId>org.other</groupId><artifactId>base</artifactId>"
            "<version>2.0</version><name>Base für alle</name></project>\n".encode("iso-8859-1")
        )

        assert load_pom(pom).id == "org.other:base:2.0"

    def test_utf8_with_bom(self, tmp_path) -> None:
        pom = tmp_path / "pom.xml"
        pom.write_bytes(b"\xef\xbb\xbf" + NAMESPACED.encode("utf-8"))
        assert load_pom(pom).id == "com.acme:app:1.0"

    def test_bytes_not_matching_declared_encoding(self, tmp_path) -> None:
        pom = tmp_path / "broken.pom"
        pom.write_bytes(
            b'<?xml version="1.0" encoding="UTF-8"?>\n'
            b"<project><artifactId>a\xfc</artifactId></project>"
        )
        with pytest.raises(DescriptorError) as exc_info:
            load_pom(pom)
        assert exc_info.value.error_code == "MALFORMED_DESCRIPTOR"

    def test_missing_file(self, tmp_path) -> None:
        with pytest.raises(DescriptorError) as exc_info:
            load_pom(tmp_path / "absent.pom")
        assert exc_info.value.path == str(tmp_path / "absent.pom")
