"""
Reactor Example: Stage a Module of a Multi-Module Build
=========================================================

This example builds a throwaway two-module build and a source repository
in a temporary directory, then stages the ``app`` module into an isolated
test repository:

    - app's POM and jar are installed
    - the sibling ``lib`` it depends on is installed with its parent POM
    - ``commons-io`` is copied from the source repository with its POM

Usage:
    python examples/stage_reactor.py
"""

from __future__ import annotations

import tempfile
from pathlib import Path

from repostage.core.config import StagingConfig
from repostage.core.enums import WriteMode
from repostage.core.log import configure_logging
from repostage.core.models import Artifact, Project
from repostage.facade import RepoStage


POM = """<project xmlns="http://maven.apache.org/POM/4.0.0">
  <modelVersion>4.0.0</modelVersion>
  <groupId>{group}</groupId>
  <artifactId>{artifact}</artifactId>
  <version>{version}</version>
  <packaging>{packaging}</packaging>
</project>
"""


def _write(path: Path, content: str) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content)
    return path


def _module(build: Path, artifact_id: str, packaging: str = "jar", **kwargs) -> Project:
    pom = _write(
        build / artifact_id / "pom.xml",
        POM.format(group="com.acme", artifact=artifact_id, version="1.0", packaging=packaging),
    )
    jar = None
    if packaging != "pom":
        jar = _write(build / artifact_id / "target" / f"{artifact_id}-1.0.jar", artifact_id)
    return Project.of("com.acme", artifact_id, "1.0", packaging=packaging, artifact_file=jar, file=pom, **kwargs)


def main() -> None:
    configure_logging("INFO")
    root = Path(tempfile.mkdtemp(prefix="repostage-"))
    local_repository = root / "m2"

    # A dependency previously resolved into the local repository
    commons_dir = local_repository / "commons-io" / "commons-io" / "2.15.1"
    commons_jar = _write(commons_dir / "commons-io-2.15.1.jar", "commons-io")
    _write(
        commons_dir / "commons-io-2.15.1.pom",
        POM.format(group="commons-io", artifact="commons-io", version="2.15.1", packaging="jar"),
    )
    commons = Artifact(group_id="commons-io", artifact_id="commons-io", version="2.15.1", file=commons_jar)

    build = root / "build"
    parent = _module(build, "parent", packaging="pom")
    lib = _module(build, "lib", parent=parent)
    app = _module(build, "app", parent=parent, artifacts=[lib.artifact, commons])

    config = StagingConfig(
        local_repository=local_repository,
        staging_repository_path=root / "it-repo",
    )
    report = RepoStage(config).run(app, [parent, lib, app])

    print(f"\nStaging repository: {report.repository}")
    for record in report.records:
        marker = "install" if record.mode == WriteMode.INSTALLED else "copy   "
        print(f"  {marker} {record.artifact_id}")
    print(f"Duplicates skipped: {', '.join(report.duplicates) or 'none'}")


if __name__ == "__main__":
    main()
