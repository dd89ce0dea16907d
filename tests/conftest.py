# Copyright 2025 Ralph Lemke
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""Shared fixtures for jettyrun tests."""

import pytest

from jettyrun.artifact import Coordinate
from jettyrun.resolver import ArtifactResolver
from tests.artifact_helpers import JETTY_VERSION, install_artifact, make_jetty_home_zip


@pytest.fixture
def local_repo(tmp_path):
    """Empty local Maven repository."""
    repo = tmp_path / "m2" / "repository"
    repo.mkdir(parents=True)
    return repo


@pytest.fixture
def resolver(local_repo):
    """Resolver limited to the local repository (no remote access)."""
    return ArtifactResolver(local_repository=local_repo, remote_repositories=[])


@pytest.fixture
def jetty_home_artifact(local_repo, tmp_path):
    """A jetty-home zip installed in the local repository."""
    zip_path = make_jetty_home_zip(tmp_path / "jetty-home.zip")
    coordinate = Coordinate("org.eclipse.jetty", "jetty-home", JETTY_VERSION, "zip")
    return install_artifact(local_repo, coordinate, zip_path.read_bytes())


@pytest.fixture
def plugin_jar(tmp_path):
    """Stand-in for the plugin's own jar."""
    jar = tmp_path / "jetty-maven-plugin.jar"
    jar.write_bytes(b"PK\x03\x04plugin")
    return jar


@pytest.fixture
def template_base(tmp_path):
    """A jetty base with a deployer, a context xml and a custom library."""
    base = tmp_path / "my-base"
    (base / "start.d").mkdir(parents=True)
    (base / "start.d" / "deploy.ini").write_text("--module=deploy\n")
    (base / "start.d" / "http.ini").write_text("jetty.http.port=9090\n")
    (base / "webapps").mkdir()
    (base / "webapps" / "ROOT.xml").write_text("<Configure/>\n")
    (base / "lib").mkdir()
    (base / "lib" / "custom.jar").write_bytes(b"PK\x03\x04custom")
    return base
