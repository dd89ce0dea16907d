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

"""Maven artifact resolution.

Resolves coordinates to local files, using a Maven-layout local repository
as a cache and downloading from the configured remote repositories on a
miss. Each call makes a single attempt per repository; there is no retry.

Example usage::

    from jettyrun.resolver import ArtifactResolver

    resolver = ArtifactResolver(
        local_repository="~/.m2/repository",
        remote_repositories=["https://repo1.maven.org/maven2"],
    )
    path = resolver.resolve("org.eclipse.jetty", "jetty-home", "9.4.8.v20171121", "zip")
"""

from __future__ import annotations

import logging
import os
import urllib.error
import urllib.request
from pathlib import Path

from .artifact import Coordinate
from .errors import ResolutionError

logger = logging.getLogger(__name__)

MAVEN_CENTRAL = "https://repo1.maven.org/maven2"


class ArtifactResolver:
    """Resolves artifacts against a local cache and remote repositories."""

    def __init__(
        self,
        local_repository: str | Path,
        remote_repositories: list[str] | None = None,
        timeout_s: float = 60.0,
    ) -> None:
        self._local_repository = Path(local_repository).expanduser()
        if remote_repositories is None:
            remote_repositories = [MAVEN_CENTRAL]
        self._remote_repositories = [url.rstrip("/") for url in remote_repositories]
        self._timeout_s = timeout_s

    @property
    def local_repository(self) -> Path:
        return self._local_repository

    @property
    def remote_repositories(self) -> list[str]:
        return list(self._remote_repositories)

    def resolve(
        self,
        group_id: str,
        artifact_id: str,
        version: str,
        extension: str,
        classifier: str = "",
    ) -> Path:
        """Resolve an artifact to a local file, downloading it if not cached.

        Args:
            group_id: Maven group ID (e.g. "org.eclipse.jetty")
            artifact_id: Maven artifact ID (e.g. "jetty-home")
            version: Maven version
            extension: Artifact type, e.g. "zip" or "jar"
            classifier: Optional classifier

        Returns:
            Path to the artifact in the local repository.

        Raises:
            ResolutionError: If no repository can supply the artifact.
        """
        return self.resolve_coordinate(
            Coordinate(group_id, artifact_id, version, extension, classifier)
        )

    def resolve_coordinate(self, coordinate: Coordinate) -> Path:
        local_path = self._local_repository / coordinate.repository_path()
        if local_path.is_file() and local_path.stat().st_size > 0:
            logger.debug("Resolved %s from local repository: %s", coordinate, local_path)
            return local_path

        reasons: list[str] = []
        for repository_url in self._remote_repositories:
            url = f"{repository_url}/{coordinate.repository_path()}"
            try:
                self._download(url, local_path)
            except urllib.error.HTTPError as e:
                reasons.append(f"{repository_url}: HTTP {e.code}")
                logger.debug("Artifact %s not found at %s (HTTP %d)", coordinate, url, e.code)
                continue
            except urllib.error.URLError as e:
                reasons.append(f"{repository_url}: {e.reason}")
                logger.debug("Could not reach %s: %s", repository_url, e.reason)
                continue
            except OSError as e:
                reasons.append(f"{repository_url}: {e}")
                logger.debug("Download of %s from %s failed: %s", coordinate, repository_url, e)
                continue
            logger.info(
                "Cached artifact %s (%d bytes) at %s",
                coordinate,
                local_path.stat().st_size,
                local_path,
            )
            return local_path

        if not self._remote_repositories:
            reasons.append("not in local repository and no remote repositories configured")
        raise ResolutionError(str(coordinate), reasons)

    def _download(self, url: str, local_path: Path) -> None:
        """Download *url* into *local_path* through a temporary sibling file."""
        logger.info("Downloading %s", url)
        with urllib.request.urlopen(url, timeout=self._timeout_s) as response:
            data = response.read()

        local_path.parent.mkdir(parents=True, exist_ok=True)
        partial = local_path.with_name(local_path.name + ".part")
        partial.write_bytes(data)
        os.replace(partial, local_path)
