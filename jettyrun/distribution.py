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

"""Jetty distribution installation.

Makes sure a jetty home exists on disk, either one supplied by the caller
or a ``jetty-home`` zip resolved from a repository and unpacked into the
build directory.
"""

from __future__ import annotations

import logging
import zipfile
from pathlib import Path

from .errors import ConfigurationError
from .resolver import ArtifactResolver

logger = logging.getLogger(__name__)

JETTY_HOME_GROUP_ID = "org.eclipse.jetty"
JETTY_HOME_ARTIFACT_ID = "jetty-home"


class DistributionInstaller:
    """Resolves and unpacks a Jetty distribution when none is configured."""

    def __init__(self, resolver: ArtifactResolver, build_dir: str | Path) -> None:
        self._resolver = resolver
        self._build_dir = Path(build_dir)

    def ensure(
        self,
        explicit_home: str | Path | None,
        group_id: str = JETTY_HOME_GROUP_ID,
        artifact_id: str = JETTY_HOME_ARTIFACT_ID,
        version: str = "",
    ) -> Path:
        """Return a usable jetty home, installing one if necessary.

        Args:
            explicit_home: A pre-installed distribution, or ``None``
            group_id: Group id of the distribution archive
            artifact_id: Artifact id of the distribution archive
            version: Distribution version, normally the plugin's own version

        Returns:
            The explicit home unchanged, or ``<build_dir>/<artifact_id>-<version>``.

        Raises:
            ConfigurationError: If *explicit_home* does not exist.
            ResolutionError: If the archive cannot be resolved.
        """
        if explicit_home is not None:
            home = Path(explicit_home)
            if not home.exists():
                raise ConfigurationError(f"{home.absolute()} does not exist")
            logger.info("jetty.home = %s", home.absolute())
            return home

        if not version:
            raise ConfigurationError("No jetty home configured and no version to download")

        archive = self._resolver.resolve(group_id, artifact_id, version, "zip")
        self._build_dir.mkdir(parents=True, exist_ok=True)
        extract_zip(archive, self._build_dir)

        # the archive unpacks to <artifactId>-<version>
        home = self._build_dir / f"{artifact_id}-{version}"
        if not home.is_dir():
            logger.warning(
                "Expected %s to unpack to %s, but that directory does not exist",
                archive.name,
                home,
            )
        logger.info("jetty.home = %s", home.absolute())
        return home


def extract_zip(archive: str | Path, target: str | Path) -> None:
    """Extract *archive* into *target*, keeping its directory structure.

    Unix permission bits stored in the archive are restored so that scripts
    shipped in the distribution stay executable.

    Raises:
        ConfigurationError: If an entry would be written outside *target*.
    """
    target_dir = Path(target).resolve()
    with zipfile.ZipFile(archive) as zf:
        for info in zf.infolist():
            destination = (target_dir / info.filename).resolve()
            if destination != target_dir and target_dir not in destination.parents:
                raise ConfigurationError(
                    f"Archive entry '{info.filename}' escapes {target_dir}"
                )
            zf.extract(info, target_dir)
            mode = (info.external_attr >> 16) & 0o777
            if mode and not info.is_dir():
                destination.chmod(mode)
