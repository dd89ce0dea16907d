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

"""Jetty base synthesis.

Builds a fresh ``jetty-base`` directory for a single run: an optional
template base is mirrored in (without its deployer and without the
webapp's own context xml), then the maven module, its glue xml, the
plugin jar, any extra libraries and the webapp properties are added.

Layout produced::

    jetty-base/
      modules/maven.mod
      etc/maven.xml
      etc/maven.props
      lib/maven/plugin.jar
      lib/ext/<groupId>.<artifactId>-<version>.<type>   (extra libs only)
"""

from __future__ import annotations

import logging
import shutil
from dataclasses import dataclass
from pathlib import Path

from .artifact import Coordinate
from .errors import ConfigurationError
from .filetree import all_of, copy_tree, remove_tree, skip_named_in, skip_same_file
from .resolver import ArtifactResolver
from .webapp import WebAppConfig

logger = logging.getLogger(__name__)

BASE_DIR_NAME = "jetty-base"

DEPLOYER_INI = "deploy.ini"
START_D = "start.d"

PLUGIN_JAR_NAME = "plugin.jar"
MAVEN_XML = "maven.xml"
MAVEN_MOD = "maven.mod"
MAVEN_PROPS = "maven.props"

_RESOURCES_DIR = Path(__file__).resolve().parent / "resources"


@dataclass
class BaseLayout:
    """Paths of a synthesized jetty base."""

    root: Path
    modules: Path
    etc: Path
    lib: Path
    maven_lib: Path
    props_file: Path
    ext_lib: Path | None = None


class BaseSynthesizer:
    """Creates the jetty base a forked distribution runs against."""

    def __init__(self, resolver: ArtifactResolver, resources_dir: str | Path | None = None) -> None:
        self._resolver = resolver
        self._resources_dir = Path(resources_dir) if resources_dir else _RESOURCES_DIR

    def synthesize(
        self,
        template_base: str | Path | None,
        excluded_context_file: str | Path | None,
        target_base: str | Path,
        plugin_artifact: str | Path | None,
        extra_libs: list[Coordinate],
        webapp: WebAppConfig,
    ) -> BaseLayout:
        """Create *target_base* from scratch.

        Any existing directory at *target_base* is deleted first. Nothing is
        rolled back if a step fails.

        Args:
            template_base: Existing jetty base to mirror, or ``None``
            excluded_context_file: File in the template base not to copy
            target_base: Directory to create
            plugin_artifact: Location of the plugin jar to install
            extra_libs: Libraries to resolve into ``lib/ext``
            webapp: Webapp settings written to ``etc/maven.props``

        Raises:
            ConfigurationError: If the template base or plugin jar is missing.
            ResolutionError: If an extra library cannot be resolved.
            OSError: On any I/O failure.
        """
        template = Path(template_base) if template_base is not None else None
        if template is not None and not template.exists():
            raise ConfigurationError(f"{template.absolute()} does not exist")

        root = Path(target_base)
        if remove_tree(root):
            logger.debug("Removed previous jetty base %s", root)
        root.mkdir(parents=True)

        if template is not None:
            # skip the deployer and the context xml file if there is one
            keep = all_of(
                skip_same_file(excluded_context_file),
                skip_named_in(DEPLOYER_INI, START_D),
            )
            copied = copy_tree(template, root, keep)
            logger.info("Copied %d file(s) from jetty base %s", len(copied), template)

        modules = _ensure_dir(root / "modules")
        etc = _ensure_dir(root / "etc")
        lib = _ensure_dir(root / "lib")
        maven_lib = _ensure_dir(lib / "maven")

        if plugin_artifact is None or not Path(plugin_artifact).is_file():
            raise ConfigurationError("Can't find jar for jetty-maven-plugin")
        shutil.copyfile(plugin_artifact, maven_lib / PLUGIN_JAR_NAME)

        shutil.copyfile(self._resources_dir / MAVEN_XML, etc / MAVEN_XML)
        shutil.copyfile(self._resources_dir / MAVEN_MOD, modules / MAVEN_MOD)

        ext_lib = None
        if extra_libs:
            ext_lib = _ensure_dir(lib / "ext")
            for coordinate in extra_libs:
                artifact = self._resolver.resolve_coordinate(coordinate)
                shutil.copyfile(artifact, ext_lib / coordinate.lib_ext_name())
                logger.info("Added %s to lib/ext", coordinate)

        props_file = webapp.write_properties(etc / MAVEN_PROPS)

        logger.info("jetty.base = %s", root.absolute())
        return BaseLayout(
            root=root,
            modules=modules,
            etc=etc,
            lib=lib,
            maven_lib=maven_lib,
            props_file=props_file,
            ext_lib=ext_lib,
        )


def _ensure_dir(path: Path) -> Path:
    path.mkdir(parents=True, exist_ok=True)
    return path
