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

"""Maven artifact coordinates.

Provides the coordinate type used for every artifact the runner resolves
(the Jetty distribution, extra ``lib/ext`` libraries) and the startup
filter that splits declared plugin dependencies into extra libraries.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

logger = logging.getLogger(__name__)

JETTY_GROUP_ID = "org.eclipse.jetty"


@dataclass(frozen=True)
class Coordinate:
    """A (group, artifact, version, type) tuple identifying an artifact."""

    group_id: str
    artifact_id: str
    version: str
    extension: str = "jar"
    classifier: str = ""

    @property
    def file_name(self) -> str:
        """File name of the artifact inside a Maven repository."""
        name = f"{self.artifact_id}-{self.version}"
        if self.classifier:
            name += f"-{self.classifier}"
        return f"{name}.{self.extension}"

    def repository_path(self) -> str:
        """Relative path of the artifact in the Maven repository layout."""
        group_path = self.group_id.replace(".", "/")
        return f"{group_path}/{self.artifact_id}/{self.version}/{self.file_name}"

    def lib_ext_name(self) -> str:
        """File name used when the artifact is installed into ``lib/ext``.

        The group id is included so that artifacts sharing an artifact id
        across groups do not overwrite each other.
        """
        return f"{self.group_id}.{self.artifact_id}-{self.version}.{self.extension}"

    def to_uri(self) -> str:
        uri = f"mvn:{self.group_id}:{self.artifact_id}:{self.version}"
        if self.extension != "jar" or self.classifier:
            uri += f":{self.extension}"
        if self.classifier:
            uri += f":{self.classifier}"
        return uri

    def __str__(self) -> str:
        return self.to_uri()[4:]


def parse_coordinate(text: str) -> Coordinate:
    """Parse a coordinate string.

    Format: ``[mvn:]groupId:artifactId:version[:type[:classifier]]``

    Raises:
        ValueError: If the string is malformed.
    """
    body = text[4:] if text.startswith("mvn:") else text
    parts = body.split(":")
    if len(parts) < 3:
        raise ValueError(
            f"Invalid coordinate (expected groupId:artifactId:version[:type[:classifier]]): {text}"
        )
    if len(parts) > 5:
        raise ValueError(f"Invalid coordinate (too many components): {text}")
    if not all(parts[:3]) or (len(parts) > 3 and not parts[3]):
        raise ValueError(f"Invalid coordinate (empty component): {text}")

    group_id, artifact_id, version = parts[0], parts[1], parts[2]
    extension = parts[3] if len(parts) > 3 else "jar"
    classifier = parts[4] if len(parts) > 4 else ""
    return Coordinate(group_id, artifact_id, version, extension, classifier)


def split_plugin_dependencies(dependencies: list[Coordinate]) -> list[Coordinate]:
    """Select the declared plugin dependencies that belong in ``lib/ext``.

    Jetty's own artifacts are never copied: the distribution already
    provides them and they are selected through modules instead. A single
    warning is logged no matter how many of them were declared.

    Returns:
        The remaining dependencies, in declaration order.
    """
    extra_libs: list[Coordinate] = []
    warned = False
    for dep in dependencies:
        if dep.group_id.lower() == JETTY_GROUP_ID:
            if not warned:
                logger.warning(
                    "Jetty jars detected in plugin dependencies: use modules in the "
                    "configuration instead to select appropriate jetty modules."
                )
                warned = True
            continue
        extra_libs.append(dep)
    return extra_libs
