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

"""jettyrun configuration management.

Provides configuration dataclasses for a distro run and a loader that
reads from config files or environment variables.
"""

from __future__ import annotations

import json
import os
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any

from .resolver import MAVEN_CENTRAL
from .webapp import WebAppConfig


def _split_list(value: str, sep: str = ",") -> list[str]:
    return [item.strip() for item in value.split(sep) if item.strip()]


@dataclass
class DistributionConfig:
    """Jetty distribution settings.

    Attributes:
        jetty_home: Pre-installed distribution (empty = download jetty-home)
        jetty_base: Template jetty base to copy (empty = none)
        modules: Extra jetty modules to enable
        properties: Jetty properties for the command line
        java_command: Java launcher
        jvm_args: Arguments for the JVM, placed before ``-jar``
    """

    jetty_home: str = ""
    jetty_base: str = ""
    modules: list[str] = field(default_factory=list)
    properties: list[str] = field(default_factory=list)
    java_command: str = "java"
    jvm_args: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        """Serialize to a plain dictionary."""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> DistributionConfig:
        """Create from a dictionary.

        Keys may use either snake_case (``jetty_home``) or
        camelCase (``jettyHome``).
        """
        defaults = cls()
        return cls(
            jetty_home=data.get("jetty_home", data.get("jettyHome", defaults.jetty_home)),
            jetty_base=data.get("jetty_base", data.get("jettyBase", defaults.jetty_base)),
            modules=list(data.get("modules", [])),
            properties=list(data.get("properties", [])),
            java_command=data.get("java_command", defaults.java_command),
            jvm_args=list(data.get("jvm_args", [])),
        )

    @classmethod
    def from_env(cls) -> DistributionConfig:
        """Create from environment variables.

        Recognised variables (all optional):
            JETTYRUN_JETTY_HOME
            JETTYRUN_JETTY_BASE
            JETTYRUN_MODULES  (comma-separated)
            JETTYRUN_JAVA
        """
        defaults = cls()
        return cls(
            jetty_home=os.environ.get("JETTYRUN_JETTY_HOME", defaults.jetty_home),
            jetty_base=os.environ.get("JETTYRUN_JETTY_BASE", defaults.jetty_base),
            modules=_split_list(os.environ.get("JETTYRUN_MODULES", "")),
            java_command=os.environ.get("JETTYRUN_JAVA", defaults.java_command),
        )


@dataclass
class RepositoryConfig:
    """Artifact repository settings.

    Attributes:
        local_repository: Maven-layout local repository used as cache
        remote_repositories: Repository URLs tried in order on a cache miss
        timeout_s: Per-download timeout in seconds
    """

    local_repository: str = ""
    remote_repositories: list[str] = field(default_factory=lambda: [MAVEN_CENTRAL])
    timeout_s: float = 60.0

    def __post_init__(self) -> None:
        if not self.local_repository:
            self.local_repository = str(Path.home() / ".m2" / "repository")

    def to_dict(self) -> dict[str, Any]:
        """Serialize to a plain dictionary."""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> RepositoryConfig:
        """Create from a dictionary."""
        return cls(
            local_repository=data.get("local_repository", ""),
            remote_repositories=list(data.get("remote_repositories", [MAVEN_CENTRAL])),
            timeout_s=float(data.get("timeout_s", 60.0)),
        )

    @classmethod
    def from_env(cls) -> RepositoryConfig:
        """Create from environment variables.

        Recognised variables (all optional):
            JETTYRUN_LOCAL_REPOSITORY
            JETTYRUN_REMOTE_REPOSITORIES  (comma-separated list of URLs)
        """
        remotes = _split_list(os.environ.get("JETTYRUN_REMOTE_REPOSITORIES", ""))
        return cls(
            local_repository=os.environ.get("JETTYRUN_LOCAL_REPOSITORY", ""),
            remote_repositories=remotes or [MAVEN_CENTRAL],
        )


@dataclass
class PluginConfig:
    """The plugin being run.

    Attributes:
        version: Plugin version; the jetty-home version downloaded
        location: Path of the plugin jar copied into ``lib/maven``
        dependencies: Declared plugin dependencies (``g:a:v[:type]``)
    """

    version: str = ""
    location: str = ""
    dependencies: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        """Serialize to a plain dictionary."""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> PluginConfig:
        """Create from a dictionary."""
        return cls(
            version=data.get("version", ""),
            location=data.get("location", ""),
            dependencies=list(data.get("dependencies", [])),
        )

    @classmethod
    def from_env(cls) -> PluginConfig:
        """Create from environment variables.

        Recognised variables (all optional):
            JETTYRUN_VERSION
            JETTYRUN_PLUGIN_JAR
            JETTYRUN_LIBS  (comma-separated coordinates)
        """
        return cls(
            version=os.environ.get("JETTYRUN_VERSION", ""),
            location=os.environ.get("JETTYRUN_PLUGIN_JAR", ""),
            dependencies=_split_list(os.environ.get("JETTYRUN_LIBS", "")),
        )


@dataclass
class RunConfig:
    """Top-level run configuration.

    Attributes:
        project_dir: Root of the webapp project
        build_dir: Build output directory (default ``<project_dir>/target``)
        context_xml: Webapp context xml; never copied from the template base
        system_properties: Properties reported before the run
        distribution: Jetty distribution settings
        repository: Artifact repository settings
        plugin: Plugin version, jar and dependencies
        webapp: Webapp settings
    """

    project_dir: str = "."
    build_dir: str = ""
    context_xml: str = ""
    system_properties: dict[str, str] = field(default_factory=dict)
    distribution: DistributionConfig = field(default_factory=DistributionConfig)
    repository: RepositoryConfig = field(default_factory=RepositoryConfig)
    plugin: PluginConfig = field(default_factory=PluginConfig)
    webapp: WebAppConfig = field(default_factory=WebAppConfig)

    def __post_init__(self) -> None:
        if not self.build_dir:
            self.build_dir = str(Path(self.project_dir) / "target")

    def to_dict(self) -> dict[str, Any]:
        """Serialize to a plain dictionary."""
        return {
            "project_dir": self.project_dir,
            "build_dir": self.build_dir,
            "context_xml": self.context_xml,
            "system_properties": dict(self.system_properties),
            "distribution": self.distribution.to_dict(),
            "repository": self.repository.to_dict(),
            "plugin": self.plugin.to_dict(),
            "webapp": self.webapp.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> RunConfig:
        """Create from a dictionary (e.g. parsed JSON)."""
        return cls(
            project_dir=data.get("project_dir", "."),
            build_dir=data.get("build_dir", ""),
            context_xml=data.get("context_xml", ""),
            system_properties=dict(data.get("system_properties", {})),
            distribution=DistributionConfig.from_dict(data.get("distribution", {})),
            repository=RepositoryConfig.from_dict(data.get("repository", {})),
            plugin=PluginConfig.from_dict(data.get("plugin", {})),
            webapp=WebAppConfig.from_dict(data.get("webapp", {})),
        )

    @classmethod
    def from_env(cls) -> RunConfig:
        """Create from environment variables."""
        return cls(
            project_dir=os.environ.get("JETTYRUN_PROJECT_DIR", "."),
            build_dir=os.environ.get("JETTYRUN_BUILD_DIR", ""),
            context_xml=os.environ.get("JETTYRUN_CONTEXT_XML", ""),
            distribution=DistributionConfig.from_env(),
            repository=RepositoryConfig.from_env(),
            plugin=PluginConfig.from_env(),
        )


# -- Config file loading -----------------------------------------------------

DEFAULT_CONFIG_FILENAME = "jettyrun.config.json"

_SEARCH_PATHS = [
    Path.cwd,  # current directory
    lambda: Path.home() / ".jettyrun",  # user home
    lambda: Path("/etc/jettyrun"),  # system-wide
]


def _find_config_file(filename: str = DEFAULT_CONFIG_FILENAME) -> Path | None:
    """Search well-known locations for a config file.

    Search order:
        1. ``$JETTYRUN_CONFIG`` environment variable (explicit path)
        2. Current working directory
        3. ``~/.jettyrun/``
        4. ``/etc/jettyrun/``

    Returns:
        Path to the first config file found, or ``None``.
    """
    explicit = os.environ.get("JETTYRUN_CONFIG")
    if explicit:
        path = Path(explicit)
        if path.is_file():
            return path
        return None

    for path_fn in _SEARCH_PATHS:
        candidate = path_fn() / filename
        if candidate.is_file():
            return candidate
    return None


def load_config(path: str | Path | None = None) -> RunConfig:
    """Load run configuration.

    Resolution order:
        1. Explicit *path* argument
        2. Config file found via :func:`_find_config_file`
        3. Environment variables (``JETTYRUN_*``)
        4. Built-in defaults

    Args:
        path: Optional explicit path to a JSON config file.

    Returns:
        Populated :class:`RunConfig` instance.
    """
    config_path: Path | None = Path(path) if path else _find_config_file()

    if config_path and config_path.is_file():
        data = json.loads(config_path.read_text())
        return RunConfig.from_dict(data)

    return RunConfig.from_env()
