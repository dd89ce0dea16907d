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

"""jettyrun: run an unassembled webapp in a forked Jetty distribution."""

from .artifact import Coordinate, parse_coordinate, split_plugin_dependencies
from .base import BASE_DIR_NAME, BaseLayout, BaseSynthesizer
from .command import CommandSpec, build_command, module_string
from .config import (
    DistributionConfig,
    PluginConfig,
    RepositoryConfig,
    RunConfig,
    load_config,
)
from .distribution import DistributionInstaller
from .errors import ConfigurationError, JettyRunError, ResolutionError, StartFailure
from .filetree import copy_tree
from .orchestrator import DistroRunner, RunPlan, RunResult, RunState
from .resolver import ArtifactResolver
from .webapp import WebAppConfig

__version__ = "0.1.0"

__all__ = [
    # Coordinates
    "Coordinate",
    "parse_coordinate",
    "split_plugin_dependencies",
    # Resolution and installation
    "ArtifactResolver",
    "DistributionInstaller",
    # Jetty base
    "BASE_DIR_NAME",
    "BaseLayout",
    "BaseSynthesizer",
    "copy_tree",
    "WebAppConfig",
    # Command
    "CommandSpec",
    "build_command",
    "module_string",
    # Orchestration
    "DistroRunner",
    "RunPlan",
    "RunResult",
    "RunState",
    # Configuration
    "RunConfig",
    "DistributionConfig",
    "RepositoryConfig",
    "PluginConfig",
    "load_config",
    # Errors
    "JettyRunError",
    "ConfigurationError",
    "ResolutionError",
    "StartFailure",
]
