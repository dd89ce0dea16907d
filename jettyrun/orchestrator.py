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

"""Run an unassembled webapp in a forked Jetty distribution.

A run moves through a fixed sequence of states::

    Idle -> PrintingDiagnostics -> InstallingDistribution -> ConfiguringWebapp
         -> SynthesizingBase -> BuildingCommand -> Spawned -> Terminated

Any failure moves the run to ``Failed`` and is raised as a single
:class:`StartFailure`. Partially written files are left in place; the next
run deletes the old jetty base before building a new one.

Example usage::

    from jettyrun.config import load_config
    from jettyrun.orchestrator import DistroRunner

    runner = DistroRunner(load_config())
    result = runner.execute()  # blocks until jetty exits
    print(result.exit_code)
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from .artifact import Coordinate, parse_coordinate, split_plugin_dependencies
from .base import BASE_DIR_NAME, BaseLayout, BaseSynthesizer
from .command import CommandSpec, build_command
from .config import RunConfig
from .distribution import JETTY_HOME_ARTIFACT_ID, JETTY_HOME_GROUP_ID, DistributionInstaller
from .errors import StartFailure
from .resolver import ArtifactResolver

logger = logging.getLogger(__name__)

Spawner = Callable[[CommandSpec], Any]


class RunState:
    """Run state constants."""

    IDLE = "run.Idle"
    PRINTING_DIAGNOSTICS = "run.PrintingDiagnostics"
    INSTALLING_DISTRIBUTION = "run.InstallingDistribution"
    CONFIGURING_WEBAPP = "run.ConfiguringWebapp"
    SYNTHESIZING_BASE = "run.SynthesizingBase"
    BUILDING_COMMAND = "run.BuildingCommand"
    SPAWNED = "run.Spawned"
    TERMINATED = "run.Terminated"
    FAILED = "run.Failed"

    @classmethod
    def is_terminal(cls, state: str) -> bool:
        """Check if state is terminal (Terminated or Failed)."""
        return state in (cls.TERMINATED, cls.FAILED)


RUN_TRANSITIONS: dict[str, str] = {
    RunState.IDLE: RunState.PRINTING_DIAGNOSTICS,
    RunState.PRINTING_DIAGNOSTICS: RunState.INSTALLING_DISTRIBUTION,
    RunState.INSTALLING_DISTRIBUTION: RunState.CONFIGURING_WEBAPP,
    RunState.CONFIGURING_WEBAPP: RunState.SYNTHESIZING_BASE,
    RunState.SYNTHESIZING_BASE: RunState.BUILDING_COMMAND,
    RunState.BUILDING_COMMAND: RunState.SPAWNED,
    RunState.SPAWNED: RunState.TERMINATED,
}


@dataclass
class RunPlan:
    """Values collected before a run starts.

    Attributes:
        extra_libs: Plugin dependencies to install into ``lib/ext``
    """

    extra_libs: list[Coordinate] = field(default_factory=list)


@dataclass
class RunResult:
    """Outcome of a completed run."""

    state: str
    exit_code: int | None = None
    jetty_home: Path | None = None
    base: BaseLayout | None = None
    command: CommandSpec | None = None


def _spawn(command: CommandSpec) -> Any:
    return command.spawn()


class DistroRunner:
    """Forks a jetty distribution to run the configured webapp."""

    def __init__(
        self,
        config: RunConfig,
        resolver: ArtifactResolver | None = None,
        spawner: Spawner | None = None,
    ) -> None:
        self._config = config
        self._resolver = resolver or ArtifactResolver(
            local_repository=config.repository.local_repository,
            remote_repositories=config.repository.remote_repositories,
            timeout_s=config.repository.timeout_s,
        )
        self._spawner = spawner or _spawn
        self._state = RunState.IDLE
        self._history: list[str] = [RunState.IDLE]

    @property
    def state(self) -> str:
        return self._state

    @property
    def history(self) -> list[str]:
        """States visited so far, in order."""
        return list(self._history)

    @property
    def build_dir(self) -> Path:
        return Path(self._config.build_dir)

    def prepare(self) -> RunPlan:
        """Collect the extra libraries from the declared plugin dependencies."""
        declared = [parse_coordinate(d) for d in self._config.plugin.dependencies]
        return RunPlan(extra_libs=split_plugin_dependencies(declared))

    def execute(self) -> RunResult:
        """Prepare and start a run."""
        return self.start()

    def start(self, plan: RunPlan | None = None) -> RunResult:
        """Run jetty and block until the child process exits.

        Without a *plan*, the plugin dependencies are collected first with
        :meth:`prepare`. The exit code is reported, not interpreted.

        Raises:
            StartFailure: If any step fails. The original error is the cause.
        """
        cfg = self._config
        result = RunResult(state=self._state)

        try:
            if plan is None:
                plan = self.prepare()

            self._advance(RunState.PRINTING_DIAGNOSTICS)
            self.print_system_properties()

            self._advance(RunState.INSTALLING_DISTRIBUTION)
            installer = DistributionInstaller(self._resolver, self.build_dir)
            result.jetty_home = installer.ensure(
                cfg.distribution.jetty_home or None,
                JETTY_HOME_GROUP_ID,
                JETTY_HOME_ARTIFACT_ID,
                cfg.plugin.version,
            )

            self._advance(RunState.CONFIGURING_WEBAPP)
            webapp = cfg.webapp
            if cfg.context_xml and not webapp.context_xml:
                webapp.context_xml = cfg.context_xml
            webapp.finalize(cfg.project_dir, self.build_dir)

            self._advance(RunState.SYNTHESIZING_BASE)
            synthesizer = BaseSynthesizer(self._resolver)
            result.base = synthesizer.synthesize(
                template_base=cfg.distribution.jetty_base or None,
                excluded_context_file=cfg.context_xml or None,
                target_base=self.build_dir / BASE_DIR_NAME,
                plugin_artifact=cfg.plugin.location or None,
                extra_libs=plan.extra_libs,
                webapp=webapp,
            )

            self._advance(RunState.BUILDING_COMMAND)
            result.command = build_command(
                jetty_home=result.jetty_home,
                base_dir=result.base.root,
                modules=cfg.distribution.modules,
                has_extra_libs=bool(plan.extra_libs),
                properties=cfg.distribution.properties,
                java_command=cfg.distribution.java_command,
                jvm_args=cfg.distribution.jvm_args,
            )
            logger.info("Forking jetty: %s", " ".join(result.command.argv))

            process = self._spawner(result.command)
            self._advance(RunState.SPAWNED)
            result.exit_code = process.wait()

            self._advance(RunState.TERMINATED)
            logger.info("Jetty exited with code %s", result.exit_code)
        except Exception as exc:
            self._advance(RunState.FAILED)
            logger.error("Run failed in state %s: %s", self._history[-2], exc)
            raise StartFailure() from exc

        result.state = self._state
        return result

    def _advance(self, state: str) -> None:
        if state != RunState.FAILED and RUN_TRANSITIONS.get(self._state) != state:
            raise RuntimeError(f"Invalid run transition: {self._state} -> {state}")
        self._state = state
        self._history.append(state)

    def print_system_properties(self) -> None:
        """Log the configured system properties."""
        for name in sorted(self._config.system_properties):
            logger.info("Property %s=%s", name, self._config.system_properties[name])

    # -- Scanning is not supported for a forked distro ----------------------

    def configure_scanner(self) -> None:
        pass

    def start_scanner(self) -> None:
        pass

    def stop_scanner(self) -> None:
        pass

    def restart_webapp(self, reconfigure_scanner: bool = False) -> None:
        pass
