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

"""Command line construction for the forked Jetty process."""

from __future__ import annotations

import subprocess
from dataclasses import dataclass, field
from pathlib import Path

BASE_MODULES = "server,http,webapp"
EXT_MODULE = "ext"
MAVEN_MODULE = "maven"


@dataclass(frozen=True)
class CommandSpec:
    """A fully resolved child process invocation.

    Attributes:
        executable: Program to run (the java launcher)
        args: Arguments following the executable
        cwd: Working directory of the child
        inherit_io: Share stdin/stdout/stderr with the parent
        env: Environment for the child; ``None`` inherits the parent's
    """

    executable: str
    args: tuple[str, ...]
    cwd: Path
    inherit_io: bool = True
    env: dict[str, str] | None = field(default=None, compare=False)

    @property
    def argv(self) -> list[str]:
        return [self.executable, *self.args]

    def spawn(self) -> subprocess.Popen:
        """Start the child process."""
        streams = {}
        if not self.inherit_io:
            streams = {
                "stdin": subprocess.DEVNULL,
                "stdout": subprocess.DEVNULL,
                "stderr": subprocess.DEVNULL,
            }
        return subprocess.Popen(self.argv, cwd=self.cwd, env=self.env, **streams)


def module_string(modules: list[str] | None, has_extra_libs: bool) -> str:
    """Build the value of ``--module=``.

    Starts from ``server,http,webapp``. A requested module is appended only
    if its name does not already occur anywhere in the accumulated string.
    This is a substring test: ``http2`` is added, but a module named
    ``web`` never is, since ``webapp`` contains it. ``ext``
    follows when extra libraries are installed, and ``maven`` is always last.
    """
    result = BASE_MODULES
    for module in modules or []:
        if module not in result:
            result += "," + module
    if has_extra_libs and EXT_MODULE not in result:
        result += "," + EXT_MODULE
    result += "," + MAVEN_MODULE
    return result


def build_command(
    jetty_home: str | Path,
    base_dir: str | Path,
    modules: list[str] | None = None,
    has_extra_libs: bool = False,
    properties: list[str] | None = None,
    java_command: str = "java",
    jvm_args: list[str] | None = None,
    env: dict[str, str] | None = None,
) -> CommandSpec:
    """Make the command that runs a jetty distro against *base_dir*.

    Properties are passed through unvalidated as one trailing argument,
    each preceded by a space.
    """
    start_jar = (Path(jetty_home) / "start.jar").absolute()
    args = [*(jvm_args or []), "-jar", str(start_jar)]
    args.append("--module=" + module_string(modules, has_extra_libs))
    if properties:
        args.append("".join(" " + p for p in properties))

    return CommandSpec(
        executable=java_command,
        args=tuple(args),
        cwd=Path(base_dir),
        inherit_io=True,
        env=env,
    )
