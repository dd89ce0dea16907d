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

"""jettyrun command-line interface."""

import argparse
import json
import logging
import sys
from pathlib import Path

from .artifact import parse_coordinate, split_plugin_dependencies
from .base import BASE_DIR_NAME
from .command import build_command, module_string
from .config import RunConfig, load_config
from .distribution import JETTY_HOME_ARTIFACT_ID
from .errors import StartFailure
from .orchestrator import DistroRunner

# Known subcommands for routing
_SUBCOMMANDS = {"run", "plan"}


def _build_run_parser(parser: argparse.ArgumentParser) -> None:
    """Add arguments shared by ``run`` and ``plan`` to *parser*."""

    parser.add_argument(
        "--project-dir",
        metavar="DIR",
        help="Webapp project directory (default: from config, else cwd)",
    )

    parser.add_argument(
        "--build-dir",
        metavar="DIR",
        help="Build output directory (default: <project-dir>/target)",
    )

    parser.add_argument(
        "--jetty-home",
        metavar="DIR",
        help="Installed jetty distribution (default: download jetty-home)",
    )

    parser.add_argument(
        "--jetty-base",
        metavar="DIR",
        help="Existing jetty base to use as a template",
    )

    parser.add_argument(
        "--module",
        action="append",
        dest="modules",
        metavar="NAME",
        help="Additional jetty module to enable (repeatable)",
    )

    parser.add_argument(
        "--property",
        action="append",
        dest="properties",
        metavar="NAME=VALUE",
        help="Jetty property for the command line (repeatable)",
    )

    parser.add_argument(
        "--lib",
        action="append",
        dest="libs",
        metavar="G:A:V[:TYPE]",
        help="Plugin dependency to install into lib/ext (repeatable)",
    )

    parser.add_argument(
        "--plugin-jar",
        metavar="FILE",
        help="Plugin jar copied into lib/maven",
    )

    parser.add_argument(
        "--version",
        dest="plugin_version",
        metavar="VERSION",
        help="Plugin version, used as the jetty-home version to download",
    )

    parser.add_argument(
        "--context-xml",
        metavar="FILE",
        help="Webapp context xml (excluded when copying the jetty base)",
    )

    parser.add_argument(
        "--repository",
        action="append",
        dest="repositories",
        metavar="URL",
        help="Remote repository URL (repeatable, replaces configured repositories)",
    )

    parser.add_argument(
        "--java",
        dest="java_command",
        metavar="PATH",
        help="Java launcher (default: java)",
    )


def _add_common_args(parser: argparse.ArgumentParser) -> None:
    """Add arguments shared by all subcommands."""
    parser.add_argument(
        "--config",
        metavar="FILE",
        help="Path to jettyrun config file (JSON). "
        "Defaults to jettyrun.config.json in cwd, ~/.jettyrun/, or /etc/jettyrun/",
    )

    parser.add_argument(
        "--log-level",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Log level (default: INFO)",
    )

    parser.add_argument(
        "--log-file",
        default=None,
        metavar="FILE",
        help="Log to file instead of stderr",
    )


def _configure_logging(parsed: argparse.Namespace) -> None:
    """Set up logging from parsed CLI args."""
    log_handlers: list[logging.Handler] = []
    if parsed.log_file:
        log_handlers.append(logging.FileHandler(parsed.log_file))
    else:
        log_handlers.append(logging.StreamHandler())

    logging.basicConfig(
        level=getattr(logging, parsed.log_level),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
        handlers=log_handlers,
    )


def _apply_overrides(config: RunConfig, parsed: argparse.Namespace) -> RunConfig:
    """Merge command-line flags into *config*."""
    if parsed.project_dir:
        derived_build_dir = config.build_dir == str(Path(config.project_dir) / "target")
        config.project_dir = parsed.project_dir
        if derived_build_dir and not parsed.build_dir:
            config.build_dir = str(Path(parsed.project_dir) / "target")
    if parsed.build_dir:
        config.build_dir = parsed.build_dir
    if parsed.jetty_home:
        config.distribution.jetty_home = parsed.jetty_home
    if parsed.jetty_base:
        config.distribution.jetty_base = parsed.jetty_base
    if parsed.modules:
        config.distribution.modules.extend(parsed.modules)
    if parsed.properties:
        config.distribution.properties.extend(parsed.properties)
    if parsed.java_command:
        config.distribution.java_command = parsed.java_command
    if parsed.libs:
        config.plugin.dependencies.extend(parsed.libs)
    if parsed.plugin_jar:
        config.plugin.location = parsed.plugin_jar
    if parsed.plugin_version:
        config.plugin.version = parsed.plugin_version
    if parsed.context_xml:
        config.context_xml = parsed.context_xml
    if parsed.repositories:
        config.repository.remote_repositories = list(parsed.repositories)
    return config


# =========================================================================
# Run handler
# =========================================================================


def _handle_run(parsed: argparse.Namespace) -> int:
    """Execute the run subcommand."""
    config = _apply_overrides(load_config(parsed.config), parsed)

    runner = DistroRunner(config)
    try:
        result = runner.execute()
    except StartFailure as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if result.exit_code is None:
        return 0
    if result.exit_code < 0:
        # killed by signal N, exit with 128+N
        return 128 - result.exit_code
    return result.exit_code


# =========================================================================
# Plan handler
# =========================================================================


def _handle_plan(parsed: argparse.Namespace) -> int:
    """Print the command a run would execute, without touching the filesystem."""
    config = _apply_overrides(load_config(parsed.config), parsed)

    try:
        declared = [parse_coordinate(d) for d in config.plugin.dependencies]
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    extra_libs = split_plugin_dependencies(declared)

    build_dir = Path(config.build_dir)
    jetty_home = config.distribution.jetty_home or str(
        build_dir / f"{JETTY_HOME_ARTIFACT_ID}-{config.plugin.version}"
    )
    command = build_command(
        jetty_home=jetty_home,
        base_dir=build_dir / BASE_DIR_NAME,
        modules=config.distribution.modules,
        has_extra_libs=bool(extra_libs),
        properties=config.distribution.properties,
        java_command=config.distribution.java_command,
        jvm_args=config.distribution.jvm_args,
    )

    plan = {
        "jetty_home": str(jetty_home),
        "jetty_base": str(command.cwd),
        "modules": module_string(config.distribution.modules, bool(extra_libs)),
        "lib_ext": [c.lib_ext_name() for c in extra_libs],
        "argv": command.argv,
    }
    print(json.dumps(plan, indent=2))
    return 0


# =========================================================================
# Main entry point
# =========================================================================


def main(args: list[str] | None = None) -> int:
    """Main entry point for the jettyrun CLI.

    Supports subcommands ``run`` (default) and ``plan``. If the first
    argument is not a known subcommand, ``run`` is assumed.

    Args:
        args: Command-line arguments (defaults to sys.argv[1:])

    Returns:
        Exit code: jetty's own exit code for ``run``, non-zero for errors
    """
    argv = args if args is not None else sys.argv[1:]

    subcommand = "run"
    remaining = list(argv)
    if remaining and remaining[0] in _SUBCOMMANDS:
        subcommand = remaining[0]
        remaining = remaining[1:]

    if subcommand == "run":
        parser = argparse.ArgumentParser(
            prog="jettyrun run",
            description="Run an unassembled webapp in a forked jetty distribution",
        )
        _build_run_parser(parser)
        _add_common_args(parser)
        parsed = parser.parse_args(remaining)
        _configure_logging(parsed)
        return _handle_run(parsed)

    elif subcommand == "plan":
        parser = argparse.ArgumentParser(
            prog="jettyrun plan",
            description="Show the jetty command line a run would use",
        )
        _build_run_parser(parser)
        _add_common_args(parser)
        parsed = parser.parse_args(remaining)
        _configure_logging(parsed)
        return _handle_plan(parsed)

    # Should not reach here
    print(f"Unknown subcommand: {subcommand}", file=sys.stderr)
    return 1


if __name__ == "__main__":
    sys.exit(main())
