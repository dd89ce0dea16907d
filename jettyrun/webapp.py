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

"""Webapp configuration and its properties-file form.

The forked Jetty process learns about the webapp under development from
``etc/maven.props``, which ``etc/maven.xml`` reads at startup. This module
holds the webapp settings, fills in project defaults, and renders the
properties file through a Jinja2 template.
"""

from __future__ import annotations

import logging
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any

from jinja2 import Environment, FileSystemLoader, StrictUndefined

logger = logging.getLogger(__name__)

_RESOURCES_DIR = Path(__file__).resolve().parent / "resources"
PROPERTIES_TEMPLATE = "maven.props.j2"


@dataclass
class WebAppConfig:
    """Settings describing the webapp to deploy.

    Attributes:
        context_path: Context path the webapp is served under
        war_dir: Unassembled webapp directory (the resource base)
        descriptor: web.xml to use, if any
        classes_dir: Compiled classes of the project
        test_classes_dir: Compiled test classes, if they belong on the classpath
        lib_jars: Dependency jars for WEB-INF/lib
        tmp_dir: Webapp temp directory
        persist_tmp_dir: Keep the temp directory between runs
        context_xml: Jetty context xml applied to the webapp
        quickstart_web_xml: Generated quickstart descriptor, if any
        extra_properties: Additional entries passed through unchanged
    """

    context_path: str = "/"
    war_dir: str = ""
    descriptor: str = ""
    classes_dir: str = ""
    test_classes_dir: str = ""
    lib_jars: list[str] = field(default_factory=list)
    tmp_dir: str = ""
    persist_tmp_dir: bool = False
    context_xml: str = ""
    quickstart_web_xml: str = ""
    extra_properties: dict[str, str] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Serialize to a plain dictionary."""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> WebAppConfig:
        """Create from a dictionary.

        Keys may use either snake_case (``context_path``) or
        camelCase (``contextPath``).
        """
        defaults = cls()
        return cls(
            context_path=data.get("context_path", data.get("contextPath", defaults.context_path)),
            war_dir=data.get("war_dir", data.get("warDir", defaults.war_dir)),
            descriptor=data.get("descriptor", defaults.descriptor),
            classes_dir=data.get("classes_dir", data.get("classesDir", defaults.classes_dir)),
            test_classes_dir=data.get(
                "test_classes_dir", data.get("testClassesDir", defaults.test_classes_dir)
            ),
            lib_jars=list(data.get("lib_jars", data.get("libJars", []))),
            tmp_dir=data.get("tmp_dir", data.get("tmpDir", defaults.tmp_dir)),
            persist_tmp_dir=bool(data.get("persist_tmp_dir", defaults.persist_tmp_dir)),
            context_xml=data.get("context_xml", data.get("contextXml", defaults.context_xml)),
            quickstart_web_xml=data.get("quickstart_web_xml", defaults.quickstart_web_xml),
            extra_properties=dict(data.get("extra_properties", {})),
        )

    def finalize(self, project_dir: str | Path, build_dir: str | Path) -> WebAppConfig:
        """Fill in defaults derived from the project layout.

        The forked Jetty runs inside the jetty base, so every path is made
        absolute. Relative paths that were set explicitly are taken relative
        to *project_dir*. Creates the temp directory if needed. Returns ``self``.
        """
        project = Path(project_dir).absolute()
        build = Path(build_dir).absolute()

        def _absolute(value: str) -> str:
            return str(project / value) if value else value

        if not self.context_path.startswith("/"):
            self.context_path = "/" + self.context_path

        self.war_dir = _absolute(self.war_dir) or str(project / "src" / "main" / "webapp")
        self.descriptor = _absolute(self.descriptor)
        if not self.descriptor:
            web_xml = Path(self.war_dir) / "WEB-INF" / "web.xml"
            if web_xml.is_file():
                self.descriptor = str(web_xml)

        self.classes_dir = _absolute(self.classes_dir) or str(build / "classes")
        self.test_classes_dir = _absolute(self.test_classes_dir)
        self.tmp_dir = _absolute(self.tmp_dir) or str(build / "tmp")
        Path(self.tmp_dir).mkdir(parents=True, exist_ok=True)
        self.context_xml = _absolute(self.context_xml)
        self.quickstart_web_xml = _absolute(self.quickstart_web_xml)
        self.lib_jars = [_absolute(jar) for jar in self.lib_jars]

        logger.info("Context path = %s", self.context_path)
        logger.info("Tmp directory = %s", self.tmp_dir)
        logger.info("web.xml file = %s", self.descriptor or "(none)")
        logger.info("Webapp directory = %s", self.war_dir)
        return self

    def to_properties(self) -> dict[str, str]:
        """Describe the webapp as ordered ``.properties`` entries.

        Unset values are left out.
        """
        props: dict[str, str] = {}
        props["context.path"] = self.context_path
        if self.tmp_dir:
            props["tmp.dir"] = self.tmp_dir
            props["tmp.dir.persist"] = "true" if self.persist_tmp_dir else "false"
        if self.descriptor:
            props["web.xml"] = self.descriptor
        if self.quickstart_web_xml:
            props["quickstart.web.xml"] = self.quickstart_web_xml
        if self.context_xml:
            props["context.xml"] = self.context_xml
        if self.war_dir:
            props["base.dirs"] = self.war_dir
        if self.classes_dir:
            props["classes.dir"] = self.classes_dir
        if self.test_classes_dir:
            props["testClasses.dir"] = self.test_classes_dir
        if self.lib_jars:
            props["lib.jars"] = ",".join(self.lib_jars)
        props.update(self.extra_properties)
        return props

    def write_properties(self, path: str | Path) -> Path:
        """Write the properties file. The file must not already exist."""
        target = Path(path)
        text = render_properties(self.to_properties())
        with target.open("x", encoding="latin-1") as f:
            f.write(text)
        logger.debug("Wrote webapp properties to %s", target)
        return target


# -- Rendering ---------------------------------------------------------------

_SPECIAL = {
    "\\": "\\\\",
    "\n": "\\n",
    "\r": "\\r",
    "\t": "\\t",
    "\f": "\\f",
    "=": "\\=",
    ":": "\\:",
    "#": "\\#",
    "!": "\\!",
}


def propescape(value: Any, key: bool = False) -> str:
    """Escape *value* the way ``java.util.Properties.store`` does."""
    text = str(value)
    out: list[str] = []
    for i, ch in enumerate(text):
        if ch == " " and (key or i == 0):
            out.append("\\ ")
        elif ch in _SPECIAL:
            out.append(_SPECIAL[ch])
        elif ord(ch) < 0x20 or ord(ch) > 0x7E:
            out.append(f"\\u{ord(ch):04X}")
        else:
            out.append(ch)
    return "".join(out)


def _environment() -> Environment:
    env = Environment(
        loader=FileSystemLoader(str(_RESOURCES_DIR)),
        undefined=StrictUndefined,
        autoescape=False,
        trim_blocks=True,
        keep_trailing_newline=True,
    )
    env.filters["propescape"] = propescape
    return env


def render_properties(properties: dict[str, str]) -> str:
    """Render *properties* as the text of a ``.properties`` file."""
    template = _environment().get_template(PROPERTIES_TEMPLATE)
    return template.render(properties=properties)
