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

"""Tests for webapp configuration and the properties file."""

import pytest

from jettyrun.webapp import WebAppConfig, propescape, render_properties


class TestWebAppConfig:
    """Tests for WebAppConfig defaults and serialization."""

    def test_defaults(self):
        cfg = WebAppConfig()
        assert cfg.context_path == "/"
        assert cfg.lib_jars == []
        assert cfg.persist_tmp_dir is False

    def test_from_dict_camel_case(self):
        cfg = WebAppConfig.from_dict({"contextPath": "/shop", "warDir": "/w", "libJars": ["a.jar"]})
        assert cfg.context_path == "/shop"
        assert cfg.war_dir == "/w"
        assert cfg.lib_jars == ["a.jar"]

    def test_round_trip_dict(self):
        cfg = WebAppConfig(context_path="/x", lib_jars=["a.jar"], extra_properties={"k": "v"})
        assert WebAppConfig.from_dict(cfg.to_dict()) == cfg


class TestFinalize:
    """Tests for filling in project defaults."""

    def test_project_defaults(self, tmp_path):
        project = tmp_path / "proj"
        build = project / "target"

        cfg = WebAppConfig().finalize(project, build)

        assert cfg.war_dir == str(project / "src" / "main" / "webapp")
        assert cfg.classes_dir == str(build / "classes")
        assert cfg.tmp_dir == str(build / "tmp")
        assert (build / "tmp").is_dir()
        assert cfg.descriptor == ""

    def test_descriptor_found_in_war_dir(self, tmp_path):
        web_inf = tmp_path / "src" / "main" / "webapp" / "WEB-INF"
        web_inf.mkdir(parents=True)
        (web_inf / "web.xml").write_text("<web-app/>")

        cfg = WebAppConfig().finalize(tmp_path, tmp_path / "target")

        assert cfg.descriptor == str(web_inf / "web.xml")

    def test_context_path_gets_leading_slash(self, tmp_path):
        cfg = WebAppConfig(context_path="shop").finalize(tmp_path, tmp_path / "target")
        assert cfg.context_path == "/shop"

    def test_explicit_values_kept(self, tmp_path):
        cfg = WebAppConfig(classes_dir="/c", tmp_dir=str(tmp_path / "t")).finalize(
            tmp_path, tmp_path / "target"
        )
        assert cfg.classes_dir == "/c"
        assert cfg.tmp_dir == str(tmp_path / "t")

    def test_relative_project_made_absolute(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)

        cfg = WebAppConfig().finalize(".", "target")

        assert cfg.war_dir == str(tmp_path / "src" / "main" / "webapp")
        assert cfg.classes_dir == str(tmp_path / "target" / "classes")
        assert cfg.tmp_dir == str(tmp_path / "target" / "tmp")

    def test_explicit_relative_paths_resolved_against_project(self, tmp_path):
        project = tmp_path / "proj"
        cfg = WebAppConfig(
            war_dir="web",
            test_classes_dir="target/test-classes",
            context_xml="jetty-context.xml",
            lib_jars=["lib/a.jar", "/opt/b.jar"],
        ).finalize(project, project / "target")

        assert cfg.war_dir == str(project / "web")
        assert cfg.test_classes_dir == str(project / "target" / "test-classes")
        assert cfg.context_xml == str(project / "jetty-context.xml")
        assert cfg.lib_jars == [str(project / "lib" / "a.jar"), "/opt/b.jar"]


class TestToProperties:
    """Tests for the properties mapping."""

    def test_minimal(self):
        assert WebAppConfig().to_properties() == {"context.path": "/"}

    def test_full(self):
        cfg = WebAppConfig(
            context_path="/app",
            war_dir="/src/webapp",
            descriptor="/src/webapp/WEB-INF/web.xml",
            classes_dir="/target/classes",
            test_classes_dir="/target/test-classes",
            lib_jars=["/r/a.jar", "/r/b.jar"],
            tmp_dir="/target/tmp",
            persist_tmp_dir=True,
            context_xml="/ctx.xml",
            quickstart_web_xml="/target/qs.xml",
        )
        props = cfg.to_properties()
        assert props == {
            "context.path": "/app",
            "tmp.dir": "/target/tmp",
            "tmp.dir.persist": "true",
            "web.xml": "/src/webapp/WEB-INF/web.xml",
            "quickstart.web.xml": "/target/qs.xml",
            "context.xml": "/ctx.xml",
            "base.dirs": "/src/webapp",
            "classes.dir": "/target/classes",
            "testClasses.dir": "/target/test-classes",
            "lib.jars": "/r/a.jar,/r/b.jar",
        }

    def test_extra_properties_appended(self):
        props = WebAppConfig(extra_properties={"maven.war.excludes": "*.tmp"}).to_properties()
        assert list(props)[-1] == "maven.war.excludes"


class TestPropertiesFile:
    """Tests for rendering and writing maven.props."""

    def test_escape_value(self):
        assert propescape("C:\\web\\app") == "C\\:\\\\web\\\\app"
        assert propescape(" lead") == "\\ lead"
        assert propescape("a b") == "a b"
        assert propescape("caf\u00e9") == "caf\\u00E9"

    def test_escape_key(self):
        assert propescape("a b=c", key=True) == "a\\ b\\=c"

    def test_render(self):
        text = render_properties({"context.path": "/", "tmp.dir": "/t"})
        lines = text.splitlines()
        assert lines[0].startswith("#")
        assert lines[1:] == ["context.path=/", "tmp.dir=/t"]
        assert text.endswith("\n")

    def test_write_properties(self, tmp_path):
        path = WebAppConfig(context_path="/x").write_properties(tmp_path / "maven.props")
        assert "context.path=/x" in path.read_text().splitlines()

    def test_write_properties_refuses_existing_file(self, tmp_path):
        existing = tmp_path / "maven.props"
        existing.write_text("old")
        with pytest.raises(FileExistsError):
            WebAppConfig().write_properties(existing)
