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

"""Tests for artifact coordinates and plugin dependency filtering."""

import logging

import pytest

from jettyrun.artifact import Coordinate, parse_coordinate, split_plugin_dependencies


class TestCoordinate:
    """Tests for Coordinate naming."""

    def test_file_name(self):
        c = Coordinate("org.eclipse.jetty", "jetty-home", "9.4.8", "zip")
        assert c.file_name == "jetty-home-9.4.8.zip"

    def test_file_name_with_classifier(self):
        c = Coordinate("com.example", "tool", "1.0", "jar", "all")
        assert c.file_name == "tool-1.0-all.jar"

    def test_repository_path(self):
        c = Coordinate("org.eclipse.jetty", "jetty-home", "9.4.8", "zip")
        assert c.repository_path() == "org/eclipse/jetty/jetty-home/9.4.8/jetty-home-9.4.8.zip"

    def test_lib_ext_name(self):
        c = Coordinate("com.x", "foo", "1.0", "jar")
        assert c.lib_ext_name() == "com.x.foo-1.0.jar"

    def test_lib_ext_name_distinguishes_groups(self):
        a = Coordinate("com.a", "util", "1.0")
        b = Coordinate("com.b", "util", "1.0")
        assert a.lib_ext_name() != b.lib_ext_name()

    def test_to_uri_default_extension(self):
        assert Coordinate("com.x", "foo", "1.0").to_uri() == "mvn:com.x:foo:1.0"

    def test_to_uri_with_extension_and_classifier(self):
        c = Coordinate("com.x", "foo", "1.0", "zip", "dist")
        assert c.to_uri() == "mvn:com.x:foo:1.0:zip:dist"

    def test_str(self):
        assert str(Coordinate("com.x", "foo", "1.0", "war")) == "com.x:foo:1.0:war"


class TestParseCoordinate:
    """Tests for coordinate parsing."""

    def test_minimal(self):
        c = parse_coordinate("com.x:foo:1.0")
        assert c == Coordinate("com.x", "foo", "1.0", "jar", "")

    def test_with_type(self):
        assert parse_coordinate("com.x:foo:1.0:zip").extension == "zip"

    def test_with_classifier(self):
        c = parse_coordinate("com.x:foo:1.0:jar:tests")
        assert c.classifier == "tests"

    def test_mvn_prefix(self):
        assert parse_coordinate("mvn:com.x:foo:1.0") == Coordinate("com.x", "foo", "1.0")

    def test_too_few_parts(self):
        with pytest.raises(ValueError, match="expected groupId:artifactId:version"):
            parse_coordinate("com.x:foo")

    def test_too_many_parts(self):
        with pytest.raises(ValueError, match="too many components"):
            parse_coordinate("a:b:c:d:e:f")

    def test_empty_component(self):
        with pytest.raises(ValueError, match="empty component"):
            parse_coordinate("com.x::1.0")


class TestSplitPluginDependencies:
    """Tests for selecting lib/ext dependencies."""

    def test_keeps_foreign_dependencies_in_order(self):
        deps = [Coordinate("com.b", "b", "1"), Coordinate("com.a", "a", "2")]
        assert split_plugin_dependencies(deps) == deps

    def test_drops_jetty_dependencies(self):
        deps = [
            Coordinate("org.eclipse.jetty", "jetty-jndi", "9.4.8"),
            Coordinate("com.x", "foo", "1.0"),
        ]
        assert split_plugin_dependencies(deps) == [Coordinate("com.x", "foo", "1.0")]

    def test_group_match_is_case_insensitive(self):
        deps = [Coordinate("ORG.Eclipse.Jetty", "jetty-plus", "9.4.8")]
        assert split_plugin_dependencies(deps) == []

    def test_warns_once(self, caplog):
        deps = [
            Coordinate("org.eclipse.jetty", "jetty-jndi", "9.4.8"),
            Coordinate("org.eclipse.jetty", "jetty-plus", "9.4.8"),
        ]
        with caplog.at_level(logging.WARNING, logger="jettyrun.artifact"):
            split_plugin_dependencies(deps)
        warnings = [r for r in caplog.records if r.levelno == logging.WARNING]
        assert len(warnings) == 1
        assert "modules" in warnings[0].getMessage()

    def test_no_warning_without_jetty_dependencies(self, caplog):
        with caplog.at_level(logging.WARNING, logger="jettyrun.artifact"):
            split_plugin_dependencies([Coordinate("com.x", "foo", "1.0")])
        assert not caplog.records

    def test_empty(self):
        assert split_plugin_dependencies([]) == []
