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

"""Root pytest configuration for jettyrun tests."""

import pytest


def pytest_addoption(parser):
    """Add custom command-line options."""
    parser.addoption(
        "--live-repository",
        action="store_true",
        default=False,
        help="Run resolver tests against Maven Central instead of mocked downloads",
    )


def pytest_collection_modifyitems(config, items):
    if config.getoption("--live-repository"):
        return
    skip_live = pytest.mark.skip(reason="needs --live-repository")
    for item in items:
        if "live_repository" in item.keywords:
            item.add_marker(skip_live)
