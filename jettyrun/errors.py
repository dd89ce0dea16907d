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

"""jettyrun error types."""

from dataclasses import dataclass, field


class JettyRunError(Exception):
    """Base class for all jettyrun errors."""

    pass


@dataclass
class ConfigurationError(JettyRunError):
    """Raised when a configured path or location is missing or unusable."""

    message: str

    def __str__(self) -> str:
        return self.message


@dataclass
class ResolutionError(JettyRunError):
    """Raised when an artifact coordinate cannot be resolved."""

    coordinate: str
    reasons: list[str] = field(default_factory=list)

    def __str__(self) -> str:
        if not self.reasons:
            return f"Could not resolve artifact '{self.coordinate}'"
        return f"Could not resolve artifact '{self.coordinate}': " + "; ".join(self.reasons)


@dataclass
class StartFailure(JettyRunError):
    """Raised by the orchestrator when any step of a run fails.

    The original exception is available as ``__cause__``.
    """

    message: str = "Failed to start Jetty"

    def __str__(self) -> str:
        cause = self.__cause__
        if cause is None:
            return self.message
        return f"{self.message}: {cause}"
