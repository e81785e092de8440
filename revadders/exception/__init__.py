#  Copyright 2023 Google LLC
#
#  Licensed under the Apache License, Version 2.0 (the "License");
#  you may not use this file except in compliance with the License.
#  You may obtain a copy of the License at
#
#      https://www.apache.org/licenses/LICENSE-2.0
#
#  Unless required by applicable law or agreed to in writing, software
#  distributed under the License is distributed on an "AS IS" BASIS,
#  WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
#  See the License for the specific language governing permissions and
#  limitations under the License.

"""Exceptions that may be raised by the framework."""

from revadders._infra.bloq import DecomposeNotImplementedError, DecomposeTypeError


class ConfigurationError(ValueError):
    """A bloq or register layout was requested that cannot be built.

    Raised for register-length mismatches and invalid bitsizes. It is always raised before
    any operation has been emitted.
    """


class ResourceSizingError(AssertionError):
    """The auxiliary workspace was sized inconsistently.

    This signals a bug in the sizing arithmetic rather than bad user input.
    """


__all__ = [
    'ConfigurationError',
    'DecomposeTypeError',
    'DecomposeNotImplementedError',
    'ResourceSizingError',
]
