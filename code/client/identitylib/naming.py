# encoding: utf-8
#
# Copyright 2025 The setmachinename Authors.
#
# Licensed under the Apache License, Version 2.0 (the 'License');
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#      https://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an 'AS IS' BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
"""
naming.py

Composing and checking machine names.
"""

import re

from . import utils

# LocalHostName allows only this; scutil rewrites anything else
VALID_NAME_RE = re.compile(r'^[A-Za-z0-9](?:[A-Za-z0-9-]*[A-Za-z0-9])?$')
MAX_NAME_LENGTH = 63


class InvalidNameError(utils.Error):
    """The name can't be used for every name record."""


def _strip_whitespace(part):
    return ''.join((part or '').split())


def compose_name(department, user, model):
    """Returns '<department>-<user>-<model>', e.g. 'Dev-alice-MacBookPro'.
    Whitespace is removed from each part; empty parts are left out."""
    parts = [_strip_whitespace(part) for part in (department, user, model)]
    return '-'.join([part for part in parts if part])


def validate_name(name):
    """Raises InvalidNameError unless name is usable as a LocalHostName"""
    if not name:
        raise InvalidNameError('The machine name is empty.')
    if len(name) > MAX_NAME_LENGTH:
        raise InvalidNameError(
            '"%s" is longer than %s characters.' % (name, MAX_NAME_LENGTH))
    if not VALID_NAME_RE.match(name):
        raise InvalidNameError(
            '"%s" may contain only letters, digits and hyphens, and may not '
            'begin or end with a hyphen.' % name)


def validate_department(department, departments):
    """Returns the department as listed in departments, matching case
    insensitively. Raises InvalidNameError if it isn't listed."""
    for known in departments:
        if known.lower() == (department or '').lower():
            return known
    raise InvalidNameError(
        '"%s" is not a known department. Choose one of: %s'
        % (department, ', '.join(departments)))
