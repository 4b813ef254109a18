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
'''Defines ScutilStore plugin. See docstring for ScutilStore class'''

from identitylib import constants
from identitylib import utils
from identitylib.fieldstore import (FieldStore, FieldNotFoundError,
                                    FieldReadError, FieldWriteError)


class ScutilStore(FieldStore):
    '''Reads and writes the macOS system name records with scutil(8).

    Only ComputerName, HostName and LocalHostName are supported. A record
    that has never been set reads as the empty string. Writing requires
    root.'''

    supported_fields = tuple(constants.SYSTEM_NAME_FIELDS)

    def __init__(self, scutil=constants.SCUTIL):
        self.scutil = scutil

    def _check_field(self, field):
        if field not in self.supported_fields:
            raise FieldNotFoundError(
                '%s is not a name record scutil manages' % field)

    def get(self, field):
        self._check_field(field)
        try:
            returncode, stdout, stderr = utils.run_command(
                [self.scutil, '--get', field])
        except utils.CommandError as err:
            raise FieldReadError(str(err))
        if returncode:
            # scutil exits non-zero and prints '<field>: not set' for a
            # record that was never set
            if '%s: not set' % field in stdout + stderr:
                return ''
            raise FieldReadError(
                'scutil --get %s failed (%s): %s'
                % (field, returncode, (stderr or stdout).strip()))
        return stdout.rstrip('\n')

    def set(self, field, value):
        self._check_field(field)
        try:
            returncode, stdout, stderr = utils.run_command(
                [self.scutil, '--set', field, value])
        except utils.CommandError as err:
            raise FieldWriteError(str(err))
        if returncode:
            raise FieldWriteError(
                'scutil --set %s failed (%s): %s'
                % (field, returncode, (stderr or stdout).strip()))
