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
"""Base classes for field store plugins"""


class FieldStoreError(Exception):
    '''Base exception for field store errors'''
    pass


class FieldNotFoundError(FieldStoreError):
    '''The store has no field with the given name'''
    pass


class FieldReadError(FieldStoreError):
    '''A field's value could not be read'''
    pass


class FieldWriteError(FieldStoreError):
    '''A field's value could not be written'''
    pass


class FieldStore(object):
    '''Abstract base class for a store of named string fields.

    Subclasses implement get() and set(). A store offers no multi-field
    transaction primitive; see identitylib.transaction for that.'''

    def get(self, field):
        '''Returns the current value of field as a str.
        Raises FieldNotFoundError or FieldReadError.'''
        raise NotImplementedError

    def set(self, field, value):
        '''Sets field to value. Raises FieldNotFoundError or
        FieldWriteError.'''
        raise NotImplementedError

    def __repr__(self):
        return '<%s>' % self.__class__.__name__
