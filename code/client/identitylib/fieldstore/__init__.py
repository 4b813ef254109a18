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
fieldstore

Stores of named string fields that a transaction can read and write.
Plugins live in this package, one class per module, named after the module.
"""

import importlib

from identitylib.fieldstore._baseclasses import (
    FieldStore, FieldStoreError, FieldNotFoundError, FieldReadError,
    FieldWriteError)

DEFAULT_PLUGIN = 'ScutilStore'


def plugin_named(some_name):
    '''Returns a plugin class given a name, or None'''
    if not some_name or some_name.startswith('_'):
        return None
    try:
        module = importlib.import_module('%s.%s' % (__name__, some_name))
    except ImportError:
        return None
    return getattr(module, some_name, None)


def connect(plugin_name=None, **kwargs):
    '''Return a store object for reading and writing fields'''
    plugin = plugin_named(plugin_name or DEFAULT_PLUGIN)
    if plugin:
        return plugin(**kwargs)
    raise FieldStoreError(
        'Could not find field store plugin named: %s' % plugin_name)
