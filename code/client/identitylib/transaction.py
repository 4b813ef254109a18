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
transaction.py

Atomically set a group of logically linked fields to one value.

A FieldStore offers only per-field get and set. To keep a group of fields
(for example the three macOS name records) from ever being left in a mixed
state, apply() backs up every field, writes the new value, reads every field
back, and restores all written fields if any write or read-back fails.

apply() never raises for store failures: every outcome, including bad input,
is returned as a TransactionResult for the caller to act on.

apply() does no locking. Callers must serialize concurrent transactions over
overlapping fields themselves.
"""

import collections

from . import display
from .fieldstore import FieldStoreError


# TransactionResult.status values
COMMITTED = 'Committed'
ROLLED_BACK = 'RolledBack'
INVALID_INPUT = 'InvalidInput'
BACKUP_FAILED = 'BackupFailed'


_ResultBase = collections.namedtuple(
    '_ResultBase',
    ['status', 'fields', 'desired_value', 'snapshot', 'failed_field',
     'error', 'restore_failures'])


class TransactionResult(_ResultBase):
    '''Immutable outcome of one transaction.

    status: one of COMMITTED, ROLLED_BACK, INVALID_INPUT, BACKUP_FAILED
    fields: tuple of field names, in order of application
    desired_value: the value the fields were to be set to
    snapshot: tuple of (field, value) pairs captured before any write;
        empty unless the backup completed
    failed_field: the field whose read, write or verification failed
    error: str describing the failure
    restore_failures: tuple of (field, error) pairs for rollback writes
        that failed; those fields may hold neither value
    '''
    __slots__ = ()

    @property
    def committed(self):
        return self.status == COMMITTED

    @property
    def rolled_back(self):
        return self.status == ROLLED_BACK

    @property
    def fully_restored(self):
        '''True if a rollback put every written field back'''
        return self.rolled_back and not self.restore_failures

    @property
    def previous_values(self):
        return dict(self.snapshot)

    def as_dict(self):
        '''Returns the result as a dict suitable for a plist report'''
        info = {
            'Status': self.status,
            'Fields': list(self.fields),
            'DesiredValue': self.desired_value or '',
            'PreviousValues': self.previous_values,
        }
        if self.failed_field:
            info['FailedField'] = self.failed_field
        if self.error:
            info['Error'] = self.error
        if self.restore_failures:
            info['RestoreFailures'] = [
                {'Field': field, 'Error': error}
                for (field, error) in self.restore_failures]
        return info


def _result(status, fields, desired_value, snapshot=(), failed_field=None,
            error=None, restore_failures=()):
    return TransactionResult(
        status, tuple(fields), desired_value, tuple(snapshot), failed_field,
        error, tuple(restore_failures))


def _backup(store, fields):
    '''Reads every field. Returns (snapshot, failed_field, error)'''
    snapshot = []
    for field in fields:
        try:
            value = store.get(field)
        except FieldStoreError as err:
            return snapshot, field, str(err)
        display.display_detail('%s is currently "%s"', field, value)
        snapshot.append((field, value))
    return snapshot, None, None


def _write(store, fields, desired_value):
    '''Writes desired_value to each field in order, stopping at the first
    failure. Returns (written_fields, failed_field, error)'''
    written = []
    for field in fields:
        display.display_detail('Setting %s to "%s"', field, desired_value)
        try:
            store.set(field, desired_value)
        except FieldStoreError as err:
            return written, field, 'could not set %s: %s' % (field, err)
        written.append(field)
    return written, None, None


def _verify(store, fields, desired_value):
    '''Reads every field back. Returns (failed_field, error) for the first
    field that does not hold desired_value, or (None, None)'''
    failed_field = None
    error = None
    for field in fields:
        try:
            value = store.get(field)
        except FieldStoreError as err:
            mismatch = 'could not read back %s: %s' % (field, err)
        else:
            if value == desired_value:
                display.display_debug1('%s verified', field)
                continue
            mismatch = '%s reads "%s" instead of "%s"' % (
                field, value, desired_value)
        display.display_warning('Verification failed: %s', mismatch)
        if failed_field is None:
            failed_field, error = field, mismatch
    return failed_field, error


def _rollback(store, snapshot, written):
    '''Restores the written fields to their snapshot values, last written
    first. Keeps going past failures. Returns list of (field, error)'''
    previous = dict(snapshot)
    restore_failures = []
    for field in reversed(written):
        display.display_detail(
            'Restoring %s to "%s"', field, previous[field])
        try:
            store.set(field, previous[field])
        except FieldStoreError as err:
            display.display_error(
                'Could not restore %s to "%s": %s',
                field, previous[field], err)
            restore_failures.append((field, str(err)))
    return restore_failures


def apply(store, fields, desired_value):
    """Sets every field in fields to desired_value, or none of them.

    Args:
      store: a FieldStore
      fields: ordered sequence of field names
      desired_value: non-empty str
    Returns:
      TransactionResult
    """
    fields = tuple(fields or ())
    if not fields:
        display.display_error('No fields were given to update.')
        return _result(INVALID_INPUT, fields, desired_value,
                       error='no fields given')
    if not desired_value:
        display.display_error('Refusing to set %s to an empty value.',
                              ', '.join(fields))
        return _result(INVALID_INPUT, fields, desired_value,
                       error='desired value is empty')

    display.display_status_minor('Backing up current values')
    snapshot, failed_field, error = _backup(store, fields)
    if failed_field is not None:
        display.display_error(
            'Could not read current value of %s: %s', failed_field, error)
        return _result(BACKUP_FAILED, fields, desired_value,
                       failed_field=failed_field, error=error)

    display.display_status_minor(
        'Setting %s to "%s"', ', '.join(fields), desired_value)
    written, failed_field, error = _write(store, fields, desired_value)
    if failed_field is not None:
        display.display_error(error)
    else:
        display.display_status_minor('Verifying')
        failed_field, error = _verify(store, fields, desired_value)

    if failed_field is None:
        display.display_info('All fields now read "%s".', desired_value)
        return _result(COMMITTED, fields, desired_value, snapshot=snapshot)

    display.display_status_minor('Rolling back')
    restore_failures = _rollback(store, snapshot, written)
    if restore_failures:
        display.display_error(
            'Rollback incomplete; %s may need to be fixed by hand.',
            ', '.join([field for (field, dummy) in restore_failures]))
    else:
        display.display_info('All fields restored to their previous values.')
    return _result(ROLLED_BACK, fields, desired_value, snapshot=snapshot,
                   failed_field=failed_field, error=error,
                   restore_failures=restore_failures)


class TransactionalSetter(object):
    '''Binds a FieldStore so repeated transactions can share it'''

    def __init__(self, store):
        self.store = store

    def apply(self, fields, desired_value):
        '''See transaction.apply()'''
        return apply(self.store, fields, desired_value)
