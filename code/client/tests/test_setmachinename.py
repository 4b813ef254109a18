# encoding: utf-8
"""
test_setmachinename.py

Unit tests for the setmachinename command-line tool.

"""
# Copyright 2025 The setmachinename Authors.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#      https://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

import signal
import unittest

from mock import call, patch

import setmachinename
from identitylib import constants
from identitylib import display
from identitylib import reports
from identitylib import transaction
from scaffolds import FakeFieldStore, quiet_log


NEW_NAME = 'Dev-alice-MacBookPro'
FACTS = {'ip_address': '10.0.0.5', 'security_agent_installed': True}


class SetMachineNameTestCase(unittest.TestCase):
    """Runs main() against a FakeFieldStore with the system patched out"""

    def setUp(self):
        self.store = FakeFieldStore()
        self.saved_verbose = display.verbose
        self.saved_report = reports.report
        self.mocks = {}
        for target, kwargs in [
                ('identitylib.identitylog.log', {'side_effect': quiet_log}),
                ('identitylib.identitylog.rotate_main_log', {}),
                ('identitylib.prefs._read_pref', {'return_value': None}),
                ('os.geteuid', {'return_value': 0}),
                ('signal.signal', {}),
                ('signal.pthread_sigmask', {}),
                ('identitylib.osutils.python_script_running',
                 {'return_value': 0}),
                ('identitylib.osutils.operator_name',
                 {'return_value': 'alice'}),
                ('identitylib.info.device_model',
                 {'return_value': 'MacBookPro'}),
                ('identitylib.info.machine_facts', {'return_value': FACTS}),
                ('identitylib.fieldstore.connect',
                 {'return_value': self.store}),
                ('identitylib.webhook.send_change_record',
                 {'return_value': True}),
                ('identitylib.reports.savereport', {'return_value': True}),
                ('identitylib.reports.archive_report', {}),
                ('setmachinename.get_input', {'return_value': 'y'}),
                ('builtins.print', {}),
        ]:
            patcher = patch(target, **kwargs)
            self.mocks[target] = patcher.start()
            self.addCleanup(patcher.stop)

    def tearDown(self):
        display.verbose = self.saved_verbose
        reports.report = self.saved_report

    def sent_record(self):
        send_mock = self.mocks['identitylib.webhook.send_change_record']
        return send_mock.call_args[0][0]


class TestCommit(SetMachineNameTestCase):
    """Runs where every record takes the new name."""

    def test_commit_with_yes(self):
        status = setmachinename.main(['--department', 'Dev', '--yes'])
        self.assertEqual(status, constants.EXIT_STATUS_SUCCESS)
        for field in constants.SYSTEM_NAME_FIELDS:
            self.assertEqual(self.store.values[field], NEW_NAME)
        self.assertFalse(self.mocks['setmachinename.get_input'].called)

    def test_commit_after_confirmation(self):
        status = setmachinename.main(['-d', 'Dev'])
        self.assertEqual(status, constants.EXIT_STATUS_SUCCESS)
        self.assertEqual(self.store.values['LocalHostName'], NEW_NAME)
        self.mocks['setmachinename.get_input'].assert_called_once_with(
            'Apply this change? (y/n): ')

    def test_department_is_asked_for(self):
        self.mocks['setmachinename.get_input'].side_effect = ['web3', 'y']
        status = setmachinename.main([])
        self.assertEqual(status, constants.EXIT_STATUS_SUCCESS)
        self.assertEqual(self.store.values['ComputerName'],
                         'Web3-alice-MacBookPro')
        self.assertEqual(self.sent_record()['department'], 'Web3')

    def test_user_and_model_options(self):
        setmachinename.main(['-d', 'Ops', '-u', 'bob', '--model', 'iMac',
                             '-y'])
        self.assertEqual(self.store.values['HostName'], 'Ops-bob-iMac')

    def test_exact_name(self):
        status = setmachinename.main(['--name', 'Lab-Mac-01', '-y'])
        self.assertEqual(status, constants.EXIT_STATUS_SUCCESS)
        self.assertEqual(self.store.values['ComputerName'], 'Lab-Mac-01')

    def test_change_is_reported(self):
        setmachinename.main(['-d', 'Dev', '-y'])
        record = self.sent_record()
        self.assertEqual(record['operator'], 'alice')
        self.assertEqual(record['previous_value'], 'old-a')
        self.assertEqual(record['attempted_value'], NEW_NAME)
        self.assertEqual(record['outcome'], transaction.COMMITTED)
        self.assertEqual(reports.report['Result']['Status'],
                         transaction.COMMITTED)
        self.assertTrue(self.mocks['identitylib.reports.savereport'].called)

    def test_no_report(self):
        setmachinename.main(['-d', 'Dev', '-y', '--no-report'])
        self.assertFalse(
            self.mocks['identitylib.webhook.send_change_record'].called)


class TestDeclineAndPreconditions(SetMachineNameTestCase):
    """Runs that stop before the transaction."""

    def test_decline_changes_nothing(self):
        self.mocks['setmachinename.get_input'].return_value = 'n'
        status = setmachinename.main(['-d', 'Dev'])
        self.assertEqual(status, constants.EXIT_STATUS_SUCCESS)
        self.assertEqual(self.store.set_calls(), [])
        self.assertFalse(
            self.mocks['identitylib.webhook.send_change_record'].called)

    def test_root_required(self):
        self.mocks['os.geteuid'].return_value = 501
        status = setmachinename.main(['-d', 'Dev', '-y'])
        self.assertEqual(status, constants.EXIT_STATUS_ROOT_REQUIRED)
        self.assertFalse(self.mocks['identitylib.fieldstore.connect'].called)

    def test_already_running(self):
        self.mocks['identitylib.osutils.python_script_running'].return_value = (
            '412')
        status = setmachinename.main(['-d', 'Dev', '-y'])
        self.assertEqual(status, constants.EXIT_STATUS_ALREADY_RUNNING)
        self.assertEqual(self.store.calls, [])

    def test_unknown_department(self):
        status = setmachinename.main(['-d', 'Legal', '-y'])
        self.assertEqual(status, constants.EXIT_STATUS_INVALID_PARAMETERS)
        self.assertEqual(self.store.set_calls(), [])

    def test_invalid_exact_name(self):
        status = setmachinename.main(['--name', 'bad name', '-y'])
        self.assertEqual(status, constants.EXIT_STATUS_INVALID_PARAMETERS)
        self.assertEqual(self.store.set_calls(), [])

    def test_version(self):
        status = setmachinename.main(['--version'])
        self.assertEqual(status, constants.EXIT_STATUS_SUCCESS)
        self.mocks['builtins.print'].assert_called_with('1.0.0.1')

    def test_show_config(self):
        status = setmachinename.main(['--show-config'])
        self.assertEqual(status, constants.EXIT_STATUS_SUCCESS)
        self.assertFalse(self.mocks['identitylib.fieldstore.connect'].called)

    def test_show_report(self):
        reports.report = {'Operator': 'alice'}
        with patch('identitylib.reports.readreport') as read_mock:
            with patch('identitylib.reports.printreport') as print_mock:
                status = setmachinename.main(['--show-report'])
        self.assertEqual(status, constants.EXIT_STATUS_SUCCESS)
        self.assertTrue(read_mock.called)
        print_mock.assert_called_once_with({'Operator': 'alice'})
        self.assertEqual(self.store.calls, [])


class TestFailures(SetMachineNameTestCase):
    """Runs where the transaction doesn't commit."""

    def test_rolled_back(self):
        self.store.stale = {'LocalHostName': 'old-c'}
        status = setmachinename.main(['-d', 'Dev', '-y'])
        self.assertEqual(status, constants.EXIT_STATUS_ROLLED_BACK)
        self.assertEqual(self.store.values['ComputerName'], 'old-a')
        self.assertEqual(self.store.values['HostName'], 'old-b')
        record = self.sent_record()
        self.assertEqual(record['outcome'], transaction.ROLLED_BACK)
        self.assertEqual(record['failed_field'], 'LocalHostName')
        self.assertTrue(record['fully_restored'])

    def test_restore_failed(self):
        self.store.stale = {'LocalHostName': 'old-c'}
        self.store.rejected = set([('HostName', 'old-b')])
        status = setmachinename.main(['-d', 'Dev', '-y'])
        self.assertEqual(status, constants.EXIT_STATUS_RESTORE_FAILED)
        self.assertIn(
            'HostName could NOT be restored (cannot write HostName). '
            'Set it back to "old-b" by hand.', reports.report['Errors'])

    def test_backup_failed(self):
        self.store.unreadable = set(['HostName'])
        status = setmachinename.main(['-d', 'Dev', '-y'])
        self.assertEqual(status, constants.EXIT_STATUS_BACKUP_FAILED)
        self.assertEqual(self.store.set_calls(), [])
        record = self.sent_record()
        self.assertEqual(record['outcome'], transaction.BACKUP_FAILED)
        self.assertEqual(record['previous_value'], 'old-a')

    def test_webhook_failure_does_not_change_status(self):
        self.mocks['identitylib.webhook.send_change_record'].return_value = (
            False)
        status = setmachinename.main(['-d', 'Dev', '-y'])
        self.assertEqual(status, constants.EXIT_STATUS_SUCCESS)


class TestSigterm(SetMachineNameTestCase):
    """SIGTERM waits until the name records are consistent again."""

    def test_sigterm_held_during_transaction(self):
        sigmask_mock = self.mocks['signal.pthread_sigmask']
        masks_at_apply = []
        real_apply = transaction.apply

        def apply_and_record(store, fields, new_name):
            masks_at_apply.append(list(sigmask_mock.call_args_list))
            return real_apply(store, fields, new_name)

        with patch('identitylib.transaction.apply',
                   side_effect=apply_and_record):
            status = setmachinename.main(['-d', 'Dev', '-y'])
        self.assertEqual(status, constants.EXIT_STATUS_SUCCESS)
        self.assertEqual(masks_at_apply,
                         [[call(signal.SIG_BLOCK, [signal.SIGTERM])]])
        self.assertEqual(sigmask_mock.call_args_list[-1],
                         call(signal.SIG_UNBLOCK, [signal.SIGTERM]))

    def test_sigterm_released_if_transaction_raises(self):
        sigmask_mock = self.mocks['signal.pthread_sigmask']
        with patch('identitylib.transaction.apply',
                   side_effect=RuntimeError('boom')):
            with self.assertRaises(RuntimeError):
                setmachinename.apply_uninterrupted(
                    self.store, ['ComputerName'], NEW_NAME)
        self.assertEqual(sigmask_mock.call_args_list[-1],
                         call(signal.SIG_UNBLOCK, [signal.SIGTERM]))

    def test_handler_exits(self):
        with self.assertRaises(SystemExit):
            setmachinename.signal_handler(signal.SIGTERM, None)


class TestExitStatus(unittest.TestCase):
    """exit_status_for maps results to exit codes."""

    def _result(self, status, restore_failures=()):
        return transaction.TransactionResult(
            status, ('ComputerName',), 'x', (), None, None,
            tuple(restore_failures))

    def test_mapping(self):
        self.assertEqual(
            setmachinename.exit_status_for(
                self._result(transaction.COMMITTED)), 0)
        self.assertEqual(
            setmachinename.exit_status_for(
                self._result(transaction.ROLLED_BACK)), 1)
        self.assertEqual(
            setmachinename.exit_status_for(
                self._result(transaction.ROLLED_BACK,
                             [('HostName', 'denied')])), 2)
        self.assertEqual(
            setmachinename.exit_status_for(
                self._result(transaction.INVALID_INPUT)), 200)
        self.assertEqual(
            setmachinename.exit_status_for(
                self._result(transaction.BACKUP_FAILED)), 202)


def main():
    unittest.main(buffer=True)


if __name__ == '__main__':
    main()
