# tests/test_dockutil.py
"""
Tests for ProDock.core.dockutil
(covers shell error mapping, tool resolution and the dockutil commands).

Run with:
    python -m unittest tests.test_dockutil
"""
import unittest
from unittest.mock import patch

from ProDock.core import dockutil
from ProDock.core.dockutil import DockutilService, run_shell_command
from ProDock.settings import lib
from ProDock.status import status
from tests.base import BaseTestCase, HOME, completed, mute_settings_signals


class RunShellCommandTests(unittest.TestCase):

    @patch('ProDock.core.dockutil.subprocess.run')
    def test_success_returns_stripped_stdout(self, run):
        run.return_value = completed(0, stdout='  hello\n', stderr='a warning\n')
        self.assertEqual(run_shell_command('echo hello'), 'hello')
        kwargs = run.call_args.kwargs
        self.assertTrue(kwargs['shell'])
        self.assertEqual(kwargs['executable'], dockutil.SHELL)
        self.assertTrue(kwargs['capture_output'])
        self.assertNotIn('timeout', kwargs)

    @patch('ProDock.core.dockutil.subprocess.run')
    def test_failure_prefers_stderr(self, run):
        run.return_value = completed(3, stdout='out', stderr='err\n')
        with self.assertRaises(status.ExecutionFailedException) as ctx:
            run_shell_command('false')
        self.assertEqual(ctx.exception.exit_status, 3)
        self.assertEqual(ctx.exception.output, 'err')

    @patch('ProDock.core.dockutil.subprocess.run')
    def test_failure_falls_back_to_stdout(self, run):
        run.return_value = completed(1, stdout='only stdout\n', stderr='  ')
        with self.assertRaises(status.ExecutionFailedException) as ctx:
            run_shell_command('false')
        self.assertEqual(ctx.exception.output, 'only stdout')

    @patch('ProDock.core.dockutil.subprocess.run')
    def test_failure_without_output(self, run):
        run.return_value = completed(7)
        with self.assertRaises(status.ExecutionFailedException) as ctx:
            run_shell_command('false')
        self.assertEqual(ctx.exception.output, 'Shell command failed (7)')
        self.assertIn('Exit status 7', str(ctx.exception))

    @patch('ProDock.core.dockutil.subprocess.run', side_effect=FileNotFoundError('no /bin/sh'))
    def test_launch_failure(self, run):
        with self.assertRaises(status.ExecutionFailedException) as ctx:
            run_shell_command('true')
        self.assertEqual(ctx.exception.exit_status, -1)

    def test_real_shell(self):
        self.assertEqual(run_shell_command("printf '%s' 'a b'"), 'a b')
        with self.assertRaises(status.ExecutionFailedException) as ctx:
            run_shell_command('echo broken >&2; exit 4')
        self.assertEqual(ctx.exception.exit_status, 4)
        self.assertEqual(ctx.exception.output, 'broken')


class ToolResolutionTests(BaseTestCase):

    def test_missing_tool_is_unavailable(self):
        with mute_settings_signals():
            lib.settings['dockutil_path'] = '/nonexistent/dockutil'
        with self.assertRaises(status.ToolUnavailableException):
            DockutilService().remove_all()

    def test_non_executable_tool_is_unavailable(self):
        tools = self.use_fake_tools()
        tools.dockutil.chmod(0o644)
        with self.assertRaises(status.ToolUnavailableException):
            DockutilService().list_items(home=HOME)

    @patch('ProDock.settings.lib.shutil.which', return_value=None)
    def test_unconfigured_tool_not_on_path(self, which):
        with self.assertRaises(status.ToolUnavailableException):
            lib.settings.dockutil_path()


class DockutilServiceTests(BaseTestCase):

    def setUp(self) -> None:
        super().setUp()
        self.tools = self.use_fake_tools()
        self.service = DockutilService()

    def test_list_items(self):
        items = self.service.list_items(home=HOME)
        self.assertEqual([i.label for i in items], ['Safari', 'Downloads'])
        self.assertEqual(self.tools.calls(), ['--list --no-restart'])

    def test_list_items_uses_configured_policy(self):
        self.tools.set_listing('garbage\nSafari\tfile:///Applications/Safari.app/')
        self.assertEqual(len(self.service.list_items(home=HOME)), 1)

        with mute_settings_signals():
            lib.settings['malformed_lines'] = 'fail'
        with self.assertRaises(status.ParseFailedException):
            self.service.list_items(home=HOME)

    def test_remove_all(self):
        self.service.remove_all()
        self.service.remove_all(no_restart=True)
        self.assertEqual(self.tools.calls(), ['--remove all', '--remove all --no-restart'])

    def test_add_item_passes_fragment_through_the_shell(self):
        self.service.add_item("'/Applications/Visual Studio Code.app' --view grid", no_restart=True)
        self.service.add_item("'' --type spacer")
        self.assertEqual(self.tools.calls(), [
            '--add /Applications/Visual Studio Code.app --view grid --no-restart',
            '--add  --type spacer',
        ])

    def test_add_item_rejects_empty_fragment(self):
        with self.assertRaises(status.ConstructionFailedException):
            self.service.add_item('   ')
        self.assertEqual(self.tools.calls(), [])

    def test_add_item_failure(self):
        self.tools.fail_on('/Applications/Safari.app')
        with self.assertRaises(status.ExecutionFailedException) as ctx:
            self.service.add_item('/Applications/Safari.app')
        self.assertEqual(ctx.exception.exit_status, 1)
        self.assertIn('add failed', ctx.exception.output)

    def test_restart_dock(self):
        self.assertTrue(self.service.restart_dock())
        self.assertEqual(self.tools.calls(), ['killall Dock'])

    def test_restart_failure_is_reported_without_raising(self):
        self.tools.fail_restart()
        self.assertFalse(self.service.restart_dock())
        self.assertEqual(self.tools.calls(), ['killall Dock'])

    @patch('ProDock.core.dockutil.subprocess.run', side_effect=FileNotFoundError('no /bin/sh'))
    def test_restart_launch_failure(self, run):
        self.assertFalse(self.service.restart_dock())


if __name__ == '__main__':
    unittest.main()
