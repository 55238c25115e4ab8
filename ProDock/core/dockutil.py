"""Runs ``dockutil`` and ``killall`` to read and modify the Dock.

Commands are executed through ``/bin/sh -c`` because add fragments are
stored as shell text. Every call blocks until the process exits, and the
whole output is captured before returning. There is no timeout.
"""
import logging
import shlex
import subprocess
from typing import List, Optional

from .parser import MalformedLinePolicy, ParsedItem, parse_list_output
from ..settings import lib
from ..status import status

SHELL: str = '/bin/sh'


def run_process(command: str) -> subprocess.CompletedProcess:
    """Run a command string with ``/bin/sh -c`` and capture its output.

    Raises:
        OSError: If the shell cannot be launched.
    """
    logging.debug(f'Executing via shell: {command}')
    return subprocess.run(
        command,
        shell=True,
        executable=SHELL,
        capture_output=True,
        text=True,
        encoding='utf-8',
        errors='replace',
    )


def run_shell_command(command: str) -> str:
    """Run a command string with ``/bin/sh -c`` and return its stripped stdout.

    Args:
        command: The complete command line.

    Returns:
        str: Standard output, stripped of surrounding whitespace.

    Raises:
        status.ExecutionFailedException: If the shell cannot be launched or the command
            exits with a nonzero status. The message is stderr, or stdout if stderr is empty.
    """
    try:
        result = run_process(command)
    except OSError as ex:
        raise status.ExecutionFailedException(-1, f'Failed to launch {SHELL}: {ex}') from ex

    stdout = (result.stdout or '').strip()
    stderr = (result.stderr or '').strip()

    if result.returncode == 0:
        if stderr:
            logging.warning(f'Shell stderr (non-fatal): {stderr}')
        return stdout

    logging.debug(
        f'Shell command failed with status {result.returncode}\n'
        f'  Command: {command}\n'
        f'  stdout: {stdout}\n'
        f'  stderr: {stderr}'
    )
    message = stderr or stdout or f'Shell command failed ({result.returncode})'
    raise status.ExecutionFailedException(result.returncode, message)


class DockutilService:
    """Thin wrapper around the dockutil command line.

    The executable is resolved from the settings on every call so a changed
    ``dockutil_path`` applies immediately.
    """

    def _command(self, *args: str) -> str:
        path = lib.settings.dockutil_path()
        return ' '.join([shlex.quote(str(path)), *args])

    def list_items(self, home: Optional[str] = None) -> List[ParsedItem]:
        """Return the current Dock items, filtered and cleaned.

        Raises:
            status.ToolUnavailableException: If dockutil cannot be found.
            status.ExecutionFailedException: If dockutil fails.
            status.ParseFailedException: If the output is malformed and the policy is 'fail'.
        """
        output = run_shell_command(self._command('--list', '--no-restart'))
        policy = MalformedLinePolicy(lib.settings['malformed_lines'])
        return parse_list_output(output, home=home, policy=policy)

    def remove_all(self, no_restart: bool = False) -> str:
        """Remove every item from the Dock."""
        args = ['--remove', 'all']
        if no_restart:
            args.append('--no-restart')
        return run_shell_command(self._command(*args))

    def add_item(self, fragment: str, no_restart: bool = False) -> str:
        """Add a single item from a stored fragment.

        Raises:
            status.ConstructionFailedException: If the fragment is empty.
        """
        fragment = fragment.strip(' \t')
        if not fragment:
            raise status.ConstructionFailedException('Cannot add item with empty command fragment.')

        # The fragment is already quoted for the shell
        args = ['--add', fragment]
        if no_restart:
            args.append('--no-restart')
        return run_shell_command(self._command(*args))

    def restart_dock(self) -> bool:
        """Ask the Dock process to quit; launchd starts it again with the new layout.

        A failed restart leaves the new layout in place, so it is logged as a
        warning and reported through the return value instead of raising.

        Returns:
            bool: True if the restart request succeeded.
        """
        command = ' '.join([
            shlex.quote(lib.settings['killall_path']),
            shlex.quote(lib.settings['dock_process']),
        ])
        logging.debug(f'Restarting Dock via: {command}')
        try:
            result = run_process(command)
        except OSError as ex:
            logging.warning(f'Could not restart the Dock: {ex}')
            return False

        if result.returncode != 0:
            output = (result.stderr or '').strip() or (result.stdout or '').strip()
            logging.warning(f'Dock restart exited with status {result.returncode}: {output}')
            return False
        return True
