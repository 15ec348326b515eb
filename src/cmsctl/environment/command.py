"""
Command line for re-invoking cmsctl.

Used when cmsctl has to run itself again: in a subprocess, under a
different interpreter, or on a remote host over ssh. The result is a single
string, every dynamic token escaped for the target shell.
"""

from typing import Mapping, Optional

from cmsctl.core.context import Context
from cmsctl.environment.host import DEFAULT_COLUMNS
from cmsctl.environment.os_family import OSClassifier

DEFAULT_INTERPRETER = 'php'
INTERPRETER_EXTENSION = '.php'
REMOTE_COMMAND = 'cmsctl'


def _escape_windows(arg: str) -> str:
    arg = arg.replace('"', '""')
    arg = arg.replace('%', '%%')
    return f'"{arg}"'


def _escape_posix(arg: str) -> str:
    return "'" + arg.replace("'", "'\\''") + "'"


def escape_shell_arg(arg: object, windows: bool = False) -> str:
    """Quote one argument for a Windows (cmd.exe) or POSIX shell."""
    arg = str(arg)
    return _escape_windows(arg) if windows else _escape_posix(arg)


class CommandBuilder:
    """Builds the shell command that runs cmsctl again."""

    def __init__(self, context: Context, classifier: OSClassifier):
        self.context = context
        self.classifier = classifier

    def escape(self, arg: object, os_token: Optional[str] = None) -> str:
        windows = self.classifier.is_windows(os_token) and not self.classifier.is_cygwin(os_token)
        return escape_shell_arg(arg, windows=windows)

    def build(
        self,
        command_path: Optional[str] = None,
        interpreter: Optional[str] = None,
        os_token: Optional[str] = None,
        remote: bool = False,
        environment: Optional[Mapping[str, object]] = None
    ) -> str:
        """Assemble the command string.

        A command ending in .php is run through the interpreter, which
        receives the configured php-options. Any other command is executed
        directly; when the target shell supports it, the interpreter,
        php-options and terminal width travel as environment variables
        instead.

        Args:
            command_path: Path of the cmsctl entry point; defaults to the
                'command' option locally and to "cmsctl" remotely
            interpreter: Interpreter override; defaults to the 'php' option
            os_token: Target OS identifier (see os_family.resolve_os)
            remote: Whether the command will run on another host
            environment: Extra environment variables to set for the command

        Returns:
            Shell-ready command string
        """
        env_vars = dict(environment or {})
        if command_path is None:
            command_path = REMOTE_COMMAND if remote else self.context.get_option('command', REMOTE_COMMAND)
        php_options = self.context.get_option('php-options')

        prefix = ''
        additional_options = ''
        if command_path.endswith(INTERPRETER_EXTENSION):
            if interpreter is None:
                interpreter = self.context.get_option('php', DEFAULT_INTERPRETER)
            if interpreter != DEFAULT_INTERPRETER:
                additional_options += ' --php=' + self.escape(interpreter, os_token)
            prefix = self.escape(interpreter, os_token) + ' '
            if php_options:
                prefix += f"{php_options} "
        elif self.classifier.has_posix_shell(os_token):
            if interpreter and interpreter != DEFAULT_INTERPRETER:
                env_vars['CMSCTL_PHP'] = interpreter
            if php_options:
                env_vars['PHP_OPTIONS'] = php_options
            columns = self.context.get_option('columns')
            if columns and str(columns).isdigit() and int(columns) != DEFAULT_COLUMNS:
                env_vars['COLUMNS'] = columns

        env_prefix = ''
        for key, value in env_vars.items():
            env_prefix += f"{self.escape(key, os_token)}={self.escape(value, os_token)} "
        if env_prefix:
            env_prefix = 'env ' + env_prefix

        return env_prefix + prefix + self.escape(command_path, os_token) + additional_options
