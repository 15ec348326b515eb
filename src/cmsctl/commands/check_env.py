"""Interpreter environment checks.

Some php.ini settings (safe_mode, open_basedir, disabled exec/system, ...)
break commands that shell out or read outside the docroot. They do not
break every command, so they are reported as warnings, not errors.
"""
import subprocess
from typing import Dict, List, Optional, Tuple

from cmsctl.core import (
    ProcessExecutor,
    ToolLocator,
    Logger,
    Context,
)

# ini setting -> values that make it a problem (empty tuple: any non-empty value)
RESTRICTED_INI_SETTINGS: Dict[str, tuple] = {
    'safe_mode': (),
    'open_basedir': (),
    'disable_functions': ('exec', 'system'),
    'disable_classes': (),
}

_INI_PROBE = (
    "foreach (array(%s) as $k) { echo $k, '=', ini_get($k), PHP_EOL; }"
)


class EnvironmentCheck:
    """Represents a single environment check result"""
    def __init__(self, name: str, status: str, message: str, critical: bool = False):
        self.name = name
        self.status = status  # 'pass', 'warn', 'fail'
        self.message = message
        self.critical = critical


class EnvironmentChecker:
    """Checks the interpreter cmsctl hands work to."""

    def __init__(
        self,
        process_executor: ProcessExecutor,
        tool_locator: ToolLocator,
        context: Context,
        logger: Logger
    ):
        self.process = process_executor
        self.tools = tool_locator
        self.context = context
        self.log = logger

    @property
    def interpreter(self) -> str:
        return self.context.get_option('php', 'php')

    def check_interpreter(self) -> EnvironmentCheck:
        """Check that the interpreter can be found"""
        found = self.tools.find_tool(self.interpreter)
        if found:
            return EnvironmentCheck('Interpreter', 'pass', f'Found {found}')
        return EnvironmentCheck(
            'Interpreter',
            'fail',
            f"'{self.interpreter}' not found in PATH (set the 'php' option)",
            critical=True
        )

    def read_ini_settings(self, names: List[str]) -> Optional[Dict[str, str]]:
        """Ask the interpreter for ini values. None if it cannot be run."""
        probe = _INI_PROBE % ', '.join(f"'{n}'" for n in names)
        cmd = [self.interpreter]
        php_options = self.context.get_option('php-options')
        if php_options:
            cmd.extend(php_options.split())
        cmd.extend(['-r', probe])

        try:
            result = self.process.run(cmd, capture_output=True, text=True, timeout=10)
        except (OSError, subprocess.TimeoutExpired) as e:
            self.log.debug(f"Could not run {self.interpreter}: {e}")
            return None
        if result.returncode != 0:
            self.log.debug(f"{self.interpreter} exited with {result.returncode}: {result.stderr}")
            return None

        settings = {}
        for line in result.stdout.splitlines():
            if '=' in line:
                key, _, value = line.partition('=')
                settings[key.strip()] = value.strip()
        return settings

    def check_restricted_ini(self) -> EnvironmentCheck:
        """Check for restrictive php.ini settings"""
        settings = self.read_ini_settings(list(RESTRICTED_INI_SETTINGS))
        if settings is None:
            return EnvironmentCheck(
                'Interpreter restrictions',
                'warn',
                f'Unable to query {self.interpreter} configuration'
            )

        offending = []
        for name, bad_values in RESTRICTED_INI_SETTINGS.items():
            value = settings.get(name, '')
            if not value or value.lower() in ('0', 'off'):
                continue
            if bad_values:
                listed = {v.strip().lower() for v in value.split(',')}
                if not listed.intersection(bad_values):
                    continue
            offending.append(f"{name}={value}")

        if not offending:
            return EnvironmentCheck('Interpreter restrictions', 'pass', 'No restrictive settings')

        return EnvironmentCheck(
            'Interpreter restrictions',
            'warn',
            "The following restricted settings have non-empty values: "
            + ', '.join(offending)
            + ". This configuration is incompatible with some commands. "
            "Change it in php.ini or override it with the 'php-options' option."
        )

    def run_all_checks(self) -> Tuple[List[EnvironmentCheck], bool]:
        """Run all environment checks.

        Returns:
            Tuple of (list of checks, all_pass boolean)
        """
        checks = [self.check_interpreter()]
        if checks[0].status == 'pass':
            checks.append(self.check_restricted_ini())

        # Warnings never fail the run; restrictions only affect some commands
        all_pass = all(check.status != 'fail' for check in checks)
        return checks, all_pass

    def print_results(self, checks: List[EnvironmentCheck]) -> None:
        """Print check results using logger."""
        self.log.info("=" * 80)
        self.log.info("ENVIRONMENT CHECK")
        self.log.info("=" * 80)

        symbols = {
            'pass': '✓',
            'warn': '⚠',
            'fail': '✗'
        }

        for check in checks:
            symbol = symbols.get(check.status, '?')
            critical_marker = ' [CRITICAL]' if check.critical else ''
            self.log.info(f"{symbol} {check.name}: {check.message}{critical_marker}")

        for check in checks:
            if check.status == 'warn':
                self.log.warning(check.message)

        pass_count = sum(1 for c in checks if c.status == 'pass')
        warn_count = sum(1 for c in checks if c.status == 'warn')
        fail_count = sum(1 for c in checks if c.status == 'fail')

        self.log.info("=" * 80)
        self.log.info(f"Summary: {pass_count} passed, {warn_count} warnings, {fail_count} failed")


def setup_parser(parser):
    """Setup argument parser for check-env command"""
    parser.add_argument(
        '--php',
        help='Interpreter to check (default: php option, else "php")'
    )


def execute(args):
    """Execute environment check.

    Returns:
        Exit code: 0 unless a critical check failed
    """
    from cmsctl.core import SubprocessExecutor, SystemToolLocator
    from cmsctl.runtime import load_runtime

    runtime = load_runtime(args, php=getattr(args, 'php', None))
    checker = EnvironmentChecker(
        process_executor=SubprocessExecutor(),
        tool_locator=SystemToolLocator(),
        context=runtime.context,
        logger=runtime.logger
    )

    checks, all_pass = checker.run_all_checks()
    checker.print_results(checks)
    return 0 if all_pass else 1
