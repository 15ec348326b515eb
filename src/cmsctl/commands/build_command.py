"""Print the command line that re-invokes cmsctl"""


def _parse_env(pairs):
    env = {}
    for pair in pairs or []:
        key, sep, value = pair.partition('=')
        if not sep or not key:
            raise ValueError(f"Invalid --env value '{pair}' (expected KEY=VALUE)")
        env[key] = value
    return env


def setup_parser(parser):
    """Setup argument parser for command command"""
    parser.add_argument(
        '--path',
        help='Path of the cmsctl entry point (default: command option)'
    )
    parser.add_argument(
        '--php',
        help='Interpreter for .php entry points'
    )
    parser.add_argument(
        '--os',
        dest='target_os',
        help='Target OS identifier, or LOCAL / RSYNC'
    )
    parser.add_argument(
        '--remote',
        action='store_true',
        help='Build the command for execution on a remote host'
    )
    parser.add_argument(
        '--env',
        action='append',
        metavar='KEY=VALUE',
        help='Environment variable to set for the command (repeatable)'
    )


def execute(args):
    """Execute command command"""
    from cmsctl.runtime import load_runtime

    runtime = load_runtime(args)
    try:
        environment = _parse_env(args.env)
    except ValueError as e:
        runtime.logger.error(str(e))
        return 2

    command = runtime.commands.build(
        command_path=args.path,
        interpreter=args.php,
        os_token=args.target_os,
        remote=args.remote,
        environment=environment
    )
    runtime.logger.info(command)
    return 0
