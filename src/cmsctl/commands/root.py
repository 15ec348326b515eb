"""Print the CMS root containing a directory"""


def setup_parser(parser):
    """Setup argument parser for root command"""
    parser.add_argument(
        'path',
        nargs='?',
        help='Directory to start from (default: current directory)'
    )


def execute(args):
    """Execute root command"""
    from cmsctl.runtime import load_runtime

    runtime = load_runtime(args)
    root = runtime.roots.locate_root(args.path)
    if root is None:
        runtime.logger.error(f"No CMS root found above {args.path or runtime.host.cwd()}")
        return 1

    descriptor = runtime.roots.valid_root(root)
    runtime.logger.info(root)
    if descriptor is not None:
        runtime.logger.debug(f"Matched {descriptor.name} marker {descriptor.marker}")
    return 0
