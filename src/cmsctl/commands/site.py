"""Print the site directory containing a directory"""


def setup_parser(parser):
    """Setup argument parser for site command"""
    parser.add_argument(
        'path',
        nargs='?',
        help='Directory to start from (default: current directory)'
    )
    parser.add_argument(
        '--root',
        help='CMS root (default: located from the start directory)'
    )


def execute(args):
    """Execute site command"""
    from cmsctl.runtime import load_runtime

    runtime = load_runtime(args, root=args.root)
    root = runtime.context.get_option('root') or runtime.roots.locate_root(args.path)
    site = runtime.sites.site_path(root, args.path)
    if site is None:
        runtime.logger.error("No site directory found")
        return 1

    runtime.logger.info(site)
    return 0
