"""Resolve the configuration directory serving a URI"""


def setup_parser(parser):
    """Setup argument parser for conf-path command"""
    parser.add_argument(
        'uri',
        nargs='?',
        help='Requested URI, e.g. http://example.com/shop (default: uri option)'
    )
    parser.add_argument(
        '--root',
        help='CMS root (default: located from the current directory)'
    )
    parser.add_argument(
        '--no-require-settings',
        dest='require_settings',
        action='store_false',
        help='Accept site directories that exist but have no settings.php'
    )
    parser.add_argument(
        '--explain',
        action='store_true',
        help='List every candidate directory in the order it is tried'
    )


def execute(args):
    """Execute conf-path command"""
    from cmsctl.environment import candidate_keys
    from cmsctl.runtime import load_runtime

    runtime = load_runtime(args, root=args.root, uri=args.uri)
    root = runtime.context.get_option('root') or runtime.roots.locate_root()
    uri = runtime.context.get_option('uri')

    if not root:
        runtime.logger.error("No CMS root found; pass --root")
        return 1
    if not uri:
        runtime.logger.error("No URI given; pass one or set the 'uri' option")
        return 1

    if args.explain:
        for index, key in enumerate(candidate_keys(uri), start=1):
            runtime.logger.info(f"{index:3d}. sites/{key}")

    conf = runtime.sites.conf_path(root, uri, require_settings=args.require_settings)
    if conf is None:
        runtime.logger.error(f"Cannot parse URI '{uri}'")
        return 1

    runtime.logger.info(conf)
    return 0
