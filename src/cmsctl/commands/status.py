"""Summarize the environment cmsctl sees"""


def setup_parser(parser):
    """Setup argument parser for status command"""
    parser.add_argument(
        '--root',
        help='CMS root (default: located from the current directory)'
    )
    parser.add_argument(
        '--uri',
        help='URI used to resolve the configuration directory'
    )


def execute(args):
    """Execute status command"""
    from cmsctl.exceptions import UnwritableResourceError
    from cmsctl.runtime import load_runtime

    runtime = load_runtime(args, root=args.root, uri=args.uri)
    log = runtime.logger
    classifier = runtime.classifier

    root = runtime.context.get_option('root') or runtime.roots.locate_root()
    uri = runtime.context.get_option('uri')
    site = runtime.sites.site_path(root) if root else None
    conf = runtime.sites.conf_path(root, uri) if root and uri else None

    try:
        cache = runtime.host.cache_directory()
    except UnwritableResourceError as e:
        log.warning(str(e))
        cache = None

    rows = [
        ('Operating system', f"{classifier.local_os()} ({classifier.family().value})"),
        ('POSIX shell', 'yes' if classifier.has_posix_shell() else 'no'),
        ('Working directory', runtime.host.cwd()),
        ('User', runtime.host.username()),
        ('Home', runtime.host.server_home() or '-'),
        ('Config file', runtime.context.config_path or '-'),
        ('CMS root', root or '-'),
        ('Site path', site or '-'),
        ('Site URI', uri or '-'),
        ('Conf path', conf or '-'),
        ('Cache directory', cache or '-'),
    ]
    width = max(len(label) for label, _ in rows)
    for label, value in rows:
        log.info(f"{label:<{width}} : {value}")

    return 0
