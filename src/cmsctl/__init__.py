"""
cmsctl - environment and site discovery for CMS administration

Locates the CMS root and site directories, classifies the host OS and
builds the command lines used to re-invoke the tool.
"""
import argparse
import logging
import sys

__version__ = "1.0.0"


def main():
    """Main CLI entry point"""
    from cmsctl.commands import (
        status, root, site, conf_path,
        build_command, check_env
    )
    from cmsctl.exceptions import CmsctlError

    parser = argparse.ArgumentParser(
        prog='cmsctl',
        description='cmsctl: CMS root, site and environment discovery',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog='''
Examples:
  cmsctl status                             # Summarize what cmsctl sees
  cmsctl root /var/www/html/modules/foo     # Locate the CMS root
  cmsctl site                               # Site containing the current directory
  cmsctl conf-path http://example.com/shop  # Site directory serving a URI
  cmsctl command --remote --os WINNT        # Re-invocation command line
  cmsctl check-env                          # Check interpreter restrictions
        '''
    )
    parser.add_argument(
        '--config', '-c',
        help='Path to cmsctl.yml (default: $CMSCTL_CONFIG or ~/.cmsctl/cmsctl.yml)'
    )
    parser.add_argument(
        '--verbose', '-v',
        action='store_true',
        help='Show debug output'
    )
    parser.add_argument(
        '--version',
        action='version',
        version=f'%(prog)s {__version__}'
    )

    subparsers = parser.add_subparsers(dest='command', help='Command to execute')

    # Status command
    status_parser = subparsers.add_parser('status', help='Summarize the environment')
    status.setup_parser(status_parser)

    # Root command
    root_parser = subparsers.add_parser('root', help='Locate the CMS root')
    root.setup_parser(root_parser)

    # Site command
    site_parser = subparsers.add_parser('site', help='Locate the site directory')
    site.setup_parser(site_parser)

    # Conf-path command
    conf_parser = subparsers.add_parser('conf-path', help='Resolve the site directory for a URI')
    conf_path.setup_parser(conf_parser)

    # Command command
    command_parser = subparsers.add_parser('command', help='Print the re-invocation command line')
    build_command.setup_parser(command_parser)

    # Check-env command
    check_parser = subparsers.add_parser('check-env', help='Check interpreter configuration')
    check_env.setup_parser(check_parser)

    args = parser.parse_args()

    if not args.command:
        parser.print_help()
        sys.exit(1)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format='%(levelname)s %(name)s: %(message)s'
    )

    handlers = {
        'status': status.execute,
        'root': root.execute,
        'site': site.execute,
        'conf-path': conf_path.execute,
        'command': build_command.execute,
        'check-env': check_env.execute,
    }

    # Dispatch to command handler
    try:
        sys.exit(handlers[args.command](args))
    except KeyboardInterrupt:
        print("\n\nInterrupted by user")
        sys.exit(130)
    except CmsctlError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)
