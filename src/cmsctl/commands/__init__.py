"""cmsctl subcommands. Each module exposes setup_parser(parser) and execute(args)."""
