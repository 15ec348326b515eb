"""Unit tests for site resolution (site_path / conf_path).

The candidate ordering tests enumerate every (path depth, host depth)
pair so that a change in loop nesting shows up immediately.
"""
import pytest
from unittest.mock import Mock

from cmsctl.core import (
    BootstrapDescriptor,
    MarkerBootstrapLocator,
    RealFileSystemService,
    SitesFileAliasProvider,
    YamlConfigLoader,
)
from cmsctl.environment.root import RootLocator
from cmsctl.environment.sites import SiteResolver, candidate_keys, parse_site_uri

ROOT = '/var/www/html'


# Helper factories for creating mock dependencies

def create_mock_filesystem(files=None, dirs=None):
    """Create mock FileSystemService with configured files/directories."""
    fs = Mock()
    files = set(files or [])
    dirs = set(dirs or [])
    # Every file's parent chain is a directory
    for f in list(files):
        parent = f.rsplit('/', 1)[0]
        while parent:
            dirs.add(parent)
            parent = parent.rsplit('/', 1)[0] if '/' in parent else ''

    fs.is_file.side_effect = lambda path: str(path) in files
    fs.exists.side_effect = lambda path: str(path) in files or str(path) in dirs
    fs.is_dir.side_effect = lambda path: str(path) in dirs
    return fs


def create_mock_aliases(aliases=None):
    """Create mock AliasProvider returning a fixed alias map."""
    provider = Mock()
    provider.load_aliases.return_value = dict(aliases or {})
    return provider


def create_mock_roots(roots=(ROOT,)):
    """Create mock RootLocator recognizing the given roots."""
    locator = Mock()
    roots = set(roots)

    def valid_root(path):
        if path in roots:
            return BootstrapDescriptor(name='test', marker='marker', root=path)
        return None

    locator.valid_root.side_effect = valid_root
    return locator


def create_resolver(files=None, dirs=None, aliases=None, host=None):
    return SiteResolver(
        create_mock_filesystem(files, dirs),
        create_mock_aliases(aliases),
        create_mock_roots(),
        host
    )


class TestParseSiteUri:

    def test_scheme_optional(self):
        assert parse_site_uri('example.com') == (['example', 'com'], ['', 'index.php'])
        assert parse_site_uri('https://example.com/shop') == (['example', 'com'], ['', 'shop', 'index.php'])

    def test_port_prefixes_host(self):
        host_parts, _ = parse_site_uri('http://example.com:8080/')

        assert host_parts == ['8080', 'example', 'com']

    def test_port_without_scheme(self):
        host_parts, _ = parse_site_uri('localhost:8888')

        assert host_parts == ['8888', 'localhost']

    def test_trailing_dot_removed(self):
        host_parts, _ = parse_site_uri('http://example.com./')

        assert host_parts == ['example', 'com']

    def test_host_case_preserved(self):
        host_parts, _ = parse_site_uri('http://user@Shop.Example.com:8080/')

        assert host_parts == ['8080', 'Shop', 'Example', 'com']

    @pytest.mark.parametrize('uri', ['', 'http://', 'http://example.com:notaport/'])
    def test_unusable(self, uri):
        assert parse_site_uri(uri) is None


class TestCandidateKeys:

    def test_host_and_path_order(self):
        assert candidate_keys('http://a.b.com/sub/index.php') == [
            'a.b.com.sub',
            'b.com.sub',
            'com.sub',
            'a.b.com',
            'b.com',
            'com',
        ]

    def test_every_pair_in_nesting_order(self):
        host = ['www', 'example', 'org']
        path = ['', 'a', 'b', 'index.php']
        expected = []
        for i in (3, 2, 1):
            for j in (3, 2, 1):
                expected.append('.'.join(host[-j:]) + '.'.join(path[:i]))

        keys = candidate_keys('http://www.example.org/a/b/index.php')

        assert keys == expected
        assert keys[0] == 'www.example.org.a.b'
        assert keys[-1] == 'org'

    @pytest.mark.parametrize('uri', [
        'http://example.com/shop',
        'http://example.com/shop/',
        'http://example.com/shop/index.php',
    ])
    def test_script_name_implied(self, uri):
        assert candidate_keys(uri) == ['example.com.shop', 'com.shop', 'example.com', 'com']

    def test_mixed_case_host(self):
        assert candidate_keys('Shop.Example.com')[0] == 'Shop.Example.com'

    def test_root_path_yields_host_suffixes(self):
        assert candidate_keys('example.com') == ['example.com', 'com']

    def test_port_candidates(self):
        assert candidate_keys('http://example.com:8080/') == ['8080.example.com', 'example.com', 'com']

    def test_unusable_uri(self):
        assert candidate_keys('') == []


class TestConfPath:

    def test_exact_host_match(self):
        resolver = create_resolver(files={f'{ROOT}/sites/example.com/settings.php'})

        assert resolver.conf_path(ROOT, 'http://example.com') == 'sites/example.com'

    def test_existing_dir_without_settings_when_not_required(self):
        resolver = create_resolver(dirs={f'{ROOT}/sites/example.com'})

        assert resolver.conf_path(ROOT, 'example.com', require_settings=False) == 'sites/example.com'
        assert resolver.conf_path(ROOT, 'example.com', require_settings=True) == 'sites/default'

    def test_falls_back_to_default(self):
        resolver = create_resolver()

        assert resolver.conf_path(ROOT, 'http://unknown.test/') == 'sites/default'

    def test_path_depth_beats_host_depth(self):
        # Both a deep-host/shallow-path and a shallow-host/deep-path site exist
        resolver = create_resolver(files={
            f'{ROOT}/sites/a.b.com/settings.php',
            f'{ROOT}/sites/com.sub/settings.php',
        })

        assert resolver.conf_path(ROOT, 'http://a.b.com/sub/index.php') == 'sites/com.sub'

    def test_host_depth_breaks_ties_within_path_depth(self):
        resolver = create_resolver(files={
            f'{ROOT}/sites/b.com.sub/settings.php',
            f'{ROOT}/sites/a.b.com.sub/settings.php',
        })

        assert resolver.conf_path(ROOT, 'http://a.b.com/sub/index.php') == 'sites/a.b.com.sub'

    @pytest.mark.parametrize('existing,expected', [
        ('a.b.com.sub', 'sites/a.b.com.sub'),
        ('b.com.sub', 'sites/b.com.sub'),
        ('com.sub', 'sites/com.sub'),
        ('a.b.com', 'sites/a.b.com'),
        ('b.com', 'sites/b.com'),
        ('com', 'sites/com'),
    ])
    def test_each_candidate_reachable(self, existing, expected):
        resolver = create_resolver(files={f'{ROOT}/sites/{existing}/settings.php'})

        assert resolver.conf_path(ROOT, 'http://a.b.com/sub/index.php') == expected

    def test_subdirectory_without_script(self):
        resolver = create_resolver(files={f'{ROOT}/sites/example.com.shop/settings.php'})

        assert resolver.conf_path(ROOT, 'http://example.com/shop') == 'sites/example.com.shop'
        assert resolver.conf_path(ROOT, 'http://example.com/shop/') == 'sites/example.com.shop'

    def test_alias_key_case_sensitive(self):
        resolver = create_resolver(
            files={f'{ROOT}/sites/shop/settings.php'},
            aliases={'Shop.Example.com': 'shop'}
        )

        assert resolver.conf_path(ROOT, 'http://Shop.Example.com/') == 'sites/shop'
        assert resolver.conf_path(ROOT, 'http://shop.example.com/') == 'sites/default'

    def test_alias_redirects_candidate(self):
        resolver = create_resolver(
            files={f'{ROOT}/sites/shop/settings.php'},
            aliases={'8080.example.com': 'shop'}
        )

        assert resolver.conf_path(ROOT, 'http://example.com:8080/') == 'sites/shop'

    def test_alias_ignored_when_target_missing(self):
        resolver = create_resolver(
            files={f'{ROOT}/sites/example.com/settings.php'},
            aliases={'example.com': 'missing'}
        )

        assert resolver.conf_path(ROOT, 'http://example.com/') == 'sites/example.com'

    def test_missing_root_or_uri(self):
        resolver = create_resolver()

        assert resolver.conf_path(None, 'example.com') is None
        assert resolver.conf_path(ROOT, '') is None
        assert resolver.conf_path(ROOT, 'http://') is None


class TestSitePath:

    def test_start_path_has_settings(self):
        resolver = create_resolver(files={f'{ROOT}/sites/example.com/settings.php'})

        assert resolver.site_path(ROOT, f'{ROOT}/sites/example.com') == f'{ROOT}/sites/example.com'

    def test_walks_up_to_settings(self):
        resolver = create_resolver(files={f'{ROOT}/sites/example.com/settings.php'})

        site = resolver.site_path(ROOT, f'{ROOT}/sites/example.com/modules/custom')

        assert site == f'{ROOT}/sites/example.com'

    def test_relative_start_resolved_against_host_cwd(self):
        host = Mock()
        host.cwd.return_value = f'{ROOT}/sites/example.com'
        resolver = create_resolver(files={f'{ROOT}/sites/example.com/settings.php'}, host=host)

        assert resolver.site_path(ROOT, 'modules/custom') == f'{ROOT}/sites/example.com'
        assert resolver.site_path(ROOT, '.') == f'{ROOT}/sites/example.com'

    def test_stops_at_root_boundary(self):
        # settings.php above the root must not be picked up
        resolver = create_resolver(files={'/var/www/settings.php'})

        assert resolver.site_path(ROOT, f'{ROOT}/modules/node') is None

    def test_default_site_fallback(self):
        resolver = create_resolver(files={f'{ROOT}/sites/default/settings.php'})

        assert resolver.site_path(ROOT, f'{ROOT}/modules') == f'{ROOT}/sites/default'

    def test_reverse_alias_lookup(self):
        resolver = create_resolver(
            files={f'{ROOT}/sites/shop/settings.php'},
            aliases={'shop.example.com': 'shop', 'store.example.com': 'shop'}
        )

        assert resolver.site_path(ROOT, f'{ROOT}/sites/shop/themes') == 'shop.example.com'

    def test_no_site(self):
        resolver = create_resolver()

        assert resolver.site_path(ROOT, f'{ROOT}/modules') is None
        assert resolver.site_path(None, '/tmp/anywhere') is None

    def test_defaults_to_host_cwd(self):
        host = Mock()
        host.cwd.return_value = f'{ROOT}/sites/example.com'
        resolver = create_resolver(files={f'{ROOT}/sites/example.com/settings.php'}, host=host)

        assert resolver.site_path(ROOT) == f'{ROOT}/sites/example.com'


class TestSiteResolverFilesystem:
    """End-to-end against a real tree with a sites.yml alias file."""

    @pytest.fixture
    def resolver(self):
        fs = RealFileSystemService()
        roots = RootLocator(fs, MarkerBootstrapLocator(fs))
        return SiteResolver(fs, SitesFileAliasProvider(fs, YamlConfigLoader(fs)), roots)

    @pytest.fixture
    def cms_root(self, tmp_path):
        root = tmp_path / 'cms'
        (root / 'core' / 'lib').mkdir(parents=True)
        (root / 'core' / 'lib' / 'Drupal.php').write_text('<?php\n')
        (root / 'sites' / 'default').mkdir(parents=True)
        (root / 'sites' / 'default' / 'settings.php').write_text('<?php\n')
        return root

    def test_example_com_directory_without_settings(self, resolver, cms_root):
        (cms_root / 'sites' / 'example.com').mkdir()
        root = str(cms_root).replace('\\', '/')

        assert resolver.conf_path(root, 'example.com', require_settings=False) == 'sites/example.com'
        assert resolver.conf_path(root, 'example.com') == 'sites/default'

    def test_alias_file(self, resolver, cms_root):
        (cms_root / 'sites' / 'shop').mkdir()
        (cms_root / 'sites' / 'shop' / 'settings.php').write_text('<?php\n')
        (cms_root / 'sites' / 'sites.yml').write_text("shop.example.com: shop\n")
        root = str(cms_root).replace('\\', '/')

        assert resolver.conf_path(root, 'https://shop.example.com/') == 'sites/shop'
        assert resolver.site_path(root, f'{root}/sites/shop') == 'shop.example.com'
