"""Unit tests for production implementations that carry logic of their own."""
import pytest
from unittest.mock import Mock

from cmsctl.core import (
    MarkerBootstrapLocator,
    RealFileSystemService,
    SitesFileAliasProvider,
    YamlConfigLoader,
    parse_sites_php,
)
from cmsctl.exceptions import ConfigurationError


def create_mock_filesystem(files=None):
    fs = Mock()
    files = files or {}
    fs.is_file.side_effect = lambda path: str(path) in files
    fs.read_file.side_effect = lambda path: files[str(path)]
    return fs


class TestYamlConfigLoader:

    def test_mapping(self):
        fs = create_mock_filesystem({'/c.yml': "php: php8\ncolumns: 120\n"})

        assert YamlConfigLoader(fs).load_yaml('/c.yml') == {'php': 'php8', 'columns': 120}

    def test_empty_file(self):
        fs = create_mock_filesystem({'/c.yml': ""})

        assert YamlConfigLoader(fs).load_yaml('/c.yml') == {}

    def test_invalid_yaml(self):
        fs = create_mock_filesystem({'/c.yml': "php: [unclosed\n"})

        with pytest.raises(ConfigurationError):
            YamlConfigLoader(fs).load_yaml('/c.yml')


class TestMarkerBootstrapLocator:

    def test_matches_first_marker(self):
        fs = create_mock_filesystem({'/www/core/lib/Drupal.php': ''})

        descriptor = MarkerBootstrapLocator(fs).get_bootstrap('/www')

        assert descriptor.name == 'drupal8'
        assert descriptor.root == '/www'

    def test_older_release(self):
        fs = create_mock_filesystem({'/www/includes/bootstrap.inc': ''})

        assert MarkerBootstrapLocator(fs).get_bootstrap('/www').name == 'drupal7'

    def test_no_marker(self):
        fs = create_mock_filesystem()

        assert MarkerBootstrapLocator(fs).get_bootstrap('/www') is None
        assert MarkerBootstrapLocator(fs).get_bootstrap('') is None


class TestParseSitesPhp:

    def test_assignments(self):
        content = """<?php
// $sites['commented.example.com'] = 'nope';
$sites['8080.www.example.com.mysite'] = 'example.com';
$sites["shop.example.com"] = "shop";
$sites['shop.example.com'] = 'store';
"""
        assert parse_sites_php(content) == {
            '8080.www.example.com.mysite': 'example.com',
            'shop.example.com': 'store',
        }

    def test_no_entries(self):
        assert parse_sites_php("<?php\n$sites = array();\n") == {}


class TestSitesFileAliasProvider:

    def test_yaml_preferred(self):
        fs = create_mock_filesystem({
            '/www/sites/sites.yml': "a.example.com: a\n",
            '/www/sites/sites.php': "$sites['b.example.com'] = 'b';\n",
        })

        assert SitesFileAliasProvider(fs, YamlConfigLoader(fs)).load_aliases('/www') == {'a.example.com': 'a'}

    def test_php_fallback(self):
        fs = create_mock_filesystem({'/www/sites/sites.php': "$sites['b.example.com'] = 'b';\n"})

        assert SitesFileAliasProvider(fs, YamlConfigLoader(fs)).load_aliases('/www') == {'b.example.com': 'b'}

    def test_missing_files(self):
        fs = create_mock_filesystem()
        provider = SitesFileAliasProvider(fs, YamlConfigLoader(fs))

        assert provider.load_aliases('/www') == {}
        assert provider.load_aliases('') == {}

    def test_non_string_target(self):
        fs = create_mock_filesystem({'/www/sites/sites.yml': "a.example.com: [a, b]\n"})

        with pytest.raises(ConfigurationError):
            SitesFileAliasProvider(fs, YamlConfigLoader(fs)).load_aliases('/www')

    def test_real_files(self, tmp_path):
        (tmp_path / 'sites').mkdir()
        (tmp_path / 'sites' / 'sites.yml').write_text("'8080.localhost': local\n")
        fs = RealFileSystemService()

        aliases = SitesFileAliasProvider(fs, YamlConfigLoader(fs)).load_aliases(str(tmp_path))

        assert aliases == {'8080.localhost': 'local'}
