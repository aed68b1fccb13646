"""
Logo source strategies and the config layer that feeds them
"""
import os

import pytest

from conftest import png_bytes
from qr_composer import InvalidOptionsError, LogoFetchError, LogoNotFoundError, LogoReadError
from qr_composer import logo_source
from qr_composer.config import Settings
from qr_composer.logo_source import (
    HttpLogoSource,
    LocalFileLogoSource,
    get_logo_source,
    is_remote,
    load_logo_bytes,
)


class TestFactory:
    @pytest.mark.parametrize('source', [
        'http://example.com/logo.png',
        'https://drive.google.com/uc?export=download&id=abc',
        'HTTPS://EXAMPLE.COM/LOGO.PNG',
    ])
    def test_remote(self, source):
        assert is_remote(source)
        assert isinstance(get_logo_source(source), HttpLogoSource)

    @pytest.mark.parametrize('source', ['logo.png', '/uploads/logos/logo.png', 'ftp://example.com/logo.png'])
    def test_local(self, source):
        assert isinstance(get_logo_source(source), LocalFileLogoSource)

    def test_timeout_is_passed_through(self):
        assert get_logo_source('https://example.com/a.png', timeout=2.5).timeout == 2.5


class TestLocalFile:
    def test_reads_bytes(self, logo_path):
        assert load_logo_bytes(logo_path) == png_bytes()

    def test_missing(self, tmp_path):
        with pytest.raises(LogoNotFoundError, match='missing.png'):
            LocalFileLogoSource(str(tmp_path / 'missing.png')).read()

    def test_directory_is_not_a_logo(self, tmp_path):
        with pytest.raises(LogoNotFoundError):
            LocalFileLogoSource(str(tmp_path)).read()

    def test_permission_denied(self, logo_path, monkeypatch):
        def denied(*args, **kwargs):
            raise PermissionError(13, 'Permission denied', logo_path)

        monkeypatch.setattr(logo_source, 'open', denied, raising=False)
        with pytest.raises(LogoReadError, match='could not be read'):
            LocalFileLogoSource(logo_path).read()

    def test_removed_before_open(self, logo_path, monkeypatch):
        def gone(*args, **kwargs):
            raise FileNotFoundError(2, 'No such file or directory', logo_path)

        monkeypatch.setattr(logo_source, 'open', gone, raising=False)
        with pytest.raises(LogoNotFoundError):
            LocalFileLogoSource(logo_path).read()


class TestHttp:
    def test_fetch(self, logo_server):
        base_url, _ = logo_server
        assert load_logo_bytes(f'{base_url}/logo.png') == png_bytes()

    def test_status_error(self, logo_server):
        base_url, seen = logo_server
        with pytest.raises(LogoFetchError, match='status 404'):
            HttpLogoSource(f'{base_url}/nope.png', timeout=5).read()
        assert seen == ['/nope.png']

    def test_no_retries(self, logo_server):
        base_url, seen = logo_server
        with pytest.raises(LogoFetchError):
            load_logo_bytes(f'{base_url}/nope.png')
        assert len(seen) == 1

    def test_response_that_is_not_http(self, garbage_server):
        with pytest.raises(LogoFetchError) as excinfo:
            HttpLogoSource(f'{garbage_server}/logo.png', timeout=5).read()
        assert excinfo.value.status is None

    def test_url_with_space(self, logo_server):
        base_url, seen = logo_server
        with pytest.raises(LogoFetchError):
            HttpLogoSource(f'{base_url}/my logo.png', timeout=5).read()
        assert seen == []


class TestSettings:
    def test_defaults(self):
        settings = Settings.from_env({})
        assert settings.fetch_timeout is None
        assert settings.invitation_url('abc') == 'http://localhost:3000/invitation/abc'

    def test_from_env(self):
        settings = Settings.from_env({
            'QR_COMPOSER_UPLOADS_ROOT': '/srv/app',
            'QR_COMPOSER_FETCH_TIMEOUT': '7.5',
            'QR_COMPOSER_FRONTEND_URL': 'https://wedding.example/',
        })
        assert settings.fetch_timeout == 7.5
        assert settings.album_url('xyz') == 'https://wedding.example/album/xyz'
        assert settings.resolve_logo_reference('/uploads/logos/logo-1.png') == \
            os.path.join('/srv/app', 'uploads/logos/logo-1.png')

    def test_other_references_unchanged(self):
        settings = Settings(uploads_root='/srv/app')
        assert settings.resolve_logo_reference('https://example.com/uploads/logos/a.png') == \
            'https://example.com/uploads/logos/a.png'
        assert settings.resolve_logo_reference('/var/logos/a.png') == '/var/logos/a.png'

    def test_bad_timeout(self):
        with pytest.raises(InvalidOptionsError):
            Settings.from_env({'QR_COMPOSER_FETCH_TIMEOUT': 'soon'})
