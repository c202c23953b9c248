"""
Tests for PathTranslator.
"""
import pytest

from media_sync.services.path_translator import PathTranslator


@pytest.fixture
def media_translator():
    return PathTranslator('/media')


class TestPathTranslator:
    """Test cases for key and prefix translation."""

    def test_to_key_joins_with_slash(self, media_translator):
        assert media_translator.to_key('catalog/images', 'a.jpg') == 'catalog/images/a.jpg'

    def test_to_key_root_file(self, media_translator):
        assert media_translator.to_key('', 'logo.svg') == 'logo.svg'

    def test_to_key_keeps_dot_dot(self, media_translator):
        """Test that '..' segments are not normalized away."""
        assert media_translator.to_key('catalog/../x', 'a.jpg') == 'catalog/../x/a.jpg'

    def test_to_key_converts_backslashes(self, media_translator):
        assert media_translator.to_key('catalog\\images', 'a.jpg') == 'catalog/images/a.jpg'

    @pytest.mark.parametrize('directory,filename', [
        ('catalog/images', 'a.jpg'),
        ('x', 'y.txt'),
        ('', 'root.png'),
        ('deep/er/still', 'file.tar.gz'),
    ])
    def test_key_round_trip_recovers_filename(self, media_translator, directory, filename):
        """Test splitting a key on its last '/' recovers the filename."""
        key = media_translator.to_key(directory, filename)

        assert key.rsplit('/', 1)[-1] == filename
        assert media_translator.split_key(key) == (directory, filename)

    @pytest.mark.parametrize('local_path,expected', [
        ('/media/catalog', 'catalog/'),
        ('/media/catalog/', 'catalog/'),
        ('/media/catalog//', 'catalog/'),
        ('/media/catalog/images', 'catalog/images/'),
        ('catalog/images', 'catalog/images/'),
        ('/media', ''),
        ('/media/', ''),
        ('', ''),
        ('/', ''),
    ])
    def test_to_prefix(self, media_translator, local_path, expected):
        assert media_translator.to_prefix(local_path) == expected

    @pytest.mark.parametrize('local_path', [
        '/media/catalog',
        '/media/catalog/images/',
        'catalog',
        '/media',
        '',
        'media/media/x',
        '\\media\\wysiwyg',
    ])
    def test_to_prefix_idempotent(self, media_translator, local_path):
        once = media_translator.to_prefix(local_path)

        assert media_translator.to_prefix(once) == once

    def test_relative_base_dir_is_stripped(self, tmp_path, monkeypatch):
        """Test a relative base dir strips both relative and absolute spellings."""
        monkeypatch.chdir(tmp_path)
        translator = PathTranslator('pub/media')

        assert translator.to_prefix('pub/media/catalog') == 'catalog/'
        assert translator.to_prefix('pub/media') == ''
        assert translator.to_prefix(str(tmp_path / 'pub' / 'media' / 'catalog')) == 'catalog/'
        assert translator.to_prefix('catalog/') == 'catalog/'
        assert translator.media_relative_path('pub/media/catalog/a.jpg') == 'catalog/a.jpg'

    def test_relative_base_dir_keeps_unrelated_paths(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        translator = PathTranslator('media')

        prefix = translator.to_prefix(str(tmp_path / 'media' / 'media' / 'x'))

        assert prefix == 'media/x/'
        assert translator.to_prefix('wysiwyg/x') == 'wysiwyg/x/'

    def test_media_relative_path_outside_base(self, media_translator):
        assert media_translator.media_relative_path('/other/catalog') == '/other/catalog'
        assert media_translator.media_relative_path('/mediax/catalog') == '/mediax/catalog'

    def test_is_placeholder(self, media_translator):
        assert media_translator.is_placeholder('catalog/') is True
        assert media_translator.is_placeholder('catalog/a.jpg') is False
