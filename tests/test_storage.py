import uuid

import pytest
from PIL import Image

from threadcrop.interfaces import IImageSource, IImageStore
from threadcrop.storage import DirectoryImageStore, FileImageSource


def test_file_source_decodes_photo(tmp_path):
    path = tmp_path / "jacket.png"
    Image.new("RGB", (40, 30), (1, 2, 3)).save(path)
    source = FileImageSource(path)
    assert isinstance(source, IImageSource)
    captured = source.capture()
    assert captured.is_decodable
    assert (captured.width, captured.height) == (40, 30)


def test_file_source_without_path_is_cancelled():
    assert FileImageSource(None).capture() is None


def test_directory_store_writes_jpeg_named_by_uuid(tmp_path):
    store = DirectoryImageStore(tmp_path / "items")
    assert isinstance(store, IImageStore)
    identifier = store.save(Image.new("RGBA", (64, 64), (200, 10, 10, 255)))

    assert identifier is not None
    assert identifier == identifier.upper()
    uuid.UUID(identifier)
    path = store.path_for(identifier)
    assert path.parent == tmp_path / "items"
    assert path.suffix == ".jpg"
    with Image.open(path) as stored:
        assert stored.format == "JPEG"
        assert stored.size == (64, 64)

    loaded = store.load(identifier)
    assert loaded.size == (64, 64)


def test_directory_store_load_unknown_identifier(tmp_path):
    assert DirectoryImageStore(tmp_path).load("missing") is None


def test_directory_store_reports_write_failure(tmp_path, monkeypatch):
    store = DirectoryImageStore(tmp_path)

    def _fail(*args, **kwargs):
        raise OSError("disk full")

    monkeypatch.setattr(Image.Image, "save", _fail)
    assert store.save(Image.new("RGB", (8, 8))) is None


def test_image_store_contract_includes_load():
    class SaveOnlyStore(IImageStore):
        def save(self, image):
            return "ID"

    with pytest.raises(TypeError):
        SaveOnlyStore()
