import pytest
from PIL import Image

from imaging.errors import DirectoryError, SourceReadError
from imaging.validation import (
    discover_images,
    is_source_image,
    load_source_image,
    validate_input_directory,
    validate_output_directory,
)


def test_discover_images_filters_extensions_case_insensitively(tmp_path):
    for name in ("a.PNG", "b.jpg", "c.JPEG", "d.gif", "e.bmp", "f.tif", "g.tiff", "h.txt", "noext"):
        (tmp_path / name).write_bytes(b"x")
    nested = tmp_path / "sub"
    nested.mkdir()
    (nested / "x.png").write_bytes(b"x")
    (tmp_path / "folder.png").mkdir()

    found = discover_images(tmp_path)

    assert [p.name for p in found] == ["a.PNG", "b.jpg", "c.JPEG", "d.gif", "e.bmp", "f.tif"]


def test_discover_images_empty_directory(tmp_path):
    assert discover_images(tmp_path) == []


def test_discover_images_missing_directory(tmp_path):
    with pytest.raises(DirectoryError):
        discover_images(tmp_path / "missing")


def test_validate_input_directory_rejects_files_and_urls(tmp_path):
    f = tmp_path / "file.png"
    f.write_bytes(b"x")
    with pytest.raises(DirectoryError):
        validate_input_directory(f)
    with pytest.raises(DirectoryError):
        validate_input_directory("http://example.com/images")


def test_is_source_image():
    assert is_source_image("photo.TIF")
    assert not is_source_image("photo.webp")


def test_load_source_image_converts_to_rgba(tmp_path):
    path = tmp_path / "rgb.bmp"
    Image.new("RGB", (3, 2), (1, 2, 3)).save(path)

    img = load_source_image(path)

    assert img.mode == "RGBA"
    assert img.size == (3, 2)
    assert img.getpixel((0, 0)) == (1, 2, 3, 255)


def test_load_source_image_zero_byte_file(tmp_path):
    path = tmp_path / "empty.png"
    path.write_bytes(b"")
    with pytest.raises(SourceReadError):
        load_source_image(path)


def test_load_source_image_missing_file(tmp_path):
    with pytest.raises(SourceReadError):
        load_source_image(tmp_path / "nope.png")


def test_validate_output_directory_allows_missing_dirs(tmp_path):
    target = tmp_path / "new" / "out"
    assert validate_output_directory(target) == target.resolve()
    assert not target.exists()


def test_validate_output_directory_rejects_files_and_urls(tmp_path):
    f = tmp_path / "out.txt"
    f.write_text("data")
    with pytest.raises(ValueError):
        validate_output_directory(f)
    with pytest.raises(ValueError):
        validate_output_directory("ftp://example.com/out")


def test_input_path_below_a_regular_file_is_a_directory_error(tmp_path):
    f = tmp_path / "file.png"
    f.write_bytes(b"x")
    with pytest.raises(DirectoryError, match="Cannot access directory"):
        validate_input_directory(f / "sub")
    with pytest.raises(DirectoryError):
        discover_images(f / "sub")
