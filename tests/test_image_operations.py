import pytest
from PIL import Image

from imaging.image_operations import (
    BorderGeometry,
    ResizeFilter,
    add_border,
    clamp_percentage,
    composite_on_canvas,
    compute_border_geometry,
    fit_within,
    longest_dimension_size,
    render_preview,
    resize_longest_dimension,
)

WHITE = (255, 255, 255, 255)
SIZES = [(1, 1), (100, 100), (200, 100), (100, 200), (37, 91), (640, 480), (3000, 17)]
PERCENTAGES = [0, 0.5, 10, 12.5, 33.3, 50]


@pytest.mark.parametrize("width,height", SIZES)
@pytest.mark.parametrize("percentage", PERCENTAGES)
def test_asymmetric_canvas_is_always_square(width, height, percentage):
    geometry = compute_border_geometry(width, height, percentage, symmetrical=False)
    assert geometry.new_width == geometry.new_height


@pytest.mark.parametrize("width,height", SIZES)
@pytest.mark.parametrize("percentage", PERCENTAGES)
def test_symmetric_border_adds_same_delta_to_both_axes(width, height, percentage):
    geometry = compute_border_geometry(width, height, percentage, symmetrical=True)
    assert geometry.new_width - width == geometry.new_height - height


@pytest.mark.parametrize("symmetrical", [True, False])
@pytest.mark.parametrize("width,height", SIZES)
@pytest.mark.parametrize("percentage", PERCENTAGES)
def test_source_always_fits_on_canvas(width, height, percentage, symmetrical):
    geometry = compute_border_geometry(width, height, percentage, symmetrical)
    assert geometry.x_offset + width <= geometry.new_width
    assert geometry.y_offset + height <= geometry.new_height


def test_geometry_pins_truncated_values():
    assert compute_border_geometry(200, 100, 10, True) == (220, 120, 10, 10)
    assert compute_border_geometry(200, 100, 10, False) == (220, 220, 10, 60)
    assert compute_border_geometry(100, 100, 10, True) == (110, 110, 5, 5)
    # 7 * 1.5 = 10.5 and 101 * 1.1 = 111.1 both truncate toward zero
    assert compute_border_geometry(7, 3, 50, False) == (10, 10, 1, 3)
    assert compute_border_geometry(7, 3, 50, True) == (10, 6, 1, 1)
    assert compute_border_geometry(101, 50, 10, True) == (111, 60, 5, 5)


def test_zero_border_keeps_size_or_squares():
    assert compute_border_geometry(200, 100, 0, True) == (200, 100, 0, 0)
    assert compute_border_geometry(200, 100, 0, False) == (200, 200, 0, 50)
    assert compute_border_geometry(64, 64, 0, False) == (64, 64, 0, 0)


def test_geometry_rejects_empty_images():
    with pytest.raises(ValueError):
        compute_border_geometry(0, 10, 10, True)


def test_clamp_percentage():
    assert clamp_percentage(-5) == 0.0
    assert clamp_percentage(12.5) == 12.5
    assert clamp_percentage(80) == 50.0


def test_compositor_pastes_source_on_white_canvas():
    src = Image.new("RGBA", (4, 2), (255, 0, 0, 255))
    canvas = composite_on_canvas(src, BorderGeometry(8, 6, 2, 2))

    assert canvas.size == (8, 6)
    assert canvas.mode == "RGBA"
    assert canvas.getpixel((0, 0)) == WHITE
    assert canvas.getpixel((2, 2)) == (255, 0, 0, 255)
    assert canvas.getpixel((5, 3)) == (255, 0, 0, 255)
    assert canvas.getpixel((6, 3)) == WHITE
    assert canvas.getpixel((2, 4)) == WHITE
    assert src.size == (4, 2)


def test_compositor_writes_transparency_through():
    src = Image.new("RGBA", (2, 2), (0, 0, 255, 0))
    canvas = composite_on_canvas(src, BorderGeometry(4, 4, 1, 1))
    assert canvas.getpixel((1, 1)) == (0, 0, 255, 0)
    assert canvas.getpixel((0, 0)) == WHITE


def test_compositor_converts_rgb_sources():
    src = Image.new("RGB", (2, 2), (0, 128, 0))
    canvas = add_border(src, 50, symmetrical=False)
    assert canvas.size == (3, 3)
    assert canvas.getpixel((0, 0)) == (0, 128, 0, 255)
    assert canvas.getpixel((2, 2)) == WHITE


def test_longest_dimension_size_preserves_aspect():
    assert longest_dimension_size(200, 100, 50) == (50, 25)
    assert longest_dimension_size(100, 400, 60) == (15, 60)
    assert longest_dimension_size(50, 50, 20) == (20, 20)
    assert longest_dimension_size(1000, 1, 10) == (10, 1)


@pytest.mark.parametrize("resize_filter", list(ResizeFilter))
def test_resize_longest_dimension_with_each_filter(resize_filter):
    img = Image.new("RGBA", (220, 110), WHITE)
    resized = resize_longest_dimension(img, 100, resize_filter)
    assert resized.size == (100, 50)
    assert img.size == (220, 110)


def test_fit_within_never_upscales():
    img = Image.new("RGBA", (400, 300), WHITE)
    assert fit_within(img, (500, 500)) is img


def test_fit_within_downscales_uniformly():
    assert fit_within(Image.new("RGBA", (2000, 1000)), (500, 500)).size == (500, 250)
    assert fit_within(Image.new("RGBA", (1000, 2000)), (500, 500)).size == (250, 500)


def test_render_preview_applies_border_then_fits():
    small = Image.new("RGBA", (100, 100), (10, 20, 30, 255))
    assert render_preview(small, 10, symmetrical=True).size == (110, 110)

    wide = Image.new("RGBA", (2000, 1000), (10, 20, 30, 255))
    assert render_preview(wide, 0, symmetrical=False).size == (500, 500)
