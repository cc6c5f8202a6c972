import logging

import numpy as np
import pytest

from config import global_config
from image_buffer import ImageBuffer
from image_helpers import index_image, pixel_center, random_image
from logger import set_level
from samplers import sample_bilinear, sample_nearest, sample_trilinear
from texture import ConstantTexture, ImageTexture, Sampler, Texture, TextureKind


def test_trilinear_construction_builds_pyramid() -> None:
    texture = ImageTexture(random_image(8, 4), Sampler.TRILINEAR)
    assert [(l.width, l.height) for l in texture.levels] == [(4, 2), (2, 1), (1, 1)]


@pytest.mark.parametrize("sampler", [Sampler.NEAREST, Sampler.BILINEAR])
def test_non_trilinear_keeps_no_pyramid(sampler) -> None:
    assert ImageTexture(random_image(8, 4), sampler).levels == ()


def test_mode_transitions_build_and_drop_pyramid() -> None:
    texture = ImageTexture(random_image(8, 8), "nearest")
    texture.sampler = Sampler.TRILINEAR
    assert len(texture.levels) == 3
    texture.sampler = "bilinear"
    assert texture.levels == ()
    texture.sampler = Sampler.TRILINEAR
    assert len(texture.levels) == 3


def test_unknown_sampler_is_rejected() -> None:
    with pytest.raises(ValueError):
        ImageTexture(ImageBuffer(2, 2), "anisotropic")


def test_default_sampler_comes_from_config() -> None:
    assert ImageTexture(ImageBuffer(2, 2)).sampler == Sampler.BILINEAR
    global_config.default_sampler.val = "trilinear"
    assert ImageTexture(ImageBuffer(2, 2)).sampler == Sampler.TRILINEAR


def test_base_image_is_copied_in() -> None:
    image = index_image(2, 2)
    texture = ImageTexture(image, Sampler.NEAREST)
    image.set(0, 0, (7.0, 7.0, 7.0))
    assert texture.image.at(0, 0)[0] == 0.0


def test_evaluate_dispatches_on_mode() -> None:
    image = random_image(8, 8, seed=3)
    uv = (0.3, 0.7)
    np.testing.assert_array_equal(ImageTexture(image, Sampler.NEAREST).evaluate(uv), sample_nearest(image, uv))
    np.testing.assert_array_equal(ImageTexture(image, Sampler.BILINEAR).evaluate(uv, 2.0), sample_bilinear(image, uv))

    texture = ImageTexture(image, Sampler.TRILINEAR)
    np.testing.assert_array_equal(texture.evaluate(uv, 1.5), sample_trilinear(image, texture.levels, uv, 1.5))
    np.testing.assert_array_equal(texture.evaluate(uv), sample_bilinear(image, uv))


@pytest.mark.parametrize("width, height", [(0, 0), (0, 4), (4, 0)])
def test_zero_sized_image_evaluates_to_zero(width, height) -> None:
    for sampler in Sampler:
        texture = ImageTexture(ImageBuffer(width, height), sampler)
        assert texture.levels == ()
        np.testing.assert_array_equal(texture.evaluate((0.5, 0.5), 1.0), np.zeros(3))
        assert texture.evaluate(np.zeros((2, 5, 2))).shape == (2, 5, 3)


def test_make_valid_refreshes_after_direct_mutation() -> None:
    texture = ImageTexture(ImageBuffer(2, 2), Sampler.TRILINEAR)
    np.testing.assert_array_equal(texture.evaluate((0.5, 0.5), 1.0), np.zeros(3))

    texture.image.data[...] = 1.0
    texture.make_valid()
    np.testing.assert_allclose(texture.evaluate((0.5, 0.5), 1.0), np.ones(3))
    np.testing.assert_allclose(texture.levels[0].at(0, 0), np.ones(3))


def test_pixel_center_round_trip_through_texture() -> None:
    texture = ImageTexture(random_image(5, 3, seed=8), Sampler.BILINEAR)
    for y in range(3):
        for x in range(5):
            np.testing.assert_allclose(texture.evaluate(pixel_center(texture.image, x, y)), texture.image.at(x, y), atol=1e-6)


def test_to_display() -> None:
    texture = ImageTexture(ImageBuffer.from_array(np.full((2, 3, 3), 0.5)), Sampler.NEAREST)
    display = texture.to_display()
    assert display.shape == (2, 3, 3)
    assert display.dtype == np.uint8


def test_image_texture_equality_ignores_sampler() -> None:
    image = random_image(4, 4)
    assert ImageTexture(image, Sampler.NEAREST) == ImageTexture(image, Sampler.TRILINEAR)
    assert ImageTexture(image) != ImageTexture(random_image(4, 4, seed=1))


def test_constant_texture() -> None:
    texture = ConstantTexture((0.2, 0.4, 0.6), scale=2.0)
    np.testing.assert_allclose(texture.evaluate((0.1, 0.9), 5.0), [0.4, 0.8, 1.2], rtol=1e-6)
    batch = texture.evaluate(np.zeros((3, 4, 2)))
    assert batch.shape == (3, 4, 3)
    batch[...] = 0.0
    np.testing.assert_allclose(texture.evaluate((0.0, 0.0)), [0.4, 0.8, 1.2], rtol=1e-6)
    assert texture == ConstantTexture((0.2, 0.4, 0.6), 2.0)
    assert texture != ConstantTexture((0.2, 0.4, 0.6), 1.0)

    with pytest.raises(ValueError):
        ConstantTexture((1.0, 1.0))


def test_texture_variant_dispatch() -> None:
    constant = Texture.constant((1.0, 0.0, 0.0))
    assert constant.kind == TextureKind.CONSTANT
    np.testing.assert_array_equal(constant.evaluate((0.5, 0.5), 3.0), [1.0, 0.0, 0.0])

    image = random_image(4, 4, seed=2)
    textured = Texture.image(image, Sampler.TRILINEAR)
    assert textured.kind == TextureKind.IMAGE
    np.testing.assert_array_equal(textured.evaluate((0.2, 0.2), 1.0), textured.data.evaluate((0.2, 0.2), 1.0))


def test_texture_variant_equality_and_tag_check() -> None:
    image = random_image(2, 2)
    assert Texture.image(image) == Texture.image(image, Sampler.NEAREST)
    assert Texture.constant() == Texture.constant()
    assert Texture.constant() != Texture.image(image)

    with pytest.raises(TypeError):
        Texture(TextureKind.CONSTANT, ImageTexture(image))


def test_pyramid_levels_cannot_be_written() -> None:
    texture = ImageTexture(random_image(8, 8, seed=6), Sampler.TRILINEAR)
    before = texture.evaluate((0.5, 0.5), 1.0)

    level = texture.levels[1]
    with pytest.raises(ValueError):
        level.set(0, 0, (99.0, 99.0, 99.0))
    with pytest.raises(ValueError):
        level.at(0, 0)[:] = 99.0
    with pytest.raises(ValueError):
        level.data[...] = 99.0
    np.testing.assert_array_equal(texture.evaluate((0.5, 0.5), 1.0), before)


def test_copied_level_is_writable() -> None:
    texture = ImageTexture(random_image(4, 4), Sampler.TRILINEAR)
    clone = texture.levels[0].copy()
    clone.set(0, 0, (1.0, 2.0, 3.0))
    np.testing.assert_array_equal(clone.at(0, 0), [1.0, 2.0, 3.0])


def test_sampler_transition_is_logged_at_debug(caplog) -> None:
    logger = logging.getLogger("texture_sampling")
    logger.addHandler(caplog.handler)
    caplog.handler.setLevel(logging.DEBUG)
    try:
        set_level(logging.DEBUG)
        texture = ImageTexture(random_image(4, 4), Sampler.NEAREST)
        texture.sampler = Sampler.TRILINEAR
        texture.sampler = Sampler.TRILINEAR
    finally:
        set_level(logging.INFO)
        logger.removeHandler(caplog.handler)
    assert caplog.text.count("Sampler nearest -> trilinear") == 1
    assert "Regenerating mipmap (2 levels): [4x4] -> [2x2] -> [1x1]" in caplog.text
