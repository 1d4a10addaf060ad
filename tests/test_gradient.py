import numpy as np
import pytest

from hogcache.exceptions import InputError
from hogcache.features import compute_gradients, to_grayscale

from conftest import make_vertical_edge


class TestComputeGradients:

    def test_shape_and_dtype(self, random_image):
        field = compute_gradients(random_image)
        assert field.magnitude.shape == random_image.shape
        assert field.orientation.shape == random_image.shape
        assert field.magnitude.dtype == np.float32
        assert field.orientation.dtype == np.float32

    def test_flat_image_has_no_gradient(self, flat_image):
        field = compute_gradients(flat_image)
        assert np.all(field.magnitude == 0)

    def test_vertical_edge(self, edge_image):
        field = compute_gradients(edge_image)
        # Centered difference responds on both sides of the edge
        np.testing.assert_allclose(field.magnitude[:, 35:37], 255.0)
        np.testing.assert_allclose(field.orientation[:, 35:37], 0.0, atol=1e-3)
        assert np.all(field.magnitude[:, :35] == 0)
        assert np.all(field.magnitude[:, 37:] == 0)

    def test_falling_edge_points_backwards(self):
        image = make_vertical_edge(low=255, high=0)
        field = compute_gradients(image)
        np.testing.assert_allclose(field.orientation[:, 35:37], 180.0, atol=1e-3)

    def test_horizontal_edge(self):
        image = make_vertical_edge().T.copy()
        field = compute_gradients(image)
        np.testing.assert_allclose(field.magnitude[35:37, :], 255.0)
        np.testing.assert_allclose(field.orientation[35:37, :], 90.0, atol=1e-3)

    def test_orientation_range(self, random_image):
        field = compute_gradients(random_image)
        assert field.orientation.min() >= 0.0
        assert field.orientation.max() < 360.0
        assert field.magnitude.min() >= 0.0

    def test_color_image_matches_gray(self, random_image):
        bgr = np.stack([random_image] * 3, axis=2)
        gray_field = compute_gradients(random_image)
        color_field = compute_gradients(bgr)
        np.testing.assert_allclose(color_field.magnitude, gray_field.magnitude, atol=1e-2)

    def test_float_and_bool_images(self, edge_image):
        reference = compute_gradients(edge_image).magnitude
        np.testing.assert_allclose(compute_gradients(edge_image.astype(np.float64)).magnitude, reference)
        mask_field = compute_gradients(edge_image > 0)
        np.testing.assert_allclose(mask_field.magnitude * 255.0, reference)


class TestToGrayscale:

    def test_single_channel_is_squeezed(self, random_image):
        gray = to_grayscale(random_image[:, :, None])
        assert gray.shape == random_image.shape

    def test_bgra(self, random_image):
        bgra = np.stack([random_image] * 4, axis=2)
        assert to_grayscale(bgra).shape == random_image.shape

    @pytest.mark.parametrize('image', [
        None,
        np.zeros((0, 0), dtype=np.uint8),
        np.zeros((8, 8, 5), dtype=np.uint8),
        np.zeros((2, 8, 8, 3), dtype=np.uint8),
        np.array([['a', 'b'], ['c', 'd']]),
    ])
    def test_invalid_images(self, image):
        with pytest.raises(InputError):
            to_grayscale(image)
