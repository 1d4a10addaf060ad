import numpy as np
import pytest

from hogcache.features import HOGExtractor
from hogcache.utils import overlay_vector_mask, render_vector_mask


class TestVectorMask:

    def test_shape(self, random_image):
        hog = HOGExtractor(blocksize=16)
        hog.process(random_image)
        mask = render_vector_mask(hog)
        assert mask.shape == random_image.shape
        assert mask.dtype == np.uint8

    def test_edge_cells_are_drawn(self, edge_image):
        hog = HOGExtractor(blocksize=16, cellsize=8)
        hog.process(edge_image)
        mask = render_vector_mask(hog)

        # Center of cell (0, 4) carries the strongest histogram
        assert mask[4, 36] == 255
        # Cells without gradient only get their borders
        assert mask[4, 4] == 0

    def test_flat_image_draws_only_grid(self, flat_image):
        hog = HOGExtractor(blocksize=16, cellsize=8)
        hog.process(flat_image)
        mask = render_vector_mask(hog)

        grid = np.zeros_like(mask, dtype=bool)
        grid[7:63:8, :] = True
        grid[:, 7:63:8] = True
        assert np.all(mask[~grid] == 0)
        assert np.all(mask[grid] == 255)

    def test_signed_mode(self, edge_image):
        hog = HOGExtractor(blocksize=16, cellsize=8, gradient_mode='signed')
        hog.process(edge_image)
        mask = render_vector_mask(hog)
        # Half arrows start at the center and point along 0 degrees
        assert mask[4, 38] == 255
        assert mask[4, 33] == 0

    def test_follows_latest_process(self, random_image, edge_image):
        hog = HOGExtractor(blocksize=16)
        hog.process(edge_image)
        hog.process(random_image)
        mask = render_vector_mask(hog)
        assert mask.shape == random_image.shape

    def test_requires_process(self):
        from hogcache.exceptions import InputError
        with pytest.raises(InputError):
            render_vector_mask(HOGExtractor(blocksize=16))

    def test_overlay(self, edge_image):
        hog = HOGExtractor(blocksize=16)
        hog.process(edge_image)
        overlay = overlay_vector_mask(edge_image, render_vector_mask(hog))
        assert overlay.shape == edge_image.shape + (3,)
        assert overlay.dtype == np.uint8
