import numpy as np
import pytest

from hogcache.features import BlockNorm, EPSILON, L2HYS_CLIP
from hogcache.features.normalization import l1_norm, l1_sqrt, l2_hys, l2_norm, no_norm


@pytest.fixture
def block():
    rng = np.random.default_rng(42)
    return (rng.random(36) * 100.0).astype(np.float32)


class TestStrategies:

    def test_l1_sums_to_one(self, block):
        out = l1_norm(block.copy())
        assert out.sum(dtype=np.float64) == pytest.approx(1.0, abs=1e-5)

    def test_l1_sqrt(self, block):
        expected = np.sqrt(block / (block.sum(dtype=np.float64) + EPSILON))
        out = l1_sqrt(block.copy())
        np.testing.assert_allclose(out, expected, rtol=1e-5)
        assert np.sum(out.astype(np.float64) ** 2) == pytest.approx(1.0, abs=1e-5)

    def test_l2_unit_norm(self, block):
        out = l2_norm(block.copy())
        assert np.linalg.norm(out.astype(np.float64)) == pytest.approx(1.0, abs=1e-5)

    def test_l2_hys_without_clipping_stays_below_ceiling(self):
        out = l2_hys(np.ones(36, dtype=np.float32))
        assert np.all(out <= L2HYS_CLIP + 1e-6)
        np.testing.assert_allclose(out, 1.0 / 6.0, rtol=1e-5)

    def test_l2_hys_damps_dominant_component(self):
        v = np.ones(36, dtype=np.float32)
        v[0] = 10.0
        plain = l2_norm(v.copy())
        hys = l2_hys(v.copy())

        clipped = np.clip(plain.astype(np.float64), 0.0, L2HYS_CLIP)
        expected = clipped / np.sqrt(np.sum(clipped ** 2) + EPSILON)

        np.testing.assert_allclose(hys, expected, rtol=1e-5)
        assert hys[0] < plain[0]
        assert np.linalg.norm(hys.astype(np.float64)) == pytest.approx(1.0, abs=1e-4)

    def test_none_is_bit_identical(self, block):
        original = block.copy()
        out = no_norm(block)
        assert out is block
        assert out.tobytes() == original.tobytes()

    def test_in_place(self, block):
        out = BlockNorm.L2.apply(block)
        assert out is block

    @pytest.mark.parametrize('norm', list(BlockNorm))
    def test_all_zero_block_stays_zero(self, norm):
        out = norm.apply(np.zeros(36, dtype=np.float32))
        assert np.all(out == 0)
        assert np.all(np.isfinite(out))

    @pytest.mark.parametrize('norm', [BlockNorm.L1, BlockNorm.L1_SQRT, BlockNorm.L2, BlockNorm.L2_HYS])
    def test_scale_invariance(self, norm, block):
        a = norm.apply(block.copy())
        b = norm.apply(block.copy() * 10.0)
        np.testing.assert_allclose(a, b, rtol=1e-4)


class TestBlockNormParsing:

    @pytest.mark.parametrize('name, expected', [
        ('none', BlockNorm.NONE),
        ('NONE', BlockNorm.NONE),
        ('l1', BlockNorm.L1),
        ('L1-sqrt', BlockNorm.L1_SQRT),
        ('l2', BlockNorm.L2),
        ('l2_hys', BlockNorm.L2_HYS),
        (BlockNorm.L2_HYS, BlockNorm.L2_HYS),
    ])
    def test_parse(self, name, expected):
        assert BlockNorm.parse(name) is expected

    @pytest.mark.parametrize('name', ['L3', '', 2, None])
    def test_parse_invalid(self, name):
        with pytest.raises(ValueError):
            BlockNorm.parse(name)
