"""
Tests for in-place ReLU / ELU kernels
"""
import pytest
import numpy as np

from nnops import BoundsViolationError, HeapFloatBuffer, ReadOnlyBufferError


def _elu_reference(x, alpha):
    x = x.astype(np.float64)
    return np.where(x >= 0, x, alpha * np.expm1(x))


class TestReLU:
    """Test ReLU activation"""

    def test_relu_whole_buffer(self, compute, make_buffer):
        """ReLU([-1, 3]) = [0, 3]"""
        x = make_buffer(-1, 3)

        compute.relu(x)

        np.testing.assert_array_equal(x.to_numpy(), [0, 3])

    def test_relu_prefix_only(self, compute, make_buffer):
        """Elements past end_exclusive are untouched"""
        x = make_buffer(-1, -2, -3, -4)

        compute.relu(x, 2)

        np.testing.assert_array_equal(x.to_numpy(), [0, 0, -3, -4])

    def test_relu_respects_limit(self, compute, make_buffer):
        """Sizeless call stops at the limit, not the capacity"""
        x = make_buffer(-1, -2, -3)
        x.limit = 2

        compute.relu(x)

        np.testing.assert_array_equal(x.array, [0, 0, -3])

    def test_relu_idempotent(self, compute, test_data):
        """Applying ReLU twice equals applying it once"""
        once = test_data['large_vector'].copy()
        twice = test_data['large_vector'].copy()

        compute.relu(once)
        compute.relu(twice)
        compute.relu(twice)

        np.testing.assert_array_equal(once, twice)
        np.testing.assert_array_equal(once, np.maximum(0, test_data['large_vector']))

    def test_relu_zero_length(self, compute, make_buffer):
        """end_exclusive = 0 is a no-op"""
        x = make_buffer(-1, -2)

        compute.relu(x, 0)

        np.testing.assert_array_equal(x.to_numpy(), [-1, -2])

    @pytest.mark.parametrize('end', [-1, 3, 100])
    def test_relu_out_of_bounds(self, compute, make_buffer, end):
        """Out-of-range end raises and mutates nothing"""
        x = make_buffer(-1, -2)

        with pytest.raises(BoundsViolationError):
            compute.relu(x, end)

        np.testing.assert_array_equal(x.to_numpy(), [-1, -2])

    def test_relu_end_beyond_limit(self, compute, make_buffer):
        """end is checked against the limit, not the capacity"""
        x = make_buffer(-1, -2, -3)
        x.limit = 1

        with pytest.raises(IndexError):
            compute.relu(x, 2)

        np.testing.assert_array_equal(x.array, [-1, -2, -3])

    def test_relu_readonly(self, compute):
        """Read-only buffers are rejected before any write"""
        x = HeapFloatBuffer.of(-1, 2).as_readonly()

        with pytest.raises(ReadOnlyBufferError):
            compute.relu(x)

        np.testing.assert_array_equal(x.to_numpy(), [-1, 2])

    def test_relu_non_integer_end(self, compute, make_buffer):
        x = make_buffer(-1, 2)

        with pytest.raises(TypeError):
            compute.relu(x, 1.5)


class TestELU:
    """Test ELU activation"""

    def test_elu_matches_reference(self, compute, test_data):
        """ELU matches x if x >= 0 else alpha * (exp(x) - 1)"""
        x = test_data['large_vector'].copy()

        compute.elu(x, 0.7)

        expected = _elu_reference(test_data['large_vector'], 0.7)
        np.testing.assert_allclose(x, expected, rtol=1e-6, atol=1e-7)

    def test_elu_identity_for_non_negative(self, compute, make_buffer):
        """ELU is the identity on v >= 0"""
        x = make_buffer(0.0, 0.5, 3.0, 1e6)

        compute.elu(x, 2.0)

        np.testing.assert_array_equal(x.to_numpy(), np.float32([0.0, 0.5, 3.0, 1e6]))

    @pytest.mark.parametrize('alpha', [0.5, 1.0, 3.0])
    def test_elu_converges_to_minus_alpha(self, compute, make_buffer, alpha):
        """ELU(v) -> -alpha as v -> -inf"""
        x = make_buffer(-1.0, -10.0, -50.0)

        compute.elu(x, alpha)

        values = x.to_numpy()
        assert values[0] > values[1] > -alpha - 1e-6
        np.testing.assert_allclose(values[2], -alpha, atol=1e-6)

    def test_elu_prefix_only(self, compute, make_buffer):
        """Only the first end_exclusive elements change"""
        x = make_buffer(-1.0, -1.0, -1.0)

        compute.elu(x, 1.0, 1)

        values = x.to_numpy()
        np.testing.assert_allclose(values[0], np.expm1(-1.0), rtol=1e-6)
        np.testing.assert_array_equal(values[1:], [-1.0, -1.0])

    def test_elu_default_alpha(self, compute, make_buffer):
        x = make_buffer(-2.0)

        compute.elu(x)

        np.testing.assert_allclose(x.to_numpy(), [np.expm1(-2.0)], rtol=1e-6)

    @pytest.mark.parametrize('end', [-1, 4])
    def test_elu_out_of_bounds(self, compute, make_buffer, end):
        """Out-of-range end raises and mutates nothing"""
        x = make_buffer(-1.0, -2.0, -3.0)

        with pytest.raises(BoundsViolationError):
            compute.elu(x, 1.0, end)

        np.testing.assert_array_equal(x.to_numpy(), [-1.0, -2.0, -3.0])
