"""
Pytest configuration and fixtures for nnops tests
"""
import pytest
import numpy as np

from nnops import (
    BackendConfig,
    DirectFloatBuffer,
    HeapFloatBuffer,
    NativeCompute,
    set_default_compute,
)


@pytest.fixture
def compute():
    """Backend with default settings, independent of the environment"""
    return NativeCompute(BackendConfig())


@pytest.fixture
def default_compute(compute):
    """Install ``compute`` as the functional API backend for one test"""
    previous = set_default_compute(compute)
    yield compute
    set_default_compute(previous)


@pytest.fixture(params=['heap', 'direct'])
def make_buffer(request):
    """Factory building heap or direct buffers from values"""
    def factory(*values):
        if request.param == 'heap':
            return HeapFloatBuffer.of(*values)
        return DirectFloatBuffer.of(*values)
    return factory


@pytest.fixture
def test_data():
    """Fixture providing test data"""
    rng = np.random.default_rng(42)
    return {
        'vector_7': rng.standard_normal(7).astype(np.float32),
        'vector_13': rng.standard_normal(13).astype(np.float32),
        'matrix_13x7': rng.standard_normal((13, 7)).astype(np.float32),
        'matrix_7x5': rng.standard_normal((7, 5)).astype(np.float32),
        'matrix_4x7': rng.standard_normal((4, 7)).astype(np.float32),
        'bias_13': rng.standard_normal(13).astype(np.float32),
        'large_vector': rng.standard_normal(1000).astype(np.float32) * 10,
    }
