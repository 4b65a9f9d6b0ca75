"""
Concurrent kernel calls from many threads
"""
import threading

import numpy as np

from nnops import DirectFloatBuffer, HeapFloatBuffer, Trans


NUM_THREADS = 32
NUM_ITERATIONS = 200
DIM_IN = 500
DIM_OUT = 300


class TestConcurrentCalls:
    """Kernels hold no shared state, so threads never interfere"""

    def test_concurrent_gemv(self, compute):
        """Each thread accumulates into its own y; results match the serial value"""
        rng = np.random.default_rng(0)
        matrix = DirectFloatBuffer.from_array(rng.standard_normal(DIM_IN * DIM_OUT))
        vector = DirectFloatBuffer.from_array(rng.standard_normal(DIM_IN))

        reference = HeapFloatBuffer.allocate(DIM_OUT)
        compute.gemv(matrix, vector, reference)

        outputs = [HeapFloatBuffer.allocate(DIM_OUT) for _ in range(NUM_THREADS)]
        errors = []

        def worker(y):
            try:
                for _ in range(NUM_ITERATIONS):
                    y.array[:] = 0
                    compute.gemv(matrix, vector, y)
            except Exception as e:
                errors.append(e)

        threads = [threading.Thread(target=worker, args=(y,)) for y in outputs]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert not errors
        for y in outputs:
            np.testing.assert_array_equal(y.to_numpy(), reference.to_numpy())

    def test_concurrent_linear_shared_weights(self, compute):
        """Threads share one read-only weight matrix"""
        rng = np.random.default_rng(1)
        weights = DirectFloatBuffer.from_array(rng.standard_normal(DIM_IN * DIM_OUT)).as_readonly()
        biases = DirectFloatBuffer.from_array(rng.standard_normal(DIM_OUT)).as_readonly()
        inputs = [DirectFloatBuffer.from_array(rng.standard_normal(DIM_IN)) for _ in range(8)]

        expected = []
        for x in inputs:
            out = HeapFloatBuffer.allocate(DIM_OUT)
            compute.linear_forward(Trans.TRANSPOSE, weights, biases, x, out)
            expected.append(out.to_numpy())

        results = [None] * len(inputs)
        errors = []

        def worker(i):
            try:
                out = DirectFloatBuffer.allocate(DIM_OUT)
                for _ in range(50):
                    compute.linear_forward(Trans.TRANSPOSE, weights, biases, inputs[i], out)
                results[i] = out.to_numpy()
            except Exception as e:
                errors.append(e)

        threads = [threading.Thread(target=worker, args=(i,)) for i in range(len(inputs))]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert not errors
        for got, want in zip(results, expected):
            np.testing.assert_array_equal(got, want)
