import numpy as np

from saltdose.concentration import concentrations


def test_linear_combination_of_rows():
    matrix = np.array([[10.0, 0.0, 2.0], [1.0, 5.0, 0.0]])
    q = np.array([0.5, 2.0])
    # 0.5 * row0 + 2 * row1
    np.testing.assert_allclose(concentrations(matrix, q), [7.0, 10.0, 1.0])


def test_non_negative_inputs_give_non_negative_output(rng):
    for _ in range(50):
        matrix = rng.uniform(0, 500, size=(4, 6))
        q = rng.uniform(0, 3, size=4)
        assert (concentrations(matrix, q) >= 0).all()


def test_same_inputs_same_output(rng):
    matrix = rng.uniform(0, 500, size=(3, 5))
    q = rng.uniform(0, 1, size=3)
    first = concentrations(matrix, q)
    second = concentrations(matrix, q)
    np.testing.assert_array_equal(first, second)
    # inputs untouched
    assert matrix.shape == (3, 5)


def test_writes_into_out_buffer():
    matrix = np.array([[1.0, 2.0], [3.0, 4.0]])
    out = np.empty(2)
    res = concentrations(matrix, np.array([1.0, 1.0]), out=out)
    assert res is out
    np.testing.assert_allclose(out, [4.0, 6.0])


def test_zero_salts_gives_zero_vector():
    matrix = np.zeros((0, 3))
    np.testing.assert_array_equal(concentrations(matrix, np.zeros(0)), np.zeros(3))
