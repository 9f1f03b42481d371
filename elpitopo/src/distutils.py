import numpy as np
import numba as nb


@nb.njit(cache=True)
def sum_squares_2d_array_along_axis1(arr):
    res = np.empty(arr.shape[0], dtype=arr.dtype)
    for o_idx in range(arr.shape[0]):
        sum_ = 0.0
        for i_idx in range(arr.shape[1]):
            sum_ += arr[o_idx, i_idx] * arr[o_idx, i_idx]
        res[o_idx] = sum_
    return res


@nb.njit(cache=True)
def euclidean_distance_square_numba(x1, x2):
    distances = np.sqrt(
        -2 * np.dot(x1, x2.T)
        + np.expand_dims(sum_squares_2d_array_along_axis1(x1), axis=1)
        + sum_squares_2d_array_along_axis1(x2)
    )
    return distances


def PartialDistance(A, B):
    """
    Euclidean distances between the rows of A and the rows of B

    A is a n-by-m matrix, B is a k-by-m matrix.

    Return
    -------
    a n-by-k matrix of distances
    """
    A = np.ascontiguousarray(A, dtype=np.float64)
    B = np.ascontiguousarray(B, dtype=np.float64)
    if len(A) == 0 or len(B) == 0:
        return np.zeros((len(A), len(B)))
    a = euclidean_distance_square_numba(A, B)
    # rounding can push the squared distance of coincident points below 0
    a[np.isnan(a)] = 0
    return a
