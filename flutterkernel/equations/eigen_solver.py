import numpy as np
from scipy import linalg

from flutterkernel.equations.common import ConvergenceError


class EigenSolver():
    """
    Dense solver for the generalized eigenvalue problem A * z = lambda * B * z using LAPACK via scipy.
    Returns all eigenvalues together with the left and right eigenvectors, where the left eigenvectors satisfy
    y^H * A = lambda * y^H * B.
    """

    def solve(self, A, B):
        try:
            eigenvalue, eigenvector_left, eigenvector_right = linalg.eig(A, B, left=True, right=True)
        except (linalg.LinAlgError, ValueError) as e:
            raise ConvergenceError('Eigenvalue solution failed: {}'.format(e)) from e
        if not np.all(np.isfinite(eigenvalue)):
            raise ConvergenceError('Eigenvalue solution returned {} infinite or NaN eigenvalues.'.format(
                np.sum(~np.isfinite(eigenvalue))))
        return eigenvalue, eigenvector_left, eigenvector_right

    def select_roots(self, eigenvalue, n_roots):
        """
        The real system has complex conjugate pairs of eigenvalues. Select the n_roots with the largest imaginary part,
        i.e. one of each pair in the upper half of the complex plane. This ensures that there is always the same number
        of roots, even if a mode is overdamped and its pair of eigenvalues is real.
        """
        return np.argsort(-eigenvalue.imag, kind='stable')[:n_roots]
