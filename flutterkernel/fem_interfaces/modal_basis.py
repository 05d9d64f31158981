import logging
import numpy as np
from scipy import linalg

from flutterkernel.equations.common import InvalidInputError


class ModalBasis():
    """
    Reduced structural basis: the mode shapes PHI [n_dof, n_modes] and the corresponding eigenvalues omega^2.
    The basis is computed once per structural solution and shall not be modified afterwards, so the arrays are set
    read-only. The column index is used as mode identifier throughout the flutter analysis.
    """

    def __init__(self, PHI, eigenvalues):
        PHI = np.array(PHI, dtype=float)
        eigenvalues = np.array(eigenvalues, dtype=float)
        if PHI.ndim != 2 or PHI.shape[1] != eigenvalues.size:
            raise InvalidInputError('Mode shapes of shape {} do not match {} eigenvalues.'.format(
                PHI.shape, eigenvalues.size))
        PHI.setflags(write=False)
        eigenvalues.setflags(write=False)
        self.PHI = PHI
        self.eigenvalues = eigenvalues

    @property
    def n_dof(self):
        return self.PHI.shape[0]

    @property
    def n_modes(self):
        return self.PHI.shape[1]

    @property
    def omegas(self):
        return np.abs(self.eigenvalues) ** 0.5

    @property
    def freqs(self):
        return self.omegas / 2.0 / np.pi

    def project(self, matrix):
        # Modal projection PHI^T * matrix * PHI, always with the same ordering and normalization of the basis.
        return self.PHI.T.dot(matrix.dot(self.PHI))


def calc_modal_basis(structure, values, n_modes):
    """
    Modal analysis of the structure for the given parameter values. The eigenvectors are mass-normalized, which is the
    default of scipy.linalg.eigh for the generalized eigenvalue problem K * x = omega^2 * M * x.
    """
    if n_modes < 1:
        raise InvalidInputError('At least one mode is required, but n_modes = {}.'.format(n_modes))
    if n_modes > structure.n_dof:
        raise InvalidInputError('Requested {} modes, but the structure has only {} DoFs.'.format(n_modes, structure.n_dof))
    matrices = structure.assemble(values)
    logging.info('Modal analysis for first {} modes...'.format(n_modes))
    eigenvalue, eigenvector = linalg.eigh(matrices['Kff'], matrices['Mff'], subset_by_index=[0, n_modes - 1])
    # sort result by eigenvalue
    idx_sort = np.argsort(eigenvalue)
    basis = ModalBasis(eigenvector[:, idx_sort], eigenvalue[idx_sort])
    logging.info('Found {} modes with the following frequencies [Hz]:'.format(basis.n_modes))
    logging.info(basis.freqs)
    return basis
