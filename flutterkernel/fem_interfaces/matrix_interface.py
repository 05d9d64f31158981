import logging
import numpy as np

from flutterkernel.equations.common import InvalidInputError


class MatrixInterface():
    """
    Structural model given directly by its matrices on the free DoFs (f-set), for example imported from an external
    finite element solution or set-up synthetically.

    Parameters enter the matrices linearly. With the increments given in parameter_terms, the matrices are assembled as
        Mff = Mff_0 + sum_i( p_i * Mff_i )
    and the same way for Kff, Dff, Bff_dot and Bff_slope.

    Bff_dot and Bff_slope describe the aerodynamic surface, i.e. the integrals N^T*N and N^T*dN/ds over the wetted
    surface, with s being the coordinate along the flow. Because the slope is already taken along the flow, the flow
    direction of the aerodynamic model is not used here.
    """
    keys = ['Mff', 'Kff', 'Dff', 'Bff_dot', 'Bff_slope']

    def __init__(self, Mff, Kff, Dff=None, Bff_dot=None, Bff_slope=None, parameter_terms=None):
        Mff = np.array(Mff, dtype=float)
        self.n_dof = Mff.shape[0]
        self.matrices = {'Mff': Mff,
                         'Kff': np.array(Kff, dtype=float),
                         'Dff': self.zeros_if_none(Dff),
                         'Bff_dot': self.zeros_if_none(Bff_dot),
                         'Bff_slope': self.zeros_if_none(Bff_slope),
                         }
        self.parameter_terms = {}
        if parameter_terms is not None:
            for name, terms in parameter_terms.items():
                self.parameter_terms[name] = {key: np.array(terms[key], dtype=float) for key in terms}
        self.check_dimensions()

    def zeros_if_none(self, matrix):
        if matrix is None:
            return np.zeros((self.n_dof, self.n_dof))
        return np.array(matrix, dtype=float)

    def check_dimensions(self):
        shape = (self.n_dof, self.n_dof)
        for key, matrix in self.matrices.items():
            if matrix.shape != shape:
                raise InvalidInputError('Matrix {} has shape {}, expected {}.'.format(key, matrix.shape, shape))
        for name, terms in self.parameter_terms.items():
            for key, matrix in terms.items():
                if key not in self.keys:
                    raise InvalidInputError('Unknown matrix {} for parameter {}.'.format(key, name))
                if matrix.shape != shape:
                    raise InvalidInputError('Matrix {} of parameter {} has shape {}, expected {}.'.format(
                        key, name, matrix.shape, shape))

    def get_matrix(self, key, values):
        matrix = self.matrices[key].copy()
        for name, terms in self.parameter_terms.items():
            if key in terms:
                if name not in values:
                    raise InvalidInputError('No value given for parameter {}.'.format(name))
                matrix += values[name] * terms[key]
        return matrix

    def assemble(self, values):
        logging.debug('Assembling structural matrices with {} DoFs'.format(self.n_dof))
        return {'Mff': self.get_matrix('Mff', values),
                'Kff': self.get_matrix('Kff', values),
                'Dff': self.get_matrix('Dff', values),
                }

    def surface_matrices(self, values, flow_direction):
        return self.get_matrix('Bff_dot', values), self.get_matrix('Bff_slope', values)
