import logging


class Common():
    """
    This class is the base class for the flutter equations.
    In the init section, no calculations shall be performed. Only the discipline, which owns the parameters and the
    models, and the modal basis are stored and checked. All matrices are assembled on demand for the requested
    velocity and parameter values.
    """

    def __init__(self, discipline, basis):
        logging.info('Init flutter equations of type "{}"'.format(self.__class__.__name__))
        if basis is None or basis.n_modes == 0:
            raise InvalidInputError('A non-empty modal basis is required to set-up the flutter equations.')
        if discipline.structure is None:
            raise InvalidInputError('No structural model attached to discipline "{}".'.format(discipline.name))
        if basis.n_dof != discipline.structure.n_dof:
            raise InvalidInputError('Modal basis with {} DoFs does not fit the structural model with {} DoFs.'.format(
                basis.n_dof, discipline.structure.n_dof))
        self.discipline = discipline
        self.basis = basis
        self.n_modes = basis.n_modes


class InvalidInputError(ValueError):
    '''Raise when the inputs of an analysis are inconsistent, before any solution is attempted'''


class ConvergenceError(Exception):
    '''Raise when the eigenvalue solution does not converge'''


class PreconditionError(Exception):
    '''Raise when a function is called in the wrong order or with unknown parameters'''
