import logging
import numpy as np

from flutterkernel.equations.common import ConvergenceError, InvalidInputError
from flutterkernel.equations.eigen_solver import EigenSolver
from flutterkernel.flutter import tracking
from flutterkernel.flutter.roots import FlutterRoot, RootHistory, VelocitySample


class RootScanner():
    """
    Solves the flutter equations for a range of velocities and tracks the roots from one velocity to the next.
    The roots at the first velocity are sorted by frequency and numbered. At all following velocities, the roots are
    matched with the roots of the last valid velocity, so that a root keeps its root_id along the whole sweep.
    """

    def __init__(self, operator, eigen_solver=None, tracking_method='frequency'):
        tracking.check_tracking_method(tracking_method)
        self.operator = operator
        self.eigen_solver = EigenSolver() if eigen_solver is None else eigen_solver
        self.tracking_method = tracking_method
        self.n_roots = operator.n_modes

    def calc_velocities(self, V_lower, V_upper, n_divs):
        if V_lower < 0.0:
            raise InvalidInputError('Velocities must not be negative, but V_lower = {}.'.format(V_lower))
        if V_upper <= V_lower:
            raise InvalidInputError('V_upper = {} must be greater than V_lower = {}.'.format(V_upper, V_lower))
        if int(n_divs) != n_divs or n_divs < 1:
            raise InvalidInputError('The number of divisions must be a positive integer, but n_divs = {}.'.format(n_divs))
        return np.linspace(V_lower, V_upper, int(n_divs) + 1)

    def calc_roots(self, V, roots_old=None):
        """
        Solve the eigenvalue problem at velocity V and return the roots sorted by root_id. Without previous roots, the
        roots are sorted by frequency. Raises a ConvergenceError if the eigenvalue solution fails.
        """
        A, B = self.operator.system(V)
        eigenvalue, eigenvector_left, eigenvector_right = self.eigen_solver.solve(A, B)
        idx_pos = self.eigen_solver.select_roots(eigenvalue, self.n_roots)
        eigenvalue = eigenvalue[idx_pos]
        eigenvector_left = eigenvector_left[:, idx_pos]
        eigenvector_right = eigenvector_right[:, idx_pos]
        # To match the roots with the previous step, use a correlation criterion.
        if roots_old is None:
            idx_sort = tracking.sort_by_frequency(eigenvalue)
        else:
            idx_sort = tracking.match_roots(self.tracking_method, roots_old, eigenvalue,
                                            eigenvector_right[:self.n_roots, :])
        roots = []
        for root_id, i in enumerate(idx_sort):
            roots.append(FlutterRoot(V, eigenvalue[i], eigenvector_right[:, i], eigenvector_left[:, i], root_id))
        return roots

    def scan(self, V_lower, V_upper, n_divs):
        velocities = self.calc_velocities(V_lower, V_upper, n_divs)
        logging.info('Scanning for roots from V = {:.6g} to {:.6g} with {} divisions'.format(V_lower, V_upper, n_divs))
        history = RootHistory(self.n_roots)
        roots_old = None
        for i, V in enumerate(velocities):
            try:
                roots = self.calc_roots(V, roots_old)
            except ConvergenceError as e:
                # The sample is excluded from the crossover search, the sweep continues.
                logging.warning('No solution at V = {:.6g}: {}'.format(V, e))
                history.append(VelocitySample(i, V))
                continue
            history.append(VelocitySample(i, V, roots))
            roots_old = roots
        n_invalid = len(history) - len(history.valid_samples)
        if n_invalid > 0:
            logging.warning('{} of {} velocity samples are invalid.'.format(n_invalid, len(history)))
        return history
