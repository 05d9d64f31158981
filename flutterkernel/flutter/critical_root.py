import logging

from flutterkernel.equations.common import InvalidInputError
from flutterkernel.flutter.roots import CriticalRoot

refinement_methods = ['bisection', 'secant']


class CriticalRootSolver():
    """
    Refines a crossover point to the velocity where the damping of the tracked root is zero. The bracket [V_lo, V_hi]
    is narrowed iteratively, either by bisection or by a bracketed secant step using the damping as function.

    The secant step is the Illinois variant of the regula falsi: if the same end of the bracket is kept twice in a
    row, its damping is halved for the next step so that both ends move towards the zero. In addition, a new velocity
    keeps a distance of half the tolerance to both ends, so that an estimate close to the zero is followed by a point
    on the other side of it. The refinement is converged only when the width of the bracket is within the tolerance.

    At each new velocity, the continuation of the tracked root is identified by matching all roots with the roots at
    the lower end of the bracket.
    """

    def __init__(self, scanner, method='bisection'):
        if method not in refinement_methods:
            raise InvalidInputError('Unknown refinement method "{}", use one of {}.'.format(method, refinement_methods))
        self.scanner = scanner
        self.method = method

    def next_velocity(self, V_lo, damping_lo, V_hi, damping_hi, min_step=0.0):
        V_mid = 0.5 * (V_lo + V_hi)
        if self.method == 'bisection':
            return V_mid
        # Secant step through both ends of the bracket. Fall back to bisection if the step does not stay inside the
        # bracket, for example when the damping is equal at both ends.
        delta = damping_hi - damping_lo
        if delta == 0.0:
            return V_mid
        V_new = V_lo - damping_lo * (V_hi - V_lo) / delta
        if not V_lo < V_new < V_hi:
            return V_mid
        if V_hi - V_lo <= 2.0 * min_step:
            return V_mid
        return min(max(V_new, V_lo + min_step), V_hi - min_step)

    def find(self, crossovers, tolerance, max_iterations):
        if tolerance <= 0.0 or max_iterations < 0:
            raise InvalidInputError('Tolerance must be positive and max_iterations must not be negative.')
        if not crossovers:
            logging.warning('No crossover point found, the flutter velocity is not within the velocity range.')
            return False, None
        # The crossover with the lowest velocity is the first instability when increasing the velocity.
        crossover = min(crossovers, key=lambda crossover: crossover.V_lo)
        if not crossover.is_onset:
            logging.warning('The first crossover point at V = {:.6g} is a transition from unstable to stable.'.format(
                crossover.V_lo))
        root_id = crossover.root_id
        roots_lo = crossover.roots_lo
        roots_hi = crossover.roots_hi
        logging.info('Refining crossover point of root {} between V = {:.6g} and {:.6g} using {}'.format(
            root_id, crossover.V_lo, crossover.V_hi, self.method))

        n_iter = 0
        # weighted dampings of the bracket ends for the secant step
        damping_lo = roots_lo[root_id].damping
        damping_hi = roots_hi[root_id].damping
        kept = None
        converged = False
        while n_iter < max_iterations:
            if roots_hi[root_id].V - roots_lo[root_id].V <= tolerance:
                converged = True
                break
            V_new = self.next_velocity(roots_lo[root_id].V, damping_lo, roots_hi[root_id].V, damping_hi,
                                       min_step=0.5 * tolerance)
            roots_new = self.scanner.calc_roots(V_new, roots_lo)
            n_iter += 1
            root_new = roots_new[root_id]
            logging.debug('Iteration {}: V = {:.10g}, damping = {:.6g}'.format(n_iter, V_new, root_new.damping))
            # narrow the bracket, keeping a sign change inside
            if root_new.is_stable == roots_lo[root_id].is_stable:
                roots_lo = roots_new
                damping_lo = root_new.damping
                if kept == 'hi':
                    damping_hi *= 0.5
                kept = 'hi'
            else:
                roots_hi = roots_new
                damping_hi = root_new.damping
                if kept == 'lo':
                    damping_lo *= 0.5
                kept = 'lo'
        else:
            converged = roots_hi[root_id].V - roots_lo[root_id].V <= tolerance

        # The best estimate is the end of the bracket with the smallest absolute damping.
        if abs(roots_lo[root_id].damping) <= abs(roots_hi[root_id].damping):
            root = roots_lo[root_id]
        else:
            root = roots_hi[root_id]
        if converged:
            logging.info('Critical root converged after {} iterations: V = {:.6g}, lambda = {:.6g}'.format(
                n_iter, root.V, root.eigenvalue))
        else:
            logging.warning('Critical root did not fully converge after {} iterations, bracket width = {:.3g}'.format(
                n_iter, roots_hi[root_id].V - roots_lo[root_id].V))
        return True, CriticalRoot(root, crossover, tolerance, n_iter, converged)
