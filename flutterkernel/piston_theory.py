import logging
import numpy as np

from flutterkernel.equations.common import InvalidInputError


class PistonTheory():
    """
    Piston theory for supersonic flow, see for example Ashley and Zartarian [1]. The local pressure on the surface is
    linear in the normal velocity of the surface relative to the flow (the downwash)

        dp = c * (dw/dt + V * dw/ds),  with  c = rho * a  and  a = V / Ma

    where s is the coordinate along the flow direction. With order=2, the second order term is linearized about a
    mean incidence alpha of the surface, which gives c = rho * a * (1 + (gamma + 1) / 2 * Ma * alpha).

    The flow properties are not stored here, instead the names of the corresponding parameters are given and resolved
    against the parameter values of the discipline at the time of assembly.

    [1] Ashley, H., and Zartarian, G., "Piston Theory - A New Aerodynamic Tool for the Aeroelastician", Journal of the
    Aeronautical Sciences, vol. 23, no. 12, pp. 1109-1118, 1956.
    """

    def __init__(self, order=1, mach='mach', rho_air='rho_air', gamma='gamma', flow_direction=(1.0, 0.0, 0.0),
                 alpha=0.0):
        if order not in [1, 2]:
            raise InvalidInputError('Piston theory of order {} is not implemented, use 1 or 2.'.format(order))
        flow_direction = np.array(flow_direction, dtype=float)
        if flow_direction.shape != (3,) or np.linalg.norm(flow_direction) == 0.0:
            raise InvalidInputError('The flow direction must be a non-zero vector with three components.')
        self.order = order
        self.mach = mach
        self.rho_air = rho_air
        self.gamma = gamma
        self.flow_direction = flow_direction / np.linalg.norm(flow_direction)
        self.alpha = float(alpha)

    def get_flow_properties(self, values):
        mach = values[self.mach]
        rho_air = values[self.rho_air]
        gamma = values[self.gamma]
        if mach <= 1.0:
            raise InvalidInputError('Piston theory requires supersonic flow, but Ma = {}.'.format(mach))
        if rho_air <= 0.0:
            raise InvalidInputError('Air density must be positive, but rho = {}.'.format(rho_air))
        if gamma <= 1.0:
            raise InvalidInputError('Ratio of specific heats must be greater than 1.0, but gamma = {}.'.format(gamma))
        return mach, rho_air, gamma

    def coefficient(self, V, values):
        mach, rho_air, gamma = self.get_flow_properties(values)
        # speed of sound of the free stream
        a = V / mach
        c = rho_air * a
        if self.order == 2:
            c *= 1.0 + (gamma + 1.0) / 2.0 * mach * self.alpha
        return c

    def assemble(self, structure, V, values):
        """
        Returns the aerodynamic damping and stiffness matrices on the structural DoFs. Both are added to the left hand
        side of the equations of motion.
        """
        Bff_dot, Bff_slope = structure.surface_matrices(values, self.flow_direction)
        c = self.coefficient(V, values)
        logging.debug('Piston theory coefficient c = {:.6g} at V = {:.6g}'.format(c, V))
        Aff = c * Bff_dot
        Sff = c * V * Bff_slope
        return Aff, Sff
