import logging
import numpy as np

from flutterkernel.equations.common import Common, InvalidInputError, PreconditionError


class FlutterOperator(Common):
    """
    Builds the reduced aeroelastic system at a given velocity. In modal coordinates, the equations of motion are

        Mhh * q'' + (Dhh + Ahh(V)) * q' + (Khh + Shh(V)) * q = 0

    where Ahh and Shh are the aerodynamic damping and stiffness from all aerodynamic surfaces (volume loads) of the
    discipline. All full order matrices are projected with the same modal basis. The second order system is written in
    first order form with the state z = [q, q'], leading to the generalized eigenvalue problem A * z = lambda * B * z with

        A = [[   0,     I  ],          B = [[ I,  0  ],
             [ -K_ae, -D_ae]]               [ 0, Mhh ]]

    Real parts of the eigenvalues are the growth rates (damping), imaginary parts are the circular frequencies.
    """

    def __init__(self, discipline, basis, modal_damping=0.0, fd_step=1.0e-6):
        super().__init__(discipline, basis)
        self.modal_damping = float(modal_damping)
        self.fd_step = fd_step
        if self.modal_damping > 0.0:
            logging.info('Damping: modal damping of {}'.format(self.modal_damping))
        else:
            logging.info('Damping: no modal damping, only damping given by the structural model.')

    def get_values(self, values):
        if values is None:
            return self.discipline.values()
        return dict(values)

    def calc_modal_damping(self):
        # Modal damping, see Bianchi et al., "Using modal damping for full model transient analysis. Application to
        # pantograph/catenary vibration", presented at the ISMA, 2010.
        return np.diag(self.basis.omegas * 2.0 * self.modal_damping)

    def reduced_matrices(self, V, values=None):
        if V < 0.0:
            raise InvalidInputError('Velocity must not be negative, but V = {}.'.format(V))
        values = self.get_values(values)
        matrices = self.discipline.structure.assemble(values)
        Mhh = self.basis.project(matrices['Mff'])
        Khh = self.basis.project(matrices['Kff'])
        Dhh = self.basis.project(matrices['Dff']) + self.calc_modal_damping()
        for load in self.discipline.volume_loads:
            Aff, Sff = load.assemble(self.discipline.structure, V, values)
            Dhh = Dhh + self.basis.project(Aff)
            Khh = Khh + self.basis.project(Sff)
        return Mhh, Dhh, Khh

    def system(self, V, values=None):
        Mhh, Dhh, Khh = self.reduced_matrices(V, values)
        n = self.n_modes
        upper_part = np.concatenate((np.zeros((n, n)), np.eye(n)), axis=1)
        lower_part = np.concatenate((-Khh, -Dhh), axis=1)
        A = np.concatenate((upper_part, lower_part))
        B = np.eye(2 * n)
        B[n:, n:] = Mhh
        return A, B

    def sensitivity(self, V, name, values=None):
        """
        Derivatives of A and B with respect to a parameter, calculated with central finite differences. The parameter
        must be tracked by the discipline. The modal basis is held fixed, i.e. the mode shapes are not differentiated.
        """
        if not self.discipline.is_tracked(name):
            raise PreconditionError('Parameter "{}" is not tracked for sensitivity analysis.'.format(name))
        values = self.get_values(values)
        if self.discipline.velocity is not None and name == self.discipline.velocity.name:
            delta = self.fd_step * max(abs(V), 1.0)
            # The lower bound of the velocity is zero, so switch to a forward difference if necessary.
            V_lo = max(V - delta, 0.0)
            A_hi, B_hi = self.system(V + delta, values)
            A_lo, B_lo = self.system(V_lo, values)
            return (A_hi - A_lo) / (V + delta - V_lo), (B_hi - B_lo) / (V + delta - V_lo)

        p0 = values[name]
        delta = self.fd_step * max(abs(p0), 1.0)
        values[name] = p0 + delta
        A_hi, B_hi = self.system(V, values)
        values[name] = p0 - delta
        A_lo, B_lo = self.system(V, values)
        logging.debug('Finite differences for parameter {} with delta = {:.3g}'.format(name, delta))
        return (A_hi - A_lo) / 2.0 / delta, (B_hi - B_lo) / 2.0 / delta
