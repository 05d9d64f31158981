import logging
import numpy as np

from flutterkernel.equations.common import ConvergenceError, PreconditionError


class FlutterSensitivity():
    """
    Sensitivity of the flutter velocity with respect to a parameter p. For the generalized eigenvalue problem
    A * x = lambda * B * x with the left eigenvector y, the derivative of an eigenvalue is

        dlambda/dp = y^H * (dA/dp - lambda * dB/dp) * x / (y^H * B * x)

    At the flutter point, the damping Re(lambda) is zero. Keeping it zero while p changes requires
    Re(dlambda/dp) + Re(dlambda/dV) * dV/dp = 0, which gives the sensitivity of the flutter velocity

        dV/dp = -Re(dlambda/dp) / Re(dlambda/dV)
    """

    def __init__(self, scanner):
        self.scanner = scanner
        self.operator = scanner.operator
        self.discipline = scanner.operator.discipline

    def find_root(self, critical_root):
        # Re-evaluate the eigenvalue problem at the critical velocity and identify the critical root by its eigenvalue.
        A, B = self.operator.system(critical_root.V)
        eigenvalue, eigenvector_left, eigenvector_right = self.scanner.eigen_solver.solve(A, B)
        i = np.abs(eigenvalue - critical_root.eigenvalue).argmin()
        return A, B, eigenvalue[i], eigenvector_left[:, i], eigenvector_right[:, i]

    def calc_eigenvalue_sensitivity(self, V, name, B, eigenvalue, y, x):
        dA, dB = self.operator.sensitivity(V, name)
        return y.conj().dot((dA - eigenvalue * dB).dot(x)) / y.conj().dot(B.dot(x))

    def calculate(self, critical_root, parameter_list, output_index):
        if critical_root is None:
            raise PreconditionError('No critical root available, call find_critical_root() successfully first.')
        if not 0 <= output_index < len(parameter_list):
            raise PreconditionError('Output index {} out of range for {} parameter(s).'.format(
                output_index, len(parameter_list)))
        velocity = self.discipline.velocity
        if velocity is None:
            raise PreconditionError('No velocity parameter defined in discipline "{}".'.format(self.discipline.name))
        parameter = self.discipline.get_parameter(parameter_list[output_index])
        if parameter is velocity:
            raise PreconditionError('The sensitivity with respect to the velocity itself is not defined.')

        # The velocity and the parameter are tracked only for the duration of this calculation.
        added = [p for p in [velocity, parameter] if self.discipline.add_parameter(p)]
        try:
            A, B, eigenvalue, y, x = self.find_root(critical_root)
            eig_sens = self.calc_eigenvalue_sensitivity(critical_root.V, parameter.name, B, eigenvalue, y, x)
            eig_sens_V = self.calc_eigenvalue_sensitivity(critical_root.V, velocity.name, B, eigenvalue, y, x)
        finally:
            for p in added:
                self.discipline.remove_parameter(p)

        if eig_sens_V.real == 0.0:
            raise ConvergenceError('The damping of the critical root does not change with the velocity.')
        V_sens = -eig_sens.real / eig_sens_V.real
        logging.info('Sensitivity with respect to {}: dV/dp = {:.6g}, dlambda/dp = {:.6g}'.format(
            parameter.name, V_sens, eig_sens))
        critical_root.V_sens = V_sens
        critical_root.eig_sens = eig_sens
        critical_root.sens_parameter = parameter.name
        return V_sens
