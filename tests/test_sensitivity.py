import numpy as np
import pytest

from flutterkernel.equations.common import ConvergenceError, PreconditionError
from tests.helper_functions import FailOnCall, HelperFunctions


class TestSensitivity(HelperFunctions):
    """
    For the synthetic model, the flutter velocity is V = c2 * mach / (0.001 * rho_air) = 1110, so the derivatives are
    dV/dc2 = 1000, dV/drho_air = -555 and dV/dmach = 555.
    """

    def solve(self):
        solver = self.build_solver()
        solver.scan_for_roots()
        found, critical_root = solver.find_critical_root(1.0e-6, 100)
        assert found
        return solver, critical_root

    @pytest.mark.parametrize('name, V_sens_ref', [('c2', 1000.0), ('rho_air', -555.0), ('mach', 555.0)])
    def test_flutter_velocity_sensitivity(self, name, V_sens_ref):
        solver, critical_root = self.solve()
        V_sens = solver.calculate_sensitivity(critical_root, [name], 0)
        assert np.isclose(V_sens, V_sens_ref, rtol=1.0e-3)
        assert critical_root.V_sens == V_sens
        assert critical_root.sens_parameter == name

    def test_eigenvalue_sensitivity(self):
        solver, critical_root = self.solve()
        solver.calculate_sensitivity(critical_root, ['mach', 'c2'], 1)
        # the damping of the second mode is -(c2 - 0.001 * V) / 2
        assert np.isclose(critical_root.eig_sens.real, -0.5, rtol=1.0e-3)

    def test_sensitivity_predicts_shift(self):
        solver, critical_root = self.solve()
        V_sens = solver.calculate_sensitivity(critical_root, ['c2'], 0)
        discipline = solver.scanner.operator.discipline
        discipline.get_parameter('c2').value = 1.12
        solver.clear()
        solver.scan_for_roots()
        found, critical_root_new = solver.find_critical_root(1.0e-6, 100)
        assert found
        assert np.isclose(critical_root_new.V - critical_root.V, V_sens * 0.01, rtol=1.0e-3)

    def test_parameters_are_restored(self):
        solver, critical_root = self.solve()
        discipline = solver.scanner.operator.discipline
        values = discipline.values()
        solver.calculate_sensitivity(critical_root, ['c2'], 0)
        assert discipline.tracked == []
        assert discipline.values() == values
        # A parameter that was tracked before stays tracked.
        discipline.add_parameter('V')
        solver.calculate_sensitivity(critical_root, ['c2'], 0)
        assert discipline.tracked == ['V']

    def test_parameters_are_restored_after_failure(self):
        solver, critical_root = self.solve()
        discipline = solver.scanner.operator.discipline
        solver.scanner.eigen_solver = FailOnCall([0])
        with pytest.raises(ConvergenceError):
            solver.calculate_sensitivity(critical_root, ['c2'], 0)
        assert discipline.tracked == []

    def test_preconditions(self):
        solver, critical_root = self.solve()
        discipline = solver.scanner.operator.discipline
        with pytest.raises(PreconditionError):
            solver.calculate_sensitivity(None, ['c2'], 0)
        with pytest.raises(PreconditionError):
            solver.calculate_sensitivity(critical_root, ['thz'], 0)
        with pytest.raises(PreconditionError):
            solver.calculate_sensitivity(critical_root, ['c2'], 1)
        with pytest.raises(PreconditionError):
            solver.calculate_sensitivity(critical_root, ['V'], 0)
        assert discipline.tracked == []
        assert critical_root.V_sens is None
