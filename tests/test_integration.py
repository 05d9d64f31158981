"""
For the following tests, the beam example from the input directory is used. A tempory directory is used for the
outputs in order to avoid pollution of the repository.
"""
import argparse
import logging
import os

import numpy as np
import pytest

from flutterkernel import program_flow
from flutterkernel.equations.common import PreconditionError
from flutterkernel.flutter.critical_root import CriticalRootSolver
from flutterkernel.io_functions import data_handling
from flutterkernel.solution_sequences import FlutterAnalysis

path_input = os.path.join(os.path.dirname(__file__), '..', 'input')


@pytest.fixture(scope='class')
def get_test_dir(tmpdir_factory):
    test_dir = tmpdir_factory.mktemp('output')
    test_dir = data_handling.check_path(test_dir)
    return str(test_dir)


class TestBeamPistonTheory():
    job_name = 'jcl_beam_piston_theory'

    def test_mainprocessing_functional(self, get_test_dir):
        # Here you launch the Flutter Kernel with your job
        k = program_flow.Kernel(self.job_name, main=True, post=False, sensitivity=True,
                                path_input=path_input,
                                path_output=get_test_dir)
        k.run()

    def test_postprocessing_functional(self, get_test_dir):
        k = program_flow.Kernel(self.job_name, main=False, post=True,
                                path_input=path_input,
                                path_output=get_test_dir)
        k.run()
        assert os.path.isfile(os.path.join(get_test_dir, 'fluttercurves_' + self.job_name + '.pdf'))

    def test_mainprocessing_results(self, get_test_dir):
        logging.info('Checking the response')
        responses = data_handling.load_hdf5_responses(self.job_name, get_test_dir)
        assert len(responses) == 1
        response = responses[0]
        assert response['found']
        assert response['valid'].all()
        assert response['eigenvalues'].shape == (35, 3)
        critical_root = response['critical_root']
        assert critical_root['converged']
        # coalescence of the first two bending modes
        assert 1000.0 < critical_root['V'] < 1500.0
        assert 8.67 / 2.0 / np.pi < critical_root['freq'] < 34.7 / 2.0 / np.pi
        # a thicker beam flutters later, a denser air earlier
        assert response['sensitivities']['thy']['V_sens'] > 0.0
        assert response['sensitivities']['rho_air']['V_sens'] < 0.0
        assert os.path.isfile(os.path.join(get_test_dir, 'flutter_' + self.job_name + '.txt'))

        with data_handling.load_hdf5(os.path.join(get_test_dir, 'model_' + self.job_name + '.hdf5')) as fid:
            model = data_handling.load_hdf5_dict(fid)
        assert model['PHI'].shape == (100, 3)
        assert model['n_modes'] == 3


class TestFlutterAnalysis():

    def get_jcl(self):
        jcl = data_handling.load_jcl('jcl_beam_piston_theory', path_input, None)
        jcl.structure['n_elems'] = 20
        return jcl

    def test_flutter_mode(self):
        analysis = FlutterAnalysis(self.get_jcl())
        found, critical_root = analysis.solve()
        assert found
        mode_real, mode_imag = analysis.flutter_mode(critical_root)
        assert mode_real.shape == (analysis.discipline.structure.n_dof,)
        assert np.abs(mode_real + 1j * mode_imag).max() > 0.0
        V_sens = analysis.sensitivity_solve(critical_root, 'thy')
        assert analysis.response['sensitivities']['thy']['V_sens'] == V_sens

    @pytest.mark.parametrize('method', ['bisection', 'secant'])
    def test_refinement_with_curved_damping(self, method):
        # the damping of the beam is not linear in V, so a single secant step is not exact
        jcl = self.get_jcl()
        jcl.flutter.update({'method': method, 'tolerance': 1.0e-3})
        analysis = FlutterAnalysis(jcl)
        found, critical_root = analysis.solve()
        assert found
        assert critical_root.converged
        reference = CriticalRootSolver(analysis.solver.scanner, method='bisection')
        _, reference_root = reference.find(analysis.solver.crossovers, 1.0e-9, 200)
        assert reference_root.converged
        assert abs(critical_root.V - reference_root.V) <= 1.0e-3
        assert abs(critical_root.eigenvalue.real) < 1.0e-2

    def test_atmosphere(self):
        jcl = self.get_jcl()
        jcl.atmo = {'altitude': 11000.0}
        analysis = FlutterAnalysis(jcl)
        assert np.isclose(analysis.discipline.get_parameter('rho_air').value, 0.3639, rtol=1.0e-3)
        found, critical_root = analysis.solve()
        # thinner air, higher flutter velocity
        assert not found or critical_root.V > 1500.0

    def test_matrices(self):
        jcl = self.get_jcl()
        jcl.structure = {'method': 'matrices',
                         'Mff': np.eye(3),
                         'Kff': np.diag([100.0, 400.0, 900.0]),
                         'Dff': np.diag([0.2, 1.11, 0.3]),
                         'Bff_dot': np.diag([0.0, -0.001, 0.0]),
                         }
        jcl.parameters = {'V': 0.0, 'mach': 2.0, 'rho_air': 2.0, 'gamma': 1.4}
        jcl.flutter.update({'V_lower': 1000.0, 'V_upper': 1200.0, 'n_divs': 10})
        found, critical_root = FlutterAnalysis(jcl).solve()
        assert found
        assert np.isclose(critical_root.V, 1110.0, atol=1.0e-3)

    def test_sensitivity_before_solve(self):
        analysis = FlutterAnalysis(self.get_jcl())
        with pytest.raises(PreconditionError):
            analysis.sensitivity_solve(None, 'thy')


def test_str2bool():
    assert program_flow.str2bool('yes')
    assert not program_flow.str2bool('False')
    with pytest.raises(argparse.ArgumentTypeError):
        program_flow.str2bool('maybe')


def test_seconds2string():
    assert program_flow.seconds2string(3725.0) == '1:02:05 [h:mm:ss]'
