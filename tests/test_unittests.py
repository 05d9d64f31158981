import numpy as np
import os
import platform
import pytest

from flutterkernel import atmosphere
from flutterkernel.discipline import Discipline, Parameter
from flutterkernel.equations.common import ConvergenceError, InvalidInputError, PreconditionError
from flutterkernel.equations.eigen_solver import EigenSolver
from flutterkernel.fem_interfaces import fem_helper
from flutterkernel.fem_interfaces.beam_interface import BeamInterface
from flutterkernel.fem_interfaces.matrix_interface import MatrixInterface
from flutterkernel.fem_interfaces.modal_basis import ModalBasis, calc_modal_basis
from flutterkernel.flutter import tracking
from flutterkernel.io_functions import data_handling
from flutterkernel.piston_theory import PistonTheory


@pytest.fixture(scope='class')
def get_test_dir(tmpdir_factory):
    test_dir = tmpdir_factory.mktemp('output')
    return str(test_dir)


def test_dummy():
    print('The dummy test is executed.')
    print('Running on python version {}'.format(platform.python_version()))


def test_pole_correlation():
    # Create two artifical arrays of eigenvalues with complex conjugate pairs and different length.
    lam1 = np.array([1.0 + 1.0j, 1.0 - 1.0j, 2.0 + 1.0j, 2.0 - 1.0j, 1.0 + 2.0j, 1.0 - 2.0j])
    lam2 = np.array([1.0 + 1.0j, 1.0 - 1.0j, 2.0 + 1.0j, 2.0 - 1.0j, 1.0 + 2.0j, 1.0 - 2.0j, 0.5 + 1.0j, 0.5 - 1.0j])
    # Provide refence results.
    PCC_ref = np.array([[1.0, 0.33333333, 0.68377223, 0.29289322, 0.75, 0.25, 0.83560101, 0.32216561],
                        [0.33333333, 1.0, 0.29289322, 0.68377223, 0.25, 0.75, 0.32216561, 0.83560101],
                        [0.66666667, 0.25464401, 1.0, 0.36754447, 0.64644661, 0.20943058, 0.50680304, 0.17800506],
                        [0.25464401, 0.66666667, 0.36754447, 1.0, 0.20943058, 0.64644661, 0.17800506, 0.50680304],
                        [0.66666667, 0.0, 0.5527864, 0.0, 1.0, 0.0, 0.63239269, 0.0],
                        [0.0, 0.66666667, 0.0, 0.5527864, 0.0, 1.0, 0.0, 0.63239269]])
    PCC = fem_helper.calc_PCC(lam1, lam2)
    assert np.allclose(PCC, PCC_ref, rtol=1e-4, atol=1e-4), "Pole correlation (PCC) does NOT match reference"


def test_hyperbolic_distance_metric():
    lam1 = np.array([1.0 + 1.0j, 1.0 - 1.0j, 2.0 + 1.0j, 2.0 - 1.0j, 1.0 + 2.0j, 1.0 - 2.0j])
    lam2 = np.array([1.0 + 1.0j, 1.0 - 1.0j, 2.0 + 1.0j, 2.0 - 1.0j, 1.0 + 2.0j, 1.0 - 2.0j, 0.5 + 1.0j, 0.5 - 1.0j])
    HDM_ref = np.array([[1.0, 0.44429156, 0.76909089, 0.6000117, 0.63524992, 0.40062684, 0.69777861, 0.27132177],
                        [0.44429156, 1.0, 0.6000117, 0.76909089, 0.40062684, 0.63524992, 0.27132177, 0.69777861],
                        [0.76909089, 0.6000117, 1.0, 0.80323929, 0.69522953, 0.57169725, 0.50164738, 0.37526785],
                        [0.6000117, 0.76909089, 0.80323929, 1.0, 0.57169725, 0.69522953, 0.37526785, 0.50164738],
                        [0.63524992, 0.40062684, 0.69522953, 0.57169725, 1.0, 0.47973274, 0.44086248, 0.23680655],
                        [0.40062684, 0.63524992, 0.57169725, 0.69522953, 0.47973274, 1.0, 0.23680655, 0.44086248]])
    HDM = fem_helper.calc_HDM(lam1, lam2)
    assert np.allclose(HDM, HDM_ref, rtol=1e-4, atol=1e-4), "Hyperbolic distance metric (HDM) does NOT match reference"


def test_modal_assurance_criterion():
    X = np.array([[1.0, 0.0], [0.0, 1.0], [0.0, 0.0]])
    Y = np.array([[0.0, 2.0], [3.0j, 0.0], [0.0, 0.0]])
    MAC = fem_helper.calc_MAC(X, Y)
    assert np.allclose(MAC, [[0.0, 1.0], [1.0, 0.0]])


def test_plot_correlation_matrix(monkeypatch):
    shown = []
    monkeypatch.setattr(fem_helper.plt, 'show', lambda: shown.append(True))
    lam = np.array([-0.1 + 10.0j, -0.2 + 20.0j])
    fem_helper.calc_proximity(lam, lam, plot=True)
    fem_helper.plt.close('all')
    assert shown == [True]


def test_proximity_and_best_match():
    lam_old = np.array([-0.1 + 10.0j, -0.2 + 20.0j, -0.3 + 30.0j])
    lam_new = np.array([-0.3 + 29.0j, -0.1 + 11.0j, -0.2 + 19.5j])
    for component in ['imag', 'full']:
        proximity = fem_helper.calc_proximity(lam_old, lam_new, component=component)
        assert tracking.get_best_match(proximity) == [1, 2, 0]
    with pytest.raises(ValueError):
        fem_helper.calc_proximity(lam_old, lam_new, component='real')


def test_best_match_is_unique():
    # The second row prefers the first column, too, but it is already taken.
    correlation = np.array([[0.9, 0.8, 0.1],
                            [0.95, 0.2, 0.1],
                            [0.3, 0.2, 0.1]])
    idx_pos = tracking.get_best_match(correlation)
    assert idx_pos == [0, 1, 2]
    assert sorted(idx_pos) == list(range(3))


def test_unknown_tracking_method():
    with pytest.raises(InvalidInputError):
        tracking.check_tracking_method('nearest')


def test_eigen_solver():
    solver = EigenSolver()
    eigenvalue = np.array([-1.0 + 2.0j, -1.0 - 2.0j, -0.5 + 1.0j, -0.5 - 1.0j])
    assert list(solver.select_roots(eigenvalue, 2)) == [0, 2]
    # A singular B matrix leads to infinite eigenvalues
    with pytest.raises(ConvergenceError):
        solver.solve(np.eye(2), np.zeros((2, 2)))


class TestDiscipline():

    def test_register_parameter(self):
        discipline = Discipline()
        thickness = discipline.register_parameter(Parameter('thy', 0.06))
        assert float(thickness) == 0.06
        assert discipline.values() == {'thy': 0.06}
        with pytest.raises(InvalidInputError):
            discipline.register_parameter(Parameter('thy', 1.0))

    def test_get_parameter(self):
        discipline = Discipline()
        discipline.register_parameter(('E', 72.0e9))
        discipline.set_velocity_parameter('V')
        assert discipline.get_parameter('E').value == 72.0e9
        assert discipline.velocity is discipline.get_parameter('V')
        with pytest.raises(PreconditionError, match='E, V'):
            discipline.get_parameter('G')

    def test_tracking(self):
        discipline = Discipline()
        discipline.register_parameter(('thy', 0.06))
        assert discipline.add_parameter('thy')
        assert not discipline.add_parameter('thy')
        assert discipline.is_tracked('thy')
        discipline.remove_parameter('thy')
        assert not discipline.is_tracked('thy')
        with pytest.raises(PreconditionError):
            discipline.remove_parameter('thy')


class TestStructure():
    values = {'E': 72.0e9, 'rho': 2800.0, 'thy': 0.06, 'thz': 1.0}

    def test_beam_frequencies(self):
        beam = BeamInterface(length=10.0, n_elems=50, bc='pinned-pinned')
        basis = calc_modal_basis(beam, self.values, 3)
        EI = 72.0e9 * 1.0 * 0.06 ** 3 / 12.0
        rhoA = 2800.0 * 0.06
        omegas_ref = (np.arange(1, 4) * np.pi / 10.0) ** 2 * (EI / rhoA) ** 0.5
        assert np.allclose(basis.omegas, omegas_ref, rtol=1e-4)
        # mass normalized
        matrices = beam.assemble(self.values)
        assert np.allclose(basis.project(matrices['Mff']), np.eye(3), atol=1e-8)

    def test_beam_surface_matrices(self):
        beam = BeamInterface(length=10.0, n_elems=20, bc='pinned-pinned')
        Bff_dot, Bff_slope = beam.surface_matrices(self.values, np.array([1.0, 0.0, 0.0]))
        assert np.allclose(Bff_dot, Bff_dot.T)
        # With the deflection fixed at both ends, the slope integral is skew-symmetric.
        assert np.allclose(Bff_slope + Bff_slope.T, 0.0, atol=1e-10)
        # A flow perpendicular to the beam has no slope term.
        _, Bff_slope = beam.surface_matrices(self.values, np.array([0.0, 1.0, 0.0]))
        assert np.allclose(Bff_slope, 0.0)

    def test_beam_invalid_input(self):
        with pytest.raises(InvalidInputError):
            BeamInterface(length=10.0, n_elems=10, bc='free-free')
        with pytest.raises(InvalidInputError):
            BeamInterface(length=-1.0, n_elems=10)
        beam = BeamInterface(length=10.0, n_elems=10, bc='clamped-free')
        assert beam.n_dof == 20
        with pytest.raises(InvalidInputError):
            beam.assemble(dict(self.values, thy=0.0))

    def test_matrix_interface(self):
        structure = MatrixInterface(Mff=np.eye(2), Kff=np.diag([1.0, 4.0]),
                                    parameter_terms={'k': {'Kff': np.diag([1.0, 0.0])}})
        matrices = structure.assemble({'k': 2.0})
        assert np.allclose(matrices['Kff'], np.diag([3.0, 4.0]))
        assert np.allclose(matrices['Dff'], 0.0)
        with pytest.raises(InvalidInputError):
            structure.assemble({})
        with pytest.raises(InvalidInputError):
            MatrixInterface(Mff=np.eye(2), Kff=np.eye(3))

    def test_modal_basis(self):
        basis = ModalBasis(np.eye(3)[:, :2], [4.0, 16.0])
        assert basis.n_dof == 3
        assert basis.n_modes == 2
        assert np.allclose(basis.freqs, np.array([2.0, 4.0]) / 2.0 / np.pi)
        with pytest.raises(ValueError):
            basis.PHI[0, 0] = 2.0
        with pytest.raises(InvalidInputError):
            ModalBasis(np.eye(3), [1.0, 2.0])
        with pytest.raises(InvalidInputError):
            calc_modal_basis(MatrixInterface(np.eye(2), np.eye(2)), {}, 3)


class TestPistonTheory():
    values = {'mach': 3.0, 'rho_air': 1.0, 'gamma': 1.4}

    def test_coefficient(self):
        assert np.isclose(PistonTheory(order=1).coefficient(3.0, self.values), 1.0)
        assert np.isclose(PistonTheory(order=2, alpha=0.1).coefficient(3.0, self.values), 1.36)

    def test_assemble(self):
        structure = MatrixInterface(Mff=np.eye(2), Kff=np.eye(2), Bff_dot=np.eye(2), Bff_slope=np.ones((2, 2)))
        Aff, Sff = PistonTheory().assemble(structure, 6.0, self.values)
        assert np.allclose(Aff, 2.0 * np.eye(2))
        assert np.allclose(Sff, 12.0 * np.ones((2, 2)))

    def test_invalid_input(self):
        with pytest.raises(InvalidInputError):
            PistonTheory(order=3)
        for flow_direction in [[0.0, 0.0, 0.0], [1.0, 0.0]]:
            with pytest.raises(InvalidInputError, match='non-zero vector with three components'):
                PistonTheory(flow_direction=flow_direction)
        # components may be zero as long as the vector is not
        PistonTheory(flow_direction=[0.0, 0.0, 1.0])
        for key, value in [('mach', 0.8), ('rho_air', 0.0), ('gamma', 1.0)]:
            with pytest.raises(InvalidInputError):
                PistonTheory().coefficient(100.0, dict(self.values, **{key: value}))


def test_standard_atmosphere():
    atmo = atmosphere.isa(0.0)
    assert np.isclose(atmo['rho'], 1.225, rtol=1e-3)
    assert np.isclose(atmo['a'], 340.29, rtol=1e-3)
    assert np.isclose(atmosphere.isa(11000.0)['T'], 216.65)
    with pytest.raises(InvalidInputError):
        atmosphere.isa(50000.0)


class TestDataHandling():

    def test_hdf5_round_trip(self, get_test_dir):
        filename = os.path.join(get_test_dir, 'response_test.hdf5')
        response = {'eigenvalues': np.array([[-0.1 + 10.0j, 0.2 + 20.0j]]),
                    'valid': np.array([True]),
                    'found': True,
                    'desc': 'some job',
                    'critical_root': {'V': 1110.0, 'root_id': 1},
                    'not_requested': None,
                    }
        data_handling.dump_hdf5(filename, {0: response})
        with data_handling.load_hdf5(filename) as fid:
            loaded = data_handling.load_hdf5_dict(fid['0'])
        assert np.allclose(loaded['eigenvalues'], response['eigenvalues'])
        assert loaded['valid'].dtype == bool
        assert loaded['found']
        assert loaded['desc'] == 'some job'
        assert loaded['critical_root']['root_id'] == 1
        assert 'not_requested' not in loaded

    def test_unsupported_type(self, get_test_dir):
        with pytest.raises(ValueError):
            data_handling.dump_hdf5(os.path.join(get_test_dir, 'invalid.hdf5'), {'a': object()})
