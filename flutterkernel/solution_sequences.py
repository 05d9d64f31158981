import logging
import numpy as np

from flutterkernel import atmosphere
from flutterkernel.discipline import Discipline, Parameter
from flutterkernel.equations.common import InvalidInputError, PreconditionError
from flutterkernel.equations.flutter_operator import FlutterOperator
from flutterkernel.fem_interfaces.beam_interface import BeamInterface
from flutterkernel.fem_interfaces.matrix_interface import MatrixInterface
from flutterkernel.fem_interfaces.modal_basis import calc_modal_basis
from flutterkernel.flutter.solver import FlutterSolver
from flutterkernel.io_functions.data_handling import load_hdf5, load_hdf5_dict
from flutterkernel.piston_theory import PistonTheory


class FlutterAnalysis():
    """
    Flutter analysis as defined by the job control (JCL): set up the discipline with its parameters, the structural model
    and the aerodynamic surfaces, then solve for the critical root and, optionally, its sensitivities.
    """

    def __init__(self, jcl, output_file=None):
        self.jcl = jcl
        self.output_file = output_file
        self.discipline = Discipline(jcl.general.get('discipline', 'structural'))
        self.basis = None
        self.operator = None
        self.solver = None
        self.response = {}

        self.set_parameters()
        self.set_atmosphere()
        self.set_structure()
        self.set_aero()

    def set_parameters(self):
        for name, value in self.jcl.parameters.items():
            self.discipline.register_parameter(Parameter(name, value))
        self.discipline.set_velocity_parameter(self.jcl.flutter.get('velocity', 'V'))

    def set_atmosphere(self):
        # With an altitude given, density and ratio of specific heats follow from the standard atmosphere.
        if not hasattr(self.jcl, 'atmo') or 'altitude' not in self.jcl.atmo:
            return
        atmo = atmosphere.isa(self.jcl.atmo['altitude'])
        logging.info('Atmosphere at h = {:.1f} m: rho = {:.4g} kg/m^3, a = {:.4g} m/s'.format(
            atmo['h'], atmo['rho'], atmo['a']))
        for key, name in [('rho', self.jcl.aero.get('rho_air', 'rho_air')), ('gamma', self.jcl.aero.get('gamma', 'gamma'))]:
            if name in self.discipline.parameters:
                self.discipline.get_parameter(name).value = atmo[key]
            else:
                self.discipline.register_parameter(Parameter(name, atmo[key]))

    def set_structure(self):
        structure = self.jcl.structure
        if structure['method'] == 'beam':
            model = BeamInterface(length=structure['length'],
                                  n_elems=structure['n_elems'],
                                  bc=structure.get('bc', 'pinned-pinned'),
                                  E=structure.get('E', 'E'),
                                  rho=structure.get('rho', 'rho'),
                                  thy=structure.get('thy', 'thy'),
                                  thz=structure.get('thz', 'thz'),
                                  )
        elif structure['method'] == 'matrices':
            if 'filename' in structure:
                logging.info('Reading structural matrices from {}'.format(structure['filename']))
                with load_hdf5(structure['filename']) as fid:
                    matrices = load_hdf5_dict(fid)
            else:
                matrices = structure
            model = MatrixInterface(Mff=matrices['Mff'],
                                    Kff=matrices['Kff'],
                                    Dff=matrices.get('Dff'),
                                    Bff_dot=matrices.get('Bff_dot'),
                                    Bff_slope=matrices.get('Bff_slope'),
                                    parameter_terms=structure.get('parameter_terms'),
                                    )
        else:
            raise InvalidInputError('Unknown structural method: {}'.format(structure['method']))
        self.discipline.set_structure(model)

    def set_aero(self):
        aero = self.jcl.aero
        if aero['method'] == 'piston_theory':
            load = PistonTheory(order=aero.get('order', 1),
                                mach=aero.get('mach', 'mach'),
                                rho_air=aero.get('rho_air', 'rho_air'),
                                gamma=aero.get('gamma', 'gamma'),
                                flow_direction=aero.get('flow_direction', [1.0, 0.0, 0.0]),
                                alpha=aero.get('alpha', 0.0),
                                )
            self.discipline.add_volume_load(load)
        elif aero['method'] == 'none':
            logging.info('No aerodynamic surfaces, structural damping only.')
        else:
            raise InvalidInputError('Unknown aero method: {}'.format(aero['method']))

    def solve(self):
        flutter = self.jcl.flutter
        n_modes = self.jcl.structure.get('n_modes', self.discipline.structure.n_dof)
        # The modal basis is a property of the structure only, so the velocity does not enter here.
        self.basis = calc_modal_basis(self.discipline.structure, self.discipline.values(), n_modes)
        self.operator = FlutterOperator(self.discipline, self.basis,
                                        modal_damping=flutter.get('modal_damping', 0.0),
                                        fd_step=flutter.get('fd_step', 1.0e-6))
        self.solver = FlutterSolver(self.operator, flutter['V_lower'], flutter['V_upper'], flutter['n_divs'],
                                    tracking_method=flutter.get('tracking_method', 'frequency'),
                                    method=flutter.get('method', 'bisection'),
                                    output_file=self.output_file)
        self.solver.scan_for_roots()
        self.solver.print_sorted_roots()
        self.solver.print_crossover_points()
        found, critical_root = self.solver.find_critical_root(flutter.get('tolerance', 1.0e-3),
                                                              flutter.get('max_iterations', 100))
        if found:
            self.solver.print_critical_root(critical_root)
        else:
            logging.warning('No flutter found between V = {} and {}.'.format(flutter['V_lower'], flutter['V_upper']))
        self.response = self.build_response(found, critical_root)
        return found, critical_root

    def sensitivity_solve(self, critical_root, name):
        if self.solver is None:
            raise PreconditionError('No flutter solution available, call solve() first.')
        V_sens = self.solver.calculate_sensitivity(critical_root, [name], 0)
        self.solver.print_critical_root(critical_root)
        self.response.setdefault('sensitivities', {})[name] = {'V_sens': V_sens, 'eig_sens': critical_root.eig_sens}
        return V_sens

    def flutter_mode(self, critical_root):
        # mode shape of the critical root on the structural DoFs
        if critical_root is None:
            raise PreconditionError('No critical root available.')
        Uf = self.basis.PHI.dot(critical_root.eig_vec_right)
        return Uf.real, Uf.imag

    def build_response(self, found, critical_root):
        response = self.solver.history.as_arrays()
        response['found'] = found
        response['desc'] = self.jcl.general.get('description', self.jcl.general.get('name', ''))
        crossovers = self.solver.crossovers
        response['crossovers'] = {'root_id': np.array([c.root_id for c in crossovers], dtype=int),
                                  'V_lo': np.array([c.V_lo for c in crossovers]),
                                  'V_hi': np.array([c.V_hi for c in crossovers]),
                                  'is_onset': np.array([c.is_onset for c in crossovers], dtype=bool),
                                  }
        if found:
            mode_real, mode_imag = self.flutter_mode(critical_root)
            response['critical_root'] = {'V': critical_root.V,
                                         'eigenvalue': critical_root.eigenvalue,
                                         'freq': critical_root.root.freq,
                                         'root_id': critical_root.root_id,
                                         'converged': critical_root.converged,
                                         'n_iter': critical_root.n_iter,
                                         'tolerance': critical_root.tolerance,
                                         'mode_real': mode_real,
                                         'mode_imag': mode_imag,
                                         }
        return response

    def build_model(self):
        # modal data to be saved alongside the response
        model = {'PHI': np.array(self.basis.PHI),
                 'eigenvalues': np.array(self.basis.eigenvalues),
                 'freqs': self.basis.freqs,
                 'n_modes': self.basis.n_modes,
                 'parameters': self.discipline.values(),
                 }
        if isinstance(self.discipline.structure, BeamInterface):
            x, dof_type = self.discipline.structure.dof_coordinates
            model['dof_coordinates'] = {'x': x, 'type': dof_type}
        return model
