"""
Job Control File documentation
The Job Control (jcl) is a python class which defines the model and the flutter analysis and is imported at
the beginning of every run. Unlike a conventional parameter file, this allows scripting/programming
of the input, e.g. to convert units, loop over parameters, etc.
Note that this documentation of parameters is comprehensive, but not all parameters are necessary for
every kind of analysis.
"""
import numpy as np


class jcl:

    def __init__(self):
        # Give your job a name and a description, which is used as title of the plots
        self.general = {'name': 'my_flutter_job',
                        'description': 'Some panel in supersonic flow',
                        # Name of the discipline, only used for the log
                        'discipline': 'structural',
                        }
        # The structural model, either a beam or given by the matrices
        self.structure = {'method': 'beam',  # 'beam' or 'matrices'
                          # Beam along the x-axis
                          'length': 10.0,
                          'n_elems': 50,
                          # Boundary conditions: 'pinned-pinned', 'clamped-free' or 'clamped-clamped'
                          'bc': 'pinned-pinned',
                          # The section and the material are given by the names of the parameters, see below.
                          'E': 'E',
                          'rho': 'rho',
                          'thy': 'thy',
                          'thz': 'thz',
                          # Number of modes used for the flutter analysis, all DoFs if not given
                          'n_modes': 3,
                          }
        # Alternatively, the matrices on the free DoFs are given directly, either as arrays or from an HDF5 file
        # with the datasets Mff, Kff and optional Dff, Bff_dot and Bff_slope.
        # Parameters enter linearly via parameter_terms: Kff = Kff_0 + p * Kff_p
        self.structure_alternative = {'method': 'matrices',
                                      'Mff': np.eye(3),
                                      'Kff': np.diag([100.0, 400.0, 900.0]),
                                      'Dff': np.diag([0.2, 0.0, 0.3]),
                                      'Bff_dot': np.diag([0.0, -0.001, 0.0]),
                                      # 'filename': '/path/to/matrices.hdf5',
                                      'parameter_terms': {'c2': {'Dff': np.diag([0.0, 1.0, 0.0])}},
                                      'n_modes': 3,
                                      }
        # Aerodynamics
        self.aero = {'method': 'piston_theory',  # 'piston_theory' or 'none'
                     # 1st or 2nd order piston theory
                     'order': 1,
                     # Names of the parameters for the flow properties
                     'mach': 'mach',
                     'rho_air': 'rho_air',
                     'gamma': 'gamma',
                     # Direction of the flow, only the component along the beam axis matters
                     'flow_direction': [1.0, 0.0, 0.0],
                     # Mean incidence for 2nd order piston theory [rad]
                     'alpha': 0.0,
                     }
        # Optional: with an altitude, rho_air and gamma are taken from the International Standard Atmosphere
        self.atmo = {'altitude': 11000.0,
                     }
        # All parameters, name: value. These are the inputs to the models and the variables for the sensitivities.
        self.parameters = {'V': 0.0,
                           'mach': 3.0,
                           'rho_air': 1.05,
                           'gamma': 1.4,
                           'E': 72.0e9,
                           'rho': 2800.0,
                           'thy': 0.06,
                           'thz': 1.0,
                           }
        # Settings of the flutter solver
        self.flutter = {# Name of the parameter used as velocity, it is created if not defined above
                        'velocity': 'V',
                        # Velocity range and number of intervals, the roots are calculated at n_divs + 1 velocities
                        'V_lower': 800.0,
                        'V_upper': 2500.0,
                        'n_divs': 34,
                        # Criterion to track the roots from one velocity to the next:
                        # 'frequency', 'eigenvalue', 'MAC', 'MAC*PCC' or 'MAC*HDM'
                        'tracking_method': 'frequency',
                        # Refinement of the first crossover: 'bisection' or 'secant'
                        'method': 'bisection',
                        'tolerance': 1.0e-3,
                        'max_iterations': 50,
                        # Additional modal damping (damping ratio), applied to all modes
                        'modal_damping': 0.0,
                        # Relative step size for the finite differences of the sensitivities
                        'fd_step': 1.0e-6,
                        # Sensitivities of the flutter velocity, calculated with --sensitivity True
                        'sensitivity': ['thy', 'rho_air'],
                        }
