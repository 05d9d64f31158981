"""
Pinned-pinned aluminium beam (panel strip) in supersonic flow. The first two bending modes coalesce and the beam
flutters at a velocity of roughly 1.1 - 1.4 km/s.
"""


class jcl:

    def __init__(self):
        self.general = {'name': 'beam_piston_theory',
                        'description': 'Pinned beam, piston theory, Ma 3.0',
                        }
        self.structure = {'method': 'beam',
                          'length': 10.0,
                          'n_elems': 50,
                          'bc': 'pinned-pinned',
                          'n_modes': 3,
                          }
        self.aero = {'method': 'piston_theory',
                     'order': 1,
                     'flow_direction': [1.0, 0.0, 0.0],
                     }
        self.parameters = {'V': 0.0,
                           'mach': 3.0,
                           'rho_air': 1.05,
                           'gamma': 1.4,
                           'E': 72.0e9,
                           'rho': 2800.0,
                           'thy': 0.06,
                           'thz': 1.0,
                           }
        self.flutter = {'velocity': 'V',
                        'V_lower': 800.0,
                        'V_upper': 2500.0,
                        'n_divs': 34,
                        'tracking_method': 'frequency',
                        'method': 'bisection',
                        'tolerance': 1.0e-3,
                        'max_iterations': 50,
                        'sensitivity': ['thy', 'rho_air'],
                        }
