import logging

from flutterkernel.equations.common import PreconditionError
from flutterkernel.flutter.critical_root import CriticalRootSolver
from flutterkernel.flutter.crossover import detect_crossovers
from flutterkernel.flutter.scanner import RootScanner
from flutterkernel.flutter.sensitivity import FlutterSensitivity


class FlutterSolver():
    """
    Time domain flutter solver: sweeps the velocity range, detects the crossover points of the damping and refines the
    first one to the critical root. Usage:

        solver = FlutterSolver(operator, V_lower, V_upper, n_divs)
        solver.scan_for_roots()
        solver.print_sorted_roots()
        solver.print_crossover_points()
        found, critical_root = solver.find_critical_root(tolerance, max_iterations)
        solver.calculate_sensitivity(critical_root, ['thy'], 0)

    The reports are written to the log and, if an output file is given, also to that file.
    """

    def __init__(self, operator, V_lower, V_upper, n_divs, tracking_method='frequency', method='bisection',
                 eigen_solver=None, output_file=None):
        self.scanner = RootScanner(operator, eigen_solver=eigen_solver, tracking_method=tracking_method)
        self.critical_root_solver = CriticalRootSolver(self.scanner, method=method)
        self.sensitivity = FlutterSensitivity(self.scanner)
        # check the velocity range right away, before any solution is attempted
        self.scanner.calc_velocities(V_lower, V_upper, n_divs)
        self.V_lower = V_lower
        self.V_upper = V_upper
        self.n_divs = n_divs
        self.output_file = output_file
        self.history = None
        self.crossovers = []

    def clear(self):
        self.history = None
        self.crossovers = []

    def scan_for_roots(self):
        self.history = self.scanner.scan(self.V_lower, self.V_upper, self.n_divs)
        self.crossovers = detect_crossovers(self.history)
        logging.info('Found {} crossover point(s).'.format(len(self.crossovers)))
        return self.history

    def check_history(self):
        if self.history is None:
            raise PreconditionError('No roots available, call scan_for_roots() first.')

    def find_critical_root(self, tolerance, max_iterations):
        self.check_history()
        return self.critical_root_solver.find(self.crossovers, tolerance, max_iterations)

    def calculate_sensitivity(self, critical_root, parameter_list, output_index=0):
        return self.sensitivity.calculate(critical_root, parameter_list, output_index)

    def write_report(self, lines):
        for line in lines:
            logging.info(line)
        if self.output_file is not None:
            with open(self.output_file, 'a') as fid:
                fid.write('\n'.join(lines) + '\n')

    def format_root(self, root):
        return '{:>6} {:>14.6g} {:>14.6g} {:>14.6g} {:>12.6g} {:>12.4g}'.format(
            root.root_id, root.V, root.eigenvalue.real, root.eigenvalue.imag, root.freq, 2.0 * root.damping_ratio)

    def print_sorted_roots(self):
        self.check_history()
        header = '{:>6} {:>14} {:>14} {:>14} {:>12} {:>12}'.format('Root', 'V', 'Re', 'Im', 'f [Hz]', 'g')
        lines = ['--------------------------------------------------------------------------------------',
                 'Sorted roots:']
        for sample in self.history:
            lines.append('Velocity sample {} (V = {:.6g})'.format(sample.index, sample.V))
            if not sample.valid:
                lines.append('    no solution')
                continue
            lines.append(header)
            lines += [self.format_root(root) for root in sample.roots]
        self.write_report(lines)

    def print_crossover_points(self):
        self.check_history()
        lines = ['--------------------------------------------------------------------------------------',
                 'Crossover points: {}'.format(len(self.crossovers))]
        for crossover in self.crossovers:
            direction = 'stable -> unstable' if crossover.is_onset else 'unstable -> stable'
            lines.append('Root {} between V = {:.6g} and {:.6g} ({})'.format(
                crossover.root_id, crossover.V_lo, crossover.V_hi, direction))
            lines.append('    ' + self.format_root(crossover.root_lo))
            lines.append('    ' + self.format_root(crossover.root_hi))
        self.write_report(lines)

    def print_critical_root(self, critical_root):
        lines = ['--------------------------------------------------------------------------------------',
                 'Critical root (converged: {}, iterations: {}, tolerance: {:.3g}):'.format(
                     critical_root.converged, critical_root.n_iter, critical_root.tolerance),
                 '    ' + self.format_root(critical_root.root)]
        if critical_root.V_sens is not None:
            lines.append('    dV/d{} = {:.6g}'.format(critical_root.sens_parameter, critical_root.V_sens))
        self.write_report(lines)
