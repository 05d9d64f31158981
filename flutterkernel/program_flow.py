import argparse
import getpass
import logging
import os
import platform
import sys
import time

from flutterkernel import solution_sequences, plotting_standard
from flutterkernel.io_functions import data_handling


class ProgramFlowHelper():

    def __init__(self, job_name, main=False, post=False, sensitivity=False,
                 path_input='../input/', path_output='../output/', jcl=None):
        self.job_name = job_name  # name of the JCL, without .py
        # steps to run
        self.main = main  # flutter analysis
        self.post = post  # plots
        self.sensitivity = sensitivity  # sensitivities of the flutter velocity, part of main
        self.debug = False  # log level DEBUG
        self.jcl = jcl  # optional, otherwise the JCL is read from path_input
        self.path_input = data_handling.check_path(path_input)
        self.path_output = data_handling.check_path(path_output)

    def get_filename(self, prefix, extension):
        return self.path_output + prefix + '_' + self.job_name + extension

    def print_logo(self):
        logging.info('')
        logging.info('   ~~~~~~~~~~~~~~~~~~~~~~~')
        logging.info('      ~~~~~~~~~~~~~~~~~')
        logging.info('   ______________________')
        logging.info('   \\/\\/\\/\\/\\/\\/\\/\\/\\/\\/\\/')
        logging.info('')

    def setup_logger(self):
        path_log = data_handling.check_path(self.path_output + 'log/')
        self.create_logfile_and_console_output(path_log + 'log_' + self.job_name + '.txt')

    def make_handler(self, handler, name, fmt, datefmt=None):
        handler.set_name(name)
        handler.setFormatter(logging.Formatter(fmt=fmt, datefmt=datefmt))
        return handler

    def create_logfile_and_console_output(self, filename):
        """
        Log to a file and to the console via the root logger. The handlers are identified by their names, so repeated
        runs in the same python session neither duplicate the output nor write to the log file of a previous job.
        """
        logger = logging.getLogger()
        logger.setLevel(logging.DEBUG if self.debug else logging.INFO)
        handlers = {hdlr.get_name(): hdlr for hdlr in logger.handlers}

        logfile = handlers.get('fk_logfile')
        if logfile is not None and logfile.baseFilename != os.path.abspath(filename):
            logger.removeHandler(logfile)
            logfile.close()
            logfile = None
        if logfile is None:
            logger.addHandler(self.make_handler(logging.FileHandler(filename, mode='a'), 'fk_logfile',
                                                fmt='%(asctime)s %(processName)-14s %(levelname)s: %(message)s',
                                                datefmt='%d/%m/%Y %H:%M:%S'))
        if 'fk_console' not in handlers:
            # simpler format for the console
            logger.addHandler(self.make_handler(logging.StreamHandler(sys.stdout), 'fk_console',
                                                fmt='%(levelname)s: %(message)s'))


class Kernel(ProgramFlowHelper):

    def run(self):
        self.setup_logger()
        logging.info('Starting Flutter Kernel with job: ' + self.job_name)
        logging.info('User ' + getpass.getuser() + ' on ' + platform.node() + ' (' + platform.platform() + ')')
        for step in ['main', 'post', 'sensitivity']:
            logging.info('{:<12} {}'.format(step + ':', getattr(self, step)))
        self.jcl = data_handling.load_jcl(self.job_name, self.path_input, self.jcl)

        if self.main:
            self.run_main()
        if self.post:
            self.run_post()

        logging.info('Flutter Kernel finished.')
        self.print_logo()

    def run_main(self):
        logging.info('--> Starting flutter analysis.')
        t_start = time.time()
        # the report is appended by the solver, start with an empty file
        filename_report = self.get_filename('flutter', '.txt')
        open(filename_report, 'w').close()

        analysis = solution_sequences.FlutterAnalysis(self.jcl, output_file=filename_report)
        found, critical_root = analysis.solve()
        if self.sensitivity:
            if found:
                for name in self.jcl.flutter.get('sensitivity', []):
                    analysis.sensitivity_solve(critical_root, name)
            else:
                logging.warning('No critical root, skipping the sensitivity analysis.')

        logging.info('--> Saving model data.')
        data_handling.dump_hdf5(self.get_filename('model', '.hdf5'), analysis.build_model())
        logging.info('--> Saving response(s).')
        fid = data_handling.open_hdf5(self.get_filename('response', '.hdf5'))
        data_handling.write_hdf5(fid, analysis.response, path='/0')
        data_handling.close_hdf5(fid)
        logging.info('--> Done in {}.'.format(seconds2string(time.time() - t_start)))
        return found, critical_root

    def run_post(self):
        responses = data_handling.load_hdf5_responses(self.job_name, self.path_output)
        logging.info('--> Drawing flutter curves.')
        plots = plotting_standard.FlutterPlots(self.jcl)
        plots.add_responses(responses)
        plots.plot_fluttercurves_to_pdf(self.get_filename('fluttercurves', '.pdf'))


def str2bool(v):
    # Convert strings from the command line to boolean.
    if isinstance(v, bool):
        return v
    answers = {'yes': True, 'true': True, 't': True, 'y': True, '1': True,
               'no': False, 'false': False, 'f': False, 'n': False, '0': False}
    if v.lower() not in answers:
        raise argparse.ArgumentTypeError('Boolean value expected, got {}.'.format(v))
    return answers[v.lower()]


def seconds2string(seconds):
    h, rest = divmod(int(round(seconds)), 3600)
    m, s = divmod(rest, 60)
    return '{}:{:02d}:{:02d} [h:mm:ss]'.format(h, m, s)


def command_line_interface():
    parser = argparse.ArgumentParser(description='Flutter analysis with piston theory aerodynamics')
    parser.add_argument('--job_name', help='Name of the JCL (no extension .py)', type=str, required=True)
    parser.add_argument('--path_input', help='Path to the JCL file', type=str, required=True)
    parser.add_argument('--path_output', help='Path to save the output', type=str, required=True)
    for step, desc, required in [('main', 'Flutter analysis', True),
                                 ('post', 'Post-processing (plots)', True),
                                 ('sensitivity', 'Sensitivities of the flutter velocity', False)]:
        parser.add_argument('--' + step, help=desc + ', True/False', choices=[True, False], type=str2bool,
                            required=required, default=False)
    args = parser.parse_args()
    k = Kernel(job_name=args.job_name, main=args.main, post=args.post, sensitivity=args.sensitivity,
               path_input=args.path_input, path_output=args.path_output)
    k.run()


if __name__ == "__main__":
    command_line_interface()
