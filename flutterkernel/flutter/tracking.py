import numpy as np

from flutterkernel.equations.common import InvalidInputError
from flutterkernel.fem_interfaces import fem_helper

tracking_methods = ['frequency', 'eigenvalue', 'MAC', 'MAC*PCC', 'MAC*HDM']


def check_tracking_method(tracking_method):
    if tracking_method not in tracking_methods:
        raise InvalidInputError('Unknown tracking method "{}", use one of {}.'.format(tracking_method, tracking_methods))


def calc_correlation(tracking_method, eigenvalues_old, eigenvectors_old, eigenvalues_new, eigenvectors_new):
    """
    Calculate the correlation between the old and the new roots, rows belong to the old and columns to the new roots.
    The eigenvectors are the modal amplitudes [n_modes, n_roots].
    """
    if tracking_method == 'frequency':
        # Only compare the frequencies, the nearest frequency is the best match.
        correlation = fem_helper.calc_proximity(eigenvalues_old, eigenvalues_new, component='imag')
    elif tracking_method == 'eigenvalue':
        # Nearest eigenvalue in the complex plane
        correlation = fem_helper.calc_proximity(eigenvalues_old, eigenvalues_new, component='full')
    elif tracking_method == 'MAC':
        # Use only the modal assurance criterion (MAC).
        correlation = fem_helper.calc_MAC(eigenvectors_old, eigenvectors_new)
    elif tracking_method == 'MAC*PCC':
        # Combining MAC and pole correlation cirterion (PCC) for improved handling of complex conjugate pairs.
        correlation = fem_helper.calc_MAC(eigenvectors_old, eigenvectors_new) \
            * fem_helper.calc_PCC(eigenvalues_old, eigenvalues_new)
    elif tracking_method == 'MAC*HDM':
        # Combining MAC and hyperboloic distance metric (HDM) for improved handling of complex conjugate pairs.
        correlation = fem_helper.calc_MAC(eigenvectors_old, eigenvectors_new) \
            * fem_helper.calc_HDM(eigenvalues_old, eigenvalues_new)
    else:
        check_tracking_method(tracking_method)
    return correlation


def get_best_match(correlation):
    """
    It is important that no root is dropped or selected twice. The solution is to keep record of the matches that are
    still available so that, if the best match is already taken, the second best match is selected.
    """
    possible_matches = [True] * correlation.shape[1]
    possible_idx = np.arange(correlation.shape[1])
    idx_pos = []
    for x in range(correlation.shape[0]):
        # the highest value indicates the best match
        best_match = correlation[x, possible_matches].argmax()
        # reconstruct the corresponding index
        idx_pos.append(possible_idx[possible_matches][best_match])
        # remove the best match from the list of candidates
        possible_matches[possible_idx[possible_matches][best_match]] = False
    return idx_pos


def sort_by_frequency(eigenvalues):
    return list(np.argsort(eigenvalues.imag, kind='stable'))


def match_roots(tracking_method, roots_old, eigenvalues_new, eigenvectors_new):
    """
    Returns the order in which the new eigenvalues continue the old roots, i.e. the new eigenvalue with index
    idx_pos[i] continues the old root with root_id i.
    """
    eigenvalues_old = np.array([root.eigenvalue for root in roots_old])
    eigenvectors_old = np.array([root.eig_vec_right for root in roots_old]).T
    correlation = calc_correlation(tracking_method, eigenvalues_old, eigenvectors_old, eigenvalues_new, eigenvectors_new)
    return get_best_match(correlation)
