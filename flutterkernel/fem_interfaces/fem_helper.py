import numpy as np
import matplotlib.pyplot as plt


def calc_MAC(X, Y, plot=False):
    """
    Modal assurance criterion (MAC) between all columns of X and all columns of Y, see equations 4a and 4b in [1].
    The result is a matrix [n_X, n_Y] with values between 0.0 (orthogonal) and 1.0 (identical shape). Complex vectors
    are allowed.

    [1] Allemang, R. J., "The Modal Assurance Criterion - Twenty Years of Use and Abuse", Sound and Vibration, pp. 14-21,
    Aug. 2003.
    """
    norm_X = np.real(np.sum(X.conj() * X, axis=0))
    norm_Y = np.real(np.sum(Y.conj() * Y, axis=0))
    MAC = np.abs(X.conj().T.dot(Y)) ** 2.0 / np.outer(norm_X, norm_Y)
    if plot:
        plot_correlation_matrix(MAC, 'MAC')
    return MAC


def calc_PCC(lam1, lam2, plot=False):
    """
    Pole correlation criterion (PCC) for complex eigenvalues. For every pole in lam2, the distances to all poles in lam1
    are scaled with the largest of these distances, so that 1.0 means identical and 0.0 means farthest away.
    """
    delta = np.abs(lam1[:, None] - lam2[None, :])
    delta_max = delta.max(axis=0)
    # identical poles in a column give a correlation of 1.0
    delta_max[delta_max == 0.0] = np.inf
    PCC = 1.0 - delta / delta_max
    if plot:
        plot_correlation_matrix(PCC, 'PCC')
    return PCC


def calc_HDM(lam1, lam2, plot=False):
    """
    Hyperbolic distance metric (HDM) as proposed in [1] and applied to aeroelastic systems in [2], section 6.2.5. The
    poles are mapped into the unit disk, where the hyperbolic distance makes complex conjugate poles well separable.

    [1] Luspay, T., Peni, T., Gozse, I., Szabo, Z., and Vanek, B., "Model reduction for LPV systems based on approximate
    modal decomposition", International Journal for Numerical Methods in Engineering, vol. 113, no. 6, pp. 891-909, 2018,
    https://doi.org/10.1002/nme.5692.
    [2] Jelicic, G., "System Identification of Parameter-Varying Aeroelastic Systems using Real-Time Operational Modal
    Analysis", Deutsches Zentrum fuer Luft- und Raumfahrt e. V., 2022, https://doi.org/10.57676/P9QV-CK92.
    """
    # sampling frequency of the discrete mapping, based on the largest pole
    fs = 2.56 * np.abs(np.concatenate((lam1, lam2))).max() / 2.0 / np.pi
    z1 = np.exp(lam1 / fs)
    z2 = np.exp(lam2 / fs)
    # unstable poles lie outside the unit circle and are mirrored back inside
    z1 = np.where(lam1.real > 0.0, 1.0 / z1.conj(), z1)
    z2 = np.where(lam2.real > 0.0, 1.0 / z2.conj(), z2)
    # equations (4) and (A4) in [1]
    HDM = 1.0 - np.abs((z1[:, None] - z2[None, :]) / (1.0 - z1[:, None] * z2[None, :].conj()))
    if plot:
        plot_correlation_matrix(HDM, 'HDM')
    return HDM


def calc_proximity(lam1, lam2, component='imag', plot=False):
    """
    Correlation based on the distance between the eigenvalues. With component='imag', only the frequencies are compared,
    with component='full', the distance in the complex plane is used. In contrast to the PCC, the distances are scaled
    with the largest distance of the whole matrix, so that the best match of a row is always the nearest eigenvalue.
    """
    lam1 = np.asarray(lam1)
    lam2 = np.asarray(lam2)
    if component == 'imag':
        delta = np.abs(lam1.imag[:, None] - lam2.imag[None, :])
    elif component == 'full':
        delta = np.abs(lam1[:, None] - lam2[None, :])
    else:
        raise ValueError('Unknown component for proximity: {}'.format(component))
    if delta.max() > 0.0:
        proximity = 1.0 - delta / delta.max()
    else:
        proximity = np.ones_like(delta)
    if plot:
        plot_correlation_matrix(proximity, 'Proximity ({})'.format(component))
    return proximity


def plot_correlation_matrix(matrix, name='Correlation Matrix'):
    fig, ax = plt.subplots()
    image = ax.pcolor(matrix, cmap='hot_r', vmin=0.0, vmax=1.0)
    fig.colorbar(image, ax=ax)
    ax.set_xlabel('new roots')
    ax.set_ylabel('old roots')
    ax.set_title(name)
    plt.show()
