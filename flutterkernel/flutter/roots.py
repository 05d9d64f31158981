import numpy as np


class FlutterRoot():
    """
    One root of the flutter equations at a given velocity. The real part of the eigenvalue is the damping (growth rate),
    the imaginary part is the circular frequency. eig_vec_right holds the modal amplitudes (length n_modes), the state
    vectors are the full right and left eigenvectors of the first order system (length 2 * n_modes).
    """

    def __init__(self, V, eigenvalue, state_vec_right, state_vec_left=None, root_id=None):
        self.V = float(V)
        self.eigenvalue = complex(eigenvalue)
        self.state_vec_right = np.asarray(state_vec_right)
        self.state_vec_left = None if state_vec_left is None else np.asarray(state_vec_left)
        self.root_id = root_id

    @property
    def n_modes(self):
        return self.state_vec_right.size // 2

    @property
    def eig_vec_right(self):
        return self.state_vec_right[:self.n_modes]

    @property
    def damping(self):
        return self.eigenvalue.real

    @property
    def omega(self):
        return self.eigenvalue.imag

    @property
    def freq(self):
        return self.eigenvalue.imag / 2.0 / np.pi

    @property
    def damping_ratio(self):
        # The structural damping g, which is often plotted in V-g diagrams, is twice the damping ratio.
        if abs(self.eigenvalue) == 0.0:
            return 0.0
        return self.eigenvalue.real / abs(self.eigenvalue)

    @property
    def is_stable(self):
        return self.damping < 0.0

    def __repr__(self):
        return 'FlutterRoot(V={:.6g}, id={}, lambda={:.6g})'.format(self.V, self.root_id, self.eigenvalue)


class VelocitySample():
    """
    All roots at one velocity, sorted by their root_id. A sample is invalid if the eigenvalue solution failed. In that
    case, no roots are stored and the sample is excluded from the crossover search.
    """

    def __init__(self, index, V, roots=None):
        self.index = index
        self.V = float(V)
        self.roots = [] if roots is None else roots
        self.valid = roots is not None

    def __repr__(self):
        return 'VelocitySample(index={}, V={:.6g}, valid={})'.format(self.index, self.V, self.valid)


class RootHistory():
    """
    Ordered list of velocity samples from the velocity sweep. Every valid sample holds exactly n_roots roots.
    """

    def __init__(self, n_roots):
        self.n_roots = n_roots
        self.samples = []

    def append(self, sample):
        if sample.valid and len(sample.roots) != self.n_roots:
            raise ValueError('Sample at V={} has {} roots, expected {}.'.format(sample.V, len(sample.roots), self.n_roots))
        if self.samples and sample.V < self.samples[-1].V:
            raise ValueError('Samples must be appended in ascending order of velocity.')
        self.samples.append(sample)

    def __iter__(self):
        return iter(self.samples)

    def __len__(self):
        return len(self.samples)

    def __getitem__(self, i):
        return self.samples[i]

    @property
    def valid_samples(self):
        return [sample for sample in self.samples if sample.valid]

    def as_arrays(self):
        """
        Convert the history into arrays [n_samples, n_roots], similar to the flutter response of the PK-method.
        Invalid samples are filled with NaN.
        """
        n_samples = len(self.samples)
        eigenvalues = np.full((n_samples, self.n_roots), np.nan, dtype=complex)
        Vtas = np.zeros((n_samples, self.n_roots))
        valid = np.zeros(n_samples, dtype=bool)
        for i, sample in enumerate(self.samples):
            Vtas[i, :] = sample.V
            valid[i] = sample.valid
            if sample.valid:
                eigenvalues[i, :] = [root.eigenvalue for root in sample.roots]
        # zero for a root at the origin, as in FlutterRoot.damping_ratio
        magnitude = np.abs(eigenvalues)
        damping = np.zeros((n_samples, self.n_roots))
        np.divide(eigenvalues.real, magnitude, out=damping, where=magnitude > 0.0)
        damping[~valid, :] = np.nan
        return {'eigenvalues': eigenvalues,
                'freqs': eigenvalues.imag / 2.0 / np.pi,
                'damping': damping,
                'Vtas': Vtas,
                'valid': valid,
                }


class CrossoverPoint():
    """
    A velocity interval [V_lo, V_hi] where the damping of one root changes its sign. The complete sets of roots at both
    ends are kept, so that the tracked root can be followed during the refinement.
    """

    def __init__(self, root_id, roots_lo, roots_hi):
        self.root_id = root_id
        self.roots_lo = roots_lo
        self.roots_hi = roots_hi
        if self.root_lo.is_stable == self.root_hi.is_stable:
            raise ValueError('No sign change of the damping for root {} between V={} and V={}.'.format(
                root_id, self.V_lo, self.V_hi))

    @property
    def root_lo(self):
        return self.roots_lo[self.root_id]

    @property
    def root_hi(self):
        return self.roots_hi[self.root_id]

    @property
    def V_lo(self):
        return self.root_lo.V

    @property
    def V_hi(self):
        return self.root_hi.V

    @property
    def damping_lo(self):
        return self.root_lo.damping

    @property
    def damping_hi(self):
        return self.root_hi.damping

    @property
    def is_onset(self):
        # True for a transition from stable to unstable with increasing velocity
        return self.root_lo.is_stable

    def __repr__(self):
        return 'CrossoverPoint(id={}, V=[{:.6g}, {:.6g}])'.format(self.root_id, self.V_lo, self.V_hi)


class CriticalRoot():
    """
    The flutter root at the stability boundary as found by the refinement of a crossover point. It carries the
    convergence information and, after a sensitivity analysis, the derivatives of the flutter velocity (V_sens) and of
    the eigenvalue (eig_sens) with respect to the last requested parameter.
    """

    def __init__(self, root, crossover, tolerance, n_iter, converged):
        self.root = root
        self.crossover = crossover
        self.tolerance = tolerance
        self.n_iter = n_iter
        self.converged = converged
        self.V_sens = None
        self.eig_sens = None
        self.sens_parameter = None

    @property
    def V(self):
        return self.root.V

    @property
    def eigenvalue(self):
        return self.root.eigenvalue

    @property
    def root_id(self):
        return self.root.root_id

    @property
    def eig_vec_right(self):
        return self.root.eig_vec_right

    def __repr__(self):
        return 'CriticalRoot(V={:.6g}, lambda={:.6g}, converged={})'.format(self.V, self.eigenvalue, self.converged)
