import logging
import numpy as np

from flutterkernel.equations.common import InvalidInputError


class BeamInterface():
    """
    Euler-Bernoulli beam along the x-axis, discretized with cubic Hermite elements. Each node has two DoFs, the
    deflection w (in z-direction) and the rotation theta = dw/dx. The upper surface of the beam is exposed to the flow.

    The section is rectangular with the thickness thy (bending direction) and the width thz. The material is given by
    the Young's modulus E and the density rho. All four are names of parameters, which are resolved against the
    parameter values of the discipline, so that the beam can be differentiated with respect to them.
    """
    axis = np.array([1.0, 0.0, 0.0])
    boundary_conditions = {'pinned-pinned': [('left', 0), ('right', 0)],
                           'clamped-free': [('left', 0), ('left', 1)],
                           'clamped-clamped': [('left', 0), ('left', 1), ('right', 0), ('right', 1)],
                           }

    def __init__(self, length, n_elems, bc='pinned-pinned', E='E', rho='rho', thy='thy', thz='thz', n_gauss=4):
        if length <= 0.0 or n_elems < 1:
            raise InvalidInputError('Beam requires a positive length and at least one element.')
        if bc not in self.boundary_conditions:
            raise InvalidInputError('Unknown boundary condition "{}", use one of {}.'.format(
                bc, list(self.boundary_conditions)))
        self.length = float(length)
        self.n_elems = int(n_elems)
        self.bc = bc
        self.E = E
        self.rho = rho
        self.thy = thy
        self.thz = thz
        self.l_elem = self.length / self.n_elems
        self.n_nodes = self.n_elems + 1
        self.x_nodes = np.linspace(0.0, self.length, self.n_nodes)
        # Gauss points and weights, mapped from [-1, 1] to [0, 1]
        xg, wg = np.polynomial.legendre.leggauss(n_gauss)
        self.xi_gauss = (xg + 1.0) / 2.0
        self.w_gauss = wg / 2.0
        self.setup_dofs()
        logging.info('Beam with {} elements, {} free DoFs and {} boundary conditions'.format(
            self.n_elems, self.n_dof, self.bc))

    def setup_dofs(self):
        constrained = []
        for side, dof in self.boundary_conditions[self.bc]:
            node = 0 if side == 'left' else self.n_nodes - 1
            constrained.append(2 * node + dof)
        self.pos_f = np.array([i for i in range(2 * self.n_nodes) if i not in constrained])
        self.n_dof = len(self.pos_f)

    @property
    def dof_coordinates(self):
        # x-coordinate and type (0 = deflection, 1 = rotation) of the free DoFs
        return self.x_nodes[self.pos_f // 2], self.pos_f % 2

    def shape_functions(self, xi):
        l = self.l_elem
        N = np.array([1.0 - 3.0 * xi ** 2 + 2.0 * xi ** 3,
                      l * (xi - 2.0 * xi ** 2 + xi ** 3),
                      3.0 * xi ** 2 - 2.0 * xi ** 3,
                      l * (-xi ** 2 + xi ** 3)])
        dN = np.array([(-6.0 * xi + 6.0 * xi ** 2) / l,
                       1.0 - 4.0 * xi + 3.0 * xi ** 2,
                       (6.0 * xi - 6.0 * xi ** 2) / l,
                       -2.0 * xi + 3.0 * xi ** 2])
        d2N = np.array([(-6.0 + 12.0 * xi) / l ** 2,
                        (-4.0 + 6.0 * xi) / l,
                        (6.0 - 12.0 * xi) / l ** 2,
                        (-2.0 + 6.0 * xi) / l])
        return N, dN, d2N

    def element_integrals(self):
        # Integrals of the shape function products over one element, evaluated by Gauss quadrature
        NN = np.zeros((4, 4))
        NdN = np.zeros((4, 4))
        d2Nd2N = np.zeros((4, 4))
        for xi, w in zip(self.xi_gauss, self.w_gauss):
            N, dN, d2N = self.shape_functions(xi)
            NN += np.outer(N, N) * w * self.l_elem
            NdN += np.outer(N, dN) * w * self.l_elem
            d2Nd2N += np.outer(d2N, d2N) * w * self.l_elem
        return NN, NdN, d2Nd2N

    def assemble_global(self, element_matrix):
        matrix = np.zeros((2 * self.n_nodes, 2 * self.n_nodes))
        for i_elem in range(self.n_elems):
            idx = np.arange(2 * i_elem, 2 * i_elem + 4)
            matrix[np.ix_(idx, idx)] += element_matrix
        # keep only the free DoFs (f-set)
        return matrix[np.ix_(self.pos_f, self.pos_f)]

    def get_section(self, values):
        thy = values[self.thy]
        thz = values[self.thz]
        if thy <= 0.0 or thz <= 0.0:
            raise InvalidInputError('Section dimensions must be positive, but thy = {} and thz = {}.'.format(thy, thz))
        area = thy * thz
        inertia = thz * thy ** 3.0 / 12.0
        return area, inertia, thz

    def assemble(self, values):
        area, inertia, _ = self.get_section(values)
        NN, _, d2Nd2N = self.element_integrals()
        Mff = self.assemble_global(values[self.rho] * area * NN)
        Kff = self.assemble_global(values[self.E] * inertia * d2Nd2N)
        Dff = np.zeros_like(Mff)
        return {'Mff': Mff, 'Kff': Kff, 'Dff': Dff}

    def surface_matrices(self, values, flow_direction):
        _, _, width = self.get_section(values)
        NN, NdN, _ = self.element_integrals()
        # only the component of the flow along the beam axis contributes to the slope
        flow_along_axis = np.dot(flow_direction, self.axis)
        Bff_dot = self.assemble_global(width * NN)
        Bff_slope = self.assemble_global(width * flow_along_axis * NdN)
        return Bff_dot, Bff_slope
