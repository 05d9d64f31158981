# -*- coding: utf-8 -*-
import itertools
import logging

import numpy as np
from matplotlib import pyplot as plt
from matplotlib.backends.backend_pdf import PdfPages

plt.rcParams.update({'font.size': 16,
                     'svg.fonttype': 'none',
                     'savefig.dpi': 300, })


class FlutterPlots():
    """
    V-f and V-g diagrams of the flutter responses, one page per response. The lower two axes show the structural
    damping g = 2 * damping ratio, once zoomed to the stability boundary and once with the full range.
    """

    def __init__(self, jcl):
        self.jcl = jcl
        self.responses = []
        self.pp = None

    def add_responses(self, responses):
        self.responses = responses

    def get_frequency_limits(self, freqs):
        # invalid velocity samples are NaN
        if np.all(np.isnan(freqs)):
            return 0.0, 2.0
        fmin = 2.0 * np.floor(np.nanmin(freqs) / 2.0)
        fmax = 2.0 * np.ceil(np.nanmax(freqs) / 2.0)
        return fmin, max(fmax, fmin + 2.0)

    def format_axis(self, ax, position, ylabel, limits):
        ax.set_position(position)
        ax.set_ylabel(ylabel)
        ax.get_yaxis().set_label_coords(x=-0.13, y=0.5)
        ax.grid(visible=True, which='major', axis='both')
        ax.minorticks_on()
        ax.axis(limits)

    def plot_response(self, fig, ax, response):
        for axis in ax:
            axis.cla()
        colors = itertools.cycle((plt.cm.tab20c(np.linspace(0, 1, 20))))
        markers = itertools.cycle(('+', 'o', 'v', '^', '<', '>', '8', 's', 'p', '*', 'x', 'D',))
        Vtas = response['Vtas']
        g = 2.0 * response['damping']
        for j in range(Vtas.shape[1]):
            style = {'marker': next(markers), 'markersize': 4.0, 'linewidth': 1.0, 'color': next(colors)}
            ax[0].plot(Vtas[:, j], response['freqs'][:, j], label='root {}'.format(j), **style)
            ax[1].plot(Vtas[:, j], g[:, j], **style)
            ax[2].plot(Vtas[:, j], g[:, j], **style)

        if 'critical_root' in response:
            V = response['critical_root']['V']
            for axis in ax:
                axis.axvline(V, color='k', linestyle='--', linewidth=1.0)
            ax[0].plot(V, response['critical_root']['freq'], marker='o', markersize=10.0, markerfacecolor='none',
                       color='k')

        fig.suptitle(response['desc'], fontsize=16)
        Vmin, Vmax = Vtas.min(), Vtas.max()
        fmin, fmax = self.get_frequency_limits(response['freqs'])
        self.format_axis(ax[0], [0.15, 0.55, 0.75, 0.35], 'Frequency [Hz]', [Vmin, Vmax, fmin, fmax])
        ax[0].legend(loc='upper left', fontsize=10)
        self.format_axis(ax[1], [0.15, 0.35, 0.75, 0.18], 'g (zoom)', [Vmin, Vmax, -0.11, 0.11])
        self.format_axis(ax[2], [0.15, 0.15, 0.75, 0.18], 'g', [Vmin, Vmax, -2.2, 2.2])
        ax[2].set_xlabel('$V [m/s]$')

    def plot_fluttercurves(self):
        logging.info('start plotting flutter curves...')
        fig, ax = plt.subplots(3, sharex=True, figsize=(8, 10))
        for response in self.responses:
            self.plot_response(fig, ax, response)
            self.pp.savefig(fig)
        plt.close(fig)

    def plot_fluttercurves_to_pdf(self, filename_pdf):
        with PdfPages(filename_pdf) as self.pp:
            self.plot_fluttercurves()
        logging.info('plots saved as ' + filename_pdf)
