# -*- coding: utf-8 -*-
"""
International Standard Atmosphere (ISA, ISO 2533, 1975) up to the stratopause. Pressure and temperature follow the
US Standard Atmosphere 1976. The atmosphere only provides the air density and the ratio of specific heats for the piston
theory, the Mach number remains an independent parameter.
"""
import math

from flutterkernel.equations.common import InvalidInputError

g0 = 9.80665  # acceleration of gravity at sea level [m/s^2]
R = 287.0531  # specific gas constant of air [J/kg/K]
gamma = 1.4  # ratio of specific heats

# layers: upper bound [m], reference altitude [m], temperature [K] and pressure [Pa] at the reference altitude,
# temperature gradient [K/m]
layers = [(11000.0, 0.0, 288.15, 101325.0, -0.0065),  # troposphere
          (20000.0, 11000.0, 216.65, 22632.04, 0.0),  # tropopause
          (32000.0, 20000.0, 216.65, 5474.878, 0.001),  # stratosphere
          (47000.0, 32000.0, 228.65, 868.0158, 0.0028),
          ]


def get_layer(h):
    if h < -5000.0 or h > layers[-1][0]:
        raise InvalidInputError('Altitude h = {} m out of range, must be -5000 <= h <= {} m.'.format(h, layers[-1][0]))
    for layer in layers:
        if h <= layer[0]:
            return layer


def isa(h):
    _, href, Tref, pref, lapse_rate = get_layer(h)
    T = Tref + lapse_rate * (h - href)
    if lapse_rate == 0.0:
        # isothermal layer
        p = pref * math.exp(-g0 * (h - href) / R / Tref)
    else:
        p = pref * (Tref / T) ** (g0 / R / lapse_rate)
    rho = p / R / T
    a = (gamma * R * T) ** 0.5
    return {'h': h, 'p': p, 'rho': rho, 'T': T, 'a': a, 'gamma': gamma}
