import logging

from flutterkernel.equations.common import InvalidInputError, PreconditionError


class Parameter():
    """
    A named scalar value. Parameters are owned by a discipline and are used both as physical input to the structural
    and aerodynamic models and as variables for the sensitivity analysis.
    """

    def __init__(self, name, value):
        self.name = str(name)
        self.value = float(value)

    def __repr__(self):
        return 'Parameter({!r}, {:g})'.format(self.name, self.value)


class Discipline():
    """
    The discipline is the context of one analysis session. It owns the parameters, the structural model and the
    aerodynamic surfaces (volume loads). All objects derived from the discipline, e.g. the flutter equations or the
    roots, only read from it.

    The discipline also keeps record of the parameters which are currently tracked for differentiation. The sensitivity
    analysis adds the parameters of interest before the calculation and removes them afterwards.
    """

    def __init__(self, name='structural'):
        self.name = name
        self.parameters = {}
        self.tracked = []
        self.velocity = None
        self.structure = None
        self.volume_loads = []

    def register_parameter(self, parameter):
        if not isinstance(parameter, Parameter):
            parameter = Parameter(*parameter)
        if parameter.name in self.parameters:
            raise InvalidInputError('Parameter "{}" is already registered.'.format(parameter.name))
        if any([parameter is p for p in self.parameters.values()]):
            raise InvalidInputError('Parameter object "{}" is already registered by another name.'.format(parameter.name))
        self.parameters[parameter.name] = parameter
        logging.debug('Registered parameter {}'.format(parameter))
        return parameter

    def set_velocity_parameter(self, parameter):
        # The velocity is a parameter like any other, it is needed for the sensitivity of the flutter velocity.
        if isinstance(parameter, str):
            if parameter not in self.parameters:
                self.register_parameter(Parameter(parameter, 0.0))
            parameter = self.parameters[parameter]
        elif parameter.name not in self.parameters:
            self.register_parameter(parameter)
        self.velocity = parameter

    def get_parameter(self, name):
        if isinstance(name, Parameter):
            name = name.name
        if name not in self.parameters:
            raise PreconditionError('Parameter not found by name: {}. Valid names are: {}'.format(
                name, ', '.join(self.parameters.keys())))
        return self.parameters[name]

    def values(self):
        # Return a snapshot of all parameter values, which is handed to the models for assembly.
        return {name: parameter.value for name, parameter in self.parameters.items()}

    def add_parameter(self, parameter):
        """
        Start tracking a parameter for differentiation. Returns True if the parameter was added and False if the
        parameter was already tracked before.
        """
        parameter = self.get_parameter(parameter)
        if parameter.name in self.tracked:
            return False
        self.tracked.append(parameter.name)
        return True

    def remove_parameter(self, parameter):
        parameter = self.get_parameter(parameter)
        if parameter.name not in self.tracked:
            raise PreconditionError('Parameter "{}" is not tracked for sensitivity analysis.'.format(parameter.name))
        self.tracked.remove(parameter.name)

    def is_tracked(self, name):
        return name in self.tracked

    def set_structure(self, structure):
        self.structure = structure

    def add_volume_load(self, load):
        self.volume_loads.append(load)
