import configparser
import os

class Config:

    # Allowed values for the enumerated parameters
    CXN_POLICIES       = ("none", "full")
    FITNESS_CRITERIA   = ("max", "mean")

    # Every parameter, with its INI section, type and default value
    _PARAMETERS = {
        # [POPULATION_INIT]
        'population_size'           : ('POPULATION_INIT', int,   32),
        'num_inputs'                : ('POPULATION_INIT', int,   2),
        'num_bias'                  : ('POPULATION_INIT', int,   1),
        'num_outputs'               : ('POPULATION_INIT', int,   1),
        'initial_cxn_policy'        : ('POPULATION_INIT', str,   "none"),
        'initial_mutation_rounds'   : ('POPULATION_INIT', int,   1),

        # [MUTATION]
        'structural_mutation_chance': ('MUTATION',        float, 0.25),
        'weight_mutation_chance'    : ('MUTATION',        float, 0.80),
        'gene_state_flip_mutation'  : ('MUTATION',        bool,  False),
        'max_mutation_attempts'     : ('MUTATION',        int,   30),

        # [SPECIATION]
        'excess_coeff'              : ('SPECIATION',      float, 1.0),
        'disjoint_coeff'            : ('SPECIATION',      float, 1.0),
        'weight_diff_coeff'         : ('SPECIATION',      float, 1.0),
        'species_delta_threshold'   : ('SPECIATION',      float, 2.5),

        # [REPRODUCTION]
        'breed_consideration'       : ('REPRODUCTION',    float, 0.3),
        'breed_retention'           : ('REPRODUCTION',    float, 0.1),

        # [TERMINATION]
        'fitness_termination_check' : ('TERMINATION',     bool,  False),
        'fitness_criterion'         : ('TERMINATION',     str,   "max"),
        'fitness_threshold'         : ('TERMINATION',     float, None),
        'max_number_generations'    : ('TERMINATION',     int,   100),
    }

    def __init__(self, config_file: str | None = None):
        """
        Initialize Config by parsing an INI file, or create a Config holding the defaults.

        Every parameter is optional in the INI file; a missing one keeps its default.

        Parameters:
            config_file: Path to the INI configuration file.
                         If None, creates a default Config for manual attribute setting.
        """
        for name, (_, _, default) in self._PARAMETERS.items():
            setattr(self, name, default)

        if config_file is None:
            return

        if not os.path.exists(config_file):
            raise FileNotFoundError(f"Configuration file '{config_file}' not found")

        parser = configparser.ConfigParser()
        parser.read(config_file)

        # Helper function to safely parse values
        def get_value(section, key, value_type, default):
            try:
                raw_value = parser.get(section, key)
                if value_type != str and raw_value.lower() == 'none':
                    return None
                if value_type == int:
                    return parser.getint(section, key)
                elif value_type == float:
                    return parser.getfloat(section, key)
                elif value_type == bool:
                    return parser.getboolean(section, key)
                elif value_type == str:
                    return raw_value
            except (configparser.NoSectionError, configparser.NoOptionError):
                return default

        # [POPULATION_INIT]
        #   population_size:         the number of genomes in each generation
        #   num_inputs:              the number of input nodes (sensor vector length)
        #   num_bias:                the number of bias nodes, whose value is fixed at 1.0
        #   num_outputs:             the number of output nodes (action vector length)
        #   initial_cxn_policy:      "none" - new genomes have no connections
        #                            "full" - connect every input and bias node to every output node
        #   initial_mutation_rounds: rounds of mutations applied to each genome of the base population
        #
        # [MUTATION]
        #   structural_mutation_chance: probability of attempting an add-connection mutation,
        #                               and (independently) of attempting an add-node mutation
        #   weight_mutation_chance:     probability that each gene has its weight mutated
        #   gene_state_flip_mutation:   whether weight mutation may also toggle a gene's enabled state
        #   max_mutation_attempts:      attempts made by a structural mutation before giving up
        #
        # [SPECIATION]
        #   excess_coeff, disjoint_coeff, weight_diff_coeff: coefficients of the distance terms
        #   species_delta_threshold: genomes whose distance is at most this are in the same species
        #
        # [REPRODUCTION]
        #   breed_consideration: fraction of each species (the fittest) eligible to breed
        #   breed_retention:     fraction of each species' allocation carried over as clones
        #
        # [TERMINATION]
        #   fitness_termination_check: whether reaching 'fitness_threshold' stops a trial
        #   fitness_criterion:         "max" or "mean" population fitness
        #   fitness_threshold:         the fitness which, met or exceeded, stops a trial
        #   max_number_generations:    the number of generations after which a trial stops
        for name, (section, value_type, default) in self._PARAMETERS.items():
            setattr(self, name, get_value(section, name, value_type, default))

        self.validate()

    @property
    def num_fixed_nodes(self) -> int:
        """The number of nodes every genome starts with (input, bias and output)."""
        return self.num_inputs + self.num_bias + self.num_outputs

    def validate(self) -> None:
        """
        Check that all parameters are within their allowed ranges.

        Raises:
            ValueError: if a parameter has an invalid value
        """
        if self.population_size < 1:
            raise ValueError(f"'population_size' must be positive, got {self.population_size}")

        for name in ('num_inputs', 'num_bias', 'num_outputs',
                     'initial_mutation_rounds', 'max_mutation_attempts', 'max_number_generations'):
            if getattr(self, name) < 0:
                raise ValueError(f"'{name}' must be non-negative, got {getattr(self, name)}")

        for name in ('structural_mutation_chance', 'weight_mutation_chance',
                     'breed_consideration', 'breed_retention'):
            value = getattr(self, name)
            if not 0.0 <= value <= 1.0:
                raise ValueError(f"'{name}' must be in [0, 1], got {value}")

        for name in ('excess_coeff', 'disjoint_coeff', 'weight_diff_coeff', 'species_delta_threshold'):
            if getattr(self, name) < 0:
                raise ValueError(f"'{name}' must be non-negative, got {getattr(self, name)}")

        if self.initial_cxn_policy not in self.CXN_POLICIES:
            raise ValueError(f"bad 'initial_cxn_policy': {self.initial_cxn_policy}")

        if self.fitness_criterion not in self.FITNESS_CRITERIA:
            raise ValueError(f"bad 'fitness_criterion': {self.fitness_criterion}")

        if self.fitness_termination_check and self.fitness_threshold is None:
            raise ValueError("'fitness_threshold' is required when 'fitness_termination_check' is set")

    def to_dict(self) -> dict:
        """
        Returns:
            Dictionary mapping every parameter name to its current value
        """
        return {name: getattr(self, name) for name in self._PARAMETERS}

    @classmethod
    def from_dict(cls, config_dict: dict) -> 'Config':
        """
        Create a Config from a dictionary (as produced by 'to_dict').
        Parameters absent from the dictionary keep their default.

        Raises:
            ValueError: if the dictionary holds an unknown parameter or an invalid value
        """
        config = cls()
        for name, value in config_dict.items():
            if name not in cls._PARAMETERS:
                raise ValueError(f"Unknown configuration parameter '{name}'")
            setattr(config, name, value)
        config.validate()
        return config

    def __repr__(self):
        params = ', '.join(f"{name}={getattr(self, name)!r}" for name in self._PARAMETERS)
        return f"Config({params})"
