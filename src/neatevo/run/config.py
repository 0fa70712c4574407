"""
NEAT Configuration Module

Classes:
    Parameter: Declaration of one numeric parameter (section, default, range)
    Config:    Flat set of named numeric parameters, read from an INI file
"""

import configparser
import os
from typing import NamedTuple

class Parameter(NamedTuple):
    section     : str
    default     : float
    low         : float
    high        : float
    whole_number: bool = False

PARAMETERS: dict[str, Parameter] = {

    # [UNIVERSAL]

    # 1 to let the library log warnings and errors, 0 to keep it quiet.
    'show_log': Parameter('UNIVERSAL', 1, 0, 1, whole_number=True),

    # The number of genomes in each generation (the population size).
    'initial_genome_count': Parameter('UNIVERSAL', 180, 1, 2000, whole_number=True),

    # The number of species the initial population is split into.
    # Also the maximum number of species kept afterwards.
    'initial_species_count': Parameter('UNIVERSAL', 40, 1, 2000, whole_number=True),

    # [EPOCH]

    # The probability of linking each (input, output) pair of a new minimal genome.
    'prob_of_making_link_in_initial_genome': Parameter('EPOCH', 0.25, 0.0001, 1),

    # The coefficients of the compatibility distance:
    #   c1/N * excess + c2/N * disjoint + c3 * mean weight difference
    'excess_genes_coefficient'  : Parameter('EPOCH', 1.0, 0.0001, 10),
    'disjoint_genes_coefficient': Parameter('EPOCH', 1.0, 0.0001, 10),
    'weights_coefficient'       : Parameter('EPOCH', 0.4, 0.0001, 10),

    # Genomes of a species closer than this share their fitness.
    'sh_threshold': Parameter('EPOCH', 3.0, 0.0001, 10),

    # The rate of mating across species. Declared but not used: parents
    # are always drawn from the same species.
    'interspecies_mating_rate': Parameter('EPOCH', 0.0, 0, 1),

    # The probability that crossover disables a link that is
    # disabled in at least one of the parents.
    'offspring_link_disable_rate': Parameter('EPOCH', 0.75, 0.0001, 1),

    # Offspring closer than this to their species leader are compatible with it.
    'min_species_compatibility_distance': Parameter('EPOCH', 0.2, 0.0001, 3),

    # The number of generations without improvement after which a species counts as stagnant.
    'max_stagnation_allowed': Parameter('EPOCH', 15, 1, 200, whole_number=True),

    # The fraction of each species passed unchanged to the next generation.
    'species_elite_proportion': Parameter('EPOCH', 0.1, 0, 1),

    # The fraction of offspring produced by cloning and mutating a single parent.
    'offspring_asexual_proportion': Parameter('EPOCH', 0.75, 0, 1),

    # The fraction of the fittest genomes of a species eligible for crossover.
    'fittest_parents_cutoff_proportion': Parameter('EPOCH', 0.3, 0, 1),

    # [MUTATION]

    # No hidden neuron is added to genomes that already have this many.
    'max_number_of_hidden_neurons': Parameter('MUTATION', 40, 0, 500, whole_number=True),

    # The probabilities of adding a hidden neuron and a link to an offspring.
    'hidden_neuron_mutation_rate': Parameter('MUTATION', 0.45, 0, 1),
    'link_mutation_rate'         : Parameter('MUTATION', 0.8,  0, 1),

    # The probability that self-loops are considered when adding a link.
    'link_mutation_chance_of_considering_looped_recurrency': Parameter('MUTATION', 0.0, 0, 1),

    # The probability that each weight (bias) mutates, and the probability
    # that a mutating weight (bias) is replaced instead of perturbed.
    'weight_mutation_rate_for_each_link': Parameter('MUTATION', 0.9,  0, 1),
    'weight_mutation_prob_new_val'      : Parameter('MUTATION', 0.1,  0, 1),
    'bias_mutation_rate_for_each_link'  : Parameter('MUTATION', 0.2,  0, 1),
    'bias_mutation_prob_new_val'        : Parameter('MUTATION', 0.07, 0, 1),

    # The largest perturbation of a weight (bias), before scaling by
    # (1 - rate_for_each_link), and the range [-r, r] of replacement values.
    'weight_mutation_max_pertubation': Parameter('MUTATION', 0.5, 0, 1),
    'weight_mutation_new_val_range'  : Parameter('MUTATION', 3.0, 0, 10),
    'bias_mutation_max_pertubation'  : Parameter('MUTATION', 0.5, 0, 1),
    'bias_mutation_new_val_range'    : Parameter('MUTATION', 3.0, 0, 10),

    # [TERMINATION]

    # The number of generations after which a trial stops.
    'max_number_generations': Parameter('TERMINATION', 100, 1, 100000, whole_number=True),

    # A trial stops as soon as the best fitness meets or exceeds this value.
    'fitness_threshold': Parameter('TERMINATION', float('inf'), float('-inf'), float('inf')),
}

class Config:
    """
    The parameters of a NEAT run.

    Every parameter is a named number with a default, a valid range and
    possibly a whole-number constraint (see PARAMETERS). Config() holds the
    defaults; Config(path) reads an INI file whose sections are UNIVERSAL,
    EPOCH, MUTATION and TERMINATION, falling back on the default for any
    parameter the file leaves out. Values are checked on construction.

    Public Attributes:
        One attribute per entry of PARAMETERS

    Public Properties:
        population_size: Alias of 'initial_genome_count'

    Public Methods:
        validate(): Check every parameter against its declared range
    """

    PARAMETERS = PARAMETERS

    def __init__(self, config_file: str | None = None):
        """
        Initialize Config by parsing an INI file, or with the default values.

        Parameters:
            config_file: Path to the INI configuration file.
                         If None, every parameter takes its default value.

        Raises:
            FileNotFoundError: if 'config_file' does not exist
            ValueError:        if a parameter is out of range or not a whole number
        """
        for name, parameter in PARAMETERS.items():
            setattr(self, name, parameter.default)

        if config_file is None:
            self.validate()
            return

        if not os.path.exists(config_file):
            raise FileNotFoundError(f"Configuration file '{config_file}' not found")

        parser = configparser.ConfigParser()
        parser.read(config_file)

        # Helper function to safely parse values
        def get_value(section, key, default):
            try:
                raw_value = parser.get(section, key)
            except (configparser.NoSectionError, configparser.NoOptionError):
                return default
            try:
                return float(raw_value)
            except ValueError:
                raise ValueError(f"parameter '{key}' in section [{section}] is not a number: '{raw_value}'")

        for name, parameter in PARAMETERS.items():
            setattr(self, name, get_value(parameter.section, name, parameter.default))

        self.validate()

    @property
    def population_size(self) -> int:
        return int(self.initial_genome_count)

    def validate(self) -> None:
        """
        Check every parameter against its declared range and whole-number
        constraint. Whole-number parameters are stored as int.

        Raises:
            ValueError: naming the first offending parameter
        """
        for name, parameter in PARAMETERS.items():
            value = getattr(self, name)

            if not parameter.low <= value <= parameter.high:
                raise ValueError(f"parameter '{name}' = {value} is outside [{parameter.low}, {parameter.high}]")

            if parameter.whole_number:
                if value != int(value):
                    raise ValueError(f"parameter '{name}' = {value} must be a whole number")
                setattr(self, name, int(value))
