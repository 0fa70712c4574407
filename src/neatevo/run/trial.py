"""
NEAT Trial Module

A trial is one seeded run of NEAT on one problem: it builds a Community,
scores its genomes through their networks, and steps it epoch by epoch.
Scoring can be spread over several processes with joblib.

Classes:
    Trial: Base class of problem drivers
"""

import logging
from abc    import ABC, abstractmethod
from joblib import Parallel, delayed
from typing import TYPE_CHECKING

from neatevo.pool       import Community, UncannyValleySpeciationAlgorithm
from neatevo.run.config import Config
if TYPE_CHECKING:
    from neatevo.phenotype import NeuralNetwork

logger = logging.getLogger(__name__)

class Trial(ABC):
    """
    Base class of a NEAT problem driver.

    run() scores every genome of the community, then alternates epoch() and
    scoring until _terminate() says stop.

    A problem subclass provides:
    - _reset():                   clear its own state, calling super()._reset() first
    - _evaluate_fitness(network): the (non-negative) fitness of one network
    - _report_progress():         output after each scored generation
    - _final_report():            output once the run is over

    and may replace _terminate(), which by default stops on the generation
    limit or on reaching the fitness threshold.

    Public Attributes:
        failed:    False once the fitness threshold has been reached
        community: The community of the current (or last) run

    Public Methods:
        run(num_jobs): Evolve a fresh community until termination
    """

    def __init__(self,
                 config         : Config,
                 input_count    : int,
                 output_count   : int,
                 seed           : int | None = None,
                 suppress_output: bool       = False):
        """
        Parameters:
            config:          run parameters
            input_count:     inputs of every evolved network
            output_count:    outputs of every evolved network
            seed:            seed of the community's generator (None: unseeded)
            suppress_output: skip _report_progress() and _final_report()
        """
        self._config         : Config            = config
        self._input_count    : int               = input_count
        self._output_count   : int               = output_count
        self._seed           : int | None        = seed
        self._community      : Community | None  = None
        self._suppress_output: bool              = suppress_output
        self.failed          : bool              = True

    @property
    def community(self) -> Community | None:
        return self._community

    def run(self, num_jobs: int = 1):
        """
        Evolve a new community from scratch.

        Parameters:
            num_jobs: processes used to score genomes (joblib convention:
                      1 scores in this process, -1 uses every core)
        """
        self._reset()

        speciation = UncannyValleySpeciationAlgorithm(self._config)
        self._community = Community(self._config, self._input_count, self._output_count, speciation, self._seed)
        self._community.init()

        self._score_generation(num_jobs)

        while not self._terminate():
            self._community.epoch()
            logger.debug("Generation %d: %d species", self._community.generation_count, len(self._community.species))
            self._score_generation(num_jobs)

        if not self._suppress_output:
            self._final_report()

    def _score_generation(self, num_jobs: int):
        self._evaluate_fitness_all(num_jobs)
        if not self._suppress_output:
            self._report_progress()

    @abstractmethod
    def _reset(self):
        """
        Forget the previous run. Subclasses extend this with their own state.
        """
        self._community = None
        self.failed     = True

    @abstractmethod
    def _evaluate_fitness(self, network: 'NeuralNetwork') -> float:
        """
        Score one genome through its network.

        Parents are drawn with probability proportional to fitness, so the
        score should not be negative.

        Parameters:
            network: phenotype of the genome being scored

        Returns:
            The genome's fitness
        """
        pass

    def _evaluate_fitness_all(self, num_jobs: int):
        """
        Score every genome of the community and store the result in genome.fitness.
        """
        genomes  = self._community.genomes
        networks = [genome.create_phenotype() for genome in genomes]

        if num_jobs == 1:
            scores = [self._evaluate_fitness(network) for network in networks]
        else:
            scores = Parallel(num_jobs)(delayed(self._evaluate_fitness)(network) for network in networks)

        for genome, score in zip(genomes, scores):
            genome.fitness = float(score)

    @abstractmethod
    def _report_progress(self):
        pass

    @abstractmethod
    def _final_report(self):
        pass

    def _terminate(self) -> bool:
        """
        Stop after 'max_number_generations' epochs, or as soon as some genome
        of the current generation reaches 'fitness_threshold'. Sets 'failed'.
        """
        best_fitness = max(genome.fitness for genome in self._community.genomes)
        success      = best_fitness >= self._config.fitness_threshold
        out_of_time  = self._community.generation_count >= self._config.max_number_generations

        if success or out_of_time:
            self.failed = not success
            return True
        return False
