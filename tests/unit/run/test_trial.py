"""
Unit tests for the Trial base class.
"""

import pytest
from joblib import parallel_backend

from neatevo.run import Trial


class CountingTrial(Trial):
    """Scores a network by its number of enabled links and records what it is told."""

    def _reset(self):
        super()._reset()
        self.reports       = 0
        self.final_reports = 0

    def _evaluate_fitness(self, network):
        return sum(1 for link in network.genome.link_genes if link.enabled)

    def _report_progress(self):
        self.reports += 1

    def _final_report(self):
        self.final_reports += 1


@pytest.fixture
def trial_config(config):
    config.max_number_generations = 3
    return config


class TestRun:

    def test_stops_after_max_generations(self, trial_config):
        trial = CountingTrial(trial_config, 2, 1, seed=3)
        trial.run()

        assert trial.community.generation_count == 3
        assert trial.failed
        assert trial.reports == 4
        assert trial.final_reports == 1

    def test_stops_when_threshold_is_reached(self, trial_config):
        trial_config.fitness_threshold = 1.0
        trial = CountingTrial(trial_config, 2, 1, seed=3)
        trial.run()

        assert trial.community.generation_count == 0
        assert not trial.failed

    def test_fitness_is_written_into_genomes(self, trial_config):
        trial = CountingTrial(trial_config, 2, 1, seed=3)
        trial.run()

        for genome in trial.community.genomes:
            assert genome.fitness == sum(1 for link in genome.link_genes if link.enabled)
            assert genome.phenotype is not None

    def test_suppress_output(self, trial_config):
        trial = CountingTrial(trial_config, 2, 1, seed=3, suppress_output=True)
        trial.run()

        assert trial.reports == 0
        assert trial.final_reports == 0

    def test_rerun_starts_over(self, trial_config):
        trial = CountingTrial(trial_config, 2, 1, seed=3)
        trial.run()
        first = trial.community
        trial.run()

        assert trial.community is not first
        assert trial.community.generation_count == 3

    def test_parallel_evaluation(self, trial_config):
        serial = CountingTrial(trial_config, 2, 1, seed=5, suppress_output=True)
        serial.run()

        parallel = CountingTrial(trial_config, 2, 1, seed=5, suppress_output=True)
        with parallel_backend("threading"):
            parallel.run(num_jobs=2)

        assert [g.fitness for g in parallel.community.genomes] == [g.fitness for g in serial.community.genomes]
