"""
XOR Problem Implementation for NEAT

This module implements the classic XOR (exclusive OR) problem as a benchmark
for the NEAT algorithm. XOR is not linearly separable, so a network must grow
at least one hidden neuron to solve it.

The XOR Problem:
        Input (0, 0) → Output 0
        Input (0, 1) → Output 1
        Input (1, 0) → Output 1
        Input (1, 1) → Output 0

Fitness Function:
    Fitness = 4.0 - Σ(output - target)²   (never below 0)

    The trial succeeds once the best fitness reaches 'fitness_threshold'.

Classes:
    Trial_XOR: NEAT trial for solving XOR

Usage:
    python examples/trial_xor.py
"""

import logging
from pathlib import Path

from neatevo.phenotype import NeuralNetwork
from neatevo.run       import Config, Trial

class Trial_XOR(Trial):
    """
    NEAT trial for solving the XOR (exclusive OR) problem.

    Implemented Methods:
        _evaluate_fitness(network): Test a network on all 4 XOR cases
        _report_progress():         Display generation statistics
        _final_report():            Display the best network and its formula
    """

    xor_inputs  = [[0.0, 0.0], [0.0, 1.0], [1.0, 0.0], [1.0, 1.0]]
    xor_outputs = [[0.0],      [1.0],      [1.0],      [0.0]]

    def __init__(self, config: Config, seed: int | None = None, suppress_output: bool = False):
        super().__init__(config, input_count=2, output_count=1, seed=seed, suppress_output=suppress_output)

    def _reset(self):
        """Reset trial state."""
        return super()._reset()

    def _evaluate_fitness(self, network: NeuralNetwork) -> float:
        fitness = 4.0  # max possible fitness
        for inputs, expected_output in zip(self.xor_inputs, self.xor_outputs):
            output   = network.activate(inputs)
            error    = output[0] - expected_output[0]
            fitness -= error ** 2

        return max(0.0, fitness)

    def _report_progress(self):
        community = self._community
        best      = max(community.genomes, key=lambda genome: genome.fitness)
        hidden    = best.hidden_count

        s  = f"GENERATION {community.generation_count:04d}: "
        s += f"species = {len(community.species):3d}, "
        s += f"max fitness = {best.fitness:.4f}, "
        s += f"hidden neurons = {hidden}, "
        s += f"links = {sum(1 for link in best.link_genes if link.enabled)}"
        print(s)

    def _final_report(self):
        best    = max(self._community.genomes, key=lambda genome: genome.fitness)
        network = best.create_phenotype()

        s  = "\n[SUCCESS]\n" if not self.failed else "\n[FAILED]\n"
        s += str(best) + "\n\n"
        s += "input         output   target\n"
        s += "-----------------------------\n"
        for inputs, expected_output in zip(self.xor_inputs, self.xor_outputs):
            s += f"{inputs} -> {network.activate(inputs)[0]:.4f}   {expected_output[0]}\n"
        s += "\nformula: " + network.generate_formula(["a", "b"])[0]
        print(s)

if __name__ == '__main__':
    logging.basicConfig(level=logging.WARNING)

    config = Config(str(Path(__file__).parent / "config_xor.ini"))
    trial  = Trial_XOR(config, seed=1)
    trial.run(num_jobs=1)
