"""
Activations Package

This package provides the activation functions used by the phenotype.
Hidden and output neurons all use the steepened sigmoid; the identity is
available for tests and for drivers that want to inspect raw sums.

Exported:
    activations:                  Dictionary mapping activation names to functions
    steepened_sigmoid_activation: 2 / (1 + exp(-4.9 z)) - 1
    identity_activation:          z
"""

from neatevo.activations.basic_activations import (
    activations,
    steepened_sigmoid_activation,
    identity_activation
)

__all__ = [
    'activations',
    'steepened_sigmoid_activation',
    'identity_activation'
]
