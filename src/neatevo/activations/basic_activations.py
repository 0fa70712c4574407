import numpy as np

def steepened_sigmoid_activation(z):
    """
    Sigmoid rescaled to (-1, 1) and steepened so that it is close
    to linear around zero: f(z) = 2 / (1 + exp(-4.9 z)) - 1
    """
    Z = 4.9 * z
    Z = np.clip(Z, -100, 100)   # to prevent under/overflow when calculating exp
    return 2.0 / (1.0 + np.exp(-Z)) - 1.0

def identity_activation(z):
    return z

activations = {
    "steepened_sigmoid": steepened_sigmoid_activation,
    "identity":          identity_activation,
}
