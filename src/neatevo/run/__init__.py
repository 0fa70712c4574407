"""
NEAT Run Package

Exported Classes:
    Config: Configuration parameters, read from an INI file
    Trial:  Abstract driver of one NEAT run
"""

from neatevo.run.config import Config, Parameter, PARAMETERS
from neatevo.run.trial  import Trial

__all__ = ['Config',
           'Parameter',
           'PARAMETERS',
           'Trial']
