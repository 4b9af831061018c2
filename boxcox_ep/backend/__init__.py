"""
Backend message operators for boxcox_ep.

Subpackages:
- fusion/: scalar Gaussian belief utilities (information form)
- operators/: Box-Cox transform and Jacobian factor message operators
"""
