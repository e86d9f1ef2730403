"""
madeeasy - discrete Fourier transforms and convolutions for learning DSP.
"""

__version__ = '1.0.0'
