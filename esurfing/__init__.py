"""Pure-Python session ciphers (triple-DES, XTEA, SM4, ZUC), a rotating logger and shutdown handling."""

__version__ = "0.1.0"