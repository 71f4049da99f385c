# qit/modular.py
# Integer helpers for the modular arithmetic circuits.
from math import gcd


def mod_power(a: int, exp: int, m: int) -> int:
    """a**exp mod m"""
    return pow(a, exp, m)


def is_coprime(a: int, b: int) -> bool:
    return gcd(a, b) == 1


def mod_inv(a: int, m: int) -> int:
    """b with a*b == 1 (mod m). ValueError unless gcd(a, m) == 1."""
    if not is_coprime(a, m):
        raise ValueError(f"{a} has no inverse modulo {m}")
    return pow(a, -1, m)
