# qit/tests/test_modular.py
import pytest

from qit.modular import is_coprime, mod_inv, mod_power


def test_mod_power():
    assert mod_power(2, 10, 1000) == 24
    assert mod_power(7, 0, 5) == 1
    assert [mod_power(2, x, 5) for x in range(4)] == [1, 2, 4, 3]


def test_is_coprime():
    assert is_coprime(3, 8)
    assert not is_coprime(6, 9)
    assert is_coprime(1, 1)


@pytest.mark.parametrize("a,m", [(3, 7), (2, 5), (5, 12), (11, 15)])
def test_mod_inv(a, m):
    assert a * mod_inv(a, m) % m == 1


def test_mod_inv_requires_coprime():
    with pytest.raises(ValueError):
        mod_inv(4, 8)
