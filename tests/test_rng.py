from heroledger.rng import SeededDiceRoller, get_default_roller, set_default_roller


def test_same_seed_same_rolls():
    a = SeededDiceRoller(seed=7)
    b = SeededDiceRoller(seed=7)
    assert a.roll_multiple(5, 20) == b.roll_multiple(5, 20)


def test_roll_bounds():
    r = SeededDiceRoller(seed=1)
    assert all(1 <= r.roll(6) <= 6 for _ in range(50))
    assert r.roll(0) == 0
    assert r.roll_multiple(0, 6) == []


def test_roll_expression():
    r = SeededDiceRoller(seed=2)
    for _ in range(20):
        assert 5 <= r.roll_expression("2d6+3") <= 15
    assert 1 <= r.roll_expression("d4") <= 4


def test_swap_default_roller():
    mine = SeededDiceRoller(seed=3)
    previous = set_default_roller(mine)
    try:
        assert get_default_roller() is mine
    finally:
        set_default_roller(previous)
