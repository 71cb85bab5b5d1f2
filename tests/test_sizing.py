from war_room.positions import loss_limit, position_multiplier, position_size, total_exposure


def test_total_exposure_is_geometric_series():
    for level in range(1, 21):
        assert total_exposure(level, 10_000) == 10_000 * (2**level - 1)
        assert position_size(level, 10_000) == 10_000 * 2 ** (level - 1)


def test_total_exposure_equals_sum_of_level_sizes():
    for level in range(1, 12):
        assert total_exposure(level, 2_500.0) == sum(position_size(item, 2_500.0) for item in range(1, level + 1))


def test_known_exposures():
    assert total_exposure(2, 10_000) == 30_000
    assert total_exposure(7, 10_000) == 1_270_000
    assert position_multiplier(1) == 1
    assert position_multiplier(6) == 32


def test_loss_limit_is_half_the_level_size():
    assert loss_limit(1, 10_000) == -5_000
    assert loss_limit(3, 10_000) == -20_000
