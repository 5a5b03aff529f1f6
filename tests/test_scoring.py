from blockudoku.game import ClearResult, ScoringRules, make_shape, shape_by_name


def test_placement_only():
    rules = ScoringRules()
    assert rules.calculate(shape_by_name("BigL-0"), ClearResult()) == 5


def test_single_row_has_no_combo():
    rules = ScoringRules()
    # 1 placement + 9 * 2 cleared, combo starts at the second region
    assert rules.calculate(shape_by_name("Dot"), ClearResult(1, 0, 0)) == 19


def test_row_and_column_earn_one_combo_bonus():
    rules = ScoringRules()
    assert rules.calculate(shape_by_name("Dot"), ClearResult(1, 1, 0)) == 1 + 36 + 10


def test_three_regions_earn_two_combo_bonuses():
    rules = ScoringRules()
    square = make_shape("Square-3x3", "Gold", [(r, c) for r in range(3) for c in range(3)])
    assert rules.calculate(square, ClearResult(1, 1, 1)) == 9 + 54 + 20


def test_custom_weights():
    rules = ScoringRules(points_per_cell=2, points_per_cleared_cell=1, combo_bonus=5)
    assert rules.score_for(3, ClearResult(0, 2, 0)) == 6 + 18 + 5
