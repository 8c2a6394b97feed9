import pytest

from listing_engine.domain.catalog.predicates import FALSE, TRUE, Condition, all_of, any_of, identifier


def test_condition_checks_placeholder_count() -> None:
    with pytest.raises(ValueError):
        Condition("a = ? AND b = ?", ("x",))
    assert Condition("a = ?", ("x",)).render() == ("a = ?", ("x",))


def test_any_of_joins_with_or_and_keeps_param_order() -> None:
    predicate = any_of([Condition("a = ?", (1,)), Condition("b = ?", (2,))])
    assert predicate.render() == ("(a = ? OR b = ?)", (1, 2))


def test_empty_any_of_is_false() -> None:
    predicate = any_of([])
    assert predicate.is_false
    assert predicate.render() == FALSE.render()


def test_any_of_drops_false_branches() -> None:
    predicate = any_of([FALSE, Condition("a = ?", (1,)), any_of([])])
    assert predicate.render() == ("a = ?", (1,))


def test_any_of_with_true_branch_is_true() -> None:
    assert any_of([Condition("a = ?", (1,)), TRUE]).render() == TRUE.render()


def test_all_of_short_circuits_on_false() -> None:
    predicate = all_of([Condition("a = ?", (1,)), any_of([])])
    assert predicate.is_false
    assert predicate.render() == ("1 = 0", ())


def test_all_of_drops_true_branches() -> None:
    predicate = all_of([TRUE, Condition("a = 1"), Condition("b IN (?, ?)", ("x", "y"))])
    assert predicate.render() == ("(a = 1 AND b IN (?, ?))", ("x", "y"))
    assert all_of([]).render() == TRUE.render()


def test_nested_tree_renders_params_in_order() -> None:
    predicate = any_of([
        all_of([Condition("JSON_VALID(c) = 1"), any_of([Condition("x = ?", (1,)), Condition("y = ?", (2,))])]),
        Condition("z = ?", (3,)),
    ])
    fragment, params = predicate.render()
    assert fragment == "((JSON_VALID(c) = 1 AND (x = ? OR y = ?)) OR z = ?)"
    assert params == (1, 2, 3)
    assert fragment.count("?") == len(params)


@pytest.mark.parametrize("name", ["category", "_x", "col_2"])
def test_identifier_accepts_safe_names(name) -> None:
    assert identifier(name) == name


@pytest.mark.parametrize("name", ["1col", "a-b", "a b", "x;drop", ""])
def test_identifier_rejects_unsafe_names(name) -> None:
    with pytest.raises(ValueError):
        identifier(name)
