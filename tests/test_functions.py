import pytest
from hypothesis import given, strategies as st

from lispy.errors import ErrorKind
from lispy.evaluation.apply import apply
from lispy.evaluation.evaluator import evaluate
from lispy.interpreter import Interpreter
from lispy.types.lambda_fn import Closure
from lispy.types.symbol import Symbol
from lispy.types.values import Error, EvaluableList, Number, QuotedList


# -----------------------------
# Partial application
# -----------------------------

def test_partial_application_returns_closure(run):
    run(r"(def {add} (\ {x y} {+ x y}))")
    partial = run("(add 1)")
    assert isinstance(partial, Closure)
    assert str(partial) == r"(\ {y} {+ x y})"


def test_partial_application_matches_full_call(run):
    run(r"(def {add} (\ {x y} {+ x y}))")
    run("(def {add1} (add 1))")
    assert run("(add1 2)") == run("(add 1 2)") == Number(3)


def test_partial_application_leaves_original_untouched(run):
    run(r"(def {add} (\ {x y} {+ x y}))")
    run("(add 1)")
    assert str(run("add")) == r"(\ {x y} {+ x y})"
    assert run("(add 2 3)") == Number(5)


@given(st.integers(min_value=-10**6, max_value=10**6), st.integers(min_value=-10**6, max_value=10**6))
def test_currying_property(a, b):
    interp = Interpreter()
    interp.eval(r"def {minus} (\ {x y} {- x y})")
    assert interp.eval(f"(minus {a}) {b}") == interp.eval(f"minus {a} {b}") == Number(a - b)


# -----------------------------
# Variadic formals
# -----------------------------

def test_variadic_collects_remaining_arguments(run):
    run(r"(def {f} (\ {a & rest} {rest}))")
    assert run("(f 1 2 3)") == QuotedList([Number(2), Number(3)])
    assert run("(f 1)") == QuotedList()


def test_variadic_only(run):
    run(r"(def {all} (\ {& xs} {xs}))")
    assert run("(all 1 2)") == QuotedList([Number(1), Number(2)])


def test_variadic_with_no_arguments_is_partial(env):
    fn = Closure(
        QuotedList([Symbol("a"), Symbol("&"), Symbol("rest")]),
        QuotedList([Symbol("rest")]),
    )
    result = apply(fn, [], env, evaluate)
    assert isinstance(result, Closure)
    assert result == fn


def test_single_element_call_returns_the_function(run):
    run(r"(def {f} (\ {a} {a}))")
    assert isinstance(run("(f)"), Closure)


@pytest.mark.parametrize(
    "formals,call",
    [
        ("{x &}", "(h 1 2)"),
        ("{x &}", "(h 1)"),
        ("{& a b}", "(h 1 2)"),
        ("{x & a b}", "(h 1)"),
    ],
)
def test_malformed_variadic(run, formals, call):
    run(rf"(def {{h}} (\ {formals} {{x}}))")
    result = run(call)
    assert isinstance(result, Error)
    assert result.kind is ErrorKind.MALFORMED_SPECIAL_FORM


def test_too_many_arguments(run):
    run(r"(def {g} (\ {x} {x}))")
    result = run("(g 1 2)")
    assert result == Error(
        ErrorKind.ARITY_MISMATCH,
        "Function passed too many arguments. Got 2, Expected 1.",
    )


# -----------------------------
# Scoping
# -----------------------------

def test_body_resolves_free_symbols_at_the_call_site(run):
    run("(def {x} 1)")
    run(r"(def {show} (\ {_} {x}))")
    run(r"(def {f} (\ {x} {show 0}))")
    assert run("(show 0)") == Number(1)
    # show is called from inside f, where x is 99
    assert run("(f 99)") == Number(99)


def test_inner_lambda_does_not_capture_enclosing_arguments(run):
    run(r"(def {adder} (\ {x} {\ {y} {+ x y}}))")
    result = run("((adder 1) 2)")
    assert isinstance(result, Error)
    assert result.kind is ErrorKind.UNBOUND_SYMBOL


def test_local_bindings_do_not_leak(run):
    run(r"(def {f} (\ {n} {+ n 1}))")
    assert run("(f 1)") == Number(2)
    assert run("n").kind is ErrorKind.UNBOUND_SYMBOL


def test_recursive_function(run):
    run(r"(def {fact} (\ {n} {if (<= n 1) {1} {* n (fact (- n 1))}}))")
    assert run("(fact 10)") == Number(3628800)


def test_function_defining_function(run):
    run(r"(def {fun} (\ {f b} {def (head f) (\ (tail f) b)}))")
    assert run("(fun {add-together x y} {+ x y})") == EvaluableList()
    assert run("(add-together 1 2)") == Number(3)


def test_closure_as_argument(run):
    run(r"(def {twice} (\ {f x} {f (f x)}))")
    run(r"(def {inc} (\ {n} {+ n 1}))")
    assert run("(twice inc 5)") == Number(7)


def test_closure_arguments_are_copied(run):
    run(r"(def {keep} (\ {xs} {xs}))")
    run("(def {data} {1 2})")
    result = run("(keep data)")
    assert result == QuotedList([Number(1), Number(2)])
    assert run("data") == QuotedList([Number(1), Number(2)])


def test_call_with_symbol_formals_only(run):
    result = run(r"(\ {x 1} {x})")
    assert result.kind is ErrorKind.TYPE_MISMATCH
    assert run(r"((\ {a b} {- a b}) 10 4)") == Number(6)
