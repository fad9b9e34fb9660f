from __future__ import annotations

from gitup.core.result import Err, Ok, Result, is_err, is_ok


def test_type_guards() -> None:
    ok: Result[int, str] = Ok(2)
    err: Result[int, str] = Err("boom")

    assert is_ok(ok) and not is_err(ok)
    assert is_err(err) and not is_ok(err)


def test_map_only_touches_ok() -> None:
    ok: Result[int, str] = Ok(2)
    err: Result[int, str] = Err("boom")

    assert ok.map(lambda v: v * 10) == Ok(20)
    assert err.map(lambda v: v * 10) == Err("boom")


def test_pattern_matching() -> None:
    def describe(result: Result[int, str]) -> str:
        match result:
            case Ok(value):
                return f"ok {value}"
            case Err(error):
                return f"err {error}"

    assert describe(Ok(1)) == "ok 1"
    assert describe(Err("x")) == "err x"


def test_repr() -> None:
    assert repr(Ok("a")) == "Ok('a')"
    assert repr(Err(3)) == "Err(3)"
