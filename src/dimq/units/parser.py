"""
dimq.units.parser
=================

Unit expression text to raw signature.

Parsing happens in two steps. The text is compiled into a *plan*, a nested
tuple describing the expression with names left unresolved; plans depend on
the text only and are cached. The plan is then evaluated against a
`UnitSystem`, which resolves every name to ``(factor, unit)`` at call time.
"""
from __future__ import annotations

import re
from fractions import Fraction
from functools import lru_cache
from typing import TYPE_CHECKING, Iterator, List, Optional, Tuple, Union

from dimq.core.signature import NO_PREFIX, UnitTerm, power_signature
from dimq.core.utils import simplify_fraction
from dimq.errors import MalformedUnitError

if TYPE_CHECKING:
    from dimq.units.system import UnitSystem

# --- Plan node types ------------------------------------------------
# ("name", <str>, None)
# ("num", <int|Fraction>, None)
# ("pow", <plan>, <int>)
# ("mul", <plan>, <plan>)
# ("div", <plan>, <plan>)
Plan = Tuple[str, Union[str, int, Fraction, "Plan"], Union[int, "Plan", None]]

_TOKEN_RE = re.compile(
    r"""
    \s*(?:
        (?P<pow>\*\*|\^)
      | (?P<mul>[*·])
      | (?P<div>/)
      | (?P<open>\()
      | (?P<close>\))
      | (?P<int>[+-]?\d+(?![\d.]))
      | (?P<dec>\d+\.\d+)
      | (?P<name>[^\W\d]\w*|°\w*)
      | (?P<bad>\S)
    )
    """,
    re.X,
)

# cheap prefilter for characters that can never appear in a unit expression
_DISALLOWED = frozenset('~!@#$%&|=,:;?<>\'\"`\\[]{}')

Token = Tuple[str, str, int]


def _tokenize(text: str) -> List[Token]:
    tokens: List[Token] = []
    pos = 0
    while pos < len(text):
        m = _TOKEN_RE.match(text, pos)
        if m is None or m.end() == pos:
            break
        kind = m.lastgroup
        tokens.append((kind, m.group(kind), m.start(kind)))
        pos = m.end()
    return tokens


class _UnitExprParser:
    """
    Grammar:
      expr   := term (('*' | '·' | '/') term)*
      term   := factor [('**' | '^') INT]?
      factor := NAME | INT | DEC | '(' expr ')'
      INT    := ['+'|'-']? digits       (the sign only makes sense as an exponent)
      DEC    := digits '.' digits
    """

    def __init__(self, text: str):
        self.text = text
        self.tokens = _tokenize(text)
        self.pos = 0

    def parse(self) -> Plan:
        plan = self._expr()
        tok = self._peek()
        if tok is not None:
            raise MalformedUnitError(
                f"Unexpected {tok[1]!r} at {tok[2]} in unit expression {self.text!r}"
            )
        return plan

    # ---- grammar rules ----
    def _expr(self) -> Plan:
        left = self._term()
        while self._at("mul", "div"):
            op = "mul" if self._next()[0] == "mul" else "div"
            left = (op, left, self._term())
        return left

    def _term(self) -> Plan:
        base = self._factor()
        if self._at("pow"):
            self._next()
            exponent = self._expect("int", what="integer exponent")[1]
            base = ("pow", base, int(exponent))
        return base

    def _factor(self) -> Plan:
        kind, text, at = self._expect("open", "name", "int", "dec", what="unit name, number or '('")
        if kind == "open":
            inner = self._expr()
            self._expect("close", what="')'")
            return inner
        if kind == "name":
            return ("name", text, None)
        if kind == "int":
            if text[0] in "+-":
                raise MalformedUnitError(f"Signed number {text!r} at {at} is only allowed as an exponent")
            return ("num", int(text), None)
        # decimal literals stay exact
        return ("num", simplify_fraction(Fraction(text)), None)

    # ---- token helpers ----
    def _peek(self) -> Optional[Token]:
        return self.tokens[self.pos] if self.pos < len(self.tokens) else None

    def _at(self, *kinds: str) -> bool:
        tok = self._peek()
        return tok is not None and tok[0] in kinds

    def _next(self) -> Token:
        tok = self.tokens[self.pos]
        self.pos += 1
        return tok

    def _expect(self, *kinds: str, what: str) -> Token:
        tok = self._peek()
        if tok is None:
            raise MalformedUnitError(f"Expected {what} at end of unit expression {self.text!r}")
        if tok[0] not in kinds:
            raise MalformedUnitError(f"Expected {what} at {tok[2]}, got {tok[1]!r}")
        return self._next()


def _walk(plan: Plan, system: "UnitSystem") -> Iterator[UnitTerm]:
    kind, left, right = plan
    if kind == "name":
        factor, unit = system.resolve(left)  # late binding to the provided system
        yield UnitTerm(factor, unit, 1)
    elif kind == "num":
        yield UnitTerm(NO_PREFIX, left, 1)
    elif kind == "pow":
        yield from power_signature(_walk(left, system), right)
    elif kind == "mul":
        yield from _walk(left, system)
        yield from _walk(right, system)
    elif kind == "div":
        yield from _walk(left, system)
        yield from power_signature(_walk(right, system), -1)
    else:
        raise RuntimeError(f"Invalid plan node: {plan!r}")


# Plans hold no catalog objects, so one cache serves every system.
@lru_cache(maxsize=4096)
def _compile_unit_expr(expr: str) -> Plan:
    if any(c in _DISALLOWED for c in expr):
        raise MalformedUnitError(
            "Only *, ·, /, **, ^, parentheses, numbers, unit names and integer exponents "
            f"are allowed in unit expressions, got {expr!r}"
        )
    return _UnitExprParser(expr).parse()


def parse_unit_expr(expr: str, system: "UnitSystem") -> list[UnitTerm]:
    """
    Parse unit expressions like ``'kg*m/(nF**2 * s**2)'`` or ``'60*s'``.

    Names resolve through `system` (ids, symbols, aliases, optionally with a
    prefix), numbers become literal terms (decimals as exact fractions), and
    blank text is the empty, dimensionless signature.

    Returns
    -------
    list of UnitTerm
        The raw signature, neither sorted nor merged.

    Raises
    ------
    MalformedUnitError
        On a syntax error or a name the system does not know.
    """
    if not expr.strip():
        return []
    return list(_walk(_compile_unit_expr(expr), system))


__all__ = ["parse_unit_expr"]
