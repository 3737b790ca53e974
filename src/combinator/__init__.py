"""Composable parser combinators, with arithmetic and regex grammars built on them.

Defining parsers:
```
from combinator import char, digit, repeat_one_or_more, symbol

number = repeat_one_or_more(digit).map(lambda ds: int("".join(ds)))
first = symbol("(") >> number << symbol(",")

number.parse("42 apples")    # (42, " apples")
number.parse("apples")       # None
first.parse("( 7, 8)")       # (7, "8)")
```
"""

__version__ = "0.1.0"

from combinator.core import (
    InfiniteRepetitionError,
    LazyParser,
    Parseable,
    Parser,
    ParserOf,
    bind,
    choice,
    discard_left,
    discard_right,
    failure,
    fmap,
    lazy,
    lift,
    optional,
    optional_string,
    or_else,
    repeat_many,
    repeat_one_or_more,
    sequence,
    sequence_all,
    success,
    then,
    void,
)
from combinator.primitives import (
    alphanum,
    char,
    current_col,
    current_location,
    current_row,
    digit,
    ident,
    identifier,
    item,
    letter,
    literal,
    lower,
    nat,
    natural,
    satisfy,
    space,
    symbol,
    token,
    upper,
    with_location,
)
from combinator.source import Cursor, Location, Span
