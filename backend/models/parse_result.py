from dataclasses import dataclass
from typing import Any, Union


@dataclass(frozen=True)
class ParseOk:
    data: Any
    ok: bool = True


@dataclass(frozen=True)
class ParseError:
    error: str
    ok: bool = False


ParseResult = Union[ParseOk, ParseError]
