"""
Declarative search clauses and their compilation into query-language text.

A clause describes one criterion: which field(s) to search, the value,
and modifiers (phrase matching, fuzziness, proximity, required or
prohibited). ``compile_clause`` turns it into a fragment such as
``title:("red apple"~3)`` together with the sign used to attach the
fragment to a boolean query.

Example:
    >>> compile_clause(ClauseOptions.for_where("test", "test value"))
    CompiledClause(fragment='test:("test value")', sign=<Sign.MUST: 'must'>)
    >>> compile_clause(ClauseOptions.for_find("test value", "test", fuzzy=0.1)).fragment
    'test:(test~0.1 value~0.1)'
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from numbers import Real
from typing import Any, Iterable, Optional, Tuple, Union

import numpy as np

from .escaping import escape_special_chars, escape_special_operators


FieldSpec = Union[str, Iterable[str], None]

# Field value meaning "search the default fields"
ANY_FIELD = "*"


class Sign(str, Enum):
    """Occurrence of a subquery inside a boolean query."""
    MUST = "must"           # must match
    MUST_NOT = "must_not"   # must not match
    SHOULD = "should"       # may match
    
    @classmethod
    def from_flags(cls, required: bool, prohibited: bool) -> "Sign":
        """Collapse required/prohibited flags; prohibited wins."""
        if prohibited:
            return cls.MUST_NOT
        if required:
            return cls.MUST
        return cls.SHOULD
    
    @classmethod
    def coerce(cls, value: Union["Sign", bool, None]) -> "Sign":
        """Accept a Sign or the tri-state True/False/None."""
        if isinstance(value, Sign):
            return value
        if value is None:
            return cls.SHOULD
        if value is True:
            return cls.MUST
        if value is False:
            return cls.MUST_NOT
        return cls(value)
    
    def to_bool(self) -> Optional[bool]:
        """Tri-state form: True = must, False = must not, None = may."""
        if self is Sign.MUST:
            return True
        if self is Sign.MUST_NOT:
            return False
        return None


@dataclass(frozen=True)
class ClauseOptions:
    """
    One declarative search clause.
    
    Attributes:
        field: Field name, several field names, or ``None``/``"*"`` for
            the default fields
        value: Free text to search for
        required: Clause must match (default True)
        prohibited: Clause must not match; overrides ``required``
        phrase: Match the value as a quoted phrase
        fuzzy: ``True`` for the index default fuzziness, or a similarity
            in [0, 1]; anything else is ignored
        proximity: Maximum word distance for the phrase; only positive
            integers are applied
    """
    
    field: FieldSpec = None
    value: Any = ""
    required: bool = True
    prohibited: bool = False
    phrase: bool = False
    fuzzy: Union[bool, float, None] = None
    proximity: Optional[int] = None
    
    @property
    def sign(self) -> Sign:
        return Sign.from_flags(bool(self.required), bool(self.prohibited))
    
    @classmethod
    def for_where(cls, field: FieldSpec, value: Any, **options: Any) -> "ClauseOptions":
        """Options for a ``where`` clause: phrase matching by default."""
        options.setdefault("phrase", True)
        return cls(field=field, value=value, **options)
    
    @classmethod
    def for_find(cls, value: Any, field: FieldSpec = ANY_FIELD, **options: Any) -> "ClauseOptions":
        """Options for a ``find`` clause: plain term matching by default."""
        options.setdefault("phrase", False)
        return cls(field=field, value=value, **options)


@dataclass(frozen=True)
class CompiledClause:
    """Query-language fragment plus the sign it is attached with."""
    fragment: str
    sign: Sign


def compile_clause(options: ClauseOptions) -> CompiledClause:
    """
    Compile a clause into a query-language fragment.
    
    Steps, in order: normalize the field, escape and trim the value,
    apply per-token fuzziness, quote (phrase or proximity) or neutralize
    operator keywords, append proximity, scope to the field(s).
    
    Args:
        options: The clause to compile
        
    Returns:
        CompiledClause with the fragment and its sign
    """
    fields = normalize_fields(options.field)
    
    value = escape_special_chars(options.value).strip()
    
    fuzzy_suffix = _fuzzy_suffix(options.fuzzy)
    if fuzzy_suffix is not None:
        value = " ".join(word + fuzzy_suffix for word in value.split())
    
    if options.phrase or options.proximity:
        value = f'"{value}"'
    else:
        value = escape_special_operators(value)
        if not value:
            # An empty fragment parses to an empty query
            return CompiledClause(fragment="", sign=options.sign)
    
    if _valid_proximity(options.proximity):
        value = f"{value}~{options.proximity}"
    
    if fields:
        fragment = " OR ".join(f"{name}:({value})" for name in fields)
    else:
        fragment = value
    
    return CompiledClause(fragment=fragment, sign=options.sign)


def normalize_fields(field: FieldSpec) -> Tuple[str, ...]:
    """
    Normalize a field argument into a tuple of names.
    
    An empty tuple means "no field prefix". Sets are sorted so the
    compiled fragment is deterministic.
    """
    if field is None:
        return ()
    
    if isinstance(field, str):
        names = [field]
    elif isinstance(field, (set, frozenset)):
        names = sorted(field)
    else:
        names = list(field)
    
    normalized = []
    for name in names:
        name = str(name).strip()
        if name and name != ANY_FIELD:
            normalized.append(name)
    return tuple(normalized)


def _fuzzy_suffix(fuzzy: Any) -> Optional[str]:
    """Suffix appended to every token, or None when fuzziness is not applied."""
    if fuzzy is None or fuzzy is False:
        return None
    if fuzzy is True:
        return "~"
    if isinstance(fuzzy, str):
        try:
            fuzzy = float(fuzzy)
        except ValueError:
            return None
    if isinstance(fuzzy, Real) and 0 <= fuzzy <= 1:
        # Fixed-point only; the query language has no exponent syntax
        return "~" + np.format_float_positional(float(fuzzy), trim="-")
    return None


def _valid_proximity(proximity: Any) -> bool:
    return (
        isinstance(proximity, int)
        and not isinstance(proximity, bool)
        and proximity > 0
    )
