"""
Update operators.

A patch maps field names to either a literal (string or number, written as its
string form) or a mapping of operators:

- ``$inc``: add an integer to the current value (non-numeric values count as 0)
- ``$append`` / ``$prepend``: add text after / before the current value
- ``$lowercase`` / ``$uppercase``: change the case of the current value
- ``$replace``: ``{"old": "new", ...}``, literal substrings replaced in one pass

Every operator of a field is applied to the field's current value; when a field
lists several operators the last one determines the written value.
"""

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional

from sheetsdb.documents.query import parse_leading_int
from sheetsdb.exceptions import InvalidArgumentError

_DIGITS_RE = re.compile(r"^\d+$")


class OperatorType(Enum):
    """Kind of mutation an update operator applies."""
    SET = "set"
    INC = "$inc"
    APPEND = "$append"
    PREPEND = "$prepend"
    LOWERCASE = "$lowercase"
    UPPERCASE = "$uppercase"
    REPLACE = "$replace"


_BY_NAME: Dict[str, OperatorType] = {
    op.value: op for op in OperatorType if op is not OperatorType.SET
}


@dataclass
class UpdateOperator:
    """One compiled mutation of a field's string value.

    Attributes:
        type: Operator kind
        operand: Compiled operand (text, increment, or replacement table)
        pattern: Alternation of the replacement keys (REPLACE only)
    """
    type: OperatorType
    operand: Any = None
    pattern: Optional["re.Pattern[str]"] = None

    def apply(self, original: str) -> str:
        """Return the new value computed from the field's current value."""
        if self.type is OperatorType.SET:
            return self.operand
        if self.type is OperatorType.INC:
            base = int(original) if _DIGITS_RE.match(original) else 0
            return str(base + self.operand)
        if self.type is OperatorType.APPEND:
            return original + self.operand
        if self.type is OperatorType.PREPEND:
            return self.operand + original
        if self.type is OperatorType.LOWERCASE:
            return original.lower()
        if self.type is OperatorType.UPPERCASE:
            return original.upper()
        if self.pattern is None:
            return original
        return self.pattern.sub(lambda m: self.operand[m.group(0)], original)


@dataclass
class FieldUpdate:
    """All operators targeting one field."""
    name: str
    operators: List[UpdateOperator] = field(default_factory=list)

    def apply(self, original: Any) -> Optional[str]:
        """Return the field's new value, or None when no operator applies."""
        current = "" if original is None else str(original)
        result = None
        for operator in self.operators:
            result = operator.apply(current)
        return result


def _compile_operator(name: str, value: Any) -> Optional[UpdateOperator]:
    op_type = _BY_NAME.get(name)
    if op_type is None:
        return None

    if op_type is OperatorType.INC:
        increment = parse_leading_int(value)
        if increment is None:
            raise InvalidArgumentError(f"$inc expects an integer, got {value!r}")
        return UpdateOperator(op_type, increment)

    if op_type is OperatorType.REPLACE:
        if not isinstance(value, Mapping):
            raise InvalidArgumentError(f"$replace expects a mapping, got {value!r}")
        table = {str(k): str(v) for k, v in value.items()}
        if not table:
            return UpdateOperator(op_type, table)
        # Longest keys first so overlapping literals prefer the longer match
        keys = sorted(table, key=len, reverse=True)
        return UpdateOperator(op_type, table, re.compile("|".join(re.escape(k) for k in keys)))

    if op_type in (OperatorType.APPEND, OperatorType.PREPEND):
        return UpdateOperator(op_type, str(value))

    return UpdateOperator(op_type)


def compile_patch(patch: Mapping[str, Any]) -> List[FieldUpdate]:
    """Compile a patch mapping into per-field operator lists.

    Args:
        patch: Field name to literal or operator mapping

    Returns:
        One FieldUpdate per patched field, in patch order; unknown operator
        names are ignored

    Raises:
        InvalidArgumentError: If a literal has an unsupported type or an
            operator operand is malformed
    """
    updates: List[FieldUpdate] = []
    for name, value in patch.items():
        update = FieldUpdate(name)
        if isinstance(value, str):
            update.operators.append(UpdateOperator(OperatorType.SET, value))
        elif isinstance(value, (int, float)) and not isinstance(value, bool):
            update.operators.append(UpdateOperator(OperatorType.SET, str(value)))
        elif isinstance(value, Mapping):
            for op_name, operand in value.items():
                operator = _compile_operator(op_name, operand)
                if operator is not None:
                    update.operators.append(operator)
        else:
            raise InvalidArgumentError(f"Unsupported update value for {name!r}: {value!r}")
        updates.append(update)
    return updates
