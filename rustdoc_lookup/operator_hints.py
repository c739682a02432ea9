"""Short descriptions of the operators backed by std traits."""

OPERATOR_HINTS: dict[str, str] = {
    "Try": "the `?` operator",
    "PartialEq": "the `==` operator",
    "PartialOrd": "the `<`, `<=`, `>` and `>=` operators",
    "Add": "the `+` operator",
    "AddAssign": "the `+=` operator",
    "BitAnd": "the `&` operator",
    "BitAndAssign": "the `&=` operator",
    "BitOr": "the `|` operator",
    "BitOrAssign": "the `|=` operator",
    "BitXor": "the `^` operator",
    "BitXorAssign": "the `^=` operator",
    "Deref": "code that is run on dereference (`*`)",
    "DerefMut": "code that is run on mut dereference (`*`)",
    "Div": "the `/` operator",
    "DivAssign": "the `/=` operator",
    "Drop": "code that is run when type is dropped",
    "Fn": "the call operator that takes immutable env",
    "FnMut": "the call operator that takes mutable env",
    "FnOnce": "the call operator that takes by-value env",
    "Index": "the indexing operator `[]` in immutable contexts",
    "IndexMut": "the indexing operator `[]` in mutable contexts",
    "Mul": "the `*` operator for multiplication",
    "MulAssign": "the `*=` operator for multiplication",
    "Neg": "the unary negation operator `-`",
    "Not": "the unary logical negation operator `!`",
    "Rem": "the remainder operator `%`",
    "RemAssign": "the remainder assignment operator `%=`",
    "Shl": "the left shift operator `<<`",
    "ShlAssign": "the left shift assignment operator `<<=`",
    "Shr": "the right shift operator `>>`",
    "ShrAssign": "the right shift assignment operator `>>=`",
    "Sub": "the `-` operator for subtraction",
    "SubAssign": "the `-=` operator for subtraction",
}


def operator_hint(trait_name: str) -> str | None:
    """Return the operator a trait implementation backs, if any."""
    return OPERATOR_HINTS.get(trait_name)
