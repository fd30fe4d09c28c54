"""One-line descriptions of pydantic validation failures."""

from __future__ import annotations

from pydantic import ValidationError


def first_error(exc: ValidationError) -> str:
    """Describe the first error in *exc* as ``'field': message``.

    The field is the dotted error location; errors raised by a model
    validator have no location and are reported as the bare message.
    """
    first = exc.errors()[0]
    message = str(first["msg"]).removeprefix("Value error, ")
    field = ".".join(str(part) for part in first["loc"])
    return f"'{field}': {message}" if field else message
