"""Regular expression property type."""

import re
from typing import Any, Optional, Pattern, Union

from sqlalchemy import String

from .base import PropertyType


class Regexp(PropertyType):
    """
    Stores a compiled pattern as its source text.

    Only the source is kept; flags set on a compiled pattern are not
    persisted. Malformed sources raise ``re.error`` on conversion.
    """

    impl = String
    cache_ok = True

    @property
    def python_type(self) -> Any:
        return re.Pattern

    def load(self, value: Optional[str]) -> Optional[Pattern[str]]:
        """
        Compile a stored pattern source.

        Args:
            value: Pattern source as stored, used verbatim

        Returns:
            Compiled pattern, or None
        """
        if value is None:
            return None
        return re.compile(value)

    def dump(self, value: Optional[Union[Pattern[str], str]]) -> Optional[str]:
        """
        Return the source text of a pattern.

        Args:
            value: Compiled pattern, or a pattern source to validate

        Returns:
            Pattern source, or None
        """
        if value is None:
            return None
        if isinstance(value, str):
            value = re.compile(value)
        return value.pattern
