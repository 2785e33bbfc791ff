"""Metadata injection entry point.

Accepts tag name to value mappings where a value is text or a rational
number. Writing them into an application segment is not implemented: the
call checks its arguments, logs them and leaves the container untouched.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Mapping, Union

from .container import JpegContainer

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Rational:
    """Numerator/denominator pair, kept as given (550/10 stays 550/10)."""
    numerator: int
    denominator: int

    def __post_init__(self):
        if self.denominator == 0:
            raise ValueError("Rational denominator must not be zero")

    def __float__(self) -> float:
        return self.numerator / self.denominator

    def __str__(self) -> str:
        return "%d/%d" % (self.numerator, self.denominator)


TagValue = Union[str, Rational]


def inject(container: JpegContainer, tags: Mapping[str, TagValue]) -> None:
    for name, value in tags.items():
        if not isinstance(name, str):
            raise TypeError("Tag names must be str, got %r" % (name,))
        if not isinstance(value, (str, Rational)):
            raise TypeError("Tag %s: expected str or Rational, got %s"
                            % (name, type(value).__name__))
    logger.info("inject(%s, %r): not implemented, container unchanged",
                container.path, dict(tags))
