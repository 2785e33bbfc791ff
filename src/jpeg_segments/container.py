from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional

from .markers import EOI, SOI
from .segments import Segment


@dataclass
class JpegContainer:
    """Ordered segments of one decoded stream.

    ``size`` is the length of the source stream and ``end`` the offset just past
    the end-of-image marker; anything in between is a trailer that was not
    decoded.
    """
    segments: List[Segment] = field(default_factory=list)
    size: int = 0
    end: int = 0
    path: Optional[str] = None

    @property
    def trailing_data(self) -> bool:
        return self.end != self.size

    @property
    def trailing_size(self) -> int:
        return self.size - self.end

    def is_complete(self) -> bool:
        return (len(self.segments) >= 2
                and self.segments[0].marker_id() == SOI
                and self.segments[-1].marker_id() == EOI)

    def segment_at(self, offset: int) -> Optional[Segment]:
        """Return the first segment whose [offset, offset + length] range holds ``offset``."""
        for segment in self.segments:
            start = segment.offset()
            if start <= offset <= start + segment.encoded_length():
                return segment
        return None

    def __len__(self) -> int:
        return len(self.segments)

    def __iter__(self):
        return iter(self.segments)


def segment_at(container: JpegContainer, offset: int) -> Optional[Segment]:
    return container.segment_at(offset)
