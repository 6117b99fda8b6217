from dataclasses import dataclass, field
from typing import FrozenSet, List

@dataclass(slots=True)
class Board:
    """Board geometry: dimensions, vertical sections and disabled sections.

    x is the column (0..width-1), y the row (0..height-1). Sections are
    equal-width column bands; matches and row emptiness are evaluated per
    section.
    """
    width: int
    height: int
    section_count: int = 1
    disabled_sections: FrozenSet[int] = field(default_factory=frozenset)

    @property
    def columns_per_section(self) -> int:
        return self.width // self.section_count

    def section_of(self, x: int) -> int:
        return x // self.columns_per_section

    def section_columns(self, section: int) -> range:
        start = section * self.columns_per_section
        return range(start, start + self.columns_per_section)

    def is_section_enabled(self, section: int) -> bool:
        return 0 <= section < self.section_count and section not in self.disabled_sections

    def enabled_sections(self) -> List[int]:
        return [s for s in range(self.section_count) if s not in self.disabled_sections]

    def in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def is_cell_enabled(self, x: int, y: int) -> bool:
        return self.in_bounds(x, y) and self.section_of(x) not in self.disabled_sections
