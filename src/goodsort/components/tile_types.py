from dataclasses import dataclass
from typing import Dict, Iterable, List

@dataclass(slots=True)
class TileTypes:
    """Canonical tile type definitions stored on a single entity.

    This component lives alongside TileTypeRegistry (tag) and maps type ids
    to display names.
    """
    names: Dict[int, str]

    @classmethod
    def from_names(cls, names: Iterable[str]) -> "TileTypes":
        return cls(names={index: name for index, name in enumerate(names)})

    def is_known(self, type_id: int) -> bool:
        return type_id in self.names

    def name_for(self, type_id: int) -> str:
        return self.names.get(type_id, f"type_{type_id}")

    def defined_types(self) -> List[int]:
        return sorted(self.names.keys())
