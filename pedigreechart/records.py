"""
Ancestor Records

Immutable person records and the loader that turns ancestor JSON into a
record tree, pruned to the requested number of generations.
"""

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional, Tuple, Union

logger = logging.getLogger(__name__)

SEX_MALE = "M"
SEX_FEMALE = "F"
SEX_UNKNOWN = "U"

MAX_PARENTS = 2


@dataclass(frozen=True)
class PersonRecord:
    """A single individual as supplied by the data source."""
    id: int
    sex: str  # "M" | "F" | "U"
    generation: int
    xref: str = ""
    name: str = ""
    first_names: Tuple[str, ...] = ()
    last_names: Tuple[str, ...] = ()
    preferred_name: str = ""
    alternative_name: str = ""
    is_name_rtl: bool = False
    is_alt_rtl: bool = False
    birth: str = ""
    death: str = ""
    timespan: str = ""
    thumbnail: Optional[str] = None
    parents: Tuple["PersonRecord", ...] = field(default_factory=tuple)

    @property
    def has_thumbnail(self) -> bool:
        return bool(self.thumbnail)

    def max_generation(self) -> int:
        """Highest generation reached by any ancestor chain of this record."""
        if not self.parents:
            return self.generation
        return max(parent.max_generation() for parent in self.parents)

    def count(self) -> int:
        return 1 + sum(parent.count() for parent in self.parents)


def _normalize_sex(value: Any) -> str:
    sex = str(value or "").strip().upper()
    if sex in (SEX_MALE, SEX_FEMALE):
        return sex
    return SEX_UNKNOWN


def _as_names(value: Any) -> Tuple[str, ...]:
    if not value:
        return ()
    if isinstance(value, str):
        return tuple(value.split())
    return tuple(str(item) for item in value if str(item))


def record_from_dict(
    data: Dict[str, Any],
    generation: int = 1,
    max_generations: Optional[int] = None,
) -> PersonRecord:
    """Build a PersonRecord tree from its JSON mapping.

    Args:
        data: Mapping with the person fields and an optional ``parents`` list
        generation: Generation to assume when the mapping carries none
        max_generations: Drop ancestors beyond this generation (None keeps all)

    Raises:
        ValueError: If the mapping is malformed or lists more than two parents
    """
    if not isinstance(data, dict):
        raise ValueError(f"Expected a person object, got {type(data).__name__}")

    # Accept both the flat layout and the {"data": {...}, "parents": [...]} one
    fields = data.get("data", data)
    if not isinstance(fields, dict):
        raise ValueError("Person 'data' must be an object")

    try:
        generation = int(fields.get("generation") or generation)
    except (TypeError, ValueError):
        raise ValueError(f"Invalid generation: {fields.get('generation')!r}")

    raw_parents = data.get("parents") or []
    if not isinstance(raw_parents, list):
        raise ValueError("Person 'parents' must be a list")
    if len(raw_parents) > MAX_PARENTS:
        raise ValueError(
            f"Person {fields.get('xref') or fields.get('id')} has {len(raw_parents)} parents, "
            f"at most {MAX_PARENTS} are allowed"
        )

    parents: Tuple[PersonRecord, ...] = ()
    if max_generations is None or generation < max_generations:
        parents = tuple(
            record_from_dict(parent, generation + 1, max_generations)
            for parent in raw_parents
            if parent is not None
        )
    elif raw_parents:
        logger.debug(
            "Pruned %d parent(s) of %s beyond generation %d",
            len(raw_parents), fields.get("xref") or fields.get("id"), max_generations,
        )

    return PersonRecord(
        id=int(fields.get("id") or 0),
        xref=str(fields.get("xref") or ""),
        sex=_normalize_sex(fields.get("sex")),
        generation=generation,
        name=str(fields.get("name") or ""),
        first_names=_as_names(fields.get("firstNames")),
        last_names=_as_names(fields.get("lastNames")),
        preferred_name=str(fields.get("preferredName") or ""),
        alternative_name=str(fields.get("alternativeName") or ""),
        is_name_rtl=bool(fields.get("isNameRtl", False)),
        is_alt_rtl=bool(fields.get("isAltRtl", False)),
        birth=str(fields.get("birth") or ""),
        death=str(fields.get("death") or ""),
        timespan=str(fields.get("timespan") or ""),
        thumbnail=str(fields["thumbnail"]) if fields.get("thumbnail") else None,
        parents=parents,
    )


def load_records(
    source: Union[str, Path], max_generations: Optional[int] = None
) -> Optional[PersonRecord]:
    """Load an ancestor tree from a JSON file.

    Returns None when the file holds ``null`` (nothing to render).

    Raises:
        OSError: If the file cannot be read
        ValueError: If the content is not valid ancestor JSON
    """
    path = Path(source)
    with open(path, "r", encoding="utf-8") as f:
        try:
            data = json.load(f)
        except json.JSONDecodeError as e:
            raise ValueError(f"Invalid JSON in {path}: {e}")

    if data is None:
        logger.info("No ancestor data in %s", path)
        return None

    record = record_from_dict(data, max_generations=max_generations)
    logger.debug("Loaded %d records from %s", record.count(), path)
    return record
