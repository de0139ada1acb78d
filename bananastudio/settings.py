"""
Studio settings model.
Aspect ratio, lighting style and camera perspective for a shoot.
"""

from dataclasses import dataclass, replace
from enum import Enum
from typing import Any, Dict, List, Mapping

from .errors import InvalidSettingError


class AspectRatio(str, Enum):
    SQUARE = "1:1"
    PORTRAIT = "3:4"
    LANDSCAPE = "4:3"
    STORY = "9:16"
    WIDESCREEN = "16:9"


class LightingStyle(str, Enum):
    CINEMATIC = "Cinematic"
    STUDIO = "Studio Professional"
    NATURAL = "Golden Hour Natural"
    NEON = "Cyberpunk Neon"
    SOFT = "Soft Box Portrait"
    DRAMATIC = "Dramatic Chiaroscuro"


class CameraPerspective(str, Enum):
    EYE_LEVEL = "Eye Level"
    TOP_DOWN = "Flat Lay (Top Down)"
    CLOSE_UP = "Macro / Close-up"
    WIDE_ANGLE = "Wide Angle Environment"
    LOW_ANGLE = "Hero (Low Angle)"


# Field name -> enumeration of allowed values
SETTING_FIELDS = {
    'aspect_ratio': AspectRatio,
    'lighting': LightingStyle,
    'perspective': CameraPerspective,
}


def _coerce(field: str, value: Any) -> Enum:
    enum_cls = SETTING_FIELDS[field]
    if isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(value)
    except ValueError:
        pass
    # Accept member names too (e.g. "STUDIO")
    if isinstance(value, str) and value.upper() in enum_cls.__members__:
        return enum_cls[value.upper()]
    raise InvalidSettingError(field, value)


@dataclass(frozen=True)
class StudioSettings:
    """Immutable settings value; edits produce a new instance."""
    aspect_ratio: AspectRatio = AspectRatio.SQUARE
    lighting: LightingStyle = LightingStyle.STUDIO
    perspective: CameraPerspective = CameraPerspective.EYE_LEVEL

    def __post_init__(self):
        for field in SETTING_FIELDS:
            object.__setattr__(self, field, _coerce(field, getattr(self, field)))

    def with_changes(self, **changes) -> 'StudioSettings':
        """
        Return a copy with the given fields replaced

        Args:
            **changes: any of aspect_ratio, lighting, perspective

        Returns:
            StudioSettings: the new settings value

        Raises:
            InvalidSettingError: unknown field or value outside its enumeration
        """
        for field in changes:
            if field not in SETTING_FIELDS:
                raise InvalidSettingError(field, changes[field])
        return replace(self, **changes)

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> 'StudioSettings':
        return cls().with_changes(**{k: v for k, v in data.items() if v is not None})

    def to_dict(self) -> Dict[str, str]:
        return {field: getattr(self, field).value for field in SETTING_FIELDS}


def options() -> Dict[str, List[str]]:
    """All selectable values per settings field, in display order."""
    return {field: [member.value for member in enum_cls] for field, enum_cls in SETTING_FIELDS.items()}
