"""Base model for LED driver payloads and store records.

Every driver model inherits from :class:`LedBaseModel` which provides:

* ``alias_generator=to_camel`` so camelCase wire keys map
  automatically to snake_case fields.
* A ``model_validator(mode="before")`` that drops ``null`` values so
  the field default is used.
* Per-model legacy key aliases (``_KEY_ALIASES``) that rewrite keys
  written by older record layouts before validation.
"""

from __future__ import annotations

from typing import Any, ClassVar

from pydantic import BaseModel, ConfigDict, model_validator
from pydantic.alias_generators import to_camel

# ---------------------------------------------------------------------------
# Legacy key aliases shared by every model that carries a hardware address.
# Older bridge versions persisted Go-style capitalised keys.
# ---------------------------------------------------------------------------
COMMON_KEY_ALIASES: dict[str, str] = {
    "Mac": "mac",
}


class LedBaseModel(BaseModel):
    """Base for LED driver models.

    Handles:
    * camelCase → snake_case via ``alias_generator=to_camel``
    * ``null`` values → dropped so the field default is used instead
    * legacy key upgrades via ``_KEY_ALIASES``
    """

    _KEY_ALIASES: ClassVar[dict[str, str]] = {}
    """Mapping of ``{"legacy_key": "current_key"}`` applied before validation.

    A legacy key is only renamed when the current key is absent, so a
    record carrying both keeps the current one.
    """

    _CASELESS_KEYS: ClassVar[tuple[str, ...]] = ()
    """Keys matched regardless of casing, e.g. ``"topic"`` also accepts ``"TOPIC"``."""

    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
        populate_by_name=True,
        alias_generator=to_camel,
    )

    @staticmethod
    def _clean_dict(
        values: dict[str, Any],
        aliases: dict[str, str] | None = None,
        caseless: tuple[str, ...] = (),
    ) -> dict[str, Any]:
        """Apply key aliases on *values* and drop ``None`` entries."""
        working = dict(values)
        for canonical in caseless:
            if canonical in working:
                continue
            folded = canonical.casefold()
            match = next((key for key in working if isinstance(key, str) and key.casefold() == folded), None)
            if match is not None:
                working[canonical] = working.pop(match)
        if aliases:
            for old_key, new_key in aliases.items():
                if old_key in working and new_key not in working:
                    working[new_key] = working.pop(old_key)
        return {key: value for key, value in working.items() if value is not None}

    @model_validator(mode="before")
    @classmethod
    def _clean_values(cls, values: Any) -> Any:
        if not isinstance(values, dict):
            return values
        aliases: dict[str, str] = getattr(cls, "_KEY_ALIASES", {})
        caseless: tuple[str, ...] = getattr(cls, "_CASELESS_KEYS", ())
        return LedBaseModel._clean_dict(values, aliases, caseless)

    def to_payload(self) -> dict[str, Any]:
        """Return the wire representation (camelCase keys, unset fields omitted)."""
        return self.model_dump(by_alias=True, exclude_none=True)

    def to_json(self) -> str:
        """JSON form of :meth:`to_payload`."""
        return self.model_dump_json(by_alias=True, exclude_none=True)
