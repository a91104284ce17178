"""
Errors raised by the PFAS GAC lifespan models.

PFASModelError is the common base; the routers map InputValidationError to
422 and InvalidInputError to 400.
"""
from typing import Any, Dict, Iterable, List, Optional

# Field-name suffix -> unit, first match wins
UNIT_SUFFIXES = [
    ("_ng_l", "ng/L"),
    ("_ngL", "ng/L"),
    ("_mg_l", "mg/L"),
    ("_mg_g", "mg/g"),
    ("_m3_h", "m³/h"),
    ("_m3h", "m³/h"),
    ("_kg_m3", "kg/m³"),
    ("_usd", "USD"),
    ("_days", "days"),
    ("_min", "min"),
    ("_mm", "mm"),
    ("_m2_g", "m²/g"),
    ("_m", "m"),
    ("_c", "°C"),
]


def unit_for_field(field: str) -> Optional[str]:
    """Unit implied by a field name such as ``flow_rate_m3_h``."""
    for suffix, unit in UNIT_SUFFIXES:
        if field.endswith(suffix):
            return unit
    return None


class PFASModelError(Exception):
    """Base error for the lifespan models.

    Attributes:
        message: What went wrong
        details: Offending values, keyed by name
        hint: How to fix the input
    """

    def __init__(
        self,
        message: str,
        details: Optional[Dict[str, Any]] = None,
        hint: Optional[str] = None,
    ):
        self.message = message
        self.details = details or {}
        self.hint = hint
        text = message
        if self.details:
            text += " (" + "; ".join(f"{k}: {v}" for k, v in self.details.items()) + ")"
        if hint:
            text += f". {hint}"
        super().__init__(text)

    def to_dict(self) -> Dict[str, Any]:
        """Error body for HTTPException detail."""
        body: Dict[str, Any] = {"error": type(self).__name__, "message": self.message}
        if self.details:
            body["details"] = self.details
        if self.hint:
            body["hint"] = self.hint
        return body


class InputValidationError(PFASModelError):
    """Configuration or dataset fields are missing, malformed, or out of range.

    ``details["fields"]`` lists the dotted field locations and
    ``details["units"]`` the expected unit of each one that carries a unit
    suffix, so a client can tell ng/L from µg/L mistakes.
    """

    def __init__(
        self,
        errors: List[Dict[str, Any]],
        hint: Optional[str] = None,
        source: str = "system configuration",
    ):
        self.errors = errors
        fields = sorted({".".join(str(loc) for loc in e.get("loc", ())) for e in errors})
        details: Dict[str, Any] = {}
        if fields:
            details["fields"] = ", ".join(fields)
            units = {f: unit_for_field(f.split(".")[-1]) for f in fields}
            units = {f: u for f, u in units.items() if u}
            if units:
                details["units"] = units
        super().__init__(
            message=f"Invalid {source} ({len(errors)} error(s))",
            details=details,
            hint=hint,
        )

    @classmethod
    def from_pydantic(cls, errors: Iterable[Dict[str, Any]], prefix=(), **kwargs):
        """Wrap pydantic ``e.errors()`` entries, prefixing each location."""
        wrapped = [dict(e, loc=tuple(prefix) + tuple(e.get("loc", ()))) for e in errors]
        return cls(wrapped, **kwargs)


class InvalidInputError(PFASModelError):
    """Predicted and observed breakthrough series cannot be compared."""


class NumericDegeneracyWarning(UserWarning):
    """A metric hit a degenerate case (zero variance, no finite pairs) and was set to a safe value."""
