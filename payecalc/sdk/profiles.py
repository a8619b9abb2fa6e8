"""Employee record parsing.

Employee records come from an external store as loosely-typed dicts.
parse_profile() turns one into an EmployeeTaxProfile without aborting on
bad fields: each field that fails validation is dropped so its default
applies, and a PROFILE_DATA warning names it.
"""

import logging
from collections.abc import Mapping
from typing import Any, Dict, List, Tuple, Type

from pydantic import BaseModel, ValidationError

from .errors import ProfileDataError
from .schemas import Allowances, ComputationWarning, EmployeeTaxProfile

logger = logging.getLogger(__name__)

# Sub-models whose keys can be dropped individually
NESTED_MODELS: Dict[str, Type[BaseModel]] = {"allowances": Allowances}


def _field_keys(model_cls: Type[BaseModel], key: Any) -> Tuple[str, ...]:
    """Both spellings (field name and alias) a record may use for a field."""
    for name, field in model_cls.model_fields.items():
        if key in (name, field.alias):
            return tuple(k for k in (name, field.alias) if k)
    return (key,)


def _field_name(model_cls: Type[BaseModel], key: Any) -> str:
    return _field_keys(model_cls, key)[0]


def _drop(data: Dict[str, Any], model_cls: Type[BaseModel], key: Any) -> bool:
    dropped = False
    for k in _field_keys(model_cls, key):
        if k in data:
            del data[k]
            dropped = True
    return dropped


def parse_profile(record: Any) -> Tuple[EmployeeTaxProfile, Tuple[ComputationWarning, ...]]:
    """Build a profile from an employee record, degrading bad fields.

    Args:
        record: EmployeeTaxProfile (returned as is) or a mapping with
            camelCase or snake_case keys

    Returns:
        (profile, warnings). Each invalid field falls back to its default
        (zero, False or None) and adds one PROFILE_DATA warning.

    Raises:
        ProfileDataError: If record is not a mapping at all
    """
    if isinstance(record, EmployeeTaxProfile):
        return record, ()
    if not isinstance(record, Mapping):
        raise ProfileDataError(f"Employee record must be a mapping, got {type(record).__name__}")

    # None means "not supplied"
    data = {k: v for k, v in record.items() if v is not None}
    for key in NESTED_MODELS:
        if isinstance(data.get(key), Mapping):
            data[key] = {k: v for k, v in data[key].items() if v is not None}

    warnings: List[ComputationWarning] = []
    employee = data.get("employeeId") or data.get("employee_id") or data.get("name") or "?"

    # Each pass drops at least one key, so this terminates
    while True:
        try:
            profile = EmployeeTaxProfile.model_validate(data)
            return profile, tuple(warnings)
        except ValidationError as e:
            progressed = False
            for err in e.errors():
                loc = err["loc"]
                if not loc:
                    continue
                top = loc[0]
                nested = NESTED_MODELS.get(_field_name(EmployeeTaxProfile, top))
                if nested and len(loc) > 1 and isinstance(data.get(top), dict):
                    removed = _drop(data[top], nested, loc[1])
                    label = f"{_field_name(EmployeeTaxProfile, top)}.{_field_name(nested, loc[1])}"
                else:
                    removed = _drop(data, EmployeeTaxProfile, top)
                    label = _field_name(EmployeeTaxProfile, top)
                if not removed:
                    continue
                progressed = True
                message = f"Invalid {label} ({err['msg']}); using default"
                logger.warning(f"employee {employee}: {message}")
                warnings.append(ComputationWarning(code="PROFILE_DATA", message=message, field=label))
            if not progressed:
                raise ProfileDataError(f"Employee record {employee} cannot be read: {e}")
