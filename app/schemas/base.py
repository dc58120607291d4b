# app/schemas/base.py
from typing import Annotated

import email_validator
from email_validator import EmailNotValidError, validate_email
from pydantic import AfterValidator, BaseModel, BeforeValidator, ConfigDict
from pydantic.alias_generators import to_camel

# Largest id the database integer columns can hold
MAX_ID = 2**63 - 1

# Internal deployments register with intranet addresses (bob@company.local).
# email-validator refuses these special-use names even with deliverability
# checks off, so they are taken off its list.
INTRANET_DOMAINS = ("local", "test")
for _name in INTRANET_DOMAINS:
    if _name in email_validator.SPECIAL_USE_DOMAIN_NAMES:
        email_validator.SPECIAL_USE_DOMAIN_NAMES.remove(_name)


def normalize_email(v):
    return v.strip().lower() if isinstance(v, str) else v


def check_email(v: str) -> str:
    try:
        result = validate_email(v, check_deliverability=False, globally_deliverable=False)
    except EmailNotValidError as e:
        raise ValueError(str(e))
    return result.normalized


Email = Annotated[str, BeforeValidator(normalize_email), AfterValidator(check_email)]


class CamelModel(BaseModel):
    """Accepts and emits camelCase keys (``employeeId``, ``dueDate``)."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )
