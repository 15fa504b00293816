from types import MappingProxyType
from typing import Any, Mapping, Optional

from pydantic import BaseModel, ConfigDict
from pydantic import ValidationError as PydanticValidationError

from cdk_constructs.exceptions import ValidationError


def describe_validation_error(validation_error: PydanticValidationError) -> str:
    problems = []
    for error in validation_error.errors():
        location = ".".join(str(part) for part in error["loc"])
        message = error["msg"].removeprefix("Value error, ")
        problems.append(f"{location}: {message}" if location else message)
    return f"Invalid {validation_error.title}: " + "; ".join(problems)


def read_only_mapping(value: Mapping[str, str]) -> Mapping[str, str]:
    """Copies value into a mapping that rejects item assignment."""
    return MappingProxyType(dict(value))


class ParameterModel(BaseModel):
    """
    Base for the input and output parameter objects of the constructs.

    Instances are immutable. Fields are not reassignable, sequences are
    stored as tuples and mappings as read-only proxies, so one instance can
    be shared between several constructs. Validation failures surface as
    cdk_constructs.exceptions.ValidationError so callers only deal with the
    error types of this package, whether an instance is built through the
    constructor, model_validate() or model_copy(). Use _replace() in "with"
    methods to get a new, validated copy.
    """

    model_config = ConfigDict(
        frozen=True, extra="forbid", arbitrary_types_allowed=True
    )

    def __init__(self, **data: Any) -> None:
        try:
            super().__init__(**data)
        except PydanticValidationError as validation_error:
            raise ValidationError(
                describe_validation_error(validation_error)
            ) from None

    @classmethod
    def model_validate(cls, obj: Any, **kwargs: Any):
        try:
            return super().model_validate(obj, **kwargs)
        except PydanticValidationError as validation_error:
            raise ValidationError(
                describe_validation_error(validation_error)
            ) from None

    def model_copy(self, *, update: Optional[Mapping[str, Any]] = None, deep: bool = False):
        # deep is irrelevant, every field value is immutable
        return self._replace(**(update or {}))

    def _replace(self, **changes: Any):
        values = {name: getattr(self, name) for name in type(self).model_fields}
        values.update(changes)
        return type(self)(**values)
