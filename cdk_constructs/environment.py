"""
An application can be deployed into multiple environments (staging,
production, ...). An ApplicationEnvironment describes which environment an
application is deployed into.

The constructs in this package use this descriptor when naming AWS resources
so that several environments can be deployed side by side without conflicts.
"""
import re
from typing import Optional

from aws_cdk import Tags
from constructs import IConstruct
from pydantic import Field

from cdk_constructs.exceptions import ValidationError
from cdk_constructs.models import ParameterModel

_UNSAFE_CHARACTERS = re.compile(r"[^a-zA-Z0-9-]")


def sanitize(value: str) -> str:
    """
    Strips every character that is not alphanumeric or a dash, since some
    AWS resources don't cope with them in resource names.
    """
    return _UNSAFE_CHARACTERS.sub("", value)


class ApplicationEnvironment(ParameterModel):
    application_name: str = Field(min_length=1)
    environment_name: str = Field(min_length=1)

    def __init__(
        self, application_name: str = None, environment_name: str = None
    ) -> None:
        super().__init__(
            application_name=application_name, environment_name=environment_name
        )

    def __str__(self) -> str:
        return sanitize(f"{self.environment_name}-{self.application_name}")

    @property
    def parameter_namespace(self) -> str:
        """
        Namespace for parameter store keys of constructs that belong to a
        single application, e.g. "prod-myapp" in "prod-myapp-Database-secretArn".
        """
        return f"{self.environment_name}-{self.application_name}"

    def prefix(self, suffix: str, limit: Optional[int] = None) -> str:
        """
        Prefixes a string with the environment name and the application name.

        With a limit, names longer than limit characters are cut down to their
        last limit characters. The result can start in the middle of a word
        or of the prefix itself.
        """
        name = f"{self}-{suffix}"
        if limit is None:
            return name
        if isinstance(limit, bool) or not isinstance(limit, int) or limit < 1:
            raise ValidationError(
                f"limit must be a positive integer, got {limit!r}"
            )
        if len(name) <= limit:
            return name
        return name[-limit:]

    def tag(self, construct: IConstruct) -> None:
        Tags.of(construct).add("environment", self.environment_name)
        Tags.of(construct).add("application", self.application_name)
