import re

from cdk_constructs.exceptions import ValidationError

_COMPONENT = re.compile(r"[A-Za-z0-9_.]+")


def key_name(environment_name: str, producing_kind: str, field_name: str) -> str:
    """
    Builds the parameter store key "<environment>-<Kind>-<field>" under
    which a producing construct publishes one of its outputs, e.g.
    "prod-Network-vpcId".

    The kind and the field may not contain dashes, so splitting a key at its
    last two dashes recovers exactly one triple and two different triples
    never share a key.
    """
    if not isinstance(environment_name, str) or not environment_name:
        raise ValidationError("environment_name must be a non-empty string")
    for label, component in (
        ("producing_kind", producing_kind),
        ("field_name", field_name),
    ):
        if not isinstance(component, str) or not _COMPONENT.fullmatch(component):
            raise ValidationError(
                f"{label} must be a non-empty string of letters, digits, "
                f"'_' or '.', got {component!r}"
            )
    return f"{environment_name}-{producing_kind}-{field_name}"

