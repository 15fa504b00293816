from pydantic import Field

from cdk_constructs.config import config
from cdk_constructs.models import ParameterModel


class JumpHostInputParameters(ParameterModel):
    """
    key_name is the EC2 key pair installed on the jump host for SSH access.
    The key pair has to exist in the account beforehand.
    """

    key_name: str = Field(min_length=1)
    instance_type: str = Field(default=config.DEFAULT_JUMP_HOST_INSTANCE_TYPE, min_length=1)

    def with_instance_type(self, instance_type: str) -> "JumpHostInputParameters":
        return self._replace(instance_type=instance_type)
