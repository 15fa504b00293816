from cdk_constructs.jump_host.infrastructure import JumpHost
from cdk_constructs.jump_host.models import JumpHostInputParameters
