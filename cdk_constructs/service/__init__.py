from cdk_constructs.service.infrastructure import Service
from cdk_constructs.service.models import (
    DockerImageSource,
    ServiceInputParameters,
    ServiceOutputParameters,
)
