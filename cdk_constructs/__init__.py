"""
Building blocks for deploying a containerized web application to AWS with
the CDK: network, ECS service, Postgres database, jump host and Docker
repository.
"""
from cdk_constructs.database import (
    DatabaseInputParameters,
    DatabaseOutputParameters,
    PostgresDatabase,
)
from cdk_constructs.docker_repository import DockerRepository, DockerRepositoryInputParameters
from cdk_constructs.environment import ApplicationEnvironment, sanitize
from cdk_constructs.exceptions import ConstructsError, NotFoundError, ValidationError
from cdk_constructs.jump_host import JumpHost, JumpHostInputParameters
from cdk_constructs.network import Network, NetworkInputParameters, NetworkOutputParameters
from cdk_constructs.parameter_store import (
    CloudFormationParameterStore,
    InMemoryParameterStore,
    ParameterStore,
    SsmParameterStore,
    key_name,
)
from cdk_constructs.service import (
    DockerImageSource,
    Service,
    ServiceInputParameters,
    ServiceOutputParameters,
)
