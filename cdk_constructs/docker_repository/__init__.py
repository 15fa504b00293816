from cdk_constructs.docker_repository.infrastructure import DockerRepository
from cdk_constructs.docker_repository.models import DockerRepositoryInputParameters
