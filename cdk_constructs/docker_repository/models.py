from pydantic import Field

from cdk_constructs.config import config
from cdk_constructs.models import ParameterModel


class DockerRepositoryInputParameters(ParameterModel):
    """
    docker_repository_name: name of the ECR repository to create.
    account_id: AWS account whose users may push and pull images.
    max_image_count: older images are deleted once the repository holds more.
    retain_registry_on_delete: keep the repository when the stack is deleted.
    """

    docker_repository_name: str = Field(min_length=1)
    account_id: str = Field(min_length=1)
    max_image_count: int = Field(default=config.DEFAULT_MAX_IMAGE_COUNT, ge=1)
    retain_registry_on_delete: bool = True

    def with_max_image_count(self, max_image_count: int) -> "DockerRepositoryInputParameters":
        return self._replace(max_image_count=max_image_count)

    def with_retain_registry_on_delete(self, retain: bool) -> "DockerRepositoryInputParameters":
        return self._replace(retain_registry_on_delete=retain)
