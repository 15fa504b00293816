from typing import Mapping, Optional, Sequence, Tuple

from aws_cdk import aws_iam as iam
from aws_cdk import aws_logs as logs
from pydantic import Field, field_validator, model_validator

from cdk_constructs.config import config
from cdk_constructs.models import ParameterModel, read_only_mapping


class DockerImageSource(ParameterModel):
    """
    Where to load the Docker image from: either a full image URL, or an ECR
    repository in this account plus an image tag.
    """

    docker_image_url: Optional[str] = Field(default=None, min_length=1)
    docker_repository_name: Optional[str] = Field(default=None, min_length=1)
    docker_image_tag: Optional[str] = Field(default=None, min_length=1)

    @model_validator(mode="after")
    def check_single_source(self) -> "DockerImageSource":
        if self.docker_image_url is not None:
            if self.docker_repository_name is not None or self.docker_image_tag is not None:
                raise ValueError(
                    "docker_image_url cannot be combined with an ECR repository and tag"
                )
            return self
        if self.docker_repository_name is None or self.docker_image_tag is None:
            raise ValueError(
                "either docker_image_url or both docker_repository_name and "
                "docker_image_tag must be set"
            )
        return self

    @classmethod
    def from_url(cls, docker_image_url: str) -> "DockerImageSource":
        return cls(docker_image_url=docker_image_url)

    @classmethod
    def from_ecr(cls, docker_repository_name: str, docker_image_tag: str) -> "DockerImageSource":
        return cls(
            docker_repository_name=docker_repository_name,
            docker_image_tag=docker_image_tag,
        )

    @property
    def is_ecr_source(self) -> bool:
        return self.docker_repository_name is not None


class ServiceInputParameters(ParameterModel):
    """
    Knobs and dials to run a Docker image in an ECS service. The defaults
    work out of the box for a web application listening on port 8080.

    Every with_* method returns a new ServiceInputParameters, so one base
    configuration can be shared between several services.
    """

    docker_image_source: DockerImageSource
    environment_variables: Mapping[str, str] = Field(default_factory=dict, validate_default=True)
    security_group_ids_to_grant_ingress_from_ecs: Tuple[str, ...] = ()
    task_role_policy_statements: Tuple[iam.PolicyStatement, ...] = ()
    health_check_interval_seconds: int = Field(
        default=config.DEFAULT_HEALTH_CHECK_INTERVAL_SECONDS, ge=5, le=300
    )
    health_check_path: str = Field(default=config.DEFAULT_HEALTH_CHECK_PATH, min_length=1)
    container_port: int = Field(default=config.DEFAULT_CONTAINER_PORT, ge=1, le=65535)
    container_protocol: str = Field(default=config.DEFAULT_CONTAINER_PROTOCOL, min_length=1)
    health_check_timeout_seconds: int = Field(
        default=config.DEFAULT_HEALTH_CHECK_TIMEOUT_SECONDS, ge=2, le=120
    )
    healthy_threshold_count: int = Field(
        default=config.DEFAULT_HEALTHY_THRESHOLD_COUNT, ge=2, le=10
    )
    unhealthy_threshold_count: int = Field(
        default=config.DEFAULT_UNHEALTHY_THRESHOLD_COUNT, ge=2, le=10
    )
    log_retention: logs.RetentionDays = config.DEFAULT_LOG_RETENTION
    cpu: int = Field(default=config.DEFAULT_CPU, gt=0)
    memory: int = Field(default=config.DEFAULT_MEMORY, gt=0)
    desired_instances_count: int = Field(default=config.DEFAULT_DESIRED_INSTANCES_COUNT, ge=0)
    maximum_instances_percent: int = Field(
        default=config.DEFAULT_MAXIMUM_INSTANCES_PERCENT, ge=0
    )
    minimum_healthy_instances_percent: int = Field(
        default=config.DEFAULT_MINIMUM_HEALTHY_INSTANCES_PERCENT, ge=0
    )
    sticky_sessions_enabled: bool = False
    awslogs_date_time_format: str = Field(
        default=config.DEFAULT_AWSLOGS_DATE_TIME_FORMAT, min_length=1
    )

    @field_validator("environment_variables", mode="after")
    @classmethod
    def freeze_environment_variables(cls, value: Mapping[str, str]) -> Mapping[str, str]:
        return read_only_mapping(value)

    @model_validator(mode="after")
    def check_deployment_percentages(self) -> "ServiceInputParameters":
        if self.minimum_healthy_instances_percent > self.maximum_instances_percent:
            raise ValueError(
                "minimum_healthy_instances_percent cannot exceed maximum_instances_percent"
            )
        return self

    def with_environment_variables(self, environment_variables: Mapping[str, str]) -> "ServiceInputParameters":
        return self._replace(environment_variables=environment_variables)

    def with_security_group_ids_to_grant_ingress_from_ecs(
        self, security_group_ids: Sequence[str]
    ) -> "ServiceInputParameters":
        """
        Ids of the security groups that the ECS containers should be able to
        reach, e.g. the security group of a database.
        """
        return self._replace(security_group_ids_to_grant_ingress_from_ecs=security_group_ids)

    def with_task_role_policy_statements(
        self, task_role_policy_statements: Sequence[iam.PolicyStatement]
    ) -> "ServiceInputParameters":
        """
        What the service may do with other AWS resources, for example ALLOW
        sqs:GetQueueUrl on all queues. Default: nothing.
        """
        return self._replace(task_role_policy_statements=task_role_policy_statements)

    def with_health_check_interval_seconds(self, seconds: int) -> "ServiceInputParameters":
        return self._replace(health_check_interval_seconds=seconds)

    def with_health_check_path(self, health_check_path: str) -> "ServiceInputParameters":
        return self._replace(health_check_path=health_check_path)

    def with_container_port(self, container_port: int) -> "ServiceInputParameters":
        return self._replace(container_port=container_port)

    def with_container_protocol(self, container_protocol: str) -> "ServiceInputParameters":
        return self._replace(container_protocol=container_protocol)

    def with_health_check_timeout_seconds(self, seconds: int) -> "ServiceInputParameters":
        return self._replace(health_check_timeout_seconds=seconds)

    def with_healthy_threshold_count(self, count: int) -> "ServiceInputParameters":
        return self._replace(healthy_threshold_count=count)

    def with_unhealthy_threshold_count(self, count: int) -> "ServiceInputParameters":
        return self._replace(unhealthy_threshold_count=count)

    def with_cpu(self, cpu: int) -> "ServiceInputParameters":
        """
        CPU units per instance, see
        https://docs.aws.amazon.com/AmazonECS/latest/developerguide/task-cpu-memory-error.html
        for the valid combinations with memory.
        """
        return self._replace(cpu=cpu)

    def with_memory(self, memory: int) -> "ServiceInputParameters":
        return self._replace(memory=memory)

    def with_log_retention(self, log_retention: logs.RetentionDays) -> "ServiceInputParameters":
        return self._replace(log_retention=log_retention)

    def with_desired_instances(self, desired_instances: int) -> "ServiceInputParameters":
        return self._replace(desired_instances_count=desired_instances)

    def with_maximum_instances_percent(self, percent: int) -> "ServiceInputParameters":
        return self._replace(maximum_instances_percent=percent)

    def with_minimum_healthy_instances_percent(self, percent: int) -> "ServiceInputParameters":
        return self._replace(minimum_healthy_instances_percent=percent)

    def with_sticky_sessions_enabled(self, enabled: bool) -> "ServiceInputParameters":
        return self._replace(sticky_sessions_enabled=enabled)

    def with_awslogs_date_time_format(self, date_time_format: str) -> "ServiceInputParameters":
        """
        Pattern the awslogs driver uses to find the timestamp of a log event
        and to tell multi-line events apart. The default matches JSON logs
        with ISO 8601 timestamps.
        """
        return self._replace(awslogs_date_time_format=date_time_format)


class ServiceOutputParameters(ParameterModel):
    ecs_security_group_id: str
    service_name: str
    log_group_name: str
