from pydantic import Field

from cdk_constructs.config import config
from cdk_constructs.models import ParameterModel


class DatabaseInputParameters(ParameterModel):
    storage_in_gb: int = Field(default=config.DEFAULT_STORAGE_IN_GB, ge=20, le=65536)
    instance_class: str = Field(default=config.DEFAULT_DATABASE_INSTANCE_CLASS, min_length=1)
    postgres_version: str = Field(default=config.DEFAULT_POSTGRES_VERSION, min_length=1)

    def with_storage_in_gb(self, storage_in_gb: int) -> "DatabaseInputParameters":
        return self._replace(storage_in_gb=storage_in_gb)

    def with_instance_class(self, instance_class: str) -> "DatabaseInputParameters":
        return self._replace(instance_class=instance_class)

    def with_postgres_version(self, postgres_version: str) -> "DatabaseInputParameters":
        return self._replace(postgres_version=postgres_version)


class DatabaseOutputParameters(ParameterModel):
    endpoint_address: str
    endpoint_port: str
    database_name: str
    # secret with the fields "username" and "password"
    database_secret_arn: str
    database_security_group_id: str
