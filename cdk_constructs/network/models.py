from typing import Optional, Tuple

from pydantic import Field

from cdk_constructs.exceptions import ValidationError
from cdk_constructs.models import ParameterModel


class NetworkInputParameters(ParameterModel):
    """
    ssl_certificate_arn is the certificate the load balancer uses to
    terminate HTTPS. Without one, the load balancer only listens to plain
    HTTP.
    """

    ssl_certificate_arn: Optional[str] = Field(default=None, min_length=1)

    def with_ssl_certificate_arn(self, ssl_certificate_arn: str) -> "NetworkInputParameters":
        if ssl_certificate_arn is None:
            raise ValidationError("ssl_certificate_arn must not be None")
        return self._replace(ssl_certificate_arn=ssl_certificate_arn)


class NetworkOutputParameters(ParameterModel):
    vpc_id: str
    http_listener_arn: str
    # None when the load balancer only listens to HTTP
    https_listener_arn: Optional[str] = None
    load_balancer_security_group_id: str
    ecs_cluster_name: str
    isolated_subnets: Tuple[str, ...]
    public_subnets: Tuple[str, ...]
    availability_zones: Tuple[str, ...]
    load_balancer_arn: str
    load_balancer_dns_name: str
    load_balancer_canonical_hosted_zone_id: str
