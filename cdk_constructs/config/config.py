"""
Constants that are used throughout the constructs, including parameter
names, producing kinds and resource specific defaults. If you want to change
or add a new value, please use this config file to ensure uniformity.
"""
from aws_cdk import aws_logs as logs

### Parameter Store ###
# Written in place of an optional value that does not exist. No legal
# identifier contains angle brackets, and the stores refuse to write this
# string as a real value.
ABSENT_MARKER = "<absent>"

# Lists are stored as one parameter per element, suffixed with these.
LIST_ORDINALS = ("One", "Two", "Three", "Four", "Five", "Six")

### Network ###
NETWORK_KIND = "Network"

PARAMETER_VPC_ID = "vpcId"
PARAMETER_HTTP_LISTENER = "httpListenerArn"
PARAMETER_HTTPS_LISTENER = "httpsListenerArn"
PARAMETER_LOADBALANCER_SECURITY_GROUP_ID = "loadBalancerSecurityGroupId"
PARAMETER_ECS_CLUSTER_NAME = "ecsClusterName"
PARAMETER_ISOLATED_SUBNET = "isolatedSubnetId"
PARAMETER_PUBLIC_SUBNET = "publicSubnetId"
PARAMETER_AVAILABILITY_ZONE = "availabilityZone"
PARAMETER_LOAD_BALANCER_ARN = "loadBalancerArn"
PARAMETER_LOAD_BALANCER_DNS_NAME = "loadBalancerDnsName"
PARAMETER_LOAD_BALANCER_HOSTED_ZONE_ID = "loadBalancerCanonicalHostedZoneId"

MAX_AZS = 2
HTTP_PORT = 80
HTTPS_PORT = 443
NO_OP_TARGET_GROUP_PORT = 8080
ANYWHERE_IPV4 = "0.0.0.0/0"

### Database ###
DATABASE_KIND = "Database"

PARAMETER_ENDPOINT_ADDRESS = "endpointAddress"
PARAMETER_ENDPOINT_PORT = "endpointPort"
PARAMETER_DATABASE_NAME = "databaseName"
PARAMETER_SECURITY_GROUP_ID = "securityGroupId"
PARAMETER_SECRET_ARN = "secretArn"

POSTGRES_PORT = 5432
DATABASE_PASSWORD_LENGTH = 32
DATABASE_PASSWORD_EXCLUDED_CHARACTERS = '@/\\" '

DEFAULT_STORAGE_IN_GB = 20
DEFAULT_DATABASE_INSTANCE_CLASS = "db.t3.micro"
DEFAULT_POSTGRES_VERSION = "15.4"

### Service ###
ECS_TASKS_PRINCIPAL = "ecs-tasks.amazonaws.com"
ECS_TASK_EXECUTION_ACTIONS = [
    "ecr:GetAuthorizationToken",
    "ecr:BatchCheckLayerAvailability",
    "ecr:GetDownloadUrlForLayer",
    "ecr:BatchGetImage",
    "logs:CreateLogStream",
    "logs:PutLogEvents",
]
STICKY_SESSION_DURATION_SECONDS = 3600

DEFAULT_HEALTH_CHECK_INTERVAL_SECONDS = 15
DEFAULT_HEALTH_CHECK_PATH = "/"
DEFAULT_CONTAINER_PORT = 8080
DEFAULT_CONTAINER_PROTOCOL = "HTTP"
DEFAULT_HEALTH_CHECK_TIMEOUT_SECONDS = 5
DEFAULT_HEALTHY_THRESHOLD_COUNT = 2
DEFAULT_UNHEALTHY_THRESHOLD_COUNT = 8
DEFAULT_LOG_RETENTION = logs.RetentionDays.ONE_WEEK
DEFAULT_CPU = 256
DEFAULT_MEMORY = 512
DEFAULT_DESIRED_INSTANCES_COUNT = 2
DEFAULT_MAXIMUM_INSTANCES_PERCENT = 200
DEFAULT_MINIMUM_HEALTHY_INSTANCES_PERCENT = 50
DEFAULT_AWSLOGS_DATE_TIME_FORMAT = "%Y-%m-%dT%H:%M:%S.%f%z"

### Jump Host ###
SSH_PORT = 22
DEFAULT_JUMP_HOST_INSTANCE_TYPE = "t3.nano"

### Docker Repository ###
DEFAULT_MAX_IMAGE_COUNT = 10

### Example Application ###
SPRING_BOOT_APPLICATION_NAME = "SpringBootApplication"
SPRING_BOOT_ENVIRONMENT_NAME = "prod"
