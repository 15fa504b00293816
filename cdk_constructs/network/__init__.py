from cdk_constructs.network.infrastructure import Network
from cdk_constructs.network.models import NetworkInputParameters, NetworkOutputParameters
