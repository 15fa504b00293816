from cdk_constructs.parameter_store.naming import key_name
from cdk_constructs.parameter_store.store import (
    CloudFormationParameterStore,
    InMemoryParameterStore,
    ParameterStore,
    SsmParameterStore,
)
