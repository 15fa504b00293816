"""
Parameter stores used to hand identifiers from one deployed construct to
constructs that are deployed later, possibly from another app.

A producing construct calls put() for each of its outputs. A consuming
construct calls get() with the same key. Reading a key nobody wrote is a
hard error (NotFoundError): it means the producing construct was not
deployed into this environment yet, and guessing a default would hide that.
"""
import abc
import logging
from typing import Dict, List, Optional, Sequence

import boto3
from aws_cdk import aws_ssm as ssm
from botocore.exceptions import ClientError
from constructs import Construct

from cdk_constructs.config.config import ABSENT_MARKER, LIST_ORDINALS
from cdk_constructs.exceptions import NotFoundError, ValidationError

log = logging.getLogger(__name__)


class ParameterStore(abc.ABC):
    @abc.abstractmethod
    def _write(self, scope: Construct, key: str, value: str) -> None:
        pass

    @abc.abstractmethod
    def _read(self, scope: Construct, key: str) -> str:
        pass

    def put(self, scope: Construct, key: str, value: str) -> None:
        """
        Writes value under key. Writing a key again overwrites it.
        """
        if not isinstance(value, str) or not value:
            raise ValidationError(
                f"Value for parameter '{key}' must be a non-empty string, got {value!r}"
            )
        if value == ABSENT_MARKER:
            raise ValidationError(
                f"Value for parameter '{key}' is reserved to mark absent values"
            )
        log.info("Writing parameter %s", key)
        self._write(scope, key, value)

    def get(self, scope: Construct, key: str) -> str:
        log.debug("Reading parameter %s", key)
        return self._read(scope, key)

    def put_optional(self, scope: Construct, key: str, value: Optional[str]) -> None:
        if value is None:
            log.info("Writing parameter %s as absent", key)
            self._write(scope, key, ABSENT_MARKER)
        else:
            self.put(scope, key, value)

    def get_optional(self, scope: Construct, key: str) -> Optional[str]:
        value = self.get(scope, key)
        if value == ABSENT_MARKER:
            return None
        return value

    def put_list(self, scope: Construct, key: str, values: Sequence[str]) -> None:
        """
        Writes each element under its own key, key + "One", key + "Two", ...
        """
        if len(values) > len(LIST_ORDINALS):
            raise ValidationError(
                f"Parameter '{key}' can hold at most {len(LIST_ORDINALS)} values, "
                f"got {len(values)}"
            )
        for ordinal, value in zip(LIST_ORDINALS, values):
            self.put(scope, f"{key}{ordinal}", value)

    def get_list(self, scope: Construct, key: str, count: int) -> List[str]:
        if count > len(LIST_ORDINALS):
            raise ValidationError(
                f"Parameter '{key}' can hold at most {len(LIST_ORDINALS)} values"
            )
        return [self.get(scope, f"{key}{ordinal}") for ordinal in LIST_ORDINALS[:count]]


class InMemoryParameterStore(ParameterStore):
    """
    Keeps parameters in a dict. Useful to wire constructs of a single app
    together and in tests.
    """

    def __init__(self, parameters: Optional[Dict[str, str]] = None) -> None:
        self._parameters: Dict[str, str] = dict(parameters or {})

    def _write(self, scope: Construct, key: str, value: str) -> None:
        self._parameters[key] = value

    def _read(self, scope: Construct, key: str) -> str:
        try:
            return self._parameters[key]
        except KeyError:
            raise NotFoundError(key) from None

    def __contains__(self, key: str) -> bool:
        return key in self._parameters

    def as_dict(self) -> Dict[str, str]:
        return dict(self._parameters)


class SsmParameterStore(ParameterStore):
    """
    Reads and writes parameters through the SSM API while the app is
    synthesized. The scope argument is ignored.

    Failed calls are not retried. A missing parameter is almost always a
    deployment made in the wrong order, which a retry would not fix.
    """

    def __init__(self, client=None, region_name: Optional[str] = None) -> None:
        self.client = client or boto3.client("ssm", region_name=region_name)

    def _write(self, scope: Construct, key: str, value: str) -> None:
        self.client.put_parameter(Name=key, Value=value, Type="String", Overwrite=True)

    def _read(self, scope: Construct, key: str) -> str:
        try:
            response = self.client.get_parameter(Name=key)
        except ClientError as client_error:
            if client_error.response["Error"]["Code"] == "ParameterNotFound":
                raise NotFoundError(key) from client_error
            raise
        return response["Parameter"]["Value"]


class CloudFormationParameterStore(ParameterStore):
    """
    Adds SSM string parameters to the construct tree on put() and resolves
    them with CloudFormation parameters on get().

    Values returned by get() are tokens that CloudFormation fills in at
    deploy time. A key that was never written therefore fails the deployment
    of the consuming stack rather than the synthesis, and get_optional()
    cannot tell an absent value apart at synth time. Constructs that need to
    branch on an optional value compare the token against ABSENT_MARKER in a
    CloudFormation condition.
    """

    def _write(self, scope: Construct, key: str, value: str) -> None:
        existing = scope.node.try_find_child(key)
        if existing is not None:
            existing.node.default_child.value = value
            return
        ssm.StringParameter(scope, key, parameter_name=key, string_value=value)

    def _read(self, scope: Construct, key: str) -> str:
        return ssm.StringParameter.value_for_string_parameter(scope, key)
