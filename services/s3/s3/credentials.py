"""
Root credentials for MinIO.

MinIO speaks the S3 protocol, so its root user is modelled after an AWS key
pair: a 20 character upper case access key id and a 40 character secret.
"""

import typing as t

import pulumi as p
import pulumi_random as random

from s3.errors import ConfigurationError

ACCESS_KEY_ID_LENGTH = 20
SECRET_ACCESS_KEY_LENGTH = 40


class Credential(t.NamedTuple):
    access_key_id: p.Input[str]
    secret_access_key: p.Input[str]


class CredentialProvider(t.Protocol):
    def issue(self, identity: str) -> Credential:
        """Returns the credential of `identity`, the same one on every call."""
        ...


class RandomCredentialProvider:
    """
    Generates credentials with pulumi_random.

    The random resources are named after the identity, so once created they
    live in the stack state and are reused by every later update.
    """

    def __init__(self, opts: p.ResourceOptions | None = None):
        self._opts = opts or p.ResourceOptions()
        self._issued: dict[str, Credential] = {}

    def issue(self, identity: str) -> Credential:
        if identity not in self._issued:
            self._issued[identity] = self._create(identity)
        return self._issued[identity]

    def _create(self, identity: str) -> Credential:
        access_key_id = random.RandomString(
            f'{identity}-access-key-id',
            length=ACCESS_KEY_ID_LENGTH,
            upper=True,
            lower=False,
            numeric=True,
            special=False,
            opts=self._opts,
        )
        secret_access_key = random.RandomPassword(
            f'{identity}-secret-access-key',
            length=SECRET_ACCESS_KEY_LENGTH,
            special=True,
            override_special='+/',
            opts=self._opts,
        )
        return Credential(access_key_id.result, secret_access_key.result)


class StaticCredentialProvider:
    """Hands out pre-existing credentials, e.g. when adopting a running MinIO."""

    def __init__(self, credentials: t.Mapping[str, Credential]):
        self._credentials = dict(credentials)

    def issue(self, identity: str) -> Credential:
        try:
            return self._credentials[identity]
        except KeyError:
            raise ConfigurationError(
                'root-credentials', f"no credentials configured for '{identity}'"
            ) from None
