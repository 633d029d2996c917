import typing as t

import pydantic

import utils.model

from s3.errors import ConfigurationError


class MinioConfig(utils.model.LocalBaseModel):
    image: str = 'minio/minio:latest'
    storage_size: str = '1G'
    http_trace: str = '/dev/stdout'


class RootCredentialsConfig(utils.model.LocalBaseModel):
    access_key_id: str
    secret_access_key: pydantic.SecretStr


class ComponentConfig(utils.model.LocalBaseModel):
    model_config = {'str_strip_whitespace': True}

    namespace_name: str = 'default'
    base_domain: str
    dashboard_domain: str
    protect: bool = False
    issuer_name: str = 'acme-letsencrypt'
    minio: MinioConfig = MinioConfig()
    root_credentials: RootCredentialsConfig | None = None


def check_parameters(component_config: ComponentConfig) -> ComponentConfig:
    """
    Validates the deployment parameters beyond their types.

    Returns a copy with lower cased domains, DNS names are case insensitive
    and route/certificate deduplication compares them verbatim.
    """
    for field in ('namespace_name', 'base_domain', 'dashboard_domain', 'issuer_name'):
        if not getattr(component_config, field):
            raise ConfigurationError(field.replace('_', '-'), 'must not be empty')

    domains = {}
    for field in ('base_domain', 'dashboard_domain'):
        value = getattr(component_config, field)
        if not utils.model.is_valid_hostname(value):
            raise ConfigurationError(
                field.replace('_', '-'), f"'{value}' is not a valid DNS name"
            )
        domains[field] = value.lower().removesuffix('.')

    return component_config.model_copy(update=domains)


def load_component_config(raw: t.Mapping[str, t.Any] | None) -> ComponentConfig:
    """
    Parses the `config` stack setting.

    Any problem is reported as ConfigurationError naming the offending keys.
    """
    if raw is None:
        raise ConfigurationError('config', 'stack setting is missing')

    try:
        component_config = ComponentConfig.model_validate(raw)
    except pydantic.ValidationError as e:
        fields = sorted({'.'.join(str(part) for part in error['loc']) for error in e.errors()})
        raise ConfigurationError(', '.join(fields), str(e.errors()[0]['msg'])) from e

    return check_parameters(component_config)
