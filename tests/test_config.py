import pytest

from s3.config import ComponentConfig, check_parameters, load_component_config
from s3.errors import ConfigurationError


def test_defaults():
    component_config = load_component_config(
        {'base-domain': 'store.example.com', 'dashboard-domain': 'console.example.com'}
    )

    assert component_config.namespace_name == 'default'
    assert component_config.protect is False
    assert component_config.issuer_name == 'acme-letsencrypt'
    assert component_config.minio.image == 'minio/minio:latest'
    assert component_config.minio.storage_size == '1G'
    assert component_config.root_credentials is None


def test_nested_settings():
    component_config = load_component_config(
        {
            'namespace-name': 'storage',
            'base-domain': 'store.example.com',
            'dashboard-domain': 'console.example.com',
            'protect': True,
            'minio': {'storage-size': '10Gi', 'image': 'minio/minio:RELEASE.2024-01-01'},
            'root-credentials': {'access-key-id': 'AKIA', 'secret-access-key': 'hunter2'},
        }
    )

    assert component_config.namespace_name == 'storage'
    assert component_config.protect is True
    assert component_config.minio.storage_size == '10Gi'
    assert component_config.root_credentials.secret_access_key.get_secret_value() == 'hunter2'


def test_missing_config():
    with pytest.raises(ConfigurationError) as excinfo:
        load_component_config(None)

    assert excinfo.value.field == 'config'


def test_missing_domain_is_named():
    with pytest.raises(ConfigurationError) as excinfo:
        load_component_config({'base-domain': 'store.example.com'})

    assert excinfo.value.field == 'dashboard-domain'


def test_unknown_key_is_rejected():
    with pytest.raises(ConfigurationError) as excinfo:
        load_component_config(
            {
                'base-domain': 'store.example.com',
                'dashboard-domain': 'console.example.com',
                'dashboard-port': 9001,
            }
        )

    assert excinfo.value.field == 'dashboard-port'


@pytest.mark.parametrize('value', ['', '   '])
def test_empty_domain_is_rejected(value):
    with pytest.raises(ConfigurationError) as excinfo:
        load_component_config({'base-domain': value, 'dashboard-domain': 'console.example.com'})

    assert excinfo.value.field == 'base-domain'
    assert 'must not be empty' in str(excinfo.value)


@pytest.mark.parametrize('value', ['store_example.com', '-store.example.com', '*.example.com', 'a..b'])
def test_malformed_domain_is_rejected(value):
    with pytest.raises(ConfigurationError) as excinfo:
        load_component_config({'base-domain': 'store.example.com', 'dashboard-domain': value})

    assert excinfo.value.field == 'dashboard-domain'


def test_domains_are_normalized():
    component_config = check_parameters(
        ComponentConfig(base_domain='Store.Example.com.', dashboard_domain='CONSOLE.example.com')
    )

    assert component_config.base_domain == 'store.example.com'
    assert component_config.dashboard_domain == 'console.example.com'
