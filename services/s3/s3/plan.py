"""
Computes the full set of kubernetes objects for a MinIO deployment.

Planning happens in two phases. First all plain data is derived: validated
parameters, the routing table and the certificate names. Then the resource
nodes are built, referencing each other only through names known upfront
(e.g. the TLS secret is always `<name>-tls`). Nothing here talks to pulumi
or the cluster, so a plan can be recomputed and compared freely.
"""

import textwrap
import typing as t

from s3.config import ComponentConfig, check_parameters
from s3.credentials import Credential
from s3.domains import CONSOLE_PORT, HTTP_PORT, DomainResolution, resolve_domains
from s3.errors import ConfigurationError
from s3.graph import ResourceGraph, ResourceKind, ResourceNode, structural_dependencies

DATA_DIR = '/data'

CERTIFICATE_API_VERSION = 'cert-manager.io/v1'

SERVER_SCRIPT = textwrap.dedent(
    """\
    echo "$POD_IP\t{domain}" >> /etc/hosts
    exec minio server {data_dir} --address '{domain}:{http_port}' --console-address :{console_port}
    """
)


class DeploymentPlan(t.NamedTuple):
    name: str
    config: ComponentConfig
    resolution: DomainResolution
    graph: ResourceGraph
    credential: Credential

    @property
    def tls_secret_name(self) -> str:
        return tls_secret_name(self.name)


def tls_secret_name(name: str) -> str:
    return f'{name}-tls'


def resolve_parameters(
    component_config: ComponentConfig,
) -> tuple[ComponentConfig, DomainResolution]:
    """First phase: validated parameters and the derived routing data."""
    config = check_parameters(component_config)
    return config, resolve_domains(config.base_domain, config.dashboard_domain)


def _config_payload(config: ComponentConfig) -> dict[str, t.Any]:
    # Never put credentials here, config maps are readable by anyone in the namespace
    return {
        'data': {
            'MINIO_DOMAIN': config.base_domain,
            'MINIO_HTTP_TRACE': config.minio.http_trace,
        },
    }


def _secret_payload(credential: Credential) -> dict[str, t.Any]:
    return {
        'string_data': {
            'MINIO_ROOT_USER': credential.access_key_id,
            'MINIO_ROOT_PASSWORD': credential.secret_access_key,
        },
    }


def _workload_payload(name: str, config: ComponentConfig) -> dict[str, t.Any]:
    labels = {'app': name}
    script = SERVER_SCRIPT.format(
        domain=config.base_domain,
        data_dir=DATA_DIR,
        http_port=HTTP_PORT,
        console_port=CONSOLE_PORT,
    )
    return {
        'spec': {
            'pod_management_policy': 'Parallel',
            'service_name': name,
            'selector': {'match_labels': labels},
            'template': {
                'metadata': {'labels': labels},
                'spec': {
                    'containers': [
                        {
                            'name': name,
                            'image': config.minio.image,
                            'env': [
                                {
                                    'name': 'POD_IP',
                                    'value_from': {'field_ref': {'field_path': 'status.podIP'}},
                                },
                            ],
                            'env_from': [
                                {'config_map_ref': {'name': name}},
                                {'secret_ref': {'name': name}},
                            ],
                            'ports': [
                                {'name': 'http', 'container_port': HTTP_PORT},
                                {'name': 'console', 'container_port': CONSOLE_PORT},
                            ],
                            'volume_mounts': [
                                {'name': name, 'mount_path': DATA_DIR, 'sub_path': 'data'},
                            ],
                            'command': ['sh', '-exc'],
                            'args': [script],
                        },
                    ],
                },
            },
            'volume_claim_templates': [
                {
                    'metadata': {'name': name},
                    'spec': {
                        'access_modes': ['ReadWriteOnce'],
                        'resources': {'requests': {'storage': config.minio.storage_size}},
                    },
                },
            ],
        },
    }


def _service_payload(name: str) -> dict[str, t.Any]:
    return {
        'spec': {
            'selector': {'app': name},
            'ports': [
                {'name': 'http', 'port': HTTP_PORT},
                {'name': 'console', 'port': CONSOLE_PORT},
            ],
        },
    }


def _certificate_payload(
    name: str, config: ComponentConfig, resolution: DomainResolution
) -> dict[str, t.Any]:
    # Custom resources are passed through verbatim, hence camel case
    return {
        'api_version': CERTIFICATE_API_VERSION,
        'kind': 'Certificate',
        'spec': {
            'secretName': tls_secret_name(name),
            'issuerRef': {
                'kind': 'ClusterIssuer',
                'name': config.issuer_name,
            },
            'dnsNames': list(resolution.dns_names),
        },
    }


def _routing_payload(name: str, resolution: DomainResolution) -> dict[str, t.Any]:
    return {
        'spec': {
            'tls': [
                {
                    'secret_name': tls_secret_name(name),
                    'hosts': resolution.hosts,
                },
            ],
            'rules': [
                {
                    'host': route.host,
                    'http': {
                        'paths': [
                            {
                                'path': '/',
                                'path_type': 'Prefix',
                                'backend': {
                                    'service': {
                                        'name': name,
                                        'port': {'number': route.port},
                                    },
                                },
                            },
                        ],
                    },
                }
                for route in resolution.routes
            ],
        },
    }


def build_plan(name: str, component_config: ComponentConfig, credential: Credential) -> DeploymentPlan:
    """
    Plans a MinIO deployment called `name`.

    Raises ConfigurationError or AmbiguousRouteError for bad parameters and
    GraphIntegrityError if the resulting graph is inconsistent. Either a
    complete plan is returned or nothing.
    """
    if not name:
        raise ConfigurationError('name', 'must not be empty')

    config, resolution = resolve_parameters(component_config)

    payloads = {
        ResourceKind.CONFIG: _config_payload(config),
        ResourceKind.SECRET: _secret_payload(credential),
        ResourceKind.WORKLOAD: _workload_payload(name, config),
        ResourceKind.SERVICE: _service_payload(name),
        ResourceKind.CERTIFICATE: _certificate_payload(name, config, resolution),
        ResourceKind.ROUTING: _routing_payload(name, resolution),
    }
    graph = ResourceGraph(
        ResourceNode(
            kind=kind,
            name=name,
            namespace=config.namespace_name,
            payload=payload,
            depends_on=structural_dependencies(kind),
            protect=config.protect,
        )
        for kind, payload in payloads.items()
    )
    graph.validate()

    return DeploymentPlan(
        name=name,
        config=config,
        resolution=resolution,
        graph=graph,
        credential=credential,
    )
