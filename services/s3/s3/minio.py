import pulumi as p
import pulumi_kubernetes as k8s

from s3.config import ComponentConfig
from s3.credentials import (
    Credential,
    CredentialProvider,
    RandomCredentialProvider,
    StaticCredentialProvider,
)
from s3.graph import ResourceKind, ResourceNode
from s3.plan import DeploymentPlan, build_plan, resolve_parameters

RESOURCE_TYPES: dict[ResourceKind, type[p.CustomResource]] = {
    ResourceKind.CONFIG: k8s.core.v1.ConfigMap,
    ResourceKind.SECRET: k8s.core.v1.Secret,
    ResourceKind.WORKLOAD: k8s.apps.v1.StatefulSet,
    ResourceKind.SERVICE: k8s.core.v1.Service,
    ResourceKind.CERTIFICATE: k8s.apiextensions.CustomResource,
    ResourceKind.ROUTING: k8s.networking.v1.Ingress,
}


class Minio(p.ComponentResource):
    """
    MinIO behind an ingress with a cert-manager certificate.

    The S3 API is served on the base domain and all its direct subdomains,
    the console on the dashboard domain.
    """

    def __init__(
        self,
        name: str,
        component_config: ComponentConfig,
        k8s_provider: k8s.Provider | None = None,
        credential_provider: CredentialProvider | None = None,
        opts: p.ResourceOptions | None = None,
    ):
        # Bad parameters must fail before anything is registered
        resolve_parameters(component_config)

        super().__init__(f'lab:s3:Minio:{name}', name, opts=opts)

        if credential_provider is None:
            credential_provider = self._default_credential_provider(name, component_config)

        self.credentials: Credential = credential_provider.issue(name)
        self.plan: DeploymentPlan = build_plan(name, component_config, self.credentials)

        p.log.debug(
            f'{name}: routes {", ".join(f"{host}:{port}" for host, port in self.plan.resolution.routes)}',
            resource=self,
        )
        p.log.debug(f'{name}: certificate names {", ".join(self.plan.resolution.dns_names)}', resource=self)

        self.resources: dict[ResourceKind, p.CustomResource] = {}
        for node in self.plan.graph.apply_order():
            self.resources[node.kind] = self._create_resource(node, k8s_provider)

        self.config_map = self.resources[ResourceKind.CONFIG]
        self.secret = self.resources[ResourceKind.SECRET]
        self.stateful_set = self.resources[ResourceKind.WORKLOAD]
        self.service = self.resources[ResourceKind.SERVICE]
        self.certificate = self.resources[ResourceKind.CERTIFICATE]
        self.ingress = self.resources[ResourceKind.ROUTING]

        p.log.info(
            f'{name}: serving {self.plan.config.base_domain} and {self.plan.config.dashboard_domain} '
            f'from namespace {self.plan.config.namespace_name}',
            resource=self,
        )

        self.register_outputs(
            {
                'access_key_id': self.credentials.access_key_id,
                'secret_access_key': self.credentials.secret_access_key,
            }
        )

    def _default_credential_provider(
        self, name: str, component_config: ComponentConfig
    ) -> CredentialProvider:
        root_credentials = component_config.root_credentials
        if root_credentials:
            return StaticCredentialProvider(
                {
                    name: Credential(
                        root_credentials.access_key_id,
                        p.Output.secret(root_credentials.secret_access_key.get_secret_value()),
                    )
                }
            )
        return RandomCredentialProvider(
            p.ResourceOptions(parent=self, protect=component_config.protect)
        )

    def _create_resource(
        self, node: ResourceNode, k8s_provider: k8s.Provider | None
    ) -> p.CustomResource:
        # Only depend on what already exists, apply_order guarantees it was created
        depends_on = [self.resources[kind] for kind in sorted(node.depends_on)]
        opts = p.ResourceOptions(
            parent=self,
            provider=k8s_provider,
            protect=node.protect,
            depends_on=depends_on,
        )
        return RESOURCE_TYPES[node.kind](
            node.name,
            metadata={
                'name': node.name,
                'namespace': node.namespace,
            },
            opts=opts,
            **node.payload,
        )
