import pulumi
import pytest

from s3.config import ComponentConfig


class MinioMocks(pulumi.runtime.Mocks):
    def new_resource(self, args: pulumi.runtime.MockResourceArgs):
        outputs = dict(args.inputs)
        if args.typ == 'random:index/randomString:RandomString':
            outputs['result'] = 'A' * int(args.inputs['length'])
        elif args.typ == 'random:index/randomPassword:RandomPassword':
            outputs['result'] = 's' * int(args.inputs['length'])
        return f'{args.name}-id', outputs

    def call(self, args: pulumi.runtime.MockCallArgs):
        return {}


pulumi.runtime.set_mocks(MinioMocks(), preview=False)


@pytest.fixture
def component_config() -> ComponentConfig:
    return ComponentConfig(
        namespace_name='storage',
        base_domain='store.example.com',
        dashboard_domain='console.example.com',
    )
