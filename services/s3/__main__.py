"""MinIO object storage on kubernetes"""

import pulumi as p

from utils.k8s import get_k8s_provider

from s3.config import load_component_config
from s3.minio import Minio

component_config = load_component_config(p.Config().get_object('config'))

minio = Minio('minio', component_config, get_k8s_provider())

p.export('accessKeyId', minio.credentials.access_key_id)
p.export('secretAccessKey', p.Output.secret(minio.credentials.secret_access_key))
