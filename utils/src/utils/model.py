import re

import pydantic

_HOSTNAME_LABEL = re.compile(r'^(?!-)[a-z0-9-]{1,63}(?<!-)$')


def _to_kebap_case(name: str) -> str:
    return name.replace('_', '-')


class LocalBaseModel(pydantic.BaseModel):
    model_config = {
        'extra': 'forbid',
        'alias_generator': _to_kebap_case,
        # Allow instanciation also with original names
        'populate_by_name': True,
    }


def is_valid_hostname(name: str) -> bool:
    """
    Checks the syntax of a fully qualified DNS name, e.g. store.example.com.

    Wildcards are not accepted, a trailing dot is.
    """
    name = name.lower().removesuffix('.')
    if not name or len(name) > 253:
        return False
    return all(_HOSTNAME_LABEL.match(label) for label in name.split('.'))
