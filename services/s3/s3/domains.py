"""
Host routing and certificate names for the MinIO ingress.

MinIO serves the S3 API on the base domain and, for virtual-host style
bucket access, on every direct subdomain of it. The console lives on a
separate dashboard domain. All of them share one TLS certificate.
"""

import typing as t

from s3.errors import AmbiguousRouteError

HTTP_PORT = 80
CONSOLE_PORT = 9001

WILDCARD_PREFIX = '*.'


class DomainRoute(t.NamedTuple):
    host: str
    port: int


class DomainResolution(t.NamedTuple):
    routes: tuple[DomainRoute, ...]
    dns_names: tuple[str, ...]

    @property
    def hosts(self) -> list[str]:
        return [route.host for route in self.routes]


def wildcard(domain: str) -> str:
    return f'{WILDCARD_PREFIX}{domain}'


def is_wildcard(host: str) -> bool:
    return host.startswith(WILDCARD_PREFIX)


def parent_domain(host: str) -> str:
    """
    Strips exactly one leading label, `a.b.example.com` becomes `b.example.com`.

    Returns an empty string for single label hosts.
    """
    return host.partition('.')[2]


def certificate_dns_names(hosts: t.Iterable[str]) -> list[str]:
    """
    Drops hosts already covered by a wildcard in the same list.

    A wildcard only covers a single label, so `a.b.example.com` is kept even
    if `*.example.com` is present. Order of the input is preserved and
    duplicates collapse into their first occurrence.
    """
    candidates = list(dict.fromkeys(hosts))
    present = set(candidates)
    return [
        host
        for host in candidates
        if is_wildcard(host) or wildcard(parent_domain(host)) not in present
    ]


def build_routes(
    base_domain: str,
    dashboard_domain: str,
    http_port: int = HTTP_PORT,
    console_port: int = CONSOLE_PORT,
) -> tuple[DomainRoute, ...]:
    """
    Builds the ingress routing table in a stable order.

    Candidates for the same host are merged when they agree on the port,
    otherwise the table would be ambiguous and AmbiguousRouteError is raised.
    """
    candidates = [
        ('base-domain', base_domain, http_port),
        ('base-domain', wildcard(base_domain), http_port),
        ('dashboard-domain', dashboard_domain, console_port),
    ]

    table: dict[str, tuple[str, int]] = {}
    for field, host, port in candidates:
        if host in table:
            existing_field, existing_port = table[host]
            if existing_port != port:
                raise AmbiguousRouteError(host, (existing_port, port), (existing_field, field))
            continue
        table[host] = (field, port)

    return tuple(DomainRoute(host, port) for host, (_, port) in table.items())


def resolve_domains(base_domain: str, dashboard_domain: str) -> DomainResolution:
    routes = build_routes(base_domain, dashboard_domain)
    dns_names = certificate_dns_names(route.host for route in routes)
    return DomainResolution(routes=routes, dns_names=tuple(dns_names))
