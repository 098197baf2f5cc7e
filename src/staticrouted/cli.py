"""``staticroute``: edit the static routes configured per network service.

Usage::

    staticroute list-services
    staticroute list [network-service]
    staticroute add <address>[/prefix] <network-service>
    staticroute delete <address>[/prefix] <network-service>

Addresses may name a single host (``192.168.0.1``) or a network
(``192.168.5.0/24``).  Every change is announced on
``Setup:/Network/Service/<id>/<family>`` so a running ``staticrouted``
reconciles the service straight away.
"""

from __future__ import annotations

import sys
from typing import List, Optional

from oslo_config import cfg

from static_routes.destination import parse_destination
from static_routes.exceptions import NoSuchRoute, StaticRouteError, UnknownService
from static_routes.keys import service_setup_key
from static_routes.routes import DesiredRoute, Service
from static_routes.stores import PreferencesStore, StateStore
from static_routes_agent.config_extensions import register_store_opts

from .stores import PreferencesFile, StateFile

COMMANDS = ('list-services', 'list', 'add', 'delete')

USAGE = """\
usage: staticroute list-services

       List every network service, in service order.

usage: staticroute list [network-service]

       List the static routes of one service, or of every service when
       none is named.

usage: staticroute add <address>[/prefix] <network-service>

       Add a static route for the service.  The address may name a host
       (192.168.0.1) or a network (192.168.5.0/24).

usage: staticroute delete <address>[/prefix] <network-service>

       Remove a static route from the service.

"""


def _lookup(preferences: PreferencesStore, name: str) -> Service:
    service = preferences.service_by_name(name)
    if service is None:
        raise UnknownService(name)
    return service


def list_services(conf, preferences: PreferencesStore, state: StateStore) -> int:
    with preferences.locked():
        for service in preferences.services():
            print(service.name)
    return 0


def list_routes(conf, preferences: PreferencesStore, state: StateStore) -> int:
    name = conf.command.service
    with preferences.locked():
        if name is None:
            return _list_all_routes(preferences)

        service = _lookup(preferences, name)
        routes = preferences.desired_routes(service.id)
        if not routes:
            print(f"No static routes defined for service {name}.")
            return 0
        for route in routes:
            print(route.destination)
    return 0


def _list_all_routes(preferences: PreferencesStore) -> int:
    all_routes = preferences.all_routes()
    printed = False
    if all_routes:
        for service in preferences.services():
            for route in all_routes.get(service.id, []):
                print(f"{route.destination} {service.name}")
                printed = True
    if not printed:
        print("No static routes defined.")
    return 0


def add_route(conf, preferences: PreferencesStore, state: StateStore) -> int:
    route = DesiredRoute.from_destination(parse_destination(conf.command.address))
    with preferences.locked():
        service = _lookup(preferences, conf.command.service)
        routes: List[DesiredRoute] = list(preferences.desired_routes(service.id) or [])
        routes.append(route)
        preferences.set_routes(service.id, routes)
    state.notify(service_setup_key(service.id, route.family))
    return 0


def delete_route(conf, preferences: PreferencesStore, state: StateStore) -> int:
    target = DesiredRoute.from_destination(parse_destination(conf.command.address))
    name = conf.command.service
    with preferences.locked():
        service = _lookup(preferences, name)
        routes = preferences.desired_routes(service.id)
        if not routes:
            raise NoSuchRoute(target.destination, name)

        address = target.address.casefold()
        for index, route in enumerate(routes):
            if (
                route.address.casefold() == address
                and route.prefix_length == target.prefix_length
            ):
                break
        else:
            raise NoSuchRoute(target.destination, name)

        del routes[index]
        preferences.set_routes(service.id, routes)
    state.notify(service_setup_key(service.id, target.family))
    return 0


def add_command_parsers(subparsers):
    parser = subparsers.add_parser(
        'list-services',
        help='List all network services in service order.')
    parser.set_defaults(func=list_services)

    parser = subparsers.add_parser(
        'list',
        help='List the static routes of a service, or of every service.')
    parser.add_argument('service', nargs='?', default=None)
    parser.set_defaults(func=list_routes)

    parser = subparsers.add_parser(
        'add',
        help='Add a static route to a service.')
    parser.add_argument('address', help='address or address/prefix')
    parser.add_argument('service')
    parser.set_defaults(func=add_route)

    parser = subparsers.add_parser(
        'delete',
        help='Remove a static route from a service.')
    parser.add_argument('address', help='address or address/prefix')
    parser.add_argument('service')
    parser.set_defaults(func=delete_route)


command_opt = cfg.SubCommandOpt('command',
                                title='Commands',
                                help='Available commands',
                                handler=add_command_parsers)


def build_conf(argv: Optional[List[str]] = None) -> cfg.ConfigOpts:
    conf = cfg.ConfigOpts()
    register_store_opts(conf)
    conf.register_cli_opt(command_opt)
    conf(args=sys.argv[1:] if argv is None else argv,
         project='staticroutes',
         prog='staticroute',
         default_config_files=[],
         default_config_dirs=[])
    return conf


def _has_command(args: List[str]) -> bool:
    return any(arg in COMMANDS or arg in ('-h', '--help') for arg in args)


def main(argv: Optional[List[str]] = None) -> int:
    args = sys.argv[1:] if argv is None else list(argv)
    if not _has_command(args):
        sys.stderr.write(USAGE)
        return 0

    try:
        conf = build_conf(args)
    except SystemExit as exc:
        # argparse has already reported the problem on stderr
        return 0 if exc.code in (0, None) else 1

    preferences = PreferencesFile(conf.preferences_file, lock_timeout=conf.lock_timeout)
    state = StateFile(conf.state_file, lock_timeout=conf.lock_timeout)
    try:
        return conf.command.func(conf, preferences, state)
    except StaticRouteError as exc:
        print(f"staticroute: {exc}.", file=sys.stderr)
        return 1


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
