#!/usr/bin/env python3
from dataclasses import dataclass
from types import MappingProxyType
from typing import Optional

NAME_FORMAT = "{role}-[chain-]{network}-{instance}"

PORT_BASE = 30000
IP_PREFIX = "192.168"
RELAY = "relay"


class ParseError(ValueError):
    def __init__(self, token: str, expected: str):
        self.token = token
        self.expected = expected
        super().__init__("invalid token '{0}': expected {1}".format(token, expected))


class MalformedName(ParseError):
    pass


class UnknownRole(ParseError):
    pass


class UnknownNetwork(ParseError):
    pass


class UnknownChain(ParseError):
    pass


class InvalidInstance(ParseError):
    pass


class InvalidPort(ValueError):
    pass


@dataclass(frozen=True)
class Role:
    name: str
    token: str
    digit: int
    first_slot: int
    first_instance: int
    instances: int

    @property
    def last_instance(self) -> int:
        return self.first_instance + self.instances - 1

    def check_instance(self, instance: int, token: str) -> int:
        if not self.first_instance <= instance <= self.last_instance:
            raise InvalidInstance(token, "an instance number between {0:02d} and {1:02d} for {2}".format(
                self.first_instance, self.last_instance, self.name))
        return instance

    def slot(self, instance: int) -> int:
        self.check_instance(instance, str(instance))
        return self.first_slot + instance - self.first_instance


@dataclass(frozen=True)
class Network:
    name: str
    digit: int
    custom_digit: Optional[int] = None


@dataclass(frozen=True)
class NodeName:
    role: Role
    chain: str
    network: Network
    instance: int


_BOOT = Role("bootnode", "boot", digit=0, first_slot=0, first_instance=0, instances=1)
_RPC = Role("rpc", "rpc", digit=1, first_slot=1, first_instance=1, instances=3)
_VAL = Role("validator", "val", digit=2, first_slot=4, first_instance=1, instances=6)

ROLES = MappingProxyType({
    "boot": _BOOT,
    "bootnode": _BOOT,
    "rpc": _RPC,
    "val": _VAL,
    "validator": _VAL,
})

NETWORKS = MappingProxyType({
    "polkadot": Network("polkadot", 1, custom_digit=5),
    "kusama": Network("kusama", 2, custom_digit=6),
    "westend": Network("westend", 3),
    "paseo": Network("paseo", 4, custom_digit=8),
})

# offsets 00-19
SYSTEM_CHAINS = MappingProxyType({
    RELAY: 0,
    "asset-hub": 1,
    "bridge-hub": 2,
    "collectives": 3,
    "people": 4,
    "coretime": 5,
    "encointer": 6,
})

# offsets 20+, only valid on the network that hosts them
CUSTOM_CHAINS = MappingProxyType({
    "polkadot": MappingProxyType({
        "moonbeam": 20,
        "hyperbridge": 21,
        "interlay": 22,
        "acala": 23,
        "kilt": 24,
    }),
    "kusama": MappingProxyType({
        "kintsugi": 22,
        "karura": 23,
    }),
    "paseo": MappingProxyType({
        "gargantua": 21,
    }),
})

_FILE_EXTENSIONS = (".yaml", ".yml")


def is_custom_chain(chain: str, network: Network) -> bool:
    return chain in CUSTOM_CHAINS.get(network.name, {})


def chain_offset(chain: str, network: Network) -> int:
    if chain in SYSTEM_CHAINS:
        return SYSTEM_CHAINS[chain]
    custom = CUSTOM_CHAINS.get(network.name, {})
    if chain in custom:
        return custom[chain]
    known = sorted(SYSTEM_CHAINS) + sorted(custom)
    raise UnknownChain(chain, "a chain of {0} ({1})".format(network.name, ", ".join(known)))


def _parse_instance(token: str, role: Role) -> int:
    # str.isdigit() also accepts non-ASCII digits such as '²'
    if not token.isascii() or not token.isdigit():
        raise InvalidInstance(token, "a non-negative integer")
    return role.check_instance(int(token), token)


def parse_node_name(name: str) -> NodeName:
    """Parse ``{role}-[chain-]{network}-{instance}`` into a NodeName.

    The chain is optional and defaults to the relay chain. Matching is case
    insensitive and a trailing ``.yaml``/``.yml`` is ignored so node config
    file names can be passed as-is.
    """
    normalized = name.strip().lower()
    for ext in _FILE_EXTENSIONS:
        if normalized.endswith(ext):
            normalized = normalized[:-len(ext)]
            break

    tokens = normalized.split("-")
    if len(tokens) < 3 or not all(tokens):
        raise MalformedName(name, NAME_FORMAT)

    role_token, network_token, instance_token = tokens[0], tokens[-2], tokens[-1]

    role = ROLES.get(role_token)
    if role is None:
        raise UnknownRole(role_token, "one of {0}".format(", ".join(ROLES)))

    network = NETWORKS.get(network_token)
    if network is None:
        raise UnknownNetwork(network_token, "one of {0}".format(", ".join(NETWORKS)))

    chain = "-".join(tokens[1:-2]) or RELAY
    chain_offset(chain, network)

    instance = _parse_instance(instance_token, role)
    return NodeName(role=role, chain=chain, network=network, instance=instance)


def encode_port(node: NodeName) -> int:
    """Pack a node into ``3 B CC S``.

    B is the network digit, or the network's custom block digit for custom
    chains; CC is the two-digit chain offset; S is the role slot for the
    instance.
    """
    if is_custom_chain(node.chain, node.network):
        block = node.network.custom_digit
    else:
        block = node.network.digit
    return PORT_BASE + block * 1000 + chain_offset(node.chain, node.network) * 10 + node.role.slot(node.instance)


def encode_ip(node: NodeName) -> str:
    node.role.check_instance(node.instance, str(node.instance))
    third = node.role.digit * 100 + node.network.digit * 10 + node.instance
    fourth = chain_offset(node.chain, node.network) + 10
    return "{0}.{1}.{2}".format(IP_PREFIX, third, fourth)


def encode_address(node: NodeName) -> str:
    return "{0}:{1}".format(encode_ip(node), encode_port(node))


def port_for(name: str) -> int:
    return encode_port(parse_node_name(name))


def _role_for_slot(slot: int) -> Role:
    for role in (_BOOT, _RPC, _VAL):
        if role.first_slot <= slot < role.first_slot + role.instances:
            return role
    raise InvalidPort("slot {0} is not assigned to any role".format(slot))


def decode_port(port: int) -> NodeName:
    """Inverse of encode_port."""
    if not PORT_BASE <= port < PORT_BASE + 10000:
        raise InvalidPort("port {0} is outside {1}-{2}".format(port, PORT_BASE, PORT_BASE + 9999))

    block, rest = divmod(port - PORT_BASE, 1000)
    offset, slot = divmod(rest, 10)

    for network in NETWORKS.values():
        if block == network.digit:
            chains = SYSTEM_CHAINS
            break
        if block == network.custom_digit:
            chains = CUSTOM_CHAINS[network.name]
            break
    else:
        raise InvalidPort("port {0}: no network uses block digit {1}".format(port, block))

    for chain, chain_off in chains.items():
        if chain_off == offset:
            break
    else:
        raise InvalidPort("port {0}: no {1} chain has offset {2:02d}".format(port, network.name, offset))

    role = _role_for_slot(slot)
    instance = role.first_instance + slot - role.first_slot
    return NodeName(role=role, chain=chain, network=network, instance=instance)


def format_node_name(node: NodeName) -> str:
    parts = [node.role.token]
    if node.chain != RELAY:
        parts.append(node.chain)
    parts.append(node.network.name)
    parts.append("{0:02d}".format(node.instance))
    return "-".join(parts)


def all_node_names():
    """Yield every node name the tables can encode."""
    roles = (_BOOT, _RPC, _VAL)
    for network in NETWORKS.values():
        chains = list(SYSTEM_CHAINS) + list(CUSTOM_CHAINS.get(network.name, {}))
        for chain in chains:
            for role in roles:
                for instance in range(role.first_instance, role.last_instance + 1):
                    yield NodeName(role=role, chain=chain, network=network, instance=instance)
