#!/usr/bin/env python3
import json
import sys

import click

from node_port_encoder import (
    InvalidPort,
    ParseError,
    decode_port,
    encode_address,
    encode_ip,
    encode_port,
    format_node_name,
    parse_node_name,
)


def _fail(e: ValueError):
    click.echo(f"Error: {type(e).__name__}: {e}", err=True)
    sys.exit(1)


@click.command()
@click.option('-i', '--ip', 'with_ip', is_flag=True, help='Print ip:port instead of the bare port')
@click.option('--json', 'as_json', is_flag=True, help='Print every resolved field as JSON')
@click.option('-r', '--reverse', is_flag=True, help='Convert a port back to its node name')
@click.option('-v', '--verbose', is_flag=True, help='Echo the resolved fields to stderr')
@click.argument('name')
def main(with_ip, as_json, reverse, verbose, name):
    """NAME of the node, {role}-[chain-]{network}-{instance}

    e.g. rpc-polkadot-01 or rpc-asset-hub-polkadot-01. With --reverse, NAME
    is a port and the node name is printed.
    """
    if reverse:
        if not name.isascii() or not name.isdigit():
            _fail(InvalidPort(f"'{name}' is not a port number"))
        try:
            node = decode_port(int(name))
        except InvalidPort as e:
            _fail(e)
    else:
        try:
            node = parse_node_name(name)
        except ParseError as e:
            _fail(e)

    if verbose:
        click.echo(f"role={node.role.name} chain={node.chain} network={node.network.name} "
                   f"instance={node.instance}", err=True)

    if as_json:
        key_data = {
            "name": format_node_name(node),
            "role": node.role.name,
            "chain": node.chain,
            "network": node.network.name,
            "instance": node.instance,
            "port": encode_port(node),
            "ip": encode_ip(node),
            "address": encode_address(node),
        }
        click.echo(json.dumps(key_data, indent=2))
    elif reverse:
        click.echo(format_node_name(node))
    elif with_ip:
        click.echo(encode_address(node))
    else:
        click.echo(encode_port(node))


if __name__ == "__main__":
    main()
