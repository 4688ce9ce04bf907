"""
Cardano node healthcheck.

Scrapes the prometheus endpoint of a cardano-node and judges the node healthy
when its most recently received block is recent enough.

Modules:
- apps.chains: genesis/config readers and epoch/slot time keeping
- apps.nodes: metrics fetching and the health evaluation
- cli: command line interface

Usage:
    cardano-healthcheck --config-file config.json --genesis-file shelley-genesis.json
"""

__version__ = "1.0.0"
