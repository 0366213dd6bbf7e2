#!/usr/bin/env python3
"""
Example: deploy host
====================

A small host application that registers a few commands and drives them
from the command line.

Run:
    python examples/deploy_host.py 'cfg:(get-config env:prod)' '(deploy api config:$cfg)'
    python examples/deploy_host.py --help

Or through the CLI:
    cd examples && yesod run --app deploy_host:app -c 'cfg:(get-config) (deploy api config:$cfg)'
"""

import asyncio
import sys

from yesod import Yesod, configure_logging

app = Yesod("deploy")


# =============================================================================
# Commands
# =============================================================================


@app.command(
    "get-config",
    description="Load deployment settings for an environment",
    args_description=["env: target environment (default: dev)"],
    returns="Config object",
)
async def get_config(positional, named):
    env = named.get("env", "dev")
    return {"env": env, "replicas": 3 if env == "prod" else 1}


@app.command(
    "deploy",
    description="Deploy services with a configuration",
    args_description=["<service>...: services to deploy", "config: output of get-config"],
)
async def deploy(positional, named):
    for service in positional:
        print(f"deploying {service} with {named.get('config', '{}')}")


@app.command("echo", description="Print the arguments")
def echo(positional, named):
    print(" ".join(positional), named)


def main():
    configure_logging(app.name, "INFO")
    bindings = asyncio.run(app.run(sys.argv[1:]))
    if bindings:
        print(bindings)


if __name__ == "__main__":
    main()
