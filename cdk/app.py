#!/usr/bin/env python3
import os
import aws_cdk as cdk
from relay_stack import RelayStack

def main() -> None:
    app = cdk.App()
    RelayStack(
        app,
        os.environ.get("RELAY_STACK_NAME", "ExecRelayStack"),
        env=cdk.Environment(
            account=os.environ.get("CDK_DEFAULT_ACCOUNT"),
            region=os.environ.get("CDK_DEFAULT_REGION"),
        ),
    )
    app.synth()

if __name__ == "__main__":
    main()
