"""AWS Lambda entry point."""
from __future__ import annotations
import asyncio
from .runner import relay_event


def lambda_handler(event, context):
    """Lambda handler wraps the async relay.

    A context exposing `done(error)` is completed through that callback,
    exactly once. Otherwise a failure is raised so the platform marks the
    invocation as failed.
    """
    completion = asyncio.run(relay_event(event))
    done = getattr(context, "done", None)
    if callable(done):
        done(completion.error)
        return None
    if completion.error is not None:
        raise completion.error
    return None
