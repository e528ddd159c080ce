import os
from constructs import Construct
import aws_cdk as cdk
from aws_cdk import (
    Duration,
    aws_lambda as _lambda,
    aws_events as events,
    aws_events_targets as targets,
)

class RelayStack(cdk.Stack):
    def __init__(self, scope: Construct, construct_id: str, **kwargs):
        super().__init__(scope, construct_id, **kwargs)

        # Bundle dependencies from requirements.txt, the relay package and the prebuilt child binary
        executable_name = os.getenv("RELAY_EXECUTABLE_NAME", "main")
        bundling = {
            "image": _lambda.Runtime.PYTHON_3_11.bundling_image,
            "command": [
                "bash", "-c",
                "pip install -r requirements.txt -t /asset-output "
                "&& cp -r relay /asset-output/relay "
                f"&& cp {executable_name} /asset-output/{executable_name} "
                f"&& chmod 755 /asset-output/{executable_name} "
                "&& if [ -f config.json ]; then cp config.json /asset-output/; fi"
            ],
        }

        env_vars = {
                "RELAY_EXECUTABLE": f"/var/task/{executable_name}",
                "RELAY_CHUNK_SIZE": os.getenv("RELAY_CHUNK_SIZE", str(64 * 1024)),
                "RELAY_ENCODING": os.getenv("RELAY_ENCODING", "utf-8"),
                "LOG_LEVEL": os.getenv("LOG_LEVEL", "INFO"),
        }
        # Lambda's deployment directory is read-only; let the child run from a writable one if asked
        if os.getenv("RELAY_WORKDIR"):
            env_vars["RELAY_WORKDIR"] = os.getenv("RELAY_WORKDIR")

        lambda_fn = _lambda.Function(
            self,
            "ExecRelayLambda",
            runtime=_lambda.Runtime.PYTHON_3_11,
            handler="relay.lambda_handler.lambda_handler",
            code=_lambda.Code.from_asset("..", bundling=bundling),  # bundle root project
            timeout=Duration.seconds(int(os.getenv("LAMBDA_TIMEOUT_SECONDS", "300"))),
            memory_size=int(os.getenv("LAMBDA_MEMORY_MB", "512")),
            environment=env_vars,
        )

        # Optional EventBridge rule; the packaged job traditionally runs nightly at 23:30 UTC
        if os.getenv("SCHEDULE_ENABLED", "0") == "1":
            schedule_expression = events.Schedule.cron(
                minute=os.getenv("SCHEDULE_MINUTE", "30"),
                hour=os.getenv("SCHEDULE_HOUR", "23"),
                week_day=os.getenv("SCHEDULE_DAYS", "*"),
            )
            events.Rule(
                self,
                "ExecRelayScheduleRule",
                schedule=schedule_expression,
                targets=[targets.LambdaFunction(
                    lambda_fn,
                    event=events.RuleTargetInput.from_object({"source": "schedule"}),
                )],
                enabled=True,
                description="Invoke the exec relay Lambda on a fixed schedule",
            )

        cdk.CfnOutput(self, "FunctionName", value=lambda_fn.function_name)
