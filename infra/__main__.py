"""Pulumi program entry point: static website + serverless time API on Azure."""
import pulumi

from infra.stack import provision

for name, value in provision().items():
    pulumi.export(name, value)
