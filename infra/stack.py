import os
from typing import Dict

import pulumi
import pulumi_azure_native as azure_native

from infra.static_website_function import StaticWebsiteFunction, StaticWebsiteFunctionArgs

REPO_ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))


def _resolve(path: str) -> str:
    # Config paths are relative to the repository root, not the engine's cwd
    if os.path.isabs(path):
        return path
    return os.path.normpath(os.path.join(REPO_ROOT, path))


def provision() -> Dict[str, pulumi.Output]:
    """Declares the whole stack and returns its outputs, keyed by export name."""
    config = pulumi.Config()
    site_path = _resolve(config.get("path") or "www")
    app_path = _resolve(config.get("appPath") or ".")
    index_document = config.get("indexDocument") or "index.html"
    error_document = config.get("errorDocument") or "error.html"

    resource_group = azure_native.resources.ResourceGroup("resource-group")

    account = azure_native.storage.StorageAccount("account",
        resource_group_name=resource_group.name,
        kind=azure_native.storage.Kind.STORAGE_V2,
        sku=azure_native.storage.SkuArgs(
            name=azure_native.storage.SkuName.STANDARD_LRS,
        ))

    workspace = azure_native.operationalinsights.Workspace("workspace",
        resource_group_name=resource_group.name,
        retention_in_days=30,
        sku=azure_native.operationalinsights.WorkspaceSkuArgs(
            name="PerGB2018",
        ),
        features=azure_native.operationalinsights.WorkspaceFeaturesArgs(
            enable_data_export=True,
        ))

    app_insights = azure_native.insights.Component("app-insights",
        resource_group_name=resource_group.name,
        application_type="web",
        kind="web",
        workspace_resource_id=workspace.id)

    pulumi.log.debug(f"Syncing site from {site_path}, building app from {app_path}")

    site = StaticWebsiteFunction("time-api", StaticWebsiteFunctionArgs(
        resource_group_name=resource_group.name,
        storage_account_name=account.name,
        site_path=site_path,
        app_path=app_path,
        app_insights_instrumentation_key=app_insights.instrumentation_key,
        index_document_name=index_document,
        error_document_name=error_document,
        python_version=config.get("pythonVersion") or "3.11",
        sas_start_time=config.get("sasStartTime") or "2022-01-01",
        sas_expiry_time=config.get("sasExpiryTime") or "2030-01-01",
    ))

    return {
        "siteURL": account.primary_endpoints.apply(lambda endpoints: endpoints.web),
        "apiURL": site.api_url,
    }
