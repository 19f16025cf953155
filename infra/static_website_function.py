import json
import os
import shlex
import sys
from typing import Optional

import pulumi
import pulumi_azure_native as azure_native
import pulumi_synced_folder as synced_folder
from pulumi_command import local

PUBLISH_DIR = "publish"


class StaticWebsiteFunctionArgs:
    """Inputs for StaticWebsiteFunction. Paths are local filesystem paths."""

    def __init__(
        self,
        resource_group_name: pulumi.Input[str],
        storage_account_name: pulumi.Input[str],
        site_path: str,
        app_path: str,
        app_insights_instrumentation_key: pulumi.Input[str],
        index_document_name: pulumi.Input[str] = "index.html",
        error_document_name: pulumi.Input[str] = "error.html",
        python_version: str = "3.11",
        sas_start_time: str = "2022-01-01",
        sas_expiry_time: str = "2030-01-01",
    ):
        self.resource_group_name = resource_group_name
        self.storage_account_name = storage_account_name
        self.site_path = site_path
        self.app_path = app_path
        self.app_insights_instrumentation_key = app_insights_instrumentation_key
        self.index_document_name = index_document_name
        self.error_document_name = error_document_name
        self.python_version = python_version
        self.sas_start_time = sas_start_time
        self.sas_expiry_time = sas_expiry_time


class StaticWebsiteFunction(pulumi.ComponentResource):
    """
    Static website hosting on an existing storage account, plus a consumption
    plan function app serving the API. Once the app's hostname is known a
    config.json is written next to the site so the front-end can find the API.
    """

    def __init__(self, name: str, args: StaticWebsiteFunctionArgs,
                 opts: Optional[pulumi.ResourceOptions] = None):
        super().__init__("static-site-time-api:index:StaticWebsiteFunction", name, None, opts)
        child = pulumi.ResourceOptions(parent=self)

        website = azure_native.storage.StorageAccountStaticWebsite("website",
            account_name=args.storage_account_name,
            resource_group_name=args.resource_group_name,
            index_document=args.index_document_name,
            error404_document=args.error_document_name,
            opts=child)

        synced_folder.AzureBlobFolder("site-synced-folder",
            path=args.site_path,
            resource_group_name=args.resource_group_name,
            storage_account_name=args.storage_account_name,
            container_name=website.container_name,
            opts=child)

        app_container = azure_native.storage.BlobContainer("app-container",
            account_name=args.storage_account_name,
            resource_group_name=args.resource_group_name,
            public_access=azure_native.storage.PublicAccess.NONE,
            opts=child)

        # Invoked on every preview and update
        publish = local.run_output(
            command=f"{shlex.quote(sys.executable)} -m infra.build_package --output {PUBLISH_DIR}",
            dir=args.app_path,
            opts=pulumi.InvokeOptions(parent=self))
        publish_path = os.path.join(args.app_path, PUBLISH_DIR)

        app_blob = azure_native.storage.Blob("app-blob",
            account_name=args.storage_account_name,
            resource_group_name=args.resource_group_name,
            container_name=app_container.name,
            source=publish.apply(lambda _: pulumi.FileArchive(publish_path)),
            opts=child)

        sas_token = azure_native.storage.list_storage_account_service_sas_output(
            resource_group_name=args.resource_group_name,
            account_name=args.storage_account_name,
            protocols=azure_native.storage.HttpProtocol.HTTPS,
            shared_access_start_time=args.sas_start_time,
            shared_access_expiry_time=args.sas_expiry_time,
            resource="c",
            permissions="r",
            canonicalized_resource=pulumi.Output.concat(
                "/blob/", args.storage_account_name, "/", app_container.name),
            content_type="application/json",
            cache_control="max-age=5",
            content_disposition="inline",
            content_encoding="deflate",
            opts=pulumi.InvokeOptions(parent=self),
        ).apply(lambda result: result.service_sas_token)

        storage_keys = azure_native.storage.list_storage_account_keys_output(
            resource_group_name=args.resource_group_name,
            account_name=args.storage_account_name,
            opts=pulumi.InvokeOptions(parent=self))
        storage_connection_string = pulumi.Output.secret(pulumi.Output.concat(
            "DefaultEndpointsProtocol=https;AccountName=", args.storage_account_name,
            ";AccountKey=", storage_keys.apply(lambda result: result.keys[0].value),
            ";EndpointSuffix=core.windows.net"))

        # Python workers only run on Linux, so the plan is reserved
        plan = azure_native.web.AppServicePlan("app-plan",
            resource_group_name=args.resource_group_name,
            kind="Linux",
            reserved=True,
            sku=azure_native.web.SkuDescriptionArgs(
                name="Y1",
                tier="Dynamic",
            ),
            opts=child)

        self.web_app = azure_native.web.WebApp("time-api-app",
            resource_group_name=args.resource_group_name,
            server_farm_id=plan.id,
            kind="functionapp,linux",
            reserved=True,
            site_config=azure_native.web.SiteConfigArgs(
                linux_fx_version=f"Python|{args.python_version}",
                detailed_error_logging_enabled=True,
                http_logging_enabled=True,
                app_settings=[
                    azure_native.web.NameValuePairArgs(
                        name="FUNCTIONS_WORKER_RUNTIME",
                        value="python",
                    ),
                    azure_native.web.NameValuePairArgs(
                        name="FUNCTIONS_EXTENSION_VERSION",
                        value="~4",
                    ),
                    azure_native.web.NameValuePairArgs(
                        name="AzureWebJobsStorage",
                        value=storage_connection_string,
                    ),
                    azure_native.web.NameValuePairArgs(
                        name="WEBSITE_RUN_FROM_PACKAGE",
                        value=pulumi.Output.concat(
                            "https://", args.storage_account_name, ".blob.core.windows.net/",
                            app_container.name, "/", app_blob.name, "?", sas_token),
                    ),
                    azure_native.web.NameValuePairArgs(
                        name="APPINSIGHTS_INSTRUMENTATIONKEY",
                        value=args.app_insights_instrumentation_key,
                    ),
                ],
                cors=azure_native.web.CorsSettingsArgs(
                    allowed_origins=["*"],
                ),
            ),
            opts=child)

        self.api_url = self.web_app.default_host_name.apply(lambda hostname: f"https://{hostname}/api")

        self.site_config = azure_native.storage.Blob("config.json",
            blob_name="config.json",
            account_name=args.storage_account_name,
            resource_group_name=args.resource_group_name,
            container_name=website.container_name,
            content_type="application/json",
            source=self.api_url.apply(lambda api: pulumi.StringAsset(json.dumps({"api": api}))),
            opts=child)

        self.register_outputs({
            "apiUrl": self.api_url,
        })
