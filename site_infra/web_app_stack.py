"""
Web app stack deploying the following resources:
* S3 bucket holding the frontend, read by CloudFront through an origin access identity
* Lambda function and API gateway for the survey endpoint (/api/survey)
* CloudFront distribution in front of both, guarded by a WAF allowing a single CIDR block
* WAF and CloudFront access logs in CloudWatch
"""
from aws_cdk import CfnOutput, Duration, RemovalPolicy, Stack
from aws_cdk.aws_apigateway import Cors, CorsOptions, LambdaIntegration, RestApi, StageOptions
from aws_cdk.aws_cloudfront import AllowedMethods, BehaviorOptions, CachePolicy, Distribution, \
    ErrorResponse, OriginAccessIdentity, OriginProtocolPolicy, OriginRequestPolicy, OriginSslPolicy, \
    ResponseHeadersPolicy, ViewerProtocolPolicy
from aws_cdk.aws_cloudfront_origins import HttpOrigin, S3BucketOrigin
from aws_cdk.aws_iam import PolicyStatement
from aws_cdk.aws_lambda import Code, Function, Runtime
from aws_cdk.aws_logs import LogGroup
from aws_cdk.aws_s3 import BlockPublicAccess, Bucket, BucketEncryption
from aws_cdk.aws_s3_deployment import BucketDeployment, Source
from aws_cdk.aws_wafv2 import CfnLoggingConfiguration, CfnWebACL
from constructs import Construct

from site_infra.cidr import CidrBlock
from site_infra.cloudfront_logs import CloudFrontLogToCloudWatch
from site_infra.ip_set import IpSet
from site_infra.utilities import get_log_retention_days, get_removal_policy

WEB_ACL_NAME = "CloudFrontIpWhitelistAcl"


class WebAppStack(Stack):
    """
    returns an instance of the web app stack
    """

    def __init__(self, scope: Construct, construct_id: str, context: str,
                 allow_list_entry: CidrBlock, **kwargs) -> None:
        super().__init__(scope, construct_id, **kwargs)

        if allow_list_entry is None or not str(allow_list_entry).strip():
            raise ValueError('WebAppStack requires `allow_list_entry` to be provided (e.g. "203.0.113.4/32").')
        self.allow_list_entry = allow_list_entry

        context: dict = dict(self.node.try_get_context(context))
        self.prefix: str = context["project_name"].lower()

        self.site_bucket = self.create_bucket()
        self.site_oai = self.create_origin_access_identity()
        self.site_bucket.add_to_resource_policy(
            PolicyStatement(
                actions=["s3:GetObject"],
                resources=[self.site_bucket.arn_for_objects("*")],
                principals=[self.site_oai.grant_principal]
            )
        )

        self.survey_fn = self.create_lambda(context)
        self.rest_api = self.create_rest_api()
        survey_resource = self.rest_api.root.add_resource("api").add_resource("survey")
        survey_resource.add_method("POST", LambdaIntegration(self.survey_fn))

        self.web_acl = self.create_waf(context)
        self.distribution = self.create_distribution()

        CloudFrontLogToCloudWatch(self, "LogDelivery", distribution=self.distribution,
                                  output_format=context.get("log_output_format", "json"))

        BucketDeployment(
            self, "DeployWebsite",
            sources=[Source.asset(context["frontend_dist_path"])],
            destination_bucket=self.site_bucket,
            distribution=self.distribution,
            distribution_paths=["/*"]
        )

        CfnOutput(self, "CloudFrontURL", value=f"https://{self.distribution.distribution_domain_name}")
        CfnOutput(self, "ApiInvokeUrl", value=self.rest_api.url_for_path("/api/survey"))

    def create_bucket(self):
        return Bucket(
            self,
            "SiteBucket",
            block_public_access=BlockPublicAccess.BLOCK_ALL,
            encryption=BucketEncryption.S3_MANAGED,
            enforce_ssl=True,
            removal_policy=RemovalPolicy.DESTROY,
            auto_delete_objects=True
        )

    def create_origin_access_identity(self):
        return OriginAccessIdentity(
            self,
            "SiteOAI",
            comment=f"Cloudfront access to the {self.prefix} site bucket"
        )

    def create_lambda(self, context: dict) -> Function:
        """returns the survey function, code taken from the handler path in the context"""
        return Function(
            self,
            "SubmitFunction",
            runtime=Runtime.PYTHON_3_12,
            handler="handler.handler",
            code=Code.from_asset(context["handler_path"]),
            memory_size=context.get("lambda_memory", 256),
            timeout=Duration.seconds(context.get("lambda_timeout_in_seconds", 5))
        )

    def create_rest_api(self) -> RestApi:
        return RestApi(
            self,
            "SubmitApi",
            rest_api_name=f"{self.prefix}-submit-api",
            deploy_options=StageOptions(stage_name="prod"),
            default_cors_preflight_options=CorsOptions(
                allow_origins=Cors.ALL_ORIGINS,
                allow_methods=["OPTIONS", "POST"],
                allow_headers=["Content-Type"]
            )
        )

    def create_distribution(self) -> Distribution:
        """
        CloudFront serves the bucket by default and forwards /api/* to the API gateway stage
        """
        s3_origin = S3BucketOrigin.with_origin_access_identity(self.site_bucket,
                                                               origin_access_identity=self.site_oai)
        api_origin = HttpOrigin(
            f"{self.rest_api.rest_api_id}.execute-api.{self.region}.amazonaws.com",
            origin_path=f"/{self.rest_api.deployment_stage.stage_name}",
            protocol_policy=OriginProtocolPolicy.HTTPS_ONLY,
            origin_ssl_protocols=[OriginSslPolicy.TLS_V1_2]
        )

        return Distribution(
            self, "WebDistribution",
            default_root_object="index.html",
            web_acl_id=self.web_acl.attr_arn,
            default_behavior=BehaviorOptions(
                origin=s3_origin,
                viewer_protocol_policy=ViewerProtocolPolicy.REDIRECT_TO_HTTPS,
                cache_policy=CachePolicy.CACHING_OPTIMIZED,
                response_headers_policy=ResponseHeadersPolicy.SECURITY_HEADERS
            ),
            additional_behaviors={
                "/api/*": BehaviorOptions(
                    origin=api_origin,
                    viewer_protocol_policy=ViewerProtocolPolicy.REDIRECT_TO_HTTPS,
                    cache_policy=CachePolicy.CACHING_DISABLED,
                    origin_request_policy=OriginRequestPolicy.CORS_CUSTOM_ORIGIN,
                    allowed_methods=AllowedMethods.ALLOW_ALL
                )
            },
            # client side routing
            error_responses=[
                ErrorResponse(http_status=404, response_http_status=200,
                              response_page_path="/index.html", ttl=Duration.minutes(1))
            ]
        )

    @staticmethod
    def create_visibility_config(metric_name: str) -> CfnWebACL.VisibilityConfigProperty:
        return CfnWebACL.VisibilityConfigProperty(
            cloud_watch_metrics_enabled=True,
            metric_name=metric_name,
            sampled_requests_enabled=True
        )

    def create_waf(self, context: dict) -> CfnWebACL:
        """
        returns a web ACL blocking every request not coming from the allow-listed CIDR block
        """
        ip_set = IpSet(self, "CloudFrontIpWhitelist", "CloudFrontIpWhitelist",
                       self.allow_list_entry, cloudfront=True).ip_set

        web_acl = CfnWebACL(
            self, "CloudFrontWebAcl",
            name=WEB_ACL_NAME,
            scope="CLOUDFRONT",
            default_action=CfnWebACL.DefaultActionProperty(block={}),
            visibility_config=self.create_visibility_config("CloudFrontWebAcl"),
            rules=[
                CfnWebACL.RuleProperty(
                    name="IpAllowListRule",
                    priority=0,
                    action=CfnWebACL.RuleActionProperty(allow={}),
                    statement=CfnWebACL.StatementProperty(
                        ip_set_reference_statement=CfnWebACL.IPSetReferenceStatementProperty(
                            arn=ip_set.attr_arn
                        )
                    ),
                    visibility_config=self.create_visibility_config("IpAllowListRule")
                )
            ]
        )
        self.add_waf_logging(web_acl, WEB_ACL_NAME, context)
        return web_acl

    def add_waf_logging(self, web_acl: CfnWebACL, acl_name: str, context: dict) -> None:
        """
        WAF only delivers logs to log groups prefixed with aws-waf-logs-
        """
        name = f"aws-waf-logs-{acl_name}"
        waf_log_group = LogGroup(
            self, name,
            log_group_name=name,
            retention=get_log_retention_days(context.get("waf_log_retention_days", 30)),
            removal_policy=get_removal_policy(context.get("log_removal_policy", "destroy"))
        )

        CfnLoggingConfiguration(
            self, f"{name}-config",
            log_destination_configs=[waf_log_group.log_group_arn],
            resource_arn=web_acl.attr_arn
        )
