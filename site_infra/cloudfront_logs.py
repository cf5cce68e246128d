"""
Delivers CloudFront standard access logs (v2) to a CloudWatch log group.
"""
from aws_cdk import Names
from aws_cdk.aws_cloudfront import IDistribution
from aws_cdk.aws_logs import CfnDelivery, CfnDeliveryDestination, CfnDeliverySource, LogGroup
from constructs import Construct

OUTPUT_FORMATS = ("json", "w3c", "raw", "plain")


class CloudFrontLogToCloudWatch(Construct):

    def __init__(self, scope: Construct, construct_id: str, distribution: IDistribution,
                 output_format: str = "json", **kwargs) -> None:
        super().__init__(scope, construct_id, **kwargs)

        if output_format not in OUTPUT_FORMATS:
            raise ValueError(f"output_format must be one of {', '.join(OUTPUT_FORMATS)}. Got: {output_format}")

        # delivery names are capped at 60 characters
        prefix = Names.unique_resource_name(self, max_length=55)

        self.delivery_source = CfnDeliverySource(
            self, "DistributionDeliverySource",
            name=f"{prefix}-src",
            log_type="ACCESS_LOGS",
            resource_arn=distribution.distribution_arn
        )

        self.log_group = LogGroup(self, "DistributionLogGroup")

        self.delivery_destination = CfnDeliveryDestination(
            self, "DistributionDeliveryDestination",
            name=f"{prefix}-dest",
            destination_resource_arn=self.log_group.log_group_arn,
            output_format=output_format
        )

        self.delivery = CfnDelivery(
            self, "DistributionDelivery",
            delivery_source_name=self.delivery_source.name,
            delivery_destination_arn=self.delivery_destination.attr_arn
        )
        self.delivery.node.add_dependency(self.delivery_source)
        self.delivery.node.add_dependency(self.delivery_destination)
