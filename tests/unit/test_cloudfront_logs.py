import pytest
from aws_cdk import App, Stack
from aws_cdk.assertions import Template
from aws_cdk.aws_cloudfront import BehaviorOptions, Distribution
from aws_cdk.aws_cloudfront_origins import HttpOrigin

from site_infra.cloudfront_logs import CloudFrontLogToCloudWatch


def make_stack():
    stack = Stack(App(), "LogStack")
    distribution = Distribution(stack, "Distribution",
                                default_behavior=BehaviorOptions(origin=HttpOrigin("example.com")))
    return stack, distribution


@pytest.mark.parametrize("output_format", ["json", "w3c", "raw", "plain"])
def test_delivery_output_format(output_format):
    stack, distribution = make_stack()
    CloudFrontLogToCloudWatch(stack, "LogDelivery", distribution=distribution, output_format=output_format)

    template = Template.from_stack(stack)
    template.resource_count_is("AWS::Logs::DeliverySource", 1)
    template.resource_count_is("AWS::Logs::DeliveryDestination", 1)
    template.resource_count_is("AWS::Logs::Delivery", 1)
    template.has_resource_properties("AWS::Logs::DeliveryDestination", {"OutputFormat": output_format})


def test_delivery_depends_on_source_and_destination():
    stack, distribution = make_stack()
    delivery = CloudFrontLogToCloudWatch(stack, "LogDelivery", distribution=distribution)

    dependencies = {dependency.node.path for dependency in delivery.delivery.node.dependencies}
    assert delivery.delivery_source.node.path in dependencies
    assert delivery.delivery_destination.node.path in dependencies


def test_delivery_names_fit_limit():
    stack, distribution = make_stack()
    delivery = CloudFrontLogToCloudWatch(stack, "LogDelivery", distribution=distribution)

    assert delivery.delivery_source.name.endswith("-src")
    assert len(delivery.delivery_destination.name) <= 60


def test_rejects_unknown_output_format():
    stack, distribution = make_stack()
    with pytest.raises(ValueError, match="output_format"):
        CloudFrontLogToCloudWatch(stack, "LogDelivery", distribution=distribution, output_format="csv")
