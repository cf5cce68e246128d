from aws_cdk.aws_wafv2 import CfnIPSet
from constructs import Construct

from site_infra.cidr import CidrBlock


class IpSet(Construct):
    """
    returns a WAF IP set holding the single allow-listed CIDR block
    """

    def __init__(self, scope: Construct, construct_id: str, name: str,
                 allow_list_entry: CidrBlock, cloudfront: bool = True, **kwargs) -> None:
        super().__init__(scope, construct_id, **kwargs)

        ip_address_version = allow_list_entry.family.waf_version
        self.ip_set_name = f"{name}-IpSet-{ip_address_version}"

        self.ip_set: CfnIPSet = CfnIPSet(
            self, self.ip_set_name,
            name=self.ip_set_name,
            addresses=[str(allow_list_entry)],
            ip_address_version=ip_address_version,
            scope="CLOUDFRONT" if cloudfront else "REGIONAL"
        )
